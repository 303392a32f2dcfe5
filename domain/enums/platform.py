"""Platform (shard) enumeration for the PUBG API."""
from enum import Enum


class Platform(Enum):
    """PUBG platform shards.

    Provides:
    - shard: path segment used in ``/shards/{shard}/...`` URLs
    """

    STEAM = "steam"
    KAKAO = "kakao"
    PSN = "psn"
    XBOX = "xbox"
    STADIA = "stadia"
    CONSOLE = "console"

    @property
    def shard(self) -> str:
        """Get shard path segment for API calls."""
        return self.value

    @classmethod
    def from_string(cls, value: str | None, default: "Platform | None" = None) -> "Platform":
        """Parse a platform name; ``playstation`` is accepted as ``psn``.

        Unknown values fall back to ``default`` when given, else raise ValueError.
        """
        key = (value or "").strip().lower()
        aliases = {"playstation": "psn", "pc": "steam"}
        key = aliases.get(key, key)
        for platform in cls:
            if platform.value == key:
                return platform
        if default is not None:
            return default
        raise ValueError(f"Unknown platform: {value!r}")

    @classmethod
    def all_platforms(cls) -> list['Platform']:
        return list(cls)
