"""Player reference entity."""
from dataclasses import dataclass
from typing import Optional

from ..enums import Platform


@dataclass
class PlayerRef:
    """A player name on a platform, resolved to an account id at most once."""

    name: str
    platform: Platform
    account_id: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.account_id is not None

    def resolve(self, account_id: str) -> None:
        if self.account_id is not None and self.account_id != account_id:
            raise ValueError(f"Player {self.name!r} already resolved to {self.account_id}")
        self.account_id = account_id

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'platform': self.platform.value,
            'account_id': self.account_id,
        }
