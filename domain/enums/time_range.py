"""Time range enumeration for match searches."""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Tuple


def _as_utc(value: datetime) -> datetime:
    # naive bounds are read as UTC, matching the upstream createdAt timestamps
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimeRange(Enum):
    """Look-back windows accepted by match searches.

    CUSTOM requires explicit start/end datetimes.
    """

    LAST_24H = "24h"
    LAST_48H = "48h"
    LAST_7D = "7d"
    LAST_14D = "14d"
    CUSTOM = "custom"

    @property
    def lookback(self) -> Optional[timedelta]:
        spans = {
            "24h": timedelta(hours=24),
            "48h": timedelta(hours=48),
            "7d": timedelta(days=7),
            "14d": timedelta(days=14),
        }
        return spans.get(self.value)

    def window(
        self,
        now: datetime,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Tuple[datetime, datetime]:
        """Translate the range into an absolute UTC ``(start, end)`` pair.

        CUSTOM without both bounds degrades to the last 24 hours.
        """
        now = _as_utc(now)
        if self is TimeRange.CUSTOM:
            if start is not None and end is not None:
                return _as_utc(start), _as_utc(end)
            return now - timedelta(hours=24), now
        return now - self.lookback, now

    @classmethod
    def from_string(cls, value: str | None, default: "TimeRange | None" = None) -> "TimeRange":
        key = (value or "").strip().lower()
        for tr in cls:
            if tr.value == key:
                return tr
        if default is not None:
            return default
        raise ValueError(f"Unknown time range: {value!r}")
