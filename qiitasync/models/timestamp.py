"""
Timestamp value used for created_at / updated_at in files and API payloads.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple, Union


@dataclass(frozen=True)
class Timestamp:
    """
    A timezone-aware instant rendered as ``YYYY-MM-DDTHH:MM:SS+hh:mm``.

    Equality and hashing follow the underlying instant, so the same moment
    expressed in two different offsets compares equal.
    """

    value: datetime

    def __post_init__(self):
        if self.value.tzinfo is None:
            object.__setattr__(self, "value", self.value.astimezone())

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(datetime.now().astimezone().replace(microsecond=0))

    @classmethod
    def parse(cls, raw: Union[str, datetime, "Timestamp"]) -> "Timestamp":
        """
        Build a Timestamp from an RFC3339 string, a datetime or a Timestamp.

        Raises:
            ValueError: If ``raw`` is not a valid timestamp
        """
        if isinstance(raw, Timestamp):
            return raw
        if isinstance(raw, datetime):
            return cls(raw)
        if not isinstance(raw, str):
            raise ValueError(f"invalid timestamp: {raw!r}")
        return cls(datetime.fromisoformat(raw.strip()))

    def isoformat(self) -> str:
        return self.value.isoformat(timespec="seconds")

    def to_json(self) -> str:
        return self.isoformat()

    def date_parts(self) -> Tuple[str, str, str]:
        """Year, month and day in the stored offset, zero padded."""
        return (
            self.value.strftime("%Y"),
            self.value.strftime("%m"),
            self.value.strftime("%d"),
        )

    def __str__(self) -> str:
        return self.isoformat()
