from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import millis_between


@dataclass(frozen=True)
class Session:
    """Read-model: a reconstructed work interval (never persisted).

    An open session has `end=None` until a later check-out closes it.
    """

    subject_key: str
    start: datetime
    end: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    @property
    def duration_millis(self) -> int:
        """Closed duration; an open session has no accumulated closed portion."""
        if self.end is None:
            return 0
        return millis_between(self.start, self.end)

    def elapsed_millis(self, now: datetime) -> int:
        """Duration up to `now` for an open session (never negative)."""
        if self.end is not None:
            return self.duration_millis
        return max(millis_between(self.start, now), 0)
