from datetime import time
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError


def parse_hh_mm(value: str) -> time:
    try:
        hours, minutes = value.split(':')
        return time(hour=int(hours), minute=int(minutes))
    except (ValueError, AttributeError) as e:
        raise DomainError(f'Invalid time {value!r}, expected HH:MM') from e


@attrs.define(frozen=True)
class LiveWindow:
    """
    Time-of-day window in venue-local time, e.g. 22:00-02:00.

    An end earlier than the start wraps past midnight. Both ends are inclusive
    to the minute, so 22:00-02:00 admits 02:00 but not 02:01.
    """

    start: time
    end: time

    @classmethod
    def parse(cls, *, start: Optional[str], end: Optional[str]) -> Optional['LiveWindow']:
        if start is None and end is None:
            return None
        if start is None or end is None:
            raise DomainError('Live window needs both a start and an end time')
        window = cls(start=parse_hh_mm(start), end=parse_hh_mm(end))
        if window.start == window.end:
            raise DomainError('Live window start and end must differ')
        return window

    @property
    def wraps_midnight(self) -> bool:
        return self.end < self.start

    def contains(self, local_time: time) -> bool:
        minute = local_time.replace(second=0, microsecond=0, tzinfo=None)
        if self.wraps_midnight:
            return minute >= self.start or minute <= self.end
        return self.start <= minute <= self.end

    def __str__(self) -> str:
        return f'{self.start:%H:%M}-{self.end:%H:%M}'
