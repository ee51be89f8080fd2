"""Answer "is this slot blocked?" for a coach's explicitly blocked time ranges.

All-day blocks cover whole local calendar days and are matched by date only.
Partial blocks are matched by instant against ``[start_time, end_time)``.
Blocking is advisory: it disables slots in listings but never prevents a
coach from booking into them.
"""

from collections.abc import Iterable
from datetime import date

from coachcal.scheduling.timezone import resolve_zone, to_instant, to_local_wall_clock
from coachcal.schemas.blocked_time import BlockedTimeRead


class BlockedTimeIndex:
    """Lookup over blocked times for one coach, seen from one viewer zone."""

    def __init__(
        self,
        blocked_times: Iterable[BlockedTimeRead],
        zone: str,
        coach_id: int | None = None,
    ) -> None:
        self._zone = resolve_zone(zone)
        self._all_day: list[tuple[date, date, BlockedTimeRead]] = []
        self._partial: list[BlockedTimeRead] = []

        for blocked in blocked_times:
            if coach_id is not None and blocked.coach_id != coach_id:
                continue
            if blocked.is_all_day:
                first = to_local_wall_clock(blocked.start_time, self._zone).date
                last = to_local_wall_clock(blocked.end_time, self._zone).date
                self._all_day.append((first, last, blocked))
            else:
                self._partial.append(blocked)

    def __len__(self) -> int:
        return len(self._all_day) + len(self._partial)

    def blocks_day(self, day: date) -> BlockedTimeRead | None:
        """The first all-day block whose local date range covers ``day``."""
        for first, last, blocked in self._all_day:
            if first <= day <= last:
                return blocked
        return None

    def blocks_at(self, day: date, minute_of_day: int) -> BlockedTimeRead | None:
        full_day = self.blocks_day(day)
        if full_day is not None:
            return full_day

        if not self._partial:
            return None
        instant = to_instant(day, minute_of_day, self._zone)
        for blocked in self._partial:
            if blocked.start_time <= instant < blocked.end_time:
                return blocked
        return None
