"""DrawCalendar — slot times, cutoffs and betting windows.

A pure function of a reference "now" and an explicit timezone. Slot times
and window boundaries are wall-clock times in the draw timezone; the
returned datetimes are timezone-aware so they compare correctly with UTC
timestamps from the database.

Betting windows (``BETTING_WINDOWS``):

  TWO_PM   opens 21:00 the PREVIOUS day, closes 13:55   (spans midnight)
  FIVE_PM  opens 14:00 same day,         closes 16:55
  NINE_PM  opens 17:00 same day,         closes 20:55

A window is half-open: ``opens_at <= now < closes_at``. At the cutoff
instant betting is already closed.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from src.lt_common.datetime_utils import ensure_aware
from src.lt_common.enums import DrawSlot

SLOT_TIMES: dict[DrawSlot, time] = {
    DrawSlot.TWO_PM: time(14, 0),
    DrawSlot.FIVE_PM: time(17, 0),
    DrawSlot.NINE_PM: time(21, 0),
}

CUTOFF_LEAD = timedelta(minutes=5)

MAINTENANCE_HORIZON_DAYS = 14


@dataclass(frozen=True)
class WindowRule:
    """Window opening expressed relative to the draw date."""

    opens_day_offset: int
    opens_at: time


BETTING_WINDOWS: dict[DrawSlot, WindowRule] = {
    DrawSlot.TWO_PM: WindowRule(opens_day_offset=-1, opens_at=time(21, 0)),
    DrawSlot.FIVE_PM: WindowRule(opens_day_offset=0, opens_at=time(14, 0)),
    DrawSlot.NINE_PM: WindowRule(opens_day_offset=0, opens_at=time(17, 0)),
}


@dataclass(frozen=True)
class BettingWindow:
    opens_at: datetime
    closes_at: datetime

    def contains(self, now: datetime) -> bool:
        return self.opens_at <= ensure_aware(now) < self.closes_at


class DrawCalendar:
    def __init__(self, tz: ZoneInfo | str) -> None:
        self._tz = ZoneInfo(tz) if isinstance(tz, str) else tz

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def _at(self, day: date, wall: time) -> datetime:
        return datetime.combine(day, wall, tzinfo=self._tz)

    def slot_time(self, slot: DrawSlot, day: date) -> datetime:
        return self._at(day, SLOT_TIMES[slot])

    def cutoff_for(self, slot: DrawSlot, day: date) -> datetime:
        return self.slot_time(slot, day) - CUTOFF_LEAD

    def window_for(self, slot: DrawSlot, day: date) -> BettingWindow:
        rule = BETTING_WINDOWS[slot]
        opens_day = day + timedelta(days=rule.opens_day_offset)
        return BettingWindow(
            opens_at=self._at(opens_day, rule.opens_at),
            closes_at=self.cutoff_for(slot, day),
        )

    def is_open_for_betting(self, slot: DrawSlot, day: date, now: datetime) -> bool:
        return self.window_for(slot, day).contains(now)

    def local_today(self, now: datetime) -> date:
        return ensure_aware(now).astimezone(self._tz).date()

    def open_slots(self, now: datetime) -> list[tuple[date, DrawSlot]]:
        """(date, slot) pairs currently accepting wagers.

        Only today and tomorrow can qualify: no window opens more than one
        day ahead of its draw.
        """
        today = self.local_today(now)
        result: list[tuple[date, DrawSlot]] = []
        for day in (today, today + timedelta(days=1)):
            for slot in DrawSlot:
                if self.is_open_for_betting(slot, day, now):
                    result.append((day, slot))
        return result

    def dates_in_horizon(self, from_date: date, horizon_days: int) -> list[date]:
        return [from_date + timedelta(days=i) for i in range(horizon_days)]
