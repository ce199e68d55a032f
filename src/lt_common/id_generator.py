"""Ticket numbers printed on the slip and keyed in at claim time.

A ticket number is a fixed-width decimal string::

    SSSSSSSSS MM QQQQ
    seconds since 2025-01-01 Manila | worker (0-99) | sequence (0-9999)

Numbers from one worker sort by issue time. Workers are told apart by
``TICKET_MACHINE_ID`` so two processes never hand out the same number.
"""

import threading
from datetime import datetime, timezone

from config.settings import settings
from src.lt_common.datetime_utils import Clock, utc_now

_EPOCH = datetime(2024, 12, 31, 16, 0, tzinfo=timezone.utc)  # 2025-01-01 00:00 +08:00
_SECONDS_WIDTH = 9
_MACHINE_WIDTH = 2
_SEQUENCE_WIDTH = 4
_MAX_MACHINE = 10**_MACHINE_WIDTH - 1
_MAX_SEQUENCE = 10**_SEQUENCE_WIDTH - 1


class TicketNumberGenerator:
    def __init__(self, machine_id: int = 0, clock: Clock = utc_now) -> None:
        if not 0 <= machine_id <= _MAX_MACHINE:
            raise ValueError(f"machine_id must be 0-{_MAX_MACHINE}, got {machine_id}")
        self._machine_id = machine_id
        self._clock = clock
        self._second = -1
        self._sequence = 0
        self._lock = threading.Lock()

    def next_number(self) -> str:
        with self._lock:
            now = int((self._clock() - _EPOCH).total_seconds())
            if now > self._second:
                self._second, self._sequence = now, 0
            elif self._sequence < _MAX_SEQUENCE:
                # same second, or the wall clock stepped back
                self._sequence += 1
            else:
                # sequence exhausted: borrow the next second
                self._second, self._sequence = self._second + 1, 0
            return (
                f"{self._second:0{_SECONDS_WIDTH}d}"
                f"{self._machine_id:0{_MACHINE_WIDTH}d}"
                f"{self._sequence:0{_SEQUENCE_WIDTH}d}"
            )


_default_generator = TicketNumberGenerator(settings.TICKET_MACHINE_ID)


def generate_ticket_number() -> str:
    return _default_generator.next_number()
