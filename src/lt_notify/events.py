"""Notification events produced by settlement and ticket intake.

Events are data: the code that produces them never delivers them, so a
delivery failure can never undo a committed transaction.
"""

from dataclasses import dataclass, field
from typing import Any

from src.lt_common.enums import NotificationAudience

WINNING_TICKET = "winning_ticket"
DOWNLINE_WINNER = "downline_winner"
DRAW_SETTLED = "draw_settled"
NUMBER_SOLD_OUT = "number_sold_out"


@dataclass(frozen=True)
class NotificationEvent:
    event_name: str
    audience: NotificationAudience
    payload: dict[str, Any] = field(default_factory=dict)
    account_id: str | None = None  # required when audience is ACCOUNT
