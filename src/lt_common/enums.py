"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class DrawSlot(str, Enum):
    """The three fixed daily draw times."""
    TWO_PM = "TWO_PM"
    FIVE_PM = "FIVE_PM"
    NINE_PM = "NINE_PM"


class DrawStatus(str, Enum):
    """Forward-only: OPEN -> CLOSED -> SETTLED."""
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    SETTLED = "SETTLED"


class WagerType(str, Enum):
    STRAIGHT = "STRAIGHT"
    POOLED = "POOLED"  # "rambolito": wins on any permutation


class TicketStatus(str, Enum):
    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    CANCELLED = "CANCELLED"


class AccountRole(str, Enum):
    AGENT = "AGENT"
    COORDINATOR = "COORDINATOR"
    AREA_COORDINATOR = "AREA_COORDINATOR"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class BalanceEntryType(str, Enum):
    TICKET_PURCHASE = "TICKET_PURCHASE"
    TICKET_REFUND = "TICKET_REFUND"


class NotificationAudience(str, Enum):
    ACCOUNT = "ACCOUNT"
    BROADCAST = "BROADCAST"
