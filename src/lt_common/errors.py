"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Account / balance ledger
  3xxx: Draw lifecycle
  4xxx: Wager / ticket
  5xxx: Exposure limits
  9xxx: System

The betting UI branches its messaging on ``code``, so every error kind gets
its own code instead of a generic failure.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class ForbiddenError(AppError):
    def __init__(self, role: str) -> None:
        super().__init__(1006, f"Role {role} is not allowed to perform this action", 403)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: object, available: object) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(2002, f"Account not found: {account_id}", 404)


# --- 3xxx: Draw ---

class DrawNotFoundError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3001, f"Draw not found: {draw_id}", 404)


class DrawNotOpenError(AppError):
    def __init__(self, draw_id: int, status: str) -> None:
        super().__init__(3002, f"Draw {draw_id} is not open for betting (status={status})", 422)


class BettingWindowClosedError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3003, f"Betting window for draw {draw_id} is closed", 422)


class InvalidDrawStateError(AppError):
    def __init__(
        self, draw_id: int, status: str, message: str | None = None, code: int = 3004
    ) -> None:
        self.status = status
        super().__init__(
            code,
            message or f"Draw {draw_id} is in status {status}; transition not allowed",
            409,
        )


class DrawNotClosedError(InvalidDrawStateError):
    def __init__(self, draw_id: int, status: str) -> None:
        super().__init__(
            draw_id, status, f"Draw {draw_id} is not closed yet (status={status})", 3005
        )


class DrawAlreadySettledError(InvalidDrawStateError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(draw_id, "SETTLED", f"Draw {draw_id} is already settled", 3006)


class SettlementFailureError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3007, f"Settlement of draw {draw_id} failed; nothing was applied", 500)


# --- 4xxx: Wager / ticket ---

class MalformedCombinationError(AppError):
    def __init__(self, combination: object) -> None:
        super().__init__(4001, f"Combination must be exactly 3 digits, got {combination!r}", 422)


class TripleNotAllowedError(AppError):
    def __init__(self, combination: str) -> None:
        super().__init__(
            4002, f"Triple numbers ({combination}) are not allowed for pooled wagers", 422
        )


class DuplicateWagerError(AppError):
    def __init__(self, combination: str, wager_type: str) -> None:
        super().__init__(
            4003, f"Duplicate wager {combination} ({wager_type}) on the same ticket", 422
        )


class InvalidStakeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4004, f"Invalid stake: {detail}", 422)


class TooManyWagersError(AppError):
    def __init__(self, count: int, maximum: int) -> None:
        super().__init__(4005, f"A ticket holds 1 to {maximum} wagers, got {count}", 422)


class TicketNotFoundError(AppError):
    def __init__(self, ticket_number: str) -> None:
        super().__init__(4006, f"Ticket not found: {ticket_number}", 404)


class InvalidWagerTypeError(AppError):
    def __init__(self, wager_type: object) -> None:
        super().__init__(4007, f"Unknown wager type: {wager_type!r}", 422)


class TicketNotRefundableError(AppError):
    def __init__(self, ticket_number: str, status: str) -> None:
        super().__init__(
            4008, f"Ticket {ticket_number} in status {status} cannot be refunded", 422
        )


class InvalidMultiplierError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(4009, f"Payout multiplier must be a positive whole number, got {value}", 422)


# --- 5xxx: Exposure ---

class LimitExceededError(AppError):
    def __init__(self, combination: str, wager_type: str, current: object, ceiling: object) -> None:
        super().__init__(
            5001,
            f"Bet limit exceeded for {combination} ({wager_type}): "
            f"current total {current}, limit {ceiling}",
            422,
        )


class SoldOutError(AppError):
    def __init__(self, combination: str, wager_type: str) -> None:
        super().__init__(
            5002, f"Number {combination} is sold out for {wager_type} in this draw", 422
        )


class ExposureLimitNotConfiguredError(AppError):
    def __init__(self, wager_type: str) -> None:
        super().__init__(5003, f"Bet limit not configured for {wager_type}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
