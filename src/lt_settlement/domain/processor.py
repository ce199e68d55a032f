"""SettlementProcessor — pure scoring of a draw's tickets against a posted result.

No I/O. The caller persists ``SettlementOutcome.winners`` and delivers
``SettlementOutcome.events`` after its transaction commits.
"""

from collections.abc import Iterable
from decimal import Decimal

from src.lt_common.enums import NotificationAudience, TicketStatus
from src.lt_common.money import ZERO, to_money
from src.lt_draw.domain.models import Draw
from src.lt_notify.events import (
    DOWNLINE_WINNER,
    DRAW_SETTLED,
    WINNING_TICKET,
    NotificationEvent,
)
from src.lt_settlement.domain.models import (
    SettlementOutcome,
    SettlementSummary,
    TicketSettlement,
    WinningWager,
)
from src.lt_ticket.domain.models import Ticket
from src.lt_wager.domain.payout import PayoutConfig
from src.lt_wager.domain.rules import compute_prize, is_winner

# Only PENDING tickets are settled; a read-only scan also re-scores VALIDATED ones
SETTLEABLE_STATUSES = frozenset({TicketStatus.PENDING.value})
SCANNABLE_STATUSES = frozenset({TicketStatus.PENDING.value, TicketStatus.VALIDATED.value})


class SettlementProcessor:
    def score_ticket(
        self, ticket: Ticket, winning_number: str, payout_config: PayoutConfig
    ) -> TicketSettlement | None:
        """Return the ticket's winning wagers and aggregate prize, or None."""
        winning: list[WinningWager] = []
        for wager in ticket.wagers:
            if not is_winner(wager.wager_type, wager.combination, winning_number):
                continue
            prize = compute_prize(wager.wager_type, wager.combination, wager.stake, payout_config)
            if prize > ZERO:
                winning.append(WinningWager(wager=wager, prize=prize))
        if not winning:
            return None
        total = to_money(sum((w.prize for w in winning), Decimal(0)))
        return TicketSettlement(ticket=ticket, winning_wagers=winning, prize_total=total)

    def settle(
        self,
        draw: Draw,
        tickets: Iterable[Ticket],
        payout_config: PayoutConfig,
        eligible_statuses: frozenset[str] = SETTLEABLE_STATUSES,
    ) -> SettlementOutcome:
        """Score the tickets of ``draw`` whose status is in ``eligible_statuses``.

        ``draw.winning_number`` must already be set. Other tickets are skipped
        and not counted as scanned.
        """
        winning_number = draw.winning_number
        if winning_number is None:
            raise ValueError(f"Draw {draw.id} has no winning number")

        scanned = 0
        winners: list[TicketSettlement] = []
        for ticket in tickets:
            if ticket.status not in eligible_statuses:
                continue
            scanned += 1
            result = self.score_ticket(ticket, winning_number, payout_config)
            if result is not None:
                winners.append(result)

        total_payout = to_money(sum((w.prize_total for w in winners), Decimal(0)))
        summary = SettlementSummary(
            draw_id=draw.id,
            winning_number=winning_number,
            tickets_scanned=scanned,
            winner_count=len(winners),
            total_payout=total_payout,
        )
        return SettlementOutcome(
            summary=summary,
            winners=winners,
            events=self.build_events(draw, winners, summary),
        )

    def build_events(
        self, draw: Draw, winners: list[TicketSettlement], summary: SettlementSummary
    ) -> list[NotificationEvent]:
        events: list[NotificationEvent] = []
        for win in winners:
            payload = {
                "draw_id": draw.id,
                "draw_date": draw.draw_date.isoformat(),
                "slot": draw.slot,
                "ticket_number": win.ticket.ticket_number,
                "winning_number": summary.winning_number,
                "prize_total": str(win.prize_total),
                "winning_wagers": [
                    {
                        "combination": w.wager.combination,
                        "wager_type": w.wager.wager_type,
                        "stake": str(w.wager.stake),
                        "prize": str(w.prize),
                    }
                    for w in win.winning_wagers
                ],
            }
            events.append(
                NotificationEvent(
                    event_name=WINNING_TICKET,
                    audience=NotificationAudience.ACCOUNT,
                    payload=payload,
                    account_id=win.ticket.owner_id,
                )
            )
            if win.ticket.upline_id:
                events.append(
                    NotificationEvent(
                        event_name=DOWNLINE_WINNER,
                        audience=NotificationAudience.ACCOUNT,
                        payload={**payload, "owner_id": win.ticket.owner_id},
                        account_id=win.ticket.upline_id,
                    )
                )
        events.append(
            NotificationEvent(
                event_name=DRAW_SETTLED,
                audience=NotificationAudience.BROADCAST,
                payload={
                    "draw_id": draw.id,
                    "draw_date": draw.draw_date.isoformat(),
                    "slot": draw.slot,
                    "winning_number": summary.winning_number,
                    "winner_count": summary.winner_count,
                    "total_payout": str(summary.total_payout),
                },
            )
        )
        return events
