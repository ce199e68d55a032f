"""Unit tests for DrawLifecycle using mock repositories."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.lt_common.errors import (
    DrawAlreadySettledError,
    DrawNotClosedError,
    DrawNotFoundError,
    MalformedCombinationError,
    SettlementFailureError,
)
from src.lt_draw.application.lifecycle import DrawLifecycle
from src.lt_draw.domain.calendar import DrawCalendar
from src.lt_draw.domain.models import Draw
from src.lt_settlement.domain.models import SettlementOutcome, SettlementSummary

NOW = datetime(2026, 3, 10, 2, 0, tzinfo=timezone.utc)  # 10:00 Manila


def _draw(status: str = "CLOSED", winning_number: str | None = None) -> Draw:
    return Draw(
        id=5,
        draw_date=date(2026, 3, 10),
        slot="TWO_PM",
        cutoff_at=datetime(2026, 3, 10, 5, 55, tzinfo=timezone.utc),
        status=status,
        winning_number=winning_number,
    )


def _session() -> AsyncMock:
    db = AsyncMock()
    # begin_nested() is used as an async context manager, not awaited
    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=None)
    savepoint.__aexit__ = AsyncMock(return_value=False)
    db.begin_nested = MagicMock(return_value=savepoint)
    return db


def _lifecycle(repo=None, settlement=None, notifier=None, session_factory=None) -> DrawLifecycle:
    return DrawLifecycle(
        repo=repo or AsyncMock(),
        settlement=settlement or AsyncMock(),
        notifier=notifier or AsyncMock(),
        calendar=DrawCalendar("Asia/Manila"),
        clock=lambda: NOW,
        session_factory=session_factory or MagicMock(),
        horizon_days=14,
        sweep_interval_seconds=60,
    )


class TestEnsureDrawsExist:
    async def test_creates_three_per_day(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = True
        db = _session()

        summary = await _lifecycle(repo=repo).ensure_draws_exist(db, date(2026, 3, 10), 14)

        assert summary.created == 42
        assert summary.skipped == 0
        assert summary.ok
        assert repo.insert_if_missing.await_count == 42
        db.commit.assert_awaited_once()

    async def test_idempotent_rerun_only_skips(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = False

        summary = await _lifecycle(repo=repo).ensure_draws_exist(_session(), date(2026, 3, 10), 2)

        assert summary.created == 0
        assert summary.skipped == 6

    async def test_cutoff_passed_per_slot(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = True

        await _lifecycle(repo=repo).ensure_draws_exist(_session(), date(2026, 3, 10), 1)

        cutoffs = {c.args[2]: c.args[3] for c in repo.insert_if_missing.await_args_list}
        assert cutoffs["TWO_PM"].astimezone(timezone.utc) == datetime(
            2026, 3, 10, 5, 55, tzinfo=timezone.utc
        )
        assert set(cutoffs) == {"TWO_PM", "FIVE_PM", "NINE_PM"}

    async def test_failing_date_does_not_abort_others(self) -> None:
        repo = AsyncMock()
        bad_day = date(2026, 3, 11)

        async def insert(db, draw_date, slot, cutoff_at):
            if draw_date == bad_day:
                raise RuntimeError("constraint violated")
            return True

        repo.insert_if_missing.side_effect = insert

        summary = await _lifecycle(repo=repo).ensure_draws_exist(_session(), date(2026, 3, 10), 3)

        assert summary.failed_dates == [bad_day]
        assert summary.created == 6
        assert not summary.ok

    async def test_month(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = True

        summary = await _lifecycle(repo=repo).create_draws_for_month(_session(), 2026, 2)

        assert summary.created == 28 * 3

    async def test_current_and_next_month(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = True

        summary = await _lifecycle(repo=repo).create_draws_for_current_and_next_month(_session())

        # March (31) + April (30)
        assert summary.created == (31 + 30) * 3


class TestSweepStatuses:
    async def test_closes_due_draws_and_commits(self) -> None:
        repo = AsyncMock()
        repo.close_due_draws.return_value = [_draw("CLOSED")]
        db = AsyncMock()

        closed = await _lifecycle(repo=repo).sweep_statuses(db)

        assert len(closed) == 1
        repo.close_due_draws.assert_awaited_once_with(db, NOW)
        db.commit.assert_awaited_once()

    async def test_explicit_now(self) -> None:
        repo = AsyncMock()
        repo.close_due_draws.return_value = []
        later = datetime(2026, 3, 10, 6, 0, tzinfo=timezone.utc)
        db = AsyncMock()

        await _lifecycle(repo=repo).sweep_statuses(db, later)

        repo.close_due_draws.assert_awaited_once_with(db, later)


class TestPostResult:
    async def test_happy_path_commits_then_notifies(self) -> None:
        repo = AsyncMock()
        settled = _draw("SETTLED", "123")
        repo.mark_settled.return_value = settled
        summary = SettlementSummary(5, "123", 10, 2, Decimal("5250.00"))
        settlement = AsyncMock()
        settlement.settle_draw.return_value = SettlementOutcome(summary=summary, events=["e"])
        notifier = AsyncMock()
        db = AsyncMock()
        order: list[str] = []
        db.commit.side_effect = lambda: order.append("commit")
        notifier.dispatch.side_effect = lambda events: order.append("dispatch")

        result = await _lifecycle(repo, settlement, notifier).post_result(db, 5, "123", "admin-1")

        assert result == summary
        repo.mark_settled.assert_awaited_once_with(db, 5, "123", NOW)
        repo.insert_result_record.assert_awaited_once_with(db, 5, "123", "admin-1")
        settlement.settle_draw.assert_awaited_once_with(db, settled)
        assert order == ["commit", "dispatch"]

    @pytest.mark.parametrize("number", ["12", "1234", "abc", ""])
    async def test_malformed_number(self, number: str) -> None:
        repo = AsyncMock()
        with pytest.raises(MalformedCombinationError):
            await _lifecycle(repo=repo).post_result(AsyncMock(), 5, number, "admin-1")
        repo.mark_settled.assert_not_awaited()

    async def test_not_found(self) -> None:
        repo = AsyncMock()
        repo.mark_settled.return_value = None
        repo.get_by_id.return_value = None
        db = AsyncMock()
        with pytest.raises(DrawNotFoundError):
            await _lifecycle(repo=repo).post_result(db, 5, "123", "admin-1")
        db.rollback.assert_awaited_once()

    async def test_open_draw_rejected(self) -> None:
        repo = AsyncMock()
        repo.mark_settled.return_value = None
        repo.get_by_id.return_value = _draw("OPEN")
        with pytest.raises(DrawNotClosedError):
            await _lifecycle(repo=repo).post_result(AsyncMock(), 5, "123", "admin-1")

    async def test_second_post_rejected(self) -> None:
        repo = AsyncMock()
        repo.mark_settled.return_value = None
        repo.get_by_id.return_value = _draw("SETTLED", "123")
        settlement = AsyncMock()
        with pytest.raises(DrawAlreadySettledError):
            await _lifecycle(repo=repo, settlement=settlement).post_result(
                AsyncMock(), 5, "456", "admin-1"
            )
        settlement.settle_draw.assert_not_awaited()

    async def test_unexpected_failure_rolls_back(self) -> None:
        repo = AsyncMock()
        repo.mark_settled.return_value = _draw("SETTLED", "123")
        settlement = AsyncMock()
        settlement.settle_draw.side_effect = RuntimeError("connection lost")
        notifier = AsyncMock()
        db = AsyncMock()

        with pytest.raises(SettlementFailureError):
            await _lifecycle(repo, settlement, notifier).post_result(db, 5, "123", "admin-1")

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        notifier.dispatch.assert_not_awaited()


class TestScheduledRuns:
    def _factory(self, db):
        ctx = MagicMock()
        ctx.__aenter__ = AsyncMock(return_value=db)
        ctx.__aexit__ = AsyncMock(return_value=False)
        return MagicMock(return_value=ctx)

    async def test_maintenance_uses_local_today(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = True
        lifecycle = _lifecycle(repo=repo, session_factory=self._factory(_session()))

        summary = await lifecycle.run_maintenance()

        assert summary is not None
        assert summary.created == 42
        first_date = repo.insert_if_missing.await_args_list[0].args[1]
        assert first_date == date(2026, 3, 10)

    async def test_sweep_failure_is_logged_not_raised(self) -> None:
        repo = AsyncMock()
        repo.close_due_draws.side_effect = RuntimeError("db down")
        lifecycle = _lifecycle(repo=repo, session_factory=self._factory(AsyncMock()))

        assert await lifecycle.run_sweep() == []

    async def test_start_runs_both_once_then_stop(self) -> None:
        repo = AsyncMock()
        repo.insert_if_missing.return_value = False
        repo.close_due_draws.return_value = []
        db = _session()
        lifecycle = _lifecycle(repo=repo, session_factory=self._factory(db))

        await lifecycle.start()
        try:
            assert repo.insert_if_missing.await_count == 42
            repo.close_due_draws.assert_awaited_once()
        finally:
            await lifecycle.stop()
