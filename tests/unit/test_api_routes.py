"""HTTP-level tests: auth, role checks and the error envelope.

Services are replaced with AsyncMocks; no database or Redis is touched.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

import src.lt_draw.api.router as draw_router
import src.lt_ticket.api.router as ticket_router
from src.lt_common.database import get_db_session
from src.lt_common.enums import AccountRole
from src.lt_common.errors import DrawNotClosedError, SoldOutError
from src.lt_settlement.domain.models import SettlementSummary
from src.lt_ticket.domain.models import Ticket, Wager
from src.main import app


async def _fake_session():
    yield AsyncMock()


@pytest.fixture
def auth(make_token):
    def _auth(role: AccountRole, user_id: str = "user-1") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}

    return _auth


def _ticket(owner_id: str = "agent-1") -> Ticket:
    return Ticket(
        id=1,
        ticket_number="900001",
        owner_id=owner_id,
        draw_id=7,
        total_stake=Decimal("10.00"),
        status="PENDING",
        wagers=[Wager(combination="007", wager_type="STRAIGHT", stake=Decimal("10.00"))],
        created_at=datetime(2026, 3, 10, 5, 0, tzinfo=timezone.utc),
    )


@pytest.fixture(autouse=True)
def _no_database():
    app.dependency_overrides[get_db_session] = _fake_session
    yield
    app.dependency_overrides.clear()


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestTickets:
    async def test_requires_token(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/tickets", json={"draw_id": 7, "wagers": []})
        assert resp.status_code == 401

    async def test_submit(self, client: AsyncClient, auth, monkeypatch) -> None:
        intake = AsyncMock()
        intake.submit.return_value = _ticket()
        monkeypatch.setattr(ticket_router, "_intake", intake)

        resp = await client.post(
            "/api/v1/tickets",
            json={
                "draw_id": 7,
                "wagers": [{"combination": "007", "wager_type": "STRAIGHT", "stake": "10"}],
            },
            headers=auth(AccountRole.AGENT, "agent-1"),
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["ticket_number"] == "900001"
        assert body["data"]["wagers"][0]["combination"] == "007"
        owner_id = intake.submit.await_args.args[1]
        assert owner_id == "agent-1"

    async def test_domain_error_envelope(self, client: AsyncClient, auth, monkeypatch) -> None:
        intake = AsyncMock()
        intake.submit.side_effect = SoldOutError("007", "STRAIGHT")
        monkeypatch.setattr(ticket_router, "_intake", intake)

        resp = await client.post(
            "/api/v1/tickets",
            json={
                "draw_id": 7,
                "wagers": [{"combination": "007", "wager_type": "STRAIGHT", "stake": "10"}],
            },
            headers={**auth(AccountRole.AGENT), "X-Request-ID": "req_abc"},
        )

        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 5002
        assert body["data"] is None
        assert body["request_id"] == "req_abc"
        assert resp.headers["X-Request-ID"] == "req_abc"

    async def test_agent_cannot_read_other_ticket(
        self, client: AsyncClient, auth, monkeypatch
    ) -> None:
        intake = AsyncMock()
        intake.get_ticket.return_value = _ticket(owner_id="agent-2")
        monkeypatch.setattr(ticket_router, "_intake", intake)

        resp = await client.get(
            "/api/v1/tickets/900001", headers=auth(AccountRole.AGENT, "agent-1")
        )

        assert resp.status_code == 403

    async def test_agent_cannot_refund(self, client: AsyncClient, auth) -> None:
        resp = await client.post(
            "/api/v1/tickets/900001/refund", json={}, headers=auth(AccountRole.AGENT)
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 1006


class TestPostResult:
    async def test_agent_forbidden(self, client: AsyncClient, auth, monkeypatch) -> None:
        lifecycle = AsyncMock()
        monkeypatch.setattr(draw_router, "_lifecycle", lifecycle)

        resp = await client.post(
            "/api/v1/draws/7/result",
            json={"winning_number": "123"},
            headers=auth(AccountRole.AGENT),
        )

        assert resp.status_code == 403
        lifecycle.post_result.assert_not_awaited()

    async def test_area_coordinator_settles(self, client: AsyncClient, auth, monkeypatch) -> None:
        lifecycle = AsyncMock()
        lifecycle.post_result.return_value = SettlementSummary(
            7, "123", 40, 3, Decimal("14250.00")
        )
        monkeypatch.setattr(draw_router, "_lifecycle", lifecycle)

        resp = await client.post(
            "/api/v1/draws/7/result",
            json={"winning_number": "123"},
            headers=auth(AccountRole.AREA_COORDINATOR, "coord-1"),
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["winner_count"] == 3
        assert data["total_payout"] == "14250.00"
        lifecycle.post_result.assert_awaited_once()
        assert lifecycle.post_result.await_args.args[1:] == (7, "123", "coord-1")

    async def test_not_closed_is_conflict(self, client: AsyncClient, auth, monkeypatch) -> None:
        lifecycle = AsyncMock()
        lifecycle.post_result.side_effect = DrawNotClosedError(7, "OPEN")
        monkeypatch.setattr(draw_router, "_lifecycle", lifecycle)

        resp = await client.post(
            "/api/v1/draws/7/result",
            json={"winning_number": "123"},
            headers=auth(AccountRole.ADMIN),
        )

        assert resp.status_code == 409
        assert resp.json()["code"] == 3005
