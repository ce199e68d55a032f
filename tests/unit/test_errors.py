"""Tests for lt_common.errors and lt_common.response."""

from decimal import Decimal

from src.lt_common.errors import (
    AppError,
    DrawAlreadySettledError,
    DrawNotClosedError,
    InsufficientBalanceError,
    InvalidDrawStateError,
    LimitExceededError,
    SoldOutError,
)
from src.lt_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="test"), Exception)


class TestSpecificErrors:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=Decimal("65.00"), available=Decimal("30.00"))
        assert err.code == 2001
        assert err.http_status == 422
        assert "65.00" in err.message
        assert "30.00" in err.message

    def test_limit_and_sold_out_are_distinct(self) -> None:
        limit = LimitExceededError("123", "STRAIGHT", Decimal("990"), Decimal("1000"))
        sold = SoldOutError("123", "STRAIGHT")
        assert limit.code != sold.code
        assert "1000" in limit.message

    def test_draw_state_errors_share_base(self) -> None:
        assert isinstance(DrawNotClosedError(1, "OPEN"), InvalidDrawStateError)
        assert isinstance(DrawAlreadySettledError(1), InvalidDrawStateError)
        assert DrawNotClosedError(1, "OPEN").code != DrawAlreadySettledError(1).code
        assert DrawAlreadySettledError(1).http_status == 409


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.data == {"id": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(5002, "sold out")
        assert resp.code == 5002
        assert resp.data is None

    def test_serializes(self) -> None:
        dumped = ApiResponse().model_dump()
        assert set(dumped) == {"code", "message", "data", "timestamp", "request_id"}
