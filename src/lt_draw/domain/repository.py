"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import date, datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_draw.domain.models import Draw, DrawStatistics


class DrawRepositoryProtocol(Protocol):
    async def insert_if_missing(
        self, db: AsyncSession, draw_date: date, slot: str, cutoff_at: datetime
    ) -> bool: ...

    async def close_due_draws(self, db: AsyncSession, now: datetime) -> list[Draw]: ...

    async def get_by_id(self, db: AsyncSession, draw_id: int) -> Draw | None: ...

    async def lock_for_betting(self, db: AsyncSession, draw_id: int) -> Draw | None: ...

    async def mark_settled(
        self, db: AsyncSession, draw_id: int, winning_number: str, settled_at: datetime
    ) -> Draw | None: ...

    async def insert_result_record(
        self, db: AsyncSession, draw_id: int, winning_number: str, input_by: str
    ) -> None: ...

    async def list_draws(
        self,
        db: AsyncSession,
        date_from: date | None,
        date_to: date | None,
        status: str | None,
        limit: int,
    ) -> list[Draw]: ...

    async def list_open_for_dates(self, db: AsyncSession, dates: list[date]) -> list[Draw]: ...

    async def get_statistics(self, db: AsyncSession, draw_id: int) -> DrawStatistics: ...
