"""Repository Protocol — dependency inversion for testability."""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_exposure.domain.models import ExposureTotal


class ExposureRepositoryProtocol(Protocol):
    async def try_reserve(
        self,
        db: AsyncSession,
        draw_id: int,
        wager_type: str,
        combination: str,
        stake: Decimal,
        ceiling: Decimal,
    ) -> ExposureTotal | None:
        """Atomically add ``stake`` unless the total would pass ``ceiling``
        or the key is sold out. Returns None when nothing was applied."""
        ...

    async def get_total(
        self, db: AsyncSession, draw_id: int, wager_type: str, combination: str
    ) -> ExposureTotal | None: ...

    async def list_sold_out(self, db: AsyncSession, draw_id: int) -> list[ExposureTotal]: ...

    async def get_number_limit(
        self, db: AsyncSession, draw_id: int, wager_type: str, combination: str
    ) -> Decimal | None: ...

    async def get_global_limit(self, db: AsyncSession, wager_type: str) -> Decimal | None: ...

    async def upsert_global_limit(
        self, db: AsyncSession, wager_type: str, amount: Decimal, updated_by: str
    ) -> None: ...

    async def upsert_number_limit(
        self,
        db: AsyncSession,
        draw_id: int,
        wager_type: str,
        combination: str,
        amount: Decimal,
        updated_by: str,
    ) -> None: ...
