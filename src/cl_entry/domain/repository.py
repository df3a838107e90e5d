"""Repository Protocol — dependency inversion for testability."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.enums import SettledParty
from src.cl_entry.domain.models import Entry


class EntryRepositoryProtocol(Protocol):
    async def get_entry(self, db: AsyncSession, entry_id: str) -> Entry | None: ...

    async def get_by_account_date(
        self, db: AsyncSession, account_id: str, entry_date: date
    ) -> Entry | None: ...

    async def get_latest_before(
        self, db: AsyncSession, account_id: str, entry_date: date
    ) -> Entry | None:
        """Most recent entry strictly before entry_date, or None."""
        ...

    async def list_entries(
        self,
        db: AsyncSession,
        account_id: str | None,
        player_id: str | None,
        date_from: date | None,
        date_to: date | None,
        cursor_date: date | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Entry]:
        """Ordered by (entry_date DESC, id DESC), keyset-paginated."""
        ...

    async def insert_entry(self, db: AsyncSession, entry: Entry) -> Entry: ...

    async def update_entry(self, db: AsyncSession, entry: Entry) -> Entry | None: ...

    async def delete_entry(self, db: AsyncSession, entry_id: str) -> bool: ...

    async def set_settled(
        self, db: AsyncSession, entry_id: str, party: SettledParty, settled: bool
    ) -> Entry | None: ...
