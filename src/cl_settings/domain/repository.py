"""Repository Protocol for the process-wide settings row."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class SettingsRepositoryProtocol(Protocol):
    async def get_tax_rate_bps(self, db: AsyncSession) -> int | None:
        """Stored tax rate, or None when the row has never been written."""
        ...

    async def set_tax_rate_bps(self, db: AsyncSession, bps: int) -> int: ...
