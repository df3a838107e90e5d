"""SettingsApplicationService — the global tax rate.

The rate is read at entry create/edit time and handed to the engine
explicitly; changing it never touches historical entries.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.cl_common.cents import validate_bps
from src.cl_common.errors import InvalidTaxRateError
from src.cl_settings.application.schemas import TaxRateOut
from src.cl_settings.domain.repository import SettingsRepositoryProtocol
from src.cl_settings.infrastructure.persistence import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsApplicationService:
    def __init__(self, repo: SettingsRepositoryProtocol | None = None) -> None:
        self._repo: SettingsRepositoryProtocol = repo or SettingsRepository()

    async def current_tax_rate_bps(self, db: AsyncSession) -> int:
        stored = await self._repo.get_tax_rate_bps(db)
        if stored is None:
            return settings.DEFAULT_TAX_RATE_BPS
        return stored

    async def get_tax_rate(self, db: AsyncSession) -> TaxRateOut:
        return TaxRateOut.from_bps(await self.current_tax_rate_bps(db))

    async def update_tax_rate(self, db: AsyncSession, bps: int) -> TaxRateOut:
        try:
            validate_bps(bps)
        except ValueError as exc:
            raise InvalidTaxRateError(bps) from exc
        try:
            stored = await self._repo.set_tax_rate_bps(db, bps)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Tax rate updated: %d bps", stored)
        return TaxRateOut.from_bps(stored)
