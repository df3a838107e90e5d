"""SettingsRepository — single-row app_settings table (id is always 1).

Transaction ownership: the CALLER commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

_GET_TAX_RATE_SQL = text("SELECT tax_rate_bps FROM app_settings WHERE id = 1")

_UPSERT_TAX_RATE_SQL = text("""
    INSERT INTO app_settings (id, tax_rate_bps)
    VALUES (1, :bps)
    ON CONFLICT (id) DO UPDATE
        SET tax_rate_bps = EXCLUDED.tax_rate_bps,
            updated_at = NOW()
    RETURNING tax_rate_bps
""")


class SettingsRepository:
    async def get_tax_rate_bps(self, db: AsyncSession) -> int | None:
        result = await db.execute(_GET_TAX_RATE_SQL)
        row = result.fetchone()
        return int(row.tax_rate_bps) if row else None

    async def set_tax_rate_bps(self, db: AsyncSession, bps: int) -> int:
        result = await db.execute(_UPSERT_TAX_RATE_SQL, {"bps": bps})
        return int(result.scalar_one())
