"""BrokerRepository — raw SQL access to the brokers table.

special_scenarios is a TEXT[] column; asyncpg maps it to list[str].
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.domain.models import Broker
from src.cl_common.enums import CommissionType

_BROKER_COLUMNS = """
    b.id, b.name, b.commission_type, b.commission_bps, b.flat_commission,
    b.referral_bps, b.referral_flat, b.special_scenarios,
    b.created_at, b.updated_at,
    (SELECT COUNT(*) FROM accounts a WHERE a.broker_id = b.id) AS account_count
"""

_GET_BROKER_SQL = text(f"SELECT {_BROKER_COLUMNS} FROM brokers b WHERE b.id = :broker_id")

_LIST_BROKERS_SQL = text(f"""
    SELECT {_BROKER_COLUMNS}
    FROM brokers b
    ORDER BY account_count DESC, b.name ASC
""")

_INSERT_BROKER_SQL = text("""
    INSERT INTO brokers
        (name, commission_type, commission_bps, flat_commission,
         referral_bps, referral_flat, special_scenarios)
    VALUES
        (:name, :commission_type, :commission_bps, :flat_commission,
         :referral_bps, :referral_flat, :special_scenarios)
    RETURNING id
""")

_UPDATE_BROKER_SQL = text("""
    UPDATE brokers
    SET name = :name,
        commission_type = :commission_type,
        commission_bps = :commission_bps,
        flat_commission = :flat_commission,
        referral_bps = :referral_bps,
        referral_flat = :referral_flat,
        special_scenarios = :special_scenarios,
        updated_at = NOW()
    WHERE id = :broker_id
    RETURNING id
""")

_DELETE_BROKER_SQL = text("DELETE FROM brokers WHERE id = :broker_id RETURNING id")


def _row_to_broker(row: object) -> Broker:
    return Broker(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        commission_type=CommissionType(row.commission_type),  # type: ignore[attr-defined]
        commission_bps=row.commission_bps,  # type: ignore[attr-defined]
        flat_commission=row.flat_commission,  # type: ignore[attr-defined]
        referral_bps=row.referral_bps,  # type: ignore[attr-defined]
        referral_flat=row.referral_flat,  # type: ignore[attr-defined]
        special_scenarios=list(row.special_scenarios or []),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        account_count=row.account_count,  # type: ignore[attr-defined]
    )


class BrokerRepository:
    async def get_broker(self, db: AsyncSession, broker_id: str) -> Broker | None:
        result = await db.execute(_GET_BROKER_SQL, {"broker_id": broker_id})
        row = result.fetchone()
        return _row_to_broker(row) if row else None

    async def list_brokers(self, db: AsyncSession) -> list[Broker]:
        result = await db.execute(_LIST_BROKERS_SQL)
        return [_row_to_broker(row) for row in result.fetchall()]

    async def create_broker(
        self,
        db: AsyncSession,
        name: str,
        commission_type: CommissionType,
        commission_bps: int,
        flat_commission: int,
        referral_bps: int,
        referral_flat: int,
        special_scenarios: list[str],
    ) -> Broker:
        result = await db.execute(
            _INSERT_BROKER_SQL,
            {
                "name": name,
                "commission_type": commission_type.value,
                "commission_bps": commission_bps,
                "flat_commission": flat_commission,
                "referral_bps": referral_bps,
                "referral_flat": referral_flat,
                "special_scenarios": special_scenarios,
            },
        )
        broker_id = str(result.scalar_one())
        broker = await self.get_broker(db, broker_id)
        assert broker is not None, f"broker {broker_id} vanished after insert"
        return broker

    async def update_broker(self, db: AsyncSession, broker: Broker) -> Broker | None:
        result = await db.execute(
            _UPDATE_BROKER_SQL,
            {
                "broker_id": broker.id,
                "name": broker.name,
                "commission_type": broker.commission_type.value,
                "commission_bps": broker.commission_bps,
                "flat_commission": broker.flat_commission,
                "referral_bps": broker.referral_bps,
                "referral_flat": broker.referral_flat,
                "special_scenarios": broker.special_scenarios,
            },
        )
        if result.fetchone() is None:
            return None
        return await self.get_broker(db, broker.id)

    async def delete_broker(self, db: AsyncSession, broker_id: str) -> bool:
        result = await db.execute(_DELETE_BROKER_SQL, {"broker_id": broker_id})
        return result.fetchone() is not None
