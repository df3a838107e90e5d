"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All queries use raw text() SQL (no ORM). Reads attach entry_count through a
correlated sub-select so the derived status can be computed without a second
round trip.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.domain.models import Account
from src.cl_common.enums import AccountKind

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_ACCOUNT_COLUMNS = """
    a.id, a.kind, a.agent_id, a.broker_id,
    a.username, a.website_url, a.name, a.deposit_amount,
    a.referral_bps, a.promo_amount, a.assigned_player_id,
    a.inactive_override, a.created_at, a.updated_at,
    (SELECT COUNT(*) FROM entries e WHERE e.account_id = a.id) AS entry_count
"""

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts a
    WHERE a.id = :account_id
""")

_LIST_ACCOUNTS_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts a
    WHERE
        (CAST(:kind AS TEXT) IS NULL OR a.kind = CAST(:kind AS TEXT))
        AND (CAST(:agent_id AS TEXT) IS NULL OR a.agent_id = CAST(:agent_id AS TEXT))
        AND (CAST(:broker_id AS TEXT) IS NULL OR a.broker_id = CAST(:broker_id AS TEXT))
    ORDER BY a.created_at DESC, a.id DESC
""")

_INSERT_ACCOUNT_SQL = text("""
    INSERT INTO accounts
        (kind, agent_id, broker_id, username, website_url, name,
         deposit_amount, referral_bps, promo_amount)
    VALUES
        (:kind, :agent_id, :broker_id, :username, :website_url, :name,
         :deposit_amount, :referral_bps, :promo_amount)
    RETURNING id
""")

_UPDATE_ACCOUNT_SQL = text("""
    UPDATE accounts
    SET kind = :kind,
        agent_id = :agent_id,
        broker_id = :broker_id,
        username = :username,
        website_url = :website_url,
        name = :name,
        deposit_amount = :deposit_amount,
        referral_bps = :referral_bps,
        promo_amount = :promo_amount,
        assigned_player_id = :assigned_player_id,
        inactive_override = :inactive_override,
        updated_at = NOW()
    WHERE id = :account_id
    RETURNING id
""")

_SET_OVERRIDE_SQL = text("""
    UPDATE accounts
    SET inactive_override = :inactive,
        updated_at = NOW()
    WHERE id = :account_id
""")

_DELETE_ACCOUNT_SQL = text("DELETE FROM accounts WHERE id = :account_id RETURNING id")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        kind=AccountKind(row.kind),  # type: ignore[attr-defined]
        agent_id=row.agent_id,  # type: ignore[attr-defined]
        broker_id=row.broker_id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        website_url=row.website_url,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        deposit_amount=row.deposit_amount,  # type: ignore[attr-defined]
        referral_bps=row.referral_bps,  # type: ignore[attr-defined]
        promo_amount=row.promo_amount,  # type: ignore[attr-defined]
        assigned_player_id=row.assigned_player_id,  # type: ignore[attr-defined]
        inactive_override=row.inactive_override,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        entry_count=row.entry_count,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountRepository:
    async def get_account(self, db: AsyncSession, account_id: str) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def list_accounts(
        self,
        db: AsyncSession,
        kind: AccountKind | None,
        agent_id: str | None,
        broker_id: str | None,
    ) -> list[Account]:
        result = await db.execute(
            _LIST_ACCOUNTS_SQL,
            {
                "kind": kind.value if kind else None,
                "agent_id": agent_id,
                "broker_id": broker_id,
            },
        )
        return [_row_to_account(row) for row in result.fetchall()]

    async def create_account(
        self,
        db: AsyncSession,
        kind: AccountKind,
        agent_id: str,
        broker_id: str | None,
        username: str | None,
        website_url: str | None,
        name: str | None,
        deposit_amount: int | None,
        referral_bps: int | None,
        promo_amount: int,
    ) -> Account:
        result = await db.execute(
            _INSERT_ACCOUNT_SQL,
            {
                "kind": kind.value,
                "agent_id": agent_id,
                "broker_id": broker_id,
                "username": username,
                "website_url": website_url,
                "name": name,
                "deposit_amount": deposit_amount,
                "referral_bps": referral_bps,
                "promo_amount": promo_amount,
            },
        )
        account_id = str(result.scalar_one())
        account = await self.get_account(db, account_id)
        assert account is not None, f"account {account_id} vanished after insert"
        return account

    async def update_account(self, db: AsyncSession, account: Account) -> Account | None:
        result = await db.execute(
            _UPDATE_ACCOUNT_SQL,
            {
                "account_id": account.id,
                "kind": account.kind.value,
                "agent_id": account.agent_id,
                "broker_id": account.broker_id,
                "username": account.username,
                "website_url": account.website_url,
                "name": account.name,
                "deposit_amount": account.deposit_amount,
                "referral_bps": account.referral_bps,
                "promo_amount": account.promo_amount,
                "assigned_player_id": account.assigned_player_id,
                "inactive_override": account.inactive_override,
            },
        )
        if result.fetchone() is None:
            return None
        return await self.get_account(db, account.id)

    async def set_inactive_override(
        self, db: AsyncSession, account_id: str, inactive: bool
    ) -> None:
        await db.execute(
            _SET_OVERRIDE_SQL, {"account_id": account_id, "inactive": inactive}
        )

    async def delete_account(self, db: AsyncSession, account_id: str) -> bool:
        result = await db.execute(_DELETE_ACCOUNT_SQL, {"account_id": account_id})
        return result.fetchone() is not None
