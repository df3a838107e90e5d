"""EntryRepository — concrete implementation of EntryRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
The (account_id, entry_date) UNIQUE constraint backs the service's duplicate check.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.enums import EntryAccountStatus, SettledParty
from src.cl_entry.domain.models import Entry

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_ENTRY_COLUMNS = """
    id, account_id, player_id, entry_date,
    starting_balance, ending_balance, refill_amount, withdrawal,
    account_status, notes, compliance_review, tax_rate_bps,
    profit_loss, clicker_amount, acc_holder_amount, broker_amount,
    taxable_amount, referral_amount, company_amount,
    clicker_settled, acc_holder_settled, broker_settled, company_settled,
    created_at, updated_at
"""

_GET_ENTRY_SQL = text(f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = :entry_id")

_GET_BY_ACCOUNT_DATE_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM entries
    WHERE account_id = :account_id AND entry_date = :entry_date
""")

_GET_LATEST_BEFORE_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM entries
    WHERE account_id = :account_id AND entry_date < :entry_date
    ORDER BY entry_date DESC
    LIMIT 1
""")

_LIST_ENTRIES_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM entries
    WHERE
        (CAST(:account_id AS TEXT) IS NULL OR account_id = CAST(:account_id AS TEXT))
        AND (CAST(:player_id AS TEXT) IS NULL OR player_id = CAST(:player_id AS TEXT))
        AND (CAST(:date_from AS DATE) IS NULL OR entry_date >= CAST(:date_from AS DATE))
        AND (CAST(:date_to AS DATE) IS NULL OR entry_date <= CAST(:date_to AS DATE))
        AND (
            CAST(:cursor_date AS DATE) IS NULL
            OR entry_date < CAST(:cursor_date AS DATE)
            OR (
                entry_date = CAST(:cursor_date AS DATE)
                AND id < CAST(:cursor_id AS TEXT)
            )
        )
    ORDER BY entry_date DESC, id DESC
    LIMIT :limit
""")

_INSERT_ENTRY_SQL = text("""
    INSERT INTO entries
        (account_id, player_id, entry_date,
         starting_balance, ending_balance, refill_amount, withdrawal,
         account_status, notes, compliance_review, tax_rate_bps,
         profit_loss, clicker_amount, acc_holder_amount, broker_amount,
         taxable_amount, referral_amount, company_amount)
    VALUES
        (:account_id, :player_id, :entry_date,
         :starting_balance, :ending_balance, :refill_amount, :withdrawal,
         :account_status, :notes, :compliance_review, :tax_rate_bps,
         :profit_loss, :clicker_amount, :acc_holder_amount, :broker_amount,
         :taxable_amount, :referral_amount, :company_amount)
    RETURNING id
""")

_UPDATE_ENTRY_SQL = text("""
    UPDATE entries
    SET entry_date = :entry_date,
        starting_balance = :starting_balance,
        ending_balance = :ending_balance,
        refill_amount = :refill_amount,
        withdrawal = :withdrawal,
        account_status = :account_status,
        notes = :notes,
        compliance_review = :compliance_review,
        tax_rate_bps = :tax_rate_bps,
        profit_loss = :profit_loss,
        clicker_amount = :clicker_amount,
        acc_holder_amount = :acc_holder_amount,
        broker_amount = :broker_amount,
        taxable_amount = :taxable_amount,
        referral_amount = :referral_amount,
        company_amount = :company_amount,
        updated_at = NOW()
    WHERE id = :entry_id
    RETURNING id
""")

_DELETE_ENTRY_SQL = text("DELETE FROM entries WHERE id = :entry_id RETURNING id")

# Column names come from the SettledParty enum, never from user input
_SET_SETTLED_SQL = {
    party: text(f"""
        UPDATE entries
        SET {party.value}_settled = :settled,
            updated_at = NOW()
        WHERE id = :entry_id
        RETURNING id
    """)
    for party in SettledParty
}

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_entry(row: object) -> Entry:
    return Entry(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        player_id=row.player_id,  # type: ignore[attr-defined]
        entry_date=row.entry_date,  # type: ignore[attr-defined]
        starting_balance=row.starting_balance,  # type: ignore[attr-defined]
        ending_balance=row.ending_balance,  # type: ignore[attr-defined]
        refill_amount=row.refill_amount,  # type: ignore[attr-defined]
        withdrawal=row.withdrawal,  # type: ignore[attr-defined]
        account_status=EntryAccountStatus(row.account_status),  # type: ignore[attr-defined]
        notes=row.notes,  # type: ignore[attr-defined]
        compliance_review=row.compliance_review,  # type: ignore[attr-defined]
        tax_rate_bps=row.tax_rate_bps,  # type: ignore[attr-defined]
        profit_loss=row.profit_loss,  # type: ignore[attr-defined]
        clicker_amount=row.clicker_amount,  # type: ignore[attr-defined]
        acc_holder_amount=row.acc_holder_amount,  # type: ignore[attr-defined]
        broker_amount=row.broker_amount,  # type: ignore[attr-defined]
        taxable_amount=row.taxable_amount,  # type: ignore[attr-defined]
        referral_amount=row.referral_amount,  # type: ignore[attr-defined]
        company_amount=row.company_amount,  # type: ignore[attr-defined]
        clicker_settled=row.clicker_settled,  # type: ignore[attr-defined]
        acc_holder_settled=row.acc_holder_settled,  # type: ignore[attr-defined]
        broker_settled=row.broker_settled,  # type: ignore[attr-defined]
        company_settled=row.company_settled,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _entry_params(entry: Entry) -> dict:
    return {
        "entry_date": entry.entry_date,
        "starting_balance": entry.starting_balance,
        "ending_balance": entry.ending_balance,
        "refill_amount": entry.refill_amount,
        "withdrawal": entry.withdrawal,
        "account_status": entry.account_status.value,
        "notes": entry.notes,
        "compliance_review": entry.compliance_review,
        "tax_rate_bps": entry.tax_rate_bps,
        "profit_loss": entry.profit_loss,
        "clicker_amount": entry.clicker_amount,
        "acc_holder_amount": entry.acc_holder_amount,
        "broker_amount": entry.broker_amount,
        "taxable_amount": entry.taxable_amount,
        "referral_amount": entry.referral_amount,
        "company_amount": entry.company_amount,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class EntryRepository:
    async def get_entry(self, db: AsyncSession, entry_id: str) -> Entry | None:
        result = await db.execute(_GET_ENTRY_SQL, {"entry_id": entry_id})
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def get_by_account_date(
        self, db: AsyncSession, account_id: str, entry_date: date
    ) -> Entry | None:
        result = await db.execute(
            _GET_BY_ACCOUNT_DATE_SQL, {"account_id": account_id, "entry_date": entry_date}
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def get_latest_before(
        self, db: AsyncSession, account_id: str, entry_date: date
    ) -> Entry | None:
        result = await db.execute(
            _GET_LATEST_BEFORE_SQL, {"account_id": account_id, "entry_date": entry_date}
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

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
        result = await db.execute(
            _LIST_ENTRIES_SQL,
            {
                "account_id": account_id,
                "player_id": player_id,
                "date_from": date_from,
                "date_to": date_to,
                "cursor_date": cursor_date,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_entry(row) for row in result.fetchall()]

    async def insert_entry(self, db: AsyncSession, entry: Entry) -> Entry:
        params = _entry_params(entry)
        params["account_id"] = entry.account_id
        params["player_id"] = entry.player_id
        result = await db.execute(_INSERT_ENTRY_SQL, params)
        entry_id = str(result.scalar_one())
        created = await self.get_entry(db, entry_id)
        assert created is not None, f"entry {entry_id} vanished after insert"
        return created

    async def update_entry(self, db: AsyncSession, entry: Entry) -> Entry | None:
        params = _entry_params(entry)
        params["entry_id"] = entry.id
        result = await db.execute(_UPDATE_ENTRY_SQL, params)
        if result.fetchone() is None:
            return None
        return await self.get_entry(db, entry.id)

    async def delete_entry(self, db: AsyncSession, entry_id: str) -> bool:
        result = await db.execute(_DELETE_ENTRY_SQL, {"entry_id": entry_id})
        return result.fetchone() is not None

    async def set_settled(
        self, db: AsyncSession, entry_id: str, party: SettledParty, settled: bool
    ) -> Entry | None:
        result = await db.execute(
            _SET_SETTLED_SQL[party], {"entry_id": entry_id, "settled": settled}
        )
        if result.fetchone() is None:
            return None
        return await self.get_entry(db, entry_id)
