# tests/unit/test_persistence.py
"""Unit tests for the raw-SQL repositories using a MagicMock AsyncSession."""
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

from src.cl_account.infrastructure.agents_repository import AgentRepository
from src.cl_account.infrastructure.brokers_repository import BrokerRepository
from src.cl_account.infrastructure.persistence import AccountRepository
from src.cl_common.enums import (
    AccountKind,
    AccountStatus,
    CommissionType,
    EntryAccountStatus,
    PlayerStatus,
    SettledParty,
)
from src.cl_entry.infrastructure.persistence import EntryRepository
from src.cl_player.infrastructure.persistence import PlayerRepository


def _make_account_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "acc-1")
    row.kind = kwargs.get("kind", "pph")
    row.agent_id = "ag-1"
    row.broker_id = kwargs.get("broker_id")
    row.username = "clicker01"
    row.website_url = "https://book.example"
    row.name = None
    row.deposit_amount = None
    row.referral_bps = None
    row.promo_amount = 0
    row.assigned_player_id = kwargs.get("assigned_player_id")
    row.inactive_override = kwargs.get("inactive_override", False)
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    row.entry_count = kwargs.get("entry_count", 0)
    return row


def _make_entry_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "e-1")
    row.account_id = "acc-1"
    row.player_id = "p-1"
    row.entry_date = kwargs.get("entry_date", date(2026, 10, 1))
    row.starting_balance = 100000
    row.ending_balance = 150000
    row.refill_amount = 0
    row.withdrawal = 0
    row.account_status = kwargs.get("account_status", "active")
    row.notes = None
    row.compliance_review = "Requested Document"
    row.tax_rate_bps = 1000
    row.profit_loss = 50000
    row.clicker_amount = 25000
    row.acc_holder_amount = 7000
    row.broker_amount = 0
    row.taxable_amount = 5000
    row.referral_amount = 0
    row.company_amount = 13000
    row.clicker_settled = kwargs.get("clicker_settled", False)
    row.acc_holder_settled = False
    row.broker_settled = False
    row.company_settled = False
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _db_returning(rows=None, one=None, scalar=None) -> MagicMock:
    result_mock = MagicMock()
    result_mock.fetchall.return_value = rows or []
    result_mock.fetchone.return_value = one
    result_mock.scalar_one.return_value = scalar
    db = MagicMock()
    db.execute = AsyncMock(return_value=result_mock)
    return db


class TestAccountRepository:
    async def test_get_maps_row_and_derives_status(self) -> None:
        db = _db_returning(one=_make_account_row(entry_count=4))

        account = await AccountRepository().get_account(db, "acc-1")

        assert account is not None
        assert account.kind == AccountKind.PPH
        assert account.entry_count == 4
        assert account.status == AccountStatus.ACTIVE

    async def test_get_missing(self) -> None:
        assert await AccountRepository().get_account(_db_returning(), "x") is None

    async def test_list_passes_enum_values(self) -> None:
        db = _db_returning(rows=[_make_account_row(), _make_account_row(id="acc-2")])

        accounts = await AccountRepository().list_accounts(db, AccountKind.LEGAL, None, "br-1")

        assert len(accounts) == 2
        params = db.execute.call_args[0][1]
        assert params == {"kind": "legal", "agent_id": None, "broker_id": "br-1"}

    async def test_delete_reports_missing(self) -> None:
        assert await AccountRepository().delete_account(_db_returning(one=None), "x") is False

    async def test_set_override(self) -> None:
        db = _db_returning()
        await AccountRepository().set_inactive_override(db, "acc-1", True)
        assert db.execute.call_args[0][1] == {"account_id": "acc-1", "inactive": True}


class TestPartyRepositories:
    async def test_agent_mapping(self) -> None:
        row = MagicMock()
        row.id = "ag-1"
        row.name = "Holder"
        row.commission_bps = 1000
        row.flat_commission = 2000
        row.created_at = datetime.now(UTC)
        row.updated_at = datetime.now(UTC)
        row.account_count = 3

        agent = await AgentRepository().get_agent(_db_returning(one=row), "ag-1")

        assert agent is not None
        assert agent.flat_commission == 2000
        assert agent.account_count == 3

    async def test_broker_mapping_handles_null_scenarios(self) -> None:
        row = MagicMock()
        row.id = "br-1"
        row.name = "Broker"
        row.commission_type = "both"
        row.commission_bps = 1000
        row.flat_commission = 2500
        row.referral_bps = 0
        row.referral_flat = 0
        row.special_scenarios = None
        row.created_at = datetime.now(UTC)
        row.updated_at = datetime.now(UTC)
        row.account_count = 0

        broker = await BrokerRepository().get_broker(_db_returning(one=row), "br-1")

        assert broker is not None
        assert broker.commission_type == CommissionType.BOTH
        assert broker.special_scenarios == []


class TestPlayerRepository:
    async def test_activate_lost_race_returns_none(self) -> None:
        db = _db_returning(one=None)
        assert await PlayerRepository().activate_player(db, "p-1", "uid") is None
        assert db.execute.call_args[0][1] == {"player_id": "p-1", "auth_uid": "uid"}

    async def test_list_status_param(self) -> None:
        db = _db_returning(rows=[])
        await PlayerRepository().list_players(db, PlayerStatus.PENDING)
        assert db.execute.call_args[0][1] == {"status": "pending"}


class TestEntryRepository:
    async def test_get_maps_row(self) -> None:
        db = _db_returning(one=_make_entry_row(account_status="inactive"))

        entry = await EntryRepository().get_entry(db, "e-1")

        assert entry is not None
        assert entry.account_status == EntryAccountStatus.INACTIVE
        assert entry.company_amount == 13000
        assert entry.entry_date == date(2026, 10, 1)

    async def test_list_passes_cursor(self) -> None:
        db = _db_returning(rows=[_make_entry_row(id="e-2"), _make_entry_row(id="e-1")])

        entries = await EntryRepository().list_entries(
            db, "acc-1", None, None, None, date(2026, 10, 5), "e-9", 21
        )

        assert [e.id for e in entries] == ["e-2", "e-1"]
        params = db.execute.call_args[0][1]
        assert params["cursor_date"] == date(2026, 10, 5)
        assert params["cursor_id"] == "e-9"
        assert params["limit"] == 21

    async def test_set_settled_targets_party_column(self) -> None:
        result_mock = MagicMock()
        result_mock.fetchone.side_effect = [MagicMock(), _make_entry_row(clicker_settled=True)]
        db = MagicMock()
        db.execute = AsyncMock(return_value=result_mock)

        entry = await EntryRepository().set_settled(db, "e-1", SettledParty.CLICKER, True)

        assert entry is not None
        assert entry.clicker_settled is True
        update_sql = str(db.execute.call_args_list[0][0][0])
        assert "clicker_settled = :settled" in update_sql

    async def test_set_settled_missing(self) -> None:
        db = _db_returning(one=None)
        assert await EntryRepository().set_settled(db, "x", SettledParty.BROKER, True) is None

    async def test_delete(self) -> None:
        assert await EntryRepository().delete_entry(_db_returning(one=MagicMock()), "e-1") is True
