"""Unit tests for EntryApplicationService using mock repositories."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.cl_account.domain.models import Account, Agent, Broker
from src.cl_common.enums import (
    AccountKind,
    AccountStatus,
    CommissionType,
    EntryAccountStatus,
    PlayerStatus,
    SettledParty,
)
from src.cl_common.errors import (
    AccountNotFoundError,
    BrokerNotFoundError,
    DuplicateEntryError,
    EntryNotFoundError,
    InvalidEntryError,
    PlayerNotActiveError,
)
from src.cl_entry.application.schemas import (
    CreateEntryRequest,
    UpdateEntryRequest,
    cursor_decode,
)
from src.cl_entry.application.service import EntryApplicationService
from src.cl_entry.domain.models import Entry
from src.cl_player.domain.models import Player

_NOW = datetime.now(UTC)
_DAY = date(2026, 10, 1)


def _unique_day_violation() -> IntegrityError:
    return IntegrityError(
        "INSERT INTO entries ...",
        {},
        Exception(
            'duplicate key value violates unique constraint "uq_entries_account_date"'
        ),
    )


def _make_account(**kwargs) -> Account:
    defaults = dict(
        id="acc-1",
        kind=AccountKind.LEGAL,
        agent_id="ag-1",
        broker_id=None,
        username=None,
        website_url=None,
        name="Jane",
        deposit_amount=100000,
        referral_bps=None,
        promo_amount=0,
        assigned_player_id="p-1",
        inactive_override=False,
        created_at=_NOW,
        updated_at=_NOW,
        entry_count=0,
    )
    defaults.update(kwargs)
    return Account(**defaults)


def _make_player(status: PlayerStatus = PlayerStatus.ACTIVE) -> Player:
    return Player(
        id="p-1", email="c@example.com", name="Clicker", commission_bps=5000,
        status=status, auth_uid="uid-1", created_at=_NOW, updated_at=_NOW,
    )


def _make_agent() -> Agent:
    return Agent(
        id="ag-1", name="Holder", commission_bps=1000, flat_commission=2000,
        created_at=_NOW, updated_at=_NOW,
    )


def _make_entry(**kwargs) -> Entry:
    defaults = dict(
        id="e-1",
        account_id="acc-1",
        player_id="p-1",
        entry_date=_DAY,
        starting_balance=100000,
        ending_balance=150000,
        refill_amount=0,
        withdrawal=0,
        account_status=EntryAccountStatus.ACTIVE,
        notes=None,
        compliance_review="Requested Document",
        tax_rate_bps=1000,
    )
    defaults.update(kwargs)
    return Entry(**defaults)


def _stored(db, entry: Entry) -> Entry:
    entry.id = entry.id or "e-new"
    return entry


class _Mocks:
    def __init__(self) -> None:
        self.repo = AsyncMock()
        self.account_repo = AsyncMock()
        self.agent_repo = AsyncMock()
        self.broker_repo = AsyncMock()
        self.player_repo = AsyncMock()
        self.settings_repo = AsyncMock()

        self.account_repo.get_account.return_value = _make_account()
        self.player_repo.get_player.return_value = _make_player()
        self.agent_repo.get_agent.return_value = _make_agent()
        self.settings_repo.get_tax_rate_bps.return_value = 1000
        self.repo.get_by_account_date.return_value = None
        self.repo.get_latest_before.return_value = None
        self.repo.insert_entry.side_effect = _stored
        self.repo.update_entry.side_effect = _stored

        self.svc = EntryApplicationService(
            repo=self.repo,
            account_repo=self.account_repo,
            agent_repo=self.agent_repo,
            broker_repo=self.broker_repo,
            player_repo=self.player_repo,
            settings_repo=self.settings_repo,
        )


def _make_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


class TestCreateEntry:
    async def test_computes_split(self) -> None:
        m = _Mocks()
        db = _make_db()

        result = await m.svc.create_entry(
            db,
            CreateEntryRequest(
                account_id="acc-1",
                entry_date=_DAY,
                starting_balance_cents=100000,
                ending_balance_cents=150000,
            ),
        )

        s = result.settlement
        assert s.profit_loss_cents == 50000
        assert s.clicker_cents == 25000
        assert s.acc_holder_cents == 7000
        assert s.broker_cents == 0
        assert s.taxable_cents == 5000
        assert s.company_cents == 13000
        assert result.tax_rate_bps == 1000
        assert result.player_id == "p-1"
        db.commit.assert_awaited_once()
        m.account_repo.set_inactive_override.assert_not_awaited()

    async def test_tax_rate_comes_from_settings(self) -> None:
        m = _Mocks()
        m.settings_repo.get_tax_rate_bps.return_value = 2000

        result = await m.svc.create_entry(
            _make_db(),
            CreateEntryRequest(
                account_id="acc-1", entry_date=_DAY,
                starting_balance_cents=0, ending_balance_cents=10000,
            ),
        )

        assert result.tax_rate_bps == 2000
        assert result.settlement.taxable_cents == 2000

    async def test_promo_broker_and_referral(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(
            promo_amount=15000, broker_id="br-1", referral_bps=500
        )
        m.broker_repo.get_broker.return_value = Broker(
            id="br-1", name="B", commission_type=CommissionType.BOTH,
            commission_bps=1000, flat_commission=2500, referral_bps=0, referral_flat=0,
        )

        result = await m.svc.create_entry(
            _make_db(),
            CreateEntryRequest(
                account_id="acc-1", entry_date=_DAY,
                starting_balance_cents=0, ending_balance_cents=115000,
            ),
        )

        s = result.settlement
        assert s.profit_loss_cents == 100000
        assert s.broker_cents == 12500
        assert s.referral_cents == 5000
        total = (
            s.clicker_cents + s.acc_holder_cents + s.broker_cents
            + s.taxable_cents + s.referral_cents + s.company_cents
        )
        assert total == s.profit_loss_cents

    async def test_legal_default_starting_is_deposit(self) -> None:
        m = _Mocks()

        result = await m.svc.create_entry(
            _make_db(),
            CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=100000),
        )

        assert result.starting_balance_cents == 100000
        assert result.settlement.profit_loss_cents == 0
        m.repo.get_latest_before.assert_not_awaited()

    async def test_pph_default_starting_is_previous_ending(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(
            kind=AccountKind.PPH, username="u", website_url="https://x", name=None, deposit_amount=None
        )
        m.repo.get_latest_before.return_value = _make_entry(ending_balance=80000)

        result = await m.svc.create_entry(
            _make_db(),
            CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=90000),
        )

        assert result.starting_balance_cents == 80000
        assert result.settlement.profit_loss_cents == 10000

    async def test_missing_agent_means_zero_commission(self) -> None:
        m = _Mocks()
        m.agent_repo.get_agent.return_value = None

        result = await m.svc.create_entry(
            _make_db(),
            CreateEntryRequest(
                account_id="acc-1", entry_date=_DAY,
                starting_balance_cents=0, ending_balance_cents=10000,
            ),
        )

        assert result.settlement.acc_holder_cents == 0

    async def test_missing_broker_is_an_error(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(broker_id="br-gone")
        m.broker_repo.get_broker.return_value = None
        db = _make_db()

        with pytest.raises(BrokerNotFoundError):
            await m.svc.create_entry(
                db, CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1)
            )
        db.rollback.assert_awaited_once()

    async def test_inactive_entry_sets_override(self) -> None:
        m = _Mocks()
        db = _make_db()

        await m.svc.create_entry(
            db,
            CreateEntryRequest(
                account_id="acc-1",
                entry_date=_DAY,
                ending_balance_cents=100000,
                account_status=EntryAccountStatus.INACTIVE,
            ),
        )

        m.account_repo.set_inactive_override.assert_awaited_once_with(db, "acc-1", True)

    async def test_active_entry_clears_override(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(inactive_override=True)
        db = _make_db()

        await m.svc.create_entry(
            db, CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1)
        )

        m.account_repo.set_inactive_override.assert_awaited_once_with(db, "acc-1", False)

    async def test_duplicate_date(self) -> None:
        m = _Mocks()
        m.repo.get_by_account_date.return_value = _make_entry()
        db = _make_db()

        with pytest.raises(DuplicateEntryError):
            await m.svc.create_entry(
                db, CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1)
            )
        m.repo.insert_entry.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_concurrent_insert_of_same_day(self) -> None:
        m = _Mocks()
        m.repo.insert_entry.side_effect = _unique_day_violation()
        db = _make_db()

        with pytest.raises(DuplicateEntryError):
            await m.svc.create_entry(
                db, CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1)
            )
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_other_integrity_errors_propagate(self) -> None:
        m = _Mocks()
        m.repo.insert_entry.side_effect = IntegrityError(
            "INSERT INTO entries ...", {}, Exception('violates check constraint "ck_x"')
        )

        with pytest.raises(IntegrityError):
            await m.svc.create_entry(
                _make_db(),
                CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1),
            )

    async def test_pending_player_rejected(self) -> None:
        m = _Mocks()
        m.player_repo.get_player.return_value = _make_player(PlayerStatus.PENDING)

        with pytest.raises(PlayerNotActiveError):
            await m.svc.create_entry(
                _make_db(),
                CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1),
            )

    async def test_no_player_available(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(assigned_player_id=None)

        with pytest.raises(InvalidEntryError):
            await m.svc.create_entry(
                _make_db(),
                CreateEntryRequest(account_id="acc-1", entry_date=_DAY, ending_balance_cents=1),
            )

    async def test_unknown_account(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = None

        with pytest.raises(AccountNotFoundError):
            await m.svc.create_entry(
                _make_db(),
                CreateEntryRequest(account_id="nope", entry_date=_DAY, ending_balance_cents=1),
            )


class TestUpdateEntry:
    async def test_recomputes_with_current_configuration(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = _make_entry(tax_rate_bps=500)
        m.settings_repo.get_tax_rate_bps.return_value = 1000
        db = _make_db()

        result = await m.svc.update_entry(
            db, "e-1", UpdateEntryRequest(ending_balance_cents=160000)
        )

        assert result.ending_balance_cents == 160000
        assert result.settlement.profit_loss_cents == 60000
        assert result.tax_rate_bps == 1000
        assert result.settlement.taxable_cents == 6000
        db.commit.assert_awaited_once()

    async def test_moving_onto_taken_date(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = _make_entry()
        m.repo.get_by_account_date.return_value = _make_entry(id="e-other")
        db = _make_db()

        with pytest.raises(DuplicateEntryError):
            await m.svc.update_entry(db, "e-1", UpdateEntryRequest(entry_date=date(2026, 10, 2)))
        db.rollback.assert_awaited_once()

    async def test_same_date_is_not_a_duplicate(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = _make_entry()
        m.repo.get_by_account_date.return_value = _make_entry()

        result = await m.svc.update_entry(_make_db(), "e-1", UpdateEntryRequest(notes="ok"))

        assert result.notes == "ok"

    async def test_missing_entry(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = None
        with pytest.raises(EntryNotFoundError):
            await m.svc.update_entry(_make_db(), "x", UpdateEntryRequest(notes="n"))

    async def test_edit_keeps_manual_inactive_flag(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(inactive_override=True)
        m.repo.get_entry.return_value = _make_entry(account_status=EntryAccountStatus.ACTIVE)
        m.repo.get_by_account_date.return_value = _make_entry()

        await m.svc.update_entry(_make_db(), "e-1", UpdateEntryRequest(notes="typo fix"))

        m.account_repo.set_inactive_override.assert_not_awaited()

    async def test_reported_status_moves_override(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(inactive_override=True)
        m.repo.get_entry.return_value = _make_entry(account_status=EntryAccountStatus.INACTIVE)
        m.repo.get_by_account_date.return_value = _make_entry()
        db = _make_db()

        await m.svc.update_entry(
            db, "e-1", UpdateEntryRequest(account_status=EntryAccountStatus.ACTIVE)
        )

        m.account_repo.set_inactive_override.assert_awaited_once_with(db, "acc-1", False)

    async def test_concurrent_move_onto_taken_date(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = _make_entry()
        m.repo.update_entry.side_effect = _unique_day_violation()
        db = _make_db()

        with pytest.raises(DuplicateEntryError):
            await m.svc.update_entry(db, "e-1", UpdateEntryRequest(entry_date=date(2026, 10, 2)))
        db.rollback.assert_awaited_once()


class TestRecomputeEntry:
    async def test_raw_fields_kept(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = _make_entry()
        m.agent_repo.get_agent.return_value = None

        result = await m.svc.recompute_entry(_make_db(), "e-1")

        assert result.starting_balance_cents == 100000
        assert result.ending_balance_cents == 150000
        assert result.settlement.acc_holder_cents == 0
        m.repo.update_entry.assert_awaited_once()

    async def test_leaves_status_override_alone(self) -> None:
        m = _Mocks()
        m.account_repo.get_account.return_value = _make_account(inactive_override=True)
        m.repo.get_entry.return_value = _make_entry(account_status=EntryAccountStatus.ACTIVE)

        await m.svc.recompute_entry(_make_db(), "e-1")

        m.account_repo.set_inactive_override.assert_not_awaited()


class TestDeleteEntry:
    async def test_returns_derived_status(self) -> None:
        m = _Mocks()
        m.repo.get_entry.return_value = _make_entry()
        m.account_repo.get_account.return_value = _make_account(assigned_player_id=None)
        db = _make_db()

        result = await m.svc.delete_entry(db, "e-1")

        m.repo.delete_entry.assert_awaited_once_with(db, "e-1")
        assert result.account_status == AccountStatus.UNUSED
        db.commit.assert_awaited_once()


class TestSetSettled:
    async def test_toggle(self) -> None:
        m = _Mocks()
        m.repo.set_settled.return_value = _make_entry(clicker_settled=True)
        db = _make_db()

        result = await m.svc.set_settled(db, "e-1", SettledParty.CLICKER, True)

        m.repo.set_settled.assert_awaited_once_with(db, "e-1", SettledParty.CLICKER, True)
        assert result.clicker_settled is True

    async def test_missing(self) -> None:
        m = _Mocks()
        m.repo.set_settled.return_value = None
        with pytest.raises(EntryNotFoundError):
            await m.svc.set_settled(_make_db(), "x", SettledParty.BROKER, True)


class TestQueries:
    async def test_list_paginates(self) -> None:
        m = _Mocks()
        m.repo.list_entries.return_value = [
            _make_entry(id="e-3", entry_date=date(2026, 10, 3)),
            _make_entry(id="e-2", entry_date=date(2026, 10, 2)),
            _make_entry(id="e-1", entry_date=date(2026, 10, 1)),
        ]

        result = await m.svc.list_entries(MagicMock(), "acc-1", None, None, None, None, 2)

        assert [e.id for e in result.items] == ["e-3", "e-2"]
        assert result.has_more is True
        assert cursor_decode(result.next_cursor) == (date(2026, 10, 2), "e-2")
        assert m.repo.list_entries.call_args[0][-1] == 3

    async def test_draft_for_existing_day(self) -> None:
        m = _Mocks()
        m.repo.get_by_account_date.return_value = _make_entry()

        result = await m.svc.get_draft(MagicMock(), "acc-1", _DAY)

        assert result.exists is True
        assert result.entry is not None
        assert result.default_starting_balance_cents == 100000

    async def test_draft_for_new_day(self) -> None:
        m = _Mocks()

        result = await m.svc.get_draft(MagicMock(), "acc-1", _DAY)

        assert result.exists is False
        assert result.entry is None
        assert result.entry_date == "2026-10-01"
        assert result.default_starting_balance_display == "$1,000.00"
