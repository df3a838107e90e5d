"""Tests for account status derivation, identity validation and party models."""

from datetime import UTC, datetime

import pytest

from src.cl_account.domain.models import Account, Broker
from src.cl_account.domain.validation import validate_account_identity
from src.cl_common.enums import AccountKind, AccountStatus, CommissionType
from src.cl_common.errors import InvalidAccountError
from src.cl_settlement.domain.status import derive_account_status


def _make_account(**kwargs) -> Account:
    defaults = dict(
        id="acc-1",
        kind=AccountKind.PPH,
        agent_id="ag-1",
        broker_id=None,
        username="clicker01",
        website_url="https://book.example",
        name=None,
        deposit_amount=None,
        referral_bps=None,
        promo_amount=0,
        assigned_player_id=None,
        inactive_override=False,
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
        entry_count=0,
    )
    defaults.update(kwargs)
    return Account(**defaults)


class TestDeriveAccountStatus:
    def test_new_account_unused(self) -> None:
        assert derive_account_status(0, False) == AccountStatus.UNUSED

    def test_entries_make_active(self) -> None:
        assert derive_account_status(1, False) == AccountStatus.ACTIVE

    def test_assigned_player_makes_active(self) -> None:
        assert derive_account_status(0, False, has_assigned_player=True) == AccountStatus.ACTIVE

    def test_override_beats_everything(self) -> None:
        assert derive_account_status(5, True, has_assigned_player=True) == AccountStatus.INACTIVE
        assert derive_account_status(0, True) == AccountStatus.INACTIVE


class TestAccountModel:
    def test_status_property(self) -> None:
        assert _make_account().status == AccountStatus.UNUSED
        assert _make_account(entry_count=2).status == AccountStatus.ACTIVE
        assert _make_account(assigned_player_id="p-1").status == AccountStatus.ACTIVE
        assert _make_account(entry_count=2, inactive_override=True).status == AccountStatus.INACTIVE

    def test_display_name_pph(self) -> None:
        assert _make_account().display_name == "clicker01"

    def test_display_name_legal(self) -> None:
        acc = _make_account(
            kind=AccountKind.LEGAL, username=None, website_url=None, name="Smith", deposit_amount=0
        )
        assert acc.display_name == "Smith"


class TestBrokerModel:
    def test_to_commission(self) -> None:
        broker = Broker(
            id="br-1",
            name="B",
            commission_type=CommissionType.BOTH,
            commission_bps=1000,
            flat_commission=2500,
            referral_bps=300,
            referral_flat=100,
        )
        commission = broker.to_commission()
        assert commission.commission_type == CommissionType.BOTH
        assert commission.commission_bps == 1000
        assert commission.flat_commission == 2500


class TestValidateAccountIdentity:
    def test_pph_ok(self) -> None:
        validate_account_identity(AccountKind.PPH, "user", "https://x", None, None)

    def test_legal_ok(self) -> None:
        validate_account_identity(AccountKind.LEGAL, None, None, "Jane", 50000)

    def test_legal_zero_deposit_ok(self) -> None:
        validate_account_identity(AccountKind.LEGAL, None, None, "Jane", 0)

    @pytest.mark.parametrize(
        ("username", "website_url"), [(None, "https://x"), ("user", None), ("", "https://x")]
    )
    def test_pph_requires_username_and_url(self, username, website_url) -> None:
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.PPH, username, website_url, None, None)

    def test_pph_rejects_legal_fields(self) -> None:
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.PPH, "user", "https://x", "Jane", None)
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.PPH, "user", "https://x", None, 100)

    def test_legal_requires_name_and_deposit(self) -> None:
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.LEGAL, None, None, None, 100)
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.LEGAL, None, None, "Jane", None)

    def test_legal_negative_deposit(self) -> None:
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.LEGAL, None, None, "Jane", -1)

    def test_legal_rejects_pph_fields(self) -> None:
        with pytest.raises(InvalidAccountError):
            validate_account_identity(AccountKind.LEGAL, "user", None, "Jane", 100)
