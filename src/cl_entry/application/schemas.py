"""Pydantic schemas and cursor utilities for the entries API."""

import base64
import json
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from src.cl_common.cents import bps_to_display, cents_to_display
from src.cl_common.enums import AccountStatus, EntryAccountStatus, SettledParty
from src.cl_entry.domain.models import DEFAULT_COMPLIANCE_REVIEW, Entry
from src.cl_settlement.application.schemas import SettlementOut

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_entry: Entry) -> str:
    """Encode composite cursor from last entry in page."""
    payload = {"d": last_entry.entry_date.isoformat(), "id": last_entry.id}
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[date | None, str | None]:
    """Decode composite cursor -> (entry_date, entry_id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return date.fromisoformat(data["d"]), str(data["id"])
    except Exception:
        return None, None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateEntryRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    account_id: str = Field(..., min_length=1)
    player_id: str | None = Field(
        None, description="Defaults to the account's assigned player"
    )
    entry_date: date | None = Field(None, description="Defaults to today (UTC)")
    starting_balance_cents: int | None = Field(
        None, description="Omit to use the deposit (legal) or the last ending balance (pph)"
    )
    ending_balance_cents: int
    refill_cents: int = Field(0, ge=0)
    withdrawal_cents: int = Field(0, ge=0)
    account_status: EntryAccountStatus = EntryAccountStatus.ACTIVE
    notes: str | None = Field(None, max_length=2000)
    compliance_review: str = Field(DEFAULT_COMPLIANCE_REVIEW, min_length=1, max_length=200)


class UpdateEntryRequest(BaseModel):
    """Partial update of the raw fields; the split is always recomputed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    entry_date: date | None = None
    starting_balance_cents: int | None = None
    ending_balance_cents: int | None = None
    refill_cents: int | None = Field(None, ge=0)
    withdrawal_cents: int | None = Field(None, ge=0)
    account_status: EntryAccountStatus | None = None
    notes: str | None = Field(None, max_length=2000)
    compliance_review: str | None = Field(None, min_length=1, max_length=200)


class SetSettledRequest(BaseModel):
    party: SettledParty
    settled: bool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class EntryOut(BaseModel):
    id: str
    account_id: str
    player_id: str
    entry_date: str
    starting_balance_cents: int
    starting_balance_display: str
    ending_balance_cents: int
    ending_balance_display: str
    refill_cents: int
    withdrawal_cents: int
    account_status: EntryAccountStatus
    notes: str | None
    compliance_review: str
    tax_rate_bps: int
    tax_rate_display: str
    settlement: SettlementOut
    clicker_settled: bool
    acc_holder_settled: bool
    broker_settled: bool
    company_settled: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, e: Entry) -> "EntryOut":
        return cls(
            id=e.id,
            account_id=e.account_id,
            player_id=e.player_id,
            entry_date=e.entry_date.isoformat(),
            starting_balance_cents=e.starting_balance,
            starting_balance_display=cents_to_display(e.starting_balance),
            ending_balance_cents=e.ending_balance,
            ending_balance_display=cents_to_display(e.ending_balance),
            refill_cents=e.refill_amount,
            withdrawal_cents=e.withdrawal,
            account_status=e.account_status,
            notes=e.notes,
            compliance_review=e.compliance_review,
            tax_rate_bps=e.tax_rate_bps,
            tax_rate_display=bps_to_display(e.tax_rate_bps),
            settlement=SettlementOut.from_amounts(
                profit_loss=e.profit_loss,
                clicker=e.clicker_amount,
                acc_holder=e.acc_holder_amount,
                broker=e.broker_amount,
                taxable=e.taxable_amount,
                referral=e.referral_amount,
                company=e.company_amount,
            ),
            clicker_settled=e.clicker_settled,
            acc_holder_settled=e.acc_holder_settled,
            broker_settled=e.broker_settled,
            company_settled=e.company_settled,
            created_at=e.created_at.isoformat() if e.created_at else "",
            updated_at=e.updated_at.isoformat() if e.updated_at else "",
        )


class EntryListResponse(BaseModel):
    items: list[EntryOut]
    next_cursor: str | None
    has_more: bool


class EntryDraftOut(BaseModel):
    """Prefill for the daily form: the saved entry, or the default starting balance."""

    account_id: str
    entry_date: str
    exists: bool
    entry: EntryOut | None
    default_starting_balance_cents: int
    default_starting_balance_display: str


class DeleteEntryResponse(BaseModel):
    entry_id: str
    account_id: str
    account_status: AccountStatus
