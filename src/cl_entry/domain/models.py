"""Domain models for cl_entry — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime

from src.cl_account.domain.models import Account
from src.cl_common.enums import AccountKind, EntryAccountStatus
from src.cl_settlement.domain.models import SettlementResult


@dataclass
class Entry:
    """One day's balances for one account, plus the split computed from them.

    Raw fields are what the clicker reports; computed fields are written only
    by the settlement engine and are recomputed whenever a raw field changes.
    """

    id: str
    account_id: str
    player_id: str
    entry_date: date
    starting_balance: int
    ending_balance: int
    refill_amount: int
    withdrawal: int
    account_status: EntryAccountStatus
    notes: str | None
    compliance_review: str
    tax_rate_bps: int           # snapshot of the rate the split was computed with
    profit_loss: int = 0
    clicker_amount: int = 0
    acc_holder_amount: int = 0
    broker_amount: int = 0
    taxable_amount: int = 0
    referral_amount: int = 0
    company_amount: int = 0
    clicker_settled: bool = False
    acc_holder_settled: bool = False
    broker_settled: bool = False
    company_settled: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def apply_result(self, result: SettlementResult) -> None:
        self.profit_loss = result.profit_loss
        self.clicker_amount = result.clicker_amount
        self.acc_holder_amount = result.acc_holder_amount
        self.broker_amount = result.broker_amount
        self.taxable_amount = result.taxable_amount
        self.referral_amount = result.referral_amount
        self.company_amount = result.company_amount


DEFAULT_COMPLIANCE_REVIEW = "Requested Document"


def default_starting_balance(account: Account, latest_entry: Entry | None) -> int:
    """Starting balance to prefill when the clicker does not supply one.

    Legal accounts start from their deposit. PPH accounts carry forward the
    ending balance of the most recent earlier entry, or 0 for the first one.
    """
    if account.kind == AccountKind.LEGAL:
        return account.deposit_amount or 0
    if latest_entry is None:
        return 0
    return latest_entry.ending_balance


def override_for_entry_status(status: EntryAccountStatus) -> bool:
    """inactive_override value implied by an entry's reported account status."""
    return status == EntryAccountStatus.INACTIVE
