"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class AccountKind(str, Enum):
    PPH = "pph"        # pay-per-head: identified by username + website
    LEGAL = "legal"    # funded by a deposit, identified by name


class AccountStatus(str, Enum):
    """Derived account status — never stored, see derive_account_status."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNUSED = "unused"


class EntryAccountStatus(str, Enum):
    """Per-entry snapshot of the account status the clicker reported."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class CommissionType(str, Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"
    BOTH = "both"


class PlayerStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"


class SettledParty(str, Enum):
    CLICKER = "clicker"
    ACC_HOLDER = "acc_holder"
    BROKER = "broker"
    COMPANY = "company"


BROKER_SCENARIOS: tuple[str, ...] = (
    "Accounts Brokered (No Referral & No Funding)",
    "Accounts Brokered (With a Referral But No Funding)",
    "Accounts Brokered (No Referral)",
    "Accounts Brokered (With a Referral)",
    "Accounts Brokered & Funded",
    "Accounts Brokered (With a Referral & Funding)",
)
