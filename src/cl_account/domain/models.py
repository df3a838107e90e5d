"""Domain models for cl_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.cl_common.enums import AccountKind, AccountStatus, CommissionType
from src.cl_settlement.domain.models import BrokerCommission
from src.cl_settlement.domain.status import derive_account_status


@dataclass
class Agent:
    """Account holder — the party the account is registered under."""

    id: str
    name: str
    commission_bps: int
    flat_commission: int        # cents, added regardless of profit/loss sign
    created_at: datetime
    updated_at: datetime
    account_count: int = 0      # read-model only


@dataclass
class Broker:
    id: str
    name: str
    commission_type: CommissionType
    commission_bps: int
    flat_commission: int        # cents
    referral_bps: int           # stored for reporting; not used by the engine
    referral_flat: int          # cents, same
    special_scenarios: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    account_count: int = 0      # read-model only

    def to_commission(self) -> BrokerCommission:
        return BrokerCommission(
            commission_type=self.commission_type,
            commission_bps=self.commission_bps,
            flat_commission=self.flat_commission,
        )


@dataclass
class Account:
    id: str
    kind: AccountKind
    agent_id: str
    broker_id: str | None
    username: str | None            # pph only
    website_url: str | None         # pph only
    name: str | None                # legal only
    deposit_amount: int | None      # cents, legal only
    referral_bps: int | None
    promo_amount: int               # cents, credited onto the starting balance
    assigned_player_id: str | None
    inactive_override: bool
    created_at: datetime
    updated_at: datetime
    entry_count: int = 0            # read-model only

    @property
    def status(self) -> AccountStatus:
        return derive_account_status(
            self.entry_count,
            self.inactive_override,
            self.assigned_player_id is not None,
        )

    @property
    def display_name(self) -> str:
        if self.kind == AccountKind.PPH:
            return self.username or ""
        return self.name or ""
