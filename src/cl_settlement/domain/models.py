"""Domain models for cl_settlement — frozen dataclasses, no I/O.

Every amount is int cents, every rate is int bps. Fields default to 0 so
callers can leave out whatever does not apply (no promo, no referral, ...).
"""

from dataclasses import dataclass

from src.cl_common.enums import CommissionType


@dataclass(frozen=True)
class BrokerCommission:
    commission_type: CommissionType
    commission_bps: int = 0
    flat_commission: int = 0     # cents


@dataclass(frozen=True)
class SettlementInput:
    starting_balance: int = 0
    ending_balance: int = 0
    refill_amount: int = 0
    withdrawal: int = 0
    account_promo_amount: int = 0
    player_commission_bps: int = 0
    agent_commission_bps: int = 0
    agent_flat_commission: int = 0
    broker: BrokerCommission | None = None
    tax_rate_bps: int = 0
    referral_bps: int = 0


@dataclass(frozen=True)
class SettlementResult:
    effective_starting_balance: int
    profit_loss: int
    clicker_amount: int
    acc_holder_amount: int
    broker_amount: int
    taxable_amount: int
    referral_amount: int
    company_amount: int

    def total(self) -> int:
        """Sum of all six shares — always equals profit_loss."""
        return (
            self.clicker_amount
            + self.acc_holder_amount
            + self.broker_amount
            + self.taxable_amount
            + self.referral_amount
            + self.company_amount
        )
