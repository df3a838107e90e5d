"""Pydantic schemas for the settlement preview API.

SettlementOut is shared with cl_entry responses so a previewed split and a
persisted split render identically.
"""

from pydantic import BaseModel, Field

from src.cl_common.cents import cents_to_display
from src.cl_common.enums import CommissionType
from src.cl_settlement.domain.models import (
    BrokerCommission,
    SettlementInput,
    SettlementResult,
)

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BrokerCommissionIn(BaseModel):
    commission_type: CommissionType
    commission_bps: int = Field(0, ge=0, le=10000)
    flat_commission_cents: int = Field(0, ge=0)

    def to_domain(self) -> BrokerCommission:
        return BrokerCommission(
            commission_type=self.commission_type,
            commission_bps=self.commission_bps,
            flat_commission=self.flat_commission_cents,
        )


class SettlementPreviewRequest(BaseModel):
    starting_balance_cents: int = 0
    ending_balance_cents: int = 0
    refill_cents: int = Field(0, ge=0)
    withdrawal_cents: int = Field(0, ge=0)
    promo_cents: int = Field(0, ge=0, description="Account promo credit")
    player_commission_bps: int = Field(0, ge=0, le=10000)
    agent_commission_bps: int = Field(0, ge=0, le=10000)
    agent_flat_commission_cents: int = Field(0, ge=0)
    broker: BrokerCommissionIn | None = None
    tax_rate_bps: int = Field(0, ge=0, le=10000)
    referral_bps: int = Field(0, ge=0, le=10000)

    def to_domain(self) -> SettlementInput:
        return SettlementInput(
            starting_balance=self.starting_balance_cents,
            ending_balance=self.ending_balance_cents,
            refill_amount=self.refill_cents,
            withdrawal=self.withdrawal_cents,
            account_promo_amount=self.promo_cents,
            player_commission_bps=self.player_commission_bps,
            agent_commission_bps=self.agent_commission_bps,
            agent_flat_commission=self.agent_flat_commission_cents,
            broker=self.broker.to_domain() if self.broker else None,
            tax_rate_bps=self.tax_rate_bps,
            referral_bps=self.referral_bps,
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SettlementOut(BaseModel):
    profit_loss_cents: int
    profit_loss_display: str
    clicker_cents: int
    clicker_display: str
    acc_holder_cents: int
    acc_holder_display: str
    broker_cents: int
    broker_display: str
    taxable_cents: int
    taxable_display: str
    referral_cents: int
    referral_display: str
    company_cents: int
    company_display: str

    @classmethod
    def from_amounts(
        cls,
        profit_loss: int,
        clicker: int,
        acc_holder: int,
        broker: int,
        taxable: int,
        referral: int,
        company: int,
    ) -> "SettlementOut":
        return cls(
            profit_loss_cents=profit_loss,
            profit_loss_display=cents_to_display(profit_loss),
            clicker_cents=clicker,
            clicker_display=cents_to_display(clicker),
            acc_holder_cents=acc_holder,
            acc_holder_display=cents_to_display(acc_holder),
            broker_cents=broker,
            broker_display=cents_to_display(broker),
            taxable_cents=taxable,
            taxable_display=cents_to_display(taxable),
            referral_cents=referral,
            referral_display=cents_to_display(referral),
            company_cents=company,
            company_display=cents_to_display(company),
        )

    @classmethod
    def from_result(cls, result: SettlementResult) -> "SettlementOut":
        return cls.from_amounts(
            profit_loss=result.profit_loss,
            clicker=result.clicker_amount,
            acc_holder=result.acc_holder_amount,
            broker=result.broker_amount,
            taxable=result.taxable_amount,
            referral=result.referral_amount,
            company=result.company_amount,
        )


class SettlementPreviewResponse(BaseModel):
    effective_starting_balance_cents: int
    settlement: SettlementOut

    @classmethod
    def from_result(cls, result: SettlementResult) -> "SettlementPreviewResponse":
        return cls(
            effective_starting_balance_cents=result.effective_starting_balance,
            settlement=SettlementOut.from_result(result),
        )
