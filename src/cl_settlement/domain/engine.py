"""Settlement engine — turns one day's balances into a profit/loss split.

Pure function of its input: no I/O, no logging, no module state. The tax
rate and every commission rate arrive as explicit fields, so a changed
setting only affects entries computed after the change.

Order of operations:
  1. effective_starting = starting + promo
  2. profit_loss = ending - effective_starting + withdrawal - refill
  3. clicker     = pl x player_bps
  4. acc_holder  = pl x agent_bps + agent_flat
  5. broker      = per commission type (0 without a broker)
  6. taxable     = pl x tax_bps            (gross profit, not net)
  7. referral    = pl x referral_bps       (0 when no referral rate)
  8. company     = pl - all of the above   (residual, never clamped)
"""

from src.cl_common.cents import apply_bps
from src.cl_common.enums import CommissionType
from src.cl_settlement.domain.models import (
    BrokerCommission,
    SettlementInput,
    SettlementResult,
)


def broker_amount(profit_loss: int, broker: BrokerCommission | None) -> int:
    """Broker share for a given profit/loss (step 5)."""
    if broker is None:
        return 0
    if broker.commission_type == CommissionType.PERCENTAGE:
        return apply_bps(profit_loss, broker.commission_bps)
    if broker.commission_type == CommissionType.FLAT:
        return broker.flat_commission
    # BOTH
    return apply_bps(profit_loss, broker.commission_bps) + broker.flat_commission


def compute_settlement(inp: SettlementInput) -> SettlementResult:
    """Compute profit/loss and its six-way split. Never raises."""
    effective_starting = inp.starting_balance + inp.account_promo_amount
    profit_loss = inp.ending_balance - effective_starting + inp.withdrawal - inp.refill_amount

    clicker = apply_bps(profit_loss, inp.player_commission_bps)
    acc_holder = apply_bps(profit_loss, inp.agent_commission_bps) + inp.agent_flat_commission
    broker = broker_amount(profit_loss, inp.broker)
    taxable = apply_bps(profit_loss, inp.tax_rate_bps)
    referral = apply_bps(profit_loss, inp.referral_bps) if inp.referral_bps > 0 else 0

    company = profit_loss - clicker - acc_holder - broker - taxable - referral

    return SettlementResult(
        effective_starting_balance=effective_starting,
        profit_loss=profit_loss,
        clicker_amount=clicker,
        acc_holder_amount=acc_holder,
        broker_amount=broker,
        taxable_amount=taxable,
        referral_amount=referral,
        company_amount=company,
    )
