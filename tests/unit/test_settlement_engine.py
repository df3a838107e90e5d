"""Tests for the settlement engine — split order, rounding and conservation."""

import itertools

import pytest

from src.cl_common.enums import CommissionType
from src.cl_settlement.domain.engine import broker_amount, compute_settlement
from src.cl_settlement.domain.models import BrokerCommission, SettlementInput


def _pl_input(profit_loss: int, **kwargs) -> SettlementInput:
    """Input whose profit/loss is exactly profit_loss."""
    return SettlementInput(starting_balance=0, ending_balance=profit_loss, **kwargs)


class TestScenarios:
    def test_legal_account_no_broker(self) -> None:
        result = compute_settlement(
            SettlementInput(
                starting_balance=100000,
                ending_balance=150000,
                player_commission_bps=5000,
                agent_commission_bps=1000,
                agent_flat_commission=2000,
                tax_rate_bps=1000,
            )
        )
        assert result.profit_loss == 50000
        assert result.clicker_amount == 25000
        assert result.acc_holder_amount == 7000
        assert result.broker_amount == 0
        assert result.taxable_amount == 5000
        assert result.referral_amount == 0
        assert result.company_amount == 13000

    def test_promo_and_refill(self) -> None:
        result = compute_settlement(
            SettlementInput(
                starting_balance=0,
                account_promo_amount=15000,
                ending_balance=30000,
                refill_amount=5000,
            )
        )
        assert result.effective_starting_balance == 15000
        assert result.profit_loss == 10000

    def test_withdrawal_counts_as_profit(self) -> None:
        result = compute_settlement(
            SettlementInput(starting_balance=10000, ending_balance=4000, withdrawal=8000)
        )
        assert result.profit_loss == 2000

    def test_broker_both_with_referral(self) -> None:
        broker = BrokerCommission(CommissionType.BOTH, commission_bps=1000, flat_commission=2500)
        result = compute_settlement(_pl_input(100000, broker=broker, referral_bps=500))
        assert result.broker_amount == 12500
        assert result.referral_amount == 5000
        assert result.total() == result.profit_loss

    def test_negative_profit(self) -> None:
        result = compute_settlement(
            SettlementInput(
                starting_balance=20000,
                ending_balance=0,
                player_commission_bps=5000,
                agent_commission_bps=1000,
                tax_rate_bps=1000,
                broker=BrokerCommission(CommissionType.PERCENTAGE, commission_bps=1000),
                referral_bps=500,
            )
        )
        assert result.profit_loss == -20000
        assert result.clicker_amount == -10000
        assert result.acc_holder_amount == -2000
        assert result.broker_amount == -2000
        assert result.taxable_amount == -2000
        assert result.referral_amount == -1000
        assert result.company_amount == -3000
        assert result.total() == -20000

    def test_company_not_clamped(self) -> None:
        # flat commissions larger than the profit push the company negative
        result = compute_settlement(
            _pl_input(
                1000,
                agent_flat_commission=5000,
                broker=BrokerCommission(CommissionType.FLAT, flat_commission=3000),
            )
        )
        assert result.company_amount == 1000 - 5000 - 3000


class TestBrokerAmount:
    def test_no_broker(self) -> None:
        assert broker_amount(100000, None) == 0

    def test_percentage(self) -> None:
        b = BrokerCommission(CommissionType.PERCENTAGE, commission_bps=1000, flat_commission=2500)
        assert broker_amount(100000, b) == 10000

    def test_flat_ignores_profit(self) -> None:
        b = BrokerCommission(CommissionType.FLAT, commission_bps=1000, flat_commission=2500)
        assert broker_amount(100000, b) == 2500
        assert broker_amount(-100000, b) == 2500

    @pytest.mark.parametrize("profit_loss", [0, 1, 333, 100000, -777, -100000])
    def test_both_is_percentage_plus_flat(self, profit_loss: int) -> None:
        kwargs = {"commission_bps": 1234, "flat_commission": 2500}
        both = broker_amount(profit_loss, BrokerCommission(CommissionType.BOTH, **kwargs))
        pct = broker_amount(profit_loss, BrokerCommission(CommissionType.PERCENTAGE, **kwargs))
        flat = broker_amount(profit_loss, BrokerCommission(CommissionType.FLAT, **kwargs))
        assert both == pct + flat


class TestInvariants:
    def test_deterministic(self) -> None:
        inp = _pl_input(
            98765,
            player_commission_bps=3333,
            agent_commission_bps=777,
            tax_rate_bps=1000,
            broker=BrokerCommission(CommissionType.BOTH, 1500, 100),
        )
        assert compute_settlement(inp) == compute_settlement(inp)

    def test_zero_input_identity(self) -> None:
        result = compute_settlement(
            SettlementInput(
                starting_balance=50000,
                ending_balance=50000,
                player_commission_bps=5000,
                agent_commission_bps=1000,
                tax_rate_bps=1000,
                referral_bps=500,
            )
        )
        assert result.profit_loss == 0
        assert result.total() == 0
        assert result.clicker_amount == 0
        assert result.company_amount == 0

    def test_zero_profit_flats_still_apply(self) -> None:
        result = compute_settlement(_pl_input(0, agent_flat_commission=2000))
        assert result.acc_holder_amount == 2000
        assert result.company_amount == -2000

    def test_empty_input(self) -> None:
        result = compute_settlement(SettlementInput())
        assert result.profit_loss == 0
        assert result.total() == 0

    @pytest.mark.parametrize(
        ("profit_loss", "bps"),
        list(itertools.product([1, 7, 333, 10001, -5, -99999], [0, 1, 3333, 5000, 10000])),
    )
    def test_residual_conservation(self, profit_loss: int, bps: int) -> None:
        result = compute_settlement(
            _pl_input(
                profit_loss,
                player_commission_bps=bps,
                agent_commission_bps=bps // 2,
                agent_flat_commission=123,
                broker=BrokerCommission(CommissionType.BOTH, bps // 3, 45),
                tax_rate_bps=1000,
                referral_bps=bps // 4,
            )
        )
        assert result.total() == result.profit_loss

    @pytest.mark.parametrize("k", [2, 3, -1, -2])
    def test_proportional_without_flats(self, k: int) -> None:
        rates = {
            "player_commission_bps": 1234,
            "agent_commission_bps": 500,
            "tax_rate_bps": 1000,
            "referral_bps": 250,
            "broker": BrokerCommission(CommissionType.PERCENTAGE, commission_bps=750),
        }
        base = compute_settlement(_pl_input(10000, **rates))
        scaled = compute_settlement(_pl_input(10000 * k, **rates))
        assert scaled.clicker_amount == k * base.clicker_amount
        assert scaled.acc_holder_amount == k * base.acc_holder_amount
        assert scaled.broker_amount == k * base.broker_amount
        assert scaled.taxable_amount == k * base.taxable_amount
        assert scaled.referral_amount == k * base.referral_amount
        assert scaled.company_amount == k * base.company_amount

    @pytest.mark.parametrize("profit_loss", [1, 3, 7, -1, -3, 12345])
    @pytest.mark.parametrize("k", [2, -1, -2])
    def test_proportional_within_a_cent_when_rounding(self, profit_loss: int, k: int) -> None:
        rates = {
            "player_commission_bps": 5000,
            "agent_commission_bps": 3333,
            "tax_rate_bps": 1000,
            "referral_bps": 250,
            "broker": BrokerCommission(CommissionType.PERCENTAGE, commission_bps=750),
        }
        base = compute_settlement(_pl_input(profit_loss, **rates))
        scaled = compute_settlement(_pl_input(profit_loss * k, **rates))
        for share in (
            "clicker_amount",
            "acc_holder_amount",
            "broker_amount",
            "taxable_amount",
            "referral_amount",
        ):
            assert abs(getattr(scaled, share) - k * getattr(base, share)) <= 1, share
        assert scaled.total() == scaled.profit_loss

    def test_half_cent_rounds_away_from_zero(self) -> None:
        profit = compute_settlement(_pl_input(1, player_commission_bps=5000))
        loss = compute_settlement(_pl_input(-1, player_commission_bps=5000))
        assert profit.clicker_amount == 1
        assert loss.clicker_amount == -1
        assert profit.company_amount == 0
        assert loss.company_amount == 0

    def test_tax_on_gross_profit(self) -> None:
        result = compute_settlement(
            _pl_input(10000, player_commission_bps=5000, tax_rate_bps=1000)
        )
        # 10% of the full 10000, not of what is left after the clicker share
        assert result.taxable_amount == 1000
