"""Pydantic schemas for the dashboard summary."""

from pydantic import BaseModel

from src.cl_common.cents import cents_to_display
from src.cl_report.domain.aggregation import GroupTotal, Summary, Totals


class TotalsOut(BaseModel):
    entry_count: int
    profit_loss_cents: int
    profit_loss_display: str
    clicker_cents: int
    acc_holder_cents: int
    broker_cents: int
    taxable_cents: int
    referral_cents: int
    company_cents: int
    net_profit_cents: int
    net_profit_display: str

    @classmethod
    def from_domain(cls, t: Totals) -> "TotalsOut":
        return cls(
            entry_count=t.entry_count,
            profit_loss_cents=t.profit_loss,
            profit_loss_display=cents_to_display(t.profit_loss),
            clicker_cents=t.clicker_amount,
            acc_holder_cents=t.acc_holder_amount,
            broker_cents=t.broker_amount,
            taxable_cents=t.taxable_amount,
            referral_cents=t.referral_amount,
            company_cents=t.company_amount,
            net_profit_cents=t.net_profit,
            net_profit_display=cents_to_display(t.net_profit),
        )


class GroupTotalOut(BaseModel):
    id: str
    label: str
    entry_count: int
    profit_loss_cents: int
    profit_loss_display: str
    clicker_cents: int

    @classmethod
    def from_domain(cls, g: GroupTotal) -> "GroupTotalOut":
        return cls(
            id=g.key,
            label=g.label,
            entry_count=g.entry_count,
            profit_loss_cents=g.profit_loss,
            profit_loss_display=cents_to_display(g.profit_loss),
            clicker_cents=g.clicker_amount,
        )


class SummaryResponse(BaseModel):
    date_from: str | None
    date_to: str | None
    totals: TotalsOut
    by_account: list[GroupTotalOut]
    by_agent: list[GroupTotalOut]
    by_player: list[GroupTotalOut]

    @classmethod
    def from_domain(
        cls, s: Summary, date_from: str | None, date_to: str | None
    ) -> "SummaryResponse":
        return cls(
            date_from=date_from,
            date_to=date_to,
            totals=TotalsOut.from_domain(s.totals),
            by_account=[GroupTotalOut.from_domain(g) for g in s.by_account],
            by_agent=[GroupTotalOut.from_domain(g) for g in s.by_agent],
            by_player=[GroupTotalOut.from_domain(g) for g in s.by_player],
        )
