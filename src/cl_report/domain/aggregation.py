"""Dashboard aggregation — pure sums over stored entry splits.

Nothing here recomputes a split: reports add up what each entry was saved
with, so a later tax or commission change does not move historical totals.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReportRow:
    """One entry joined with the labels of the parties it belongs to."""

    account_id: str
    account_label: str
    agent_id: str
    agent_name: str
    player_id: str
    player_name: str
    profit_loss: int
    clicker_amount: int
    acc_holder_amount: int
    broker_amount: int
    taxable_amount: int
    referral_amount: int
    company_amount: int


@dataclass
class Totals:
    entry_count: int = 0
    profit_loss: int = 0
    clicker_amount: int = 0
    acc_holder_amount: int = 0
    broker_amount: int = 0
    taxable_amount: int = 0
    referral_amount: int = 0
    company_amount: int = 0

    @property
    def net_profit(self) -> int:
        return self.profit_loss - self.taxable_amount

    def add(self, row: ReportRow) -> None:
        self.entry_count += 1
        self.profit_loss += row.profit_loss
        self.clicker_amount += row.clicker_amount
        self.acc_holder_amount += row.acc_holder_amount
        self.broker_amount += row.broker_amount
        self.taxable_amount += row.taxable_amount
        self.referral_amount += row.referral_amount
        self.company_amount += row.company_amount


@dataclass
class GroupTotal:
    key: str
    label: str
    entry_count: int = 0
    profit_loss: int = 0
    clicker_amount: int = 0


@dataclass
class Summary:
    totals: Totals
    by_account: list[GroupTotal] = field(default_factory=list)
    by_agent: list[GroupTotal] = field(default_factory=list)
    by_player: list[GroupTotal] = field(default_factory=list)


def _bump(groups: dict[str, GroupTotal], key: str, label: str, row: ReportRow) -> None:
    group = groups.get(key)
    if group is None:
        group = groups[key] = GroupTotal(key=key, label=label)
    group.entry_count += 1
    group.profit_loss += row.profit_loss
    group.clicker_amount += row.clicker_amount


def _ranked(groups: dict[str, GroupTotal]) -> list[GroupTotal]:
    # best performers first; key breaks ties so output is stable
    return sorted(groups.values(), key=lambda g: (-g.profit_loss, g.key))


def summarize(rows: Iterable[ReportRow]) -> Summary:
    totals = Totals()
    accounts: dict[str, GroupTotal] = {}
    agents: dict[str, GroupTotal] = {}
    players: dict[str, GroupTotal] = {}
    for row in rows:
        totals.add(row)
        _bump(accounts, row.account_id, row.account_label, row)
        _bump(agents, row.agent_id, row.agent_name, row)
        _bump(players, row.player_id, row.player_name, row)
    return Summary(
        totals=totals,
        by_account=_ranked(accounts),
        by_agent=_ranked(agents),
        by_player=_ranked(players),
    )
