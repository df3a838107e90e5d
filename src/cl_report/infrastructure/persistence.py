"""ReportRepository — reads entry splits joined with party labels.

Agent and player are LEFT JOINed: a row whose agent was removed still counts,
labelled with its id.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_report.domain.aggregation import ReportRow

_REPORT_ROWS_SQL = text("""
    SELECT e.account_id,
           COALESCE(a.username, a.name, a.id) AS account_label,
           a.agent_id,
           COALESCE(g.name, a.agent_id) AS agent_name,
           e.player_id,
           COALESCE(p.name, e.player_id) AS player_name,
           e.profit_loss, e.clicker_amount, e.acc_holder_amount, e.broker_amount,
           e.taxable_amount, e.referral_amount, e.company_amount
    FROM entries e
    JOIN accounts a ON a.id = e.account_id
    LEFT JOIN agents g ON g.id = a.agent_id
    LEFT JOIN players p ON p.id = e.player_id
    WHERE
        (CAST(:date_from AS DATE) IS NULL OR e.entry_date >= CAST(:date_from AS DATE))
        AND (CAST(:date_to AS DATE) IS NULL OR e.entry_date <= CAST(:date_to AS DATE))
    ORDER BY e.entry_date, e.id
""")


def _row_to_report_row(row: object) -> ReportRow:
    return ReportRow(
        account_id=row.account_id,  # type: ignore[attr-defined]
        account_label=row.account_label,  # type: ignore[attr-defined]
        agent_id=row.agent_id,  # type: ignore[attr-defined]
        agent_name=row.agent_name,  # type: ignore[attr-defined]
        player_id=row.player_id,  # type: ignore[attr-defined]
        player_name=row.player_name,  # type: ignore[attr-defined]
        profit_loss=row.profit_loss,  # type: ignore[attr-defined]
        clicker_amount=row.clicker_amount,  # type: ignore[attr-defined]
        acc_holder_amount=row.acc_holder_amount,  # type: ignore[attr-defined]
        broker_amount=row.broker_amount,  # type: ignore[attr-defined]
        taxable_amount=row.taxable_amount,  # type: ignore[attr-defined]
        referral_amount=row.referral_amount,  # type: ignore[attr-defined]
        company_amount=row.company_amount,  # type: ignore[attr-defined]
    )


class ReportRepository:
    async def fetch_rows(
        self, db: AsyncSession, date_from: date | None, date_to: date | None
    ) -> list[ReportRow]:
        result = await db.execute(
            _REPORT_ROWS_SQL, {"date_from": date_from, "date_to": date_to}
        )
        return [_row_to_report_row(row) for row in result.fetchall()]
