"""ReportApplicationService — read-only dashboard totals."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_report.application.schemas import SummaryResponse
from src.cl_report.domain.aggregation import summarize
from src.cl_report.domain.repository import ReportRepositoryProtocol
from src.cl_report.infrastructure.persistence import ReportRepository


class ReportApplicationService:
    def __init__(self, repo: ReportRepositoryProtocol | None = None) -> None:
        self._repo: ReportRepositoryProtocol = repo or ReportRepository()

    async def summary(
        self, db: AsyncSession, date_from: date | None, date_to: date | None
    ) -> SummaryResponse:
        rows = await self._repo.fetch_rows(db, date_from, date_to)
        return SummaryResponse.from_domain(
            summarize(rows),
            date_from.isoformat() if date_from else None,
            date_to.isoformat() if date_to else None,
        )
