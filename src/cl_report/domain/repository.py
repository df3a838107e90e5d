from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_report.domain.aggregation import ReportRow


class ReportRepositoryProtocol(Protocol):
    async def fetch_rows(
        self, db: AsyncSession, date_from: date | None, date_to: date | None
    ) -> list[ReportRow]: ...
