"""cl_report REST endpoints.

GET /reports/summary?date_from=&date_to= — totals overall, per account/agent/player
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.database import get_db_session
from src.cl_common.response import ApiResponse, respond
from src.cl_report.application.service import ReportApplicationService

router = APIRouter(prefix="/reports", tags=["reports"])

_service = ReportApplicationService()


@router.get("/summary")
async def get_summary(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
) -> ApiResponse:
    return respond(request, await _service.summary(db, date_from, date_to))
