"""cl_settings REST endpoints.

GET /settings/tax-rate — current rate (configured default if never set)
PUT /settings/tax-rate — replace the rate (0..10000 bps)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.database import get_db_session
from src.cl_common.response import ApiResponse, respond
from src.cl_settings.application.schemas import UpdateTaxRateRequest
from src.cl_settings.application.service import SettingsApplicationService

router = APIRouter(prefix="/settings", tags=["settings"])

_service = SettingsApplicationService()


@router.get("/tax-rate")
async def get_tax_rate(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.get_tax_rate(db))


@router.put("/tax-rate")
async def update_tax_rate(
    body: UpdateTaxRateRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.update_tax_rate(db, body.tax_rate_bps))
