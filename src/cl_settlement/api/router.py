"""cl_settlement REST endpoint.

POST /settlement/preview — compute a split without persisting anything
"""

from fastapi import APIRouter, Request

from src.cl_common.response import ApiResponse, respond
from src.cl_settlement.application.schemas import (
    SettlementPreviewRequest,
    SettlementPreviewResponse,
)
from src.cl_settlement.domain.engine import compute_settlement

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post("/preview")
async def preview_settlement(
    body: SettlementPreviewRequest,
    request: Request,
) -> ApiResponse:
    result = compute_settlement(body.to_domain())
    return respond(request, SettlementPreviewResponse.from_result(result))
