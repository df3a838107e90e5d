"""cl_account REST endpoints for brokers.

POST   /brokers               — create
GET    /brokers               — list with account counts
GET    /brokers/{broker_id}    — detail
PATCH  /brokers/{broker_id}    — partial update
DELETE /brokers/{broker_id}    — delete (refused while accounts reference it)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.application.party_schemas import CreateBrokerRequest, UpdateBrokerRequest
from src.cl_account.application.party_service import BrokerApplicationService
from src.cl_common.database import get_db_session
from src.cl_common.response import ApiResponse, respond

router = APIRouter(prefix="/brokers", tags=["brokers"])

_service = BrokerApplicationService()


@router.post("")
async def create_broker(
    body: CreateBrokerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.create_broker(db, body))


@router.get("")
async def list_brokers(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.list_brokers(db))


@router.get("/{broker_id}")
async def get_broker(
    broker_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.get_broker(db, broker_id))


@router.patch("/{broker_id}")
async def update_broker(
    broker_id: str,
    body: UpdateBrokerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.update_broker(db, broker_id, body))


@router.delete("/{broker_id}")
async def delete_broker(
    broker_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _service.delete_broker(db, broker_id)
    return respond(request)
