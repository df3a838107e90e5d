"""cl_account REST endpoints for accounts.

POST   /accounts                       — create (starts unused)
GET    /accounts                       — list with status/kind/agent/broker filters
GET    /accounts/{account_id}          — detail with derived status
PATCH  /accounts/{account_id}          — partial update
DELETE /accounts/{account_id}          — delete (entries cascade)
PUT    /accounts/{account_id}/player   — assign / unassign a clicker
PATCH  /accounts/{account_id}/status   — set / clear the inactive override
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.application.schemas import (
    AssignPlayerRequest,
    CreateAccountRequest,
    SetStatusOverrideRequest,
    UpdateAccountRequest,
)
from src.cl_account.application.service import AccountApplicationService
from src.cl_common.database import get_db_session
from src.cl_common.enums import AccountKind, AccountStatus
from src.cl_common.response import ApiResponse, respond

router = APIRouter(prefix="/accounts", tags=["accounts"])

_service = AccountApplicationService()


@router.post("")
async def create_account(
    body: CreateAccountRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.create_account(db, body))


@router.get("")
async def list_accounts(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    status: AccountStatus | None = Query(None),
    kind: AccountKind | None = Query(None),
    agent_id: str | None = Query(None),
    broker_id: str | None = Query(None),
) -> ApiResponse:
    data = await _service.list_accounts(db, status, kind, agent_id, broker_id)
    return respond(request, data)


@router.get("/{account_id}")
async def get_account(
    account_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.get_account(db, account_id))


@router.patch("/{account_id}")
async def update_account(
    account_id: str,
    body: UpdateAccountRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.update_account(db, account_id, body))


@router.delete("/{account_id}")
async def delete_account(
    account_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _service.delete_account(db, account_id)
    return respond(request)


@router.put("/{account_id}/player")
async def assign_player(
    account_id: str,
    body: AssignPlayerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.assign_player(db, account_id, body))


@router.patch("/{account_id}/status")
async def set_status_override(
    account_id: str,
    body: SetStatusOverrideRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.set_status_override(db, account_id, body.inactive)
    return respond(request, data)
