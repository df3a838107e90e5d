"""cl_entry REST endpoints.

POST   /entries                                — record a day's balances
GET    /entries                                — list (account/player/date filters, cursor)
GET    /entries/{entry_id}                     — detail
PATCH  /entries/{entry_id}                     — edit raw fields, full recompute
POST   /entries/{entry_id}/recompute           — recompute with current configuration
PUT    /entries/{entry_id}/settled             — toggle a party's settled flag
DELETE /entries/{entry_id}                     — delete, returns the account's status
GET    /accounts/{account_id}/entries          — list for one account
GET    /accounts/{account_id}/entries/draft    — prefill for the daily form
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.database import get_db_session
from src.cl_common.response import ApiResponse, respond
from src.cl_entry.application.schemas import (
    CreateEntryRequest,
    SetSettledRequest,
    UpdateEntryRequest,
)
from src.cl_entry.application.service import EntryApplicationService

router = APIRouter(prefix="/entries", tags=["entries"])
account_entries_router = APIRouter(prefix="/accounts", tags=["entries"])

_service = EntryApplicationService()


@router.post("")
async def create_entry(
    body: CreateEntryRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.create_entry(db, body))


@router.get("")
async def list_entries(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    account_id: str | None = Query(None),
    player_id: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_entries(
        db, account_id, player_id, date_from, date_to, cursor, limit
    )
    return respond(request, data)


@router.get("/{entry_id}")
async def get_entry(
    entry_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.get_entry(db, entry_id))


@router.patch("/{entry_id}")
async def update_entry(
    entry_id: str,
    body: UpdateEntryRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.update_entry(db, entry_id, body))


@router.post("/{entry_id}/recompute")
async def recompute_entry(
    entry_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.recompute_entry(db, entry_id))


@router.put("/{entry_id}/settled")
async def set_settled(
    entry_id: str,
    body: SetSettledRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.set_settled(db, entry_id, body.party, body.settled)
    return respond(request, data)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.delete_entry(db, entry_id))


@account_entries_router.get("/{account_id}/entries")
async def list_account_entries(
    account_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_entries(db, account_id, None, None, None, cursor, limit)
    return respond(request, data)


@account_entries_router.get("/{account_id}/entries/draft")
async def get_entry_draft(
    account_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    entry_date: date | None = Query(None, alias="date"),
) -> ApiResponse:
    return respond(request, await _service.get_draft(db, account_id, entry_date))
