"""cl_player REST endpoints.

POST  /players                — create a pending clicker
GET   /players                — list, optional ?status=pending|active
GET   /players/{player_id}    — detail
PATCH /players/{player_id}    — rename / change commission
POST  /players/activate       — first-login activation (pending → active)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.database import get_db_session
from src.cl_common.enums import PlayerStatus
from src.cl_common.response import ApiResponse, respond
from src.cl_player.application.schemas import (
    ActivatePlayerRequest,
    CreatePlayerRequest,
    UpdatePlayerRequest,
)
from src.cl_player.application.service import PlayerApplicationService

router = APIRouter(prefix="/players", tags=["players"])

_service = PlayerApplicationService()


@router.post("")
async def create_player(
    body: CreatePlayerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.create_player(db, body))


@router.get("")
async def list_players(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    status: PlayerStatus | None = Query(None),
) -> ApiResponse:
    return respond(request, await _service.list_players(db, status))


@router.post("/activate")
async def activate_player(
    body: ActivatePlayerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.activate_player(db, body))


@router.get("/{player_id}")
async def get_player(
    player_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.get_player(db, player_id))


@router.patch("/{player_id}")
async def update_player(
    player_id: str,
    body: UpdatePlayerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.update_player(db, player_id, body))
