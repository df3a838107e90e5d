"""cl_account REST endpoints for agents.

POST   /agents               — create
GET    /agents               — list with account counts
GET    /agents/{agent_id}    — detail
PATCH  /agents/{agent_id}    — partial update
DELETE /agents/{agent_id}    — delete (refused while accounts reference it)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.application.party_schemas import CreateAgentRequest, UpdateAgentRequest
from src.cl_account.application.party_service import AgentApplicationService
from src.cl_common.database import get_db_session
from src.cl_common.response import ApiResponse, respond

router = APIRouter(prefix="/agents", tags=["agents"])

_service = AgentApplicationService()


@router.post("")
async def create_agent(
    body: CreateAgentRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.create_agent(db, body))


@router.get("")
async def list_agents(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.list_agents(db))


@router.get("/{agent_id}")
async def get_agent(
    agent_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.get_agent(db, agent_id))


@router.patch("/{agent_id}")
async def update_agent(
    agent_id: str,
    body: UpdateAgentRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return respond(request, await _service.update_agent(db, agent_id, body))


@router.delete("/{agent_id}")
async def delete_agent(
    agent_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _service.delete_agent(db, agent_id)
    return respond(request)
