"""PlayerApplicationService — thin composition layer.

Mutations commit on success and roll back on any error; reads run without
an explicit transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.enums import PlayerStatus
from src.cl_common.errors import (
    PlayerAlreadyActiveError,
    PlayerEmailExistsError,
    PlayerNotFoundError,
)
from src.cl_player.application.schemas import (
    ActivatePlayerRequest,
    CreatePlayerRequest,
    PlayerListResponse,
    PlayerOut,
    UpdatePlayerRequest,
)
from src.cl_player.domain.repository import PlayerRepositoryProtocol
from src.cl_player.infrastructure.persistence import PlayerRepository

logger = logging.getLogger(__name__)


class PlayerApplicationService:
    def __init__(self, repo: PlayerRepositoryProtocol | None = None) -> None:
        self._repo: PlayerRepositoryProtocol = repo or PlayerRepository()

    async def create_player(
        self, db: AsyncSession, body: CreatePlayerRequest
    ) -> PlayerOut:
        try:
            if await self._repo.get_player_by_email(db, body.email) is not None:
                raise PlayerEmailExistsError(body.email)
            player = await self._repo.create_player(
                db, body.email, body.name, body.commission_bps
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Player created (pending): id=%s email=%s", player.id, player.email)
        return PlayerOut.from_domain(player)

    async def get_player(self, db: AsyncSession, player_id: str) -> PlayerOut:
        player = await self._repo.get_player(db, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return PlayerOut.from_domain(player)

    async def list_players(
        self, db: AsyncSession, status: PlayerStatus | None
    ) -> PlayerListResponse:
        players = await self._repo.list_players(db, status)
        return PlayerListResponse(items=[PlayerOut.from_domain(p) for p in players])

    async def update_player(
        self, db: AsyncSession, player_id: str, body: UpdatePlayerRequest
    ) -> PlayerOut:
        try:
            player = await self._repo.get_player(db, player_id)
            if player is None:
                raise PlayerNotFoundError(player_id)
            if body.name is not None:
                player.name = body.name
            if body.commission_bps is not None:
                player.commission_bps = body.commission_bps
            updated = await self._repo.update_player(db, player)
            if updated is None:
                raise PlayerNotFoundError(player_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Player updated: id=%s commission_bps=%d", updated.id, updated.commission_bps
        )
        return PlayerOut.from_domain(updated)

    async def activate_player(
        self, db: AsyncSession, body: ActivatePlayerRequest
    ) -> PlayerOut:
        """One-way pending → active, binding the login identity."""
        try:
            player = await self._repo.get_player_by_email(db, body.email)
            if player is None:
                raise PlayerNotFoundError(body.email)
            if player.is_active:
                raise PlayerAlreadyActiveError(player.id)
            activated = await self._repo.activate_player(db, player.id, body.auth_uid)
            if activated is None:
                # Lost a race with another activation of the same record
                raise PlayerAlreadyActiveError(player.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Player activated: id=%s auth_uid=%s", activated.id, activated.auth_uid)
        return PlayerOut.from_domain(activated)
