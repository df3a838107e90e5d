"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.enums import PlayerStatus
from src.cl_player.domain.models import Player


class PlayerRepositoryProtocol(Protocol):
    async def get_player(self, db: AsyncSession, player_id: str) -> Player | None: ...

    async def get_player_by_email(self, db: AsyncSession, email: str) -> Player | None: ...

    async def list_players(
        self, db: AsyncSession, status: PlayerStatus | None
    ) -> list[Player]: ...

    async def create_player(
        self, db: AsyncSession, email: str, name: str, commission_bps: int
    ) -> Player: ...

    async def update_player(self, db: AsyncSession, player: Player) -> Player | None: ...

    async def activate_player(
        self, db: AsyncSession, player_id: str, auth_uid: str
    ) -> Player | None:
        """pending → active. Returns None if the player was not pending."""
        ...
