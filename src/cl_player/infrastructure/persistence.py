"""PlayerRepository — concrete implementation of PlayerRepositoryProtocol.

Activation is a single conditional UPDATE ... WHERE status = 'pending', so two
concurrent first logins cannot both activate the same record.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_common.enums import PlayerStatus
from src.cl_player.domain.models import Player

_PLAYER_COLUMNS = "id, email, name, commission_bps, status, auth_uid, created_at, updated_at"

_GET_PLAYER_SQL = text(f"SELECT {_PLAYER_COLUMNS} FROM players WHERE id = :player_id")

_GET_BY_EMAIL_SQL = text(
    f"SELECT {_PLAYER_COLUMNS} FROM players WHERE LOWER(email) = LOWER(:email)"
)

_LIST_PLAYERS_SQL = text(f"""
    SELECT {_PLAYER_COLUMNS}
    FROM players
    WHERE CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT)
    ORDER BY name ASC, id ASC
""")

_INSERT_PLAYER_SQL = text(f"""
    INSERT INTO players (email, name, commission_bps, status)
    VALUES (:email, :name, :commission_bps, 'pending')
    RETURNING {_PLAYER_COLUMNS}
""")

_UPDATE_PLAYER_SQL = text(f"""
    UPDATE players
    SET name = :name,
        commission_bps = :commission_bps,
        updated_at = NOW()
    WHERE id = :player_id
    RETURNING {_PLAYER_COLUMNS}
""")

_ACTIVATE_PLAYER_SQL = text(f"""
    UPDATE players
    SET status = 'active',
        auth_uid = :auth_uid,
        updated_at = NOW()
    WHERE id = :player_id AND status = 'pending'
    RETURNING {_PLAYER_COLUMNS}
""")


def _row_to_player(row: object) -> Player:
    return Player(
        id=str(row.id),  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        commission_bps=row.commission_bps,  # type: ignore[attr-defined]
        status=PlayerStatus(row.status),  # type: ignore[attr-defined]
        auth_uid=row.auth_uid,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class PlayerRepository:
    async def get_player(self, db: AsyncSession, player_id: str) -> Player | None:
        result = await db.execute(_GET_PLAYER_SQL, {"player_id": player_id})
        row = result.fetchone()
        return _row_to_player(row) if row else None

    async def get_player_by_email(self, db: AsyncSession, email: str) -> Player | None:
        result = await db.execute(_GET_BY_EMAIL_SQL, {"email": email})
        row = result.fetchone()
        return _row_to_player(row) if row else None

    async def list_players(
        self, db: AsyncSession, status: PlayerStatus | None
    ) -> list[Player]:
        result = await db.execute(
            _LIST_PLAYERS_SQL, {"status": status.value if status else None}
        )
        return [_row_to_player(row) for row in result.fetchall()]

    async def create_player(
        self, db: AsyncSession, email: str, name: str, commission_bps: int
    ) -> Player:
        result = await db.execute(
            _INSERT_PLAYER_SQL,
            {"email": email, "name": name, "commission_bps": commission_bps},
        )
        return _row_to_player(result.fetchone())

    async def update_player(self, db: AsyncSession, player: Player) -> Player | None:
        result = await db.execute(
            _UPDATE_PLAYER_SQL,
            {
                "player_id": player.id,
                "name": player.name,
                "commission_bps": player.commission_bps,
            },
        )
        row = result.fetchone()
        return _row_to_player(row) if row else None

    async def activate_player(
        self, db: AsyncSession, player_id: str, auth_uid: str
    ) -> Player | None:
        result = await db.execute(
            _ACTIVATE_PLAYER_SQL, {"player_id": player_id, "auth_uid": auth_uid}
        )
        row = result.fetchone()
        return _row_to_player(row) if row else None
