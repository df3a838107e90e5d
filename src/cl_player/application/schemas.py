"""Pydantic schemas for cl_player API."""

from pydantic import BaseModel, ConfigDict, Field

from src.cl_common.cents import bps_to_display
from src.cl_common.enums import PlayerStatus
from src.cl_player.domain.models import Player


class CreatePlayerRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(..., min_length=1, max_length=200)
    commission_bps: int = Field(0, ge=0, le=10000)


class UpdatePlayerRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    commission_bps: int | None = Field(None, ge=0, le=10000)


class ActivatePlayerRequest(BaseModel):
    """Sent by the login layer after the first successful sign-in."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=3, max_length=254)
    auth_uid: str = Field(..., min_length=1, max_length=128)


class PlayerOut(BaseModel):
    id: str
    email: str
    name: str
    commission_bps: int
    commission_display: str
    status: PlayerStatus
    auth_uid: str | None
    created_at: str

    @classmethod
    def from_domain(cls, p: Player) -> "PlayerOut":
        return cls(
            id=p.id,
            email=p.email,
            name=p.name,
            commission_bps=p.commission_bps,
            commission_display=bps_to_display(p.commission_bps),
            status=p.status,
            auth_uid=p.auth_uid,
            created_at=p.created_at.isoformat(),
        )


class PlayerListResponse(BaseModel):
    items: list[PlayerOut]
