"""Domain models for cl_player — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.cl_common.enums import PlayerStatus


@dataclass
class Player:
    """A clicker: operates assigned accounts day to day."""

    id: str
    email: str
    name: str
    commission_bps: int         # share of gross profit/loss
    status: PlayerStatus
    auth_uid: str | None        # login identity, set on activation
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == PlayerStatus.ACTIVE
