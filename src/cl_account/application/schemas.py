"""Pydantic schemas for the accounts API."""

from pydantic import BaseModel, ConfigDict, Field

from src.cl_account.domain.models import Account
from src.cl_common.cents import cents_to_display
from src.cl_common.enums import AccountKind, AccountStatus

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateAccountRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: AccountKind
    agent_id: str = Field(..., min_length=1)
    broker_id: str | None = None
    username: str | None = Field(None, max_length=200)
    website_url: str | None = Field(None, max_length=500)
    name: str | None = Field(None, max_length=200)
    deposit_amount_cents: int | None = Field(None, ge=0)
    referral_bps: int | None = Field(None, ge=0, le=10000)
    promo_cents: int = Field(0, ge=0)


class UpdateAccountRequest(BaseModel):
    """Partial update — only fields present in the body are applied.

    Send an explicit null to clear an optional field (e.g. when switching a
    pph account to legal, null out username and website_url).
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    kind: AccountKind | None = None
    agent_id: str | None = Field(None, min_length=1)
    broker_id: str | None = None
    username: str | None = Field(None, max_length=200)
    website_url: str | None = Field(None, max_length=500)
    name: str | None = Field(None, max_length=200)
    deposit_amount_cents: int | None = Field(None, ge=0)
    referral_bps: int | None = Field(None, ge=0, le=10000)
    promo_cents: int | None = Field(None, ge=0)


class AssignPlayerRequest(BaseModel):
    player_id: str | None = Field(None, description="null unassigns the account")


class SetStatusOverrideRequest(BaseModel):
    inactive: bool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountDetail(BaseModel):
    id: str
    kind: AccountKind
    status: AccountStatus
    display_name: str
    agent_id: str
    broker_id: str | None
    username: str | None
    website_url: str | None
    name: str | None
    deposit_amount_cents: int | None
    deposit_amount_display: str | None
    referral_bps: int | None
    promo_cents: int
    promo_display: str
    assigned_player_id: str | None
    inactive_override: bool
    entry_count: int
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, a: Account) -> "AccountDetail":
        return cls(
            id=a.id,
            kind=a.kind,
            status=a.status,
            display_name=a.display_name,
            agent_id=a.agent_id,
            broker_id=a.broker_id,
            username=a.username,
            website_url=a.website_url,
            name=a.name,
            deposit_amount_cents=a.deposit_amount,
            deposit_amount_display=(
                cents_to_display(a.deposit_amount) if a.deposit_amount is not None else None
            ),
            referral_bps=a.referral_bps,
            promo_cents=a.promo_amount,
            promo_display=cents_to_display(a.promo_amount),
            assigned_player_id=a.assigned_player_id,
            inactive_override=a.inactive_override,
            entry_count=a.entry_count,
            created_at=a.created_at.isoformat(),
            updated_at=a.updated_at.isoformat(),
        )


class AccountStatusCounts(BaseModel):
    total: int
    active: int
    inactive: int
    unused: int


class AccountListResponse(BaseModel):
    items: list[AccountDetail]
    counts: AccountStatusCounts
