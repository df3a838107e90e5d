"""Pydantic schemas for the agents (account holders) and brokers APIs."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.cl_account.domain.models import Agent, Broker
from src.cl_common.cents import bps_to_display, cents_to_display
from src.cl_common.enums import BROKER_SCENARIOS, CommissionType


def _check_scenarios(scenarios: list[str]) -> list[str]:
    unknown = [s for s in scenarios if s not in BROKER_SCENARIOS]
    if unknown:
        raise ValueError(f"Unknown broker scenario(s): {unknown}")
    # dedupe, keep order
    return list(dict.fromkeys(scenarios))


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------


class CreateAgentRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    commission_bps: int = Field(0, ge=0, le=10000)
    flat_commission_cents: int = Field(0, ge=0)


class UpdateAgentRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    commission_bps: int | None = Field(None, ge=0, le=10000)
    flat_commission_cents: int | None = Field(None, ge=0)


class AgentOut(BaseModel):
    id: str
    name: str
    commission_bps: int
    commission_display: str
    flat_commission_cents: int
    flat_commission_display: str
    account_count: int

    @classmethod
    def from_domain(cls, g: Agent) -> "AgentOut":
        return cls(
            id=g.id,
            name=g.name,
            commission_bps=g.commission_bps,
            commission_display=bps_to_display(g.commission_bps),
            flat_commission_cents=g.flat_commission,
            flat_commission_display=cents_to_display(g.flat_commission),
            account_count=g.account_count,
        )


class AgentListResponse(BaseModel):
    items: list[AgentOut]


# ---------------------------------------------------------------------------
# Brokers
# ---------------------------------------------------------------------------


class CreateBrokerRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    commission_type: CommissionType = CommissionType.BOTH
    commission_bps: int = Field(0, ge=0, le=10000)
    flat_commission_cents: int = Field(0, ge=0)
    referral_bps: int = Field(0, ge=0, le=10000)
    referral_flat_cents: int = Field(0, ge=0)
    special_scenarios: list[str] = Field(default_factory=list)

    @field_validator("special_scenarios")
    @classmethod
    def _known_scenarios(cls, v: list[str]) -> list[str]:
        return _check_scenarios(v)


class UpdateBrokerRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    commission_type: CommissionType | None = None
    commission_bps: int | None = Field(None, ge=0, le=10000)
    flat_commission_cents: int | None = Field(None, ge=0)
    referral_bps: int | None = Field(None, ge=0, le=10000)
    referral_flat_cents: int | None = Field(None, ge=0)
    special_scenarios: list[str] | None = None

    @field_validator("special_scenarios")
    @classmethod
    def _known_scenarios(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _check_scenarios(v)


class BrokerOut(BaseModel):
    id: str
    name: str
    commission_type: CommissionType
    commission_bps: int
    commission_display: str
    flat_commission_cents: int
    flat_commission_display: str
    referral_bps: int
    referral_flat_cents: int
    special_scenarios: list[str]
    account_count: int

    @classmethod
    def from_domain(cls, b: Broker) -> "BrokerOut":
        return cls(
            id=b.id,
            name=b.name,
            commission_type=b.commission_type,
            commission_bps=b.commission_bps,
            commission_display=bps_to_display(b.commission_bps),
            flat_commission_cents=b.flat_commission,
            flat_commission_display=cents_to_display(b.flat_commission),
            referral_bps=b.referral_bps,
            referral_flat_cents=b.referral_flat,
            special_scenarios=b.special_scenarios,
            account_count=b.account_count,
        )


class BrokerListResponse(BaseModel):
    items: list[BrokerOut]
