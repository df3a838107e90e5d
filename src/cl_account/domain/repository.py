"""Repository Protocols — dependency inversion for testability.

Unit tests inject a mock that conforms to these Protocols.
Infrastructure layer provides the real implementations.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.domain.models import Account, Agent, Broker
from src.cl_common.enums import AccountKind, CommissionType


class AgentRepositoryProtocol(Protocol):
    async def get_agent(self, db: AsyncSession, agent_id: str) -> Agent | None: ...

    async def list_agents(self, db: AsyncSession) -> list[Agent]: ...

    async def create_agent(
        self, db: AsyncSession, name: str, commission_bps: int, flat_commission: int
    ) -> Agent: ...

    async def update_agent(self, db: AsyncSession, agent: Agent) -> Agent | None: ...

    async def delete_agent(self, db: AsyncSession, agent_id: str) -> bool: ...


class BrokerRepositoryProtocol(Protocol):
    async def get_broker(self, db: AsyncSession, broker_id: str) -> Broker | None: ...

    async def list_brokers(self, db: AsyncSession) -> list[Broker]: ...

    async def create_broker(
        self,
        db: AsyncSession,
        name: str,
        commission_type: CommissionType,
        commission_bps: int,
        flat_commission: int,
        referral_bps: int,
        referral_flat: int,
        special_scenarios: list[str],
    ) -> Broker: ...

    async def update_broker(self, db: AsyncSession, broker: Broker) -> Broker | None: ...

    async def delete_broker(self, db: AsyncSession, broker_id: str) -> bool: ...


class AccountRepositoryProtocol(Protocol):
    async def get_account(self, db: AsyncSession, account_id: str) -> Account | None: ...

    async def list_accounts(
        self,
        db: AsyncSession,
        kind: AccountKind | None,
        agent_id: str | None,
        broker_id: str | None,
    ) -> list[Account]: ...

    async def create_account(
        self,
        db: AsyncSession,
        kind: AccountKind,
        agent_id: str,
        broker_id: str | None,
        username: str | None,
        website_url: str | None,
        name: str | None,
        deposit_amount: int | None,
        referral_bps: int | None,
        promo_amount: int,
    ) -> Account: ...

    async def update_account(self, db: AsyncSession, account: Account) -> Account | None: ...

    async def set_inactive_override(
        self, db: AsyncSession, account_id: str, inactive: bool
    ) -> None: ...

    async def delete_account(self, db: AsyncSession, account_id: str) -> bool: ...
