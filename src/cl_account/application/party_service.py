"""Agent and broker services — the commission beneficiaries behind accounts.

Deleting a party that accounts still reference is refused; the account
must be re-pointed first.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.application.party_schemas import (
    AgentListResponse,
    AgentOut,
    BrokerListResponse,
    BrokerOut,
    CreateAgentRequest,
    CreateBrokerRequest,
    UpdateAgentRequest,
    UpdateBrokerRequest,
)
from src.cl_account.domain.repository import (
    AgentRepositoryProtocol,
    BrokerRepositoryProtocol,
)
from src.cl_account.infrastructure.agents_repository import AgentRepository
from src.cl_account.infrastructure.brokers_repository import BrokerRepository
from src.cl_common.errors import (
    AgentInUseError,
    AgentNotFoundError,
    BrokerInUseError,
    BrokerNotFoundError,
)

logger = logging.getLogger(__name__)


class AgentApplicationService:
    def __init__(self, repo: AgentRepositoryProtocol | None = None) -> None:
        self._repo: AgentRepositoryProtocol = repo or AgentRepository()

    async def create_agent(self, db: AsyncSession, body: CreateAgentRequest) -> AgentOut:
        try:
            agent = await self._repo.create_agent(
                db, body.name, body.commission_bps, body.flat_commission_cents
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Agent created: id=%s name=%s", agent.id, agent.name)
        return AgentOut.from_domain(agent)

    async def get_agent(self, db: AsyncSession, agent_id: str) -> AgentOut:
        agent = await self._repo.get_agent(db, agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return AgentOut.from_domain(agent)

    async def list_agents(self, db: AsyncSession) -> AgentListResponse:
        agents = await self._repo.list_agents(db)
        return AgentListResponse(items=[AgentOut.from_domain(g) for g in agents])

    async def update_agent(
        self, db: AsyncSession, agent_id: str, body: UpdateAgentRequest
    ) -> AgentOut:
        try:
            agent = await self._repo.get_agent(db, agent_id)
            if agent is None:
                raise AgentNotFoundError(agent_id)
            if body.name is not None:
                agent.name = body.name
            if body.commission_bps is not None:
                agent.commission_bps = body.commission_bps
            if body.flat_commission_cents is not None:
                agent.flat_commission = body.flat_commission_cents
            updated = await self._repo.update_agent(db, agent)
            if updated is None:
                raise AgentNotFoundError(agent_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return AgentOut.from_domain(updated)

    async def delete_agent(self, db: AsyncSession, agent_id: str) -> None:
        try:
            agent = await self._repo.get_agent(db, agent_id)
            if agent is None:
                raise AgentNotFoundError(agent_id)
            if agent.account_count > 0:
                raise AgentInUseError(agent_id, agent.account_count)
            await self._repo.delete_agent(db, agent_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Agent deleted: id=%s", agent_id)


class BrokerApplicationService:
    def __init__(self, repo: BrokerRepositoryProtocol | None = None) -> None:
        self._repo: BrokerRepositoryProtocol = repo or BrokerRepository()

    async def create_broker(self, db: AsyncSession, body: CreateBrokerRequest) -> BrokerOut:
        try:
            broker = await self._repo.create_broker(
                db,
                name=body.name,
                commission_type=body.commission_type,
                commission_bps=body.commission_bps,
                flat_commission=body.flat_commission_cents,
                referral_bps=body.referral_bps,
                referral_flat=body.referral_flat_cents,
                special_scenarios=body.special_scenarios,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Broker created: id=%s type=%s", broker.id, broker.commission_type.value
        )
        return BrokerOut.from_domain(broker)

    async def get_broker(self, db: AsyncSession, broker_id: str) -> BrokerOut:
        broker = await self._repo.get_broker(db, broker_id)
        if broker is None:
            raise BrokerNotFoundError(broker_id)
        return BrokerOut.from_domain(broker)

    async def list_brokers(self, db: AsyncSession) -> BrokerListResponse:
        brokers = await self._repo.list_brokers(db)
        return BrokerListResponse(items=[BrokerOut.from_domain(b) for b in brokers])

    async def update_broker(
        self, db: AsyncSession, broker_id: str, body: UpdateBrokerRequest
    ) -> BrokerOut:
        try:
            broker = await self._repo.get_broker(db, broker_id)
            if broker is None:
                raise BrokerNotFoundError(broker_id)
            if body.name is not None:
                broker.name = body.name
            if body.commission_type is not None:
                broker.commission_type = body.commission_type
            if body.commission_bps is not None:
                broker.commission_bps = body.commission_bps
            if body.flat_commission_cents is not None:
                broker.flat_commission = body.flat_commission_cents
            if body.referral_bps is not None:
                broker.referral_bps = body.referral_bps
            if body.referral_flat_cents is not None:
                broker.referral_flat = body.referral_flat_cents
            if body.special_scenarios is not None:
                broker.special_scenarios = body.special_scenarios
            updated = await self._repo.update_broker(db, broker)
            if updated is None:
                raise BrokerNotFoundError(broker_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BrokerOut.from_domain(updated)

    async def delete_broker(self, db: AsyncSession, broker_id: str) -> None:
        try:
            broker = await self._repo.get_broker(db, broker_id)
            if broker is None:
                raise BrokerNotFoundError(broker_id)
            if broker.account_count > 0:
                raise BrokerInUseError(broker_id, broker.account_count)
            await self._repo.delete_broker(db, broker_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Broker deleted: id=%s", broker_id)
