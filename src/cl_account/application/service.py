"""AccountApplicationService — accounts, player assignment and status override.

Status is never written directly: the service only flips inactive_override
and assigned_player_id, and the read model derives active/inactive/unused.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.application.schemas import (
    AccountDetail,
    AccountListResponse,
    AccountStatusCounts,
    AssignPlayerRequest,
    CreateAccountRequest,
    UpdateAccountRequest,
)
from src.cl_account.domain.models import Account
from src.cl_account.domain.repository import (
    AccountRepositoryProtocol,
    AgentRepositoryProtocol,
    BrokerRepositoryProtocol,
)
from src.cl_account.domain.validation import validate_account_identity
from src.cl_account.infrastructure.agents_repository import AgentRepository
from src.cl_account.infrastructure.brokers_repository import BrokerRepository
from src.cl_account.infrastructure.persistence import AccountRepository
from src.cl_common.enums import AccountKind, AccountStatus
from src.cl_common.errors import (
    AccountNotFoundError,
    AgentNotFoundError,
    BrokerNotFoundError,
    PlayerNotActiveError,
    PlayerNotFoundError,
)
from src.cl_player.domain.repository import PlayerRepositoryProtocol
from src.cl_player.infrastructure.persistence import PlayerRepository

logger = logging.getLogger(__name__)

# request field -> Account attribute
_UPDATE_FIELD_MAP = {
    "kind": "kind",
    "agent_id": "agent_id",
    "broker_id": "broker_id",
    "username": "username",
    "website_url": "website_url",
    "name": "name",
    "deposit_amount_cents": "deposit_amount",
    "referral_bps": "referral_bps",
    "promo_cents": "promo_amount",
}


class AccountApplicationService:
    def __init__(
        self,
        repo: AccountRepositoryProtocol | None = None,
        agent_repo: AgentRepositoryProtocol | None = None,
        broker_repo: BrokerRepositoryProtocol | None = None,
        player_repo: PlayerRepositoryProtocol | None = None,
    ) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._agent_repo: AgentRepositoryProtocol = agent_repo or AgentRepository()
        self._broker_repo: BrokerRepositoryProtocol = broker_repo or BrokerRepository()
        self._player_repo: PlayerRepositoryProtocol = player_repo or PlayerRepository()

    async def _check_parties(
        self, db: AsyncSession, agent_id: str, broker_id: str | None
    ) -> None:
        if await self._agent_repo.get_agent(db, agent_id) is None:
            raise AgentNotFoundError(agent_id)
        if broker_id is not None and await self._broker_repo.get_broker(db, broker_id) is None:
            raise BrokerNotFoundError(broker_id)

    async def _load(self, db: AsyncSession, account_id: str) -> Account:
        account = await self._repo.get_account(db, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def create_account(
        self, db: AsyncSession, body: CreateAccountRequest
    ) -> AccountDetail:
        validate_account_identity(
            body.kind, body.username, body.website_url, body.name, body.deposit_amount_cents
        )
        try:
            await self._check_parties(db, body.agent_id, body.broker_id)
            account = await self._repo.create_account(
                db,
                kind=body.kind,
                agent_id=body.agent_id,
                broker_id=body.broker_id,
                username=body.username,
                website_url=body.website_url,
                name=body.name,
                deposit_amount=body.deposit_amount_cents,
                referral_bps=body.referral_bps,
                promo_amount=body.promo_cents,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Account created: id=%s kind=%s agent=%s", account.id, account.kind.value, account.agent_id
        )
        return AccountDetail.from_domain(account)

    async def get_account(self, db: AsyncSession, account_id: str) -> AccountDetail:
        return AccountDetail.from_domain(await self._load(db, account_id))

    async def list_accounts(
        self,
        db: AsyncSession,
        status: AccountStatus | None,
        kind: AccountKind | None,
        agent_id: str | None,
        broker_id: str | None,
    ) -> AccountListResponse:
        accounts = await self._repo.list_accounts(db, kind, agent_id, broker_id)
        # Counts cover the kind/agent/broker filter, before the status filter
        counts = AccountStatusCounts(
            total=len(accounts),
            active=sum(1 for a in accounts if a.status == AccountStatus.ACTIVE),
            inactive=sum(1 for a in accounts if a.status == AccountStatus.INACTIVE),
            unused=sum(1 for a in accounts if a.status == AccountStatus.UNUSED),
        )
        if status is not None:
            accounts = [a for a in accounts if a.status == status]
        return AccountListResponse(
            items=[AccountDetail.from_domain(a) for a in accounts],
            counts=counts,
        )

    async def update_account(
        self, db: AsyncSession, account_id: str, body: UpdateAccountRequest
    ) -> AccountDetail:
        try:
            account = await self._load(db, account_id)
            for field, value in body.model_dump(exclude_unset=True).items():
                if field in ("kind", "agent_id") and value is None:
                    continue
                if field == "promo_cents" and value is None:
                    value = 0
                setattr(account, _UPDATE_FIELD_MAP[field], value)
            validate_account_identity(
                account.kind,
                account.username,
                account.website_url,
                account.name,
                account.deposit_amount,
            )
            await self._check_parties(db, account.agent_id, account.broker_id)
            updated = await self._repo.update_account(db, account)
            if updated is None:
                raise AccountNotFoundError(account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Account updated: id=%s", account_id)
        return AccountDetail.from_domain(updated)

    async def delete_account(self, db: AsyncSession, account_id: str) -> None:
        try:
            if not await self._repo.delete_account(db, account_id):
                raise AccountNotFoundError(account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Account deleted: id=%s", account_id)

    async def assign_player(
        self, db: AsyncSession, account_id: str, body: AssignPlayerRequest
    ) -> AccountDetail:
        """Assign (or with player_id=None, unassign) a clicker.

        Assignment forces the account active, so it also clears any manual
        inactive override.
        """
        try:
            account = await self._load(db, account_id)
            if body.player_id is not None:
                player = await self._player_repo.get_player(db, body.player_id)
                if player is None:
                    raise PlayerNotFoundError(body.player_id)
                if not player.is_active:
                    raise PlayerNotActiveError(player.id)
                account.inactive_override = False
            account.assigned_player_id = body.player_id
            updated = await self._repo.update_account(db, account)
            if updated is None:
                raise AccountNotFoundError(account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Account %s assigned to player %s", account_id, body.player_id)
        return AccountDetail.from_domain(updated)

    async def set_status_override(
        self, db: AsyncSession, account_id: str, inactive: bool
    ) -> AccountDetail:
        try:
            await self._load(db, account_id)
            await self._repo.set_inactive_override(db, account_id, inactive)
            account = await self._load(db, account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Account %s inactive_override=%s", account_id, inactive)
        return AccountDetail.from_domain(account)
