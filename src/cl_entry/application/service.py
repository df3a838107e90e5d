"""EntryApplicationService — the caller of the settlement engine.

Every write gathers the account's current configuration (player, agent,
broker, promo, referral) and the current tax rate, runs compute_settlement
once, and stores raw and computed fields together. A changed setting only
reaches an existing entry when that entry is edited or recomputed.
"""

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.cl_account.domain.models import Account
from src.cl_account.domain.repository import (
    AccountRepositoryProtocol,
    AgentRepositoryProtocol,
    BrokerRepositoryProtocol,
)
from src.cl_account.infrastructure.agents_repository import AgentRepository
from src.cl_account.infrastructure.brokers_repository import BrokerRepository
from src.cl_account.infrastructure.persistence import AccountRepository
from src.cl_common.cents import cents_to_display
from src.cl_common.datetime_utils import utc_today
from src.cl_common.enums import AccountKind, SettledParty
from src.cl_common.errors import (
    AccountNotFoundError,
    BrokerNotFoundError,
    DuplicateEntryError,
    EntryNotFoundError,
    InvalidEntryError,
    PlayerNotActiveError,
    PlayerNotFoundError,
)
from src.cl_entry.application.schemas import (
    CreateEntryRequest,
    DeleteEntryResponse,
    EntryDraftOut,
    EntryListResponse,
    EntryOut,
    UpdateEntryRequest,
    cursor_decode,
    cursor_encode,
)
from src.cl_entry.domain.models import (
    Entry,
    default_starting_balance,
    override_for_entry_status,
)
from src.cl_entry.domain.repository import EntryRepositoryProtocol
from src.cl_entry.infrastructure.persistence import EntryRepository
from src.cl_player.domain.models import Player
from src.cl_player.domain.repository import PlayerRepositoryProtocol
from src.cl_player.infrastructure.persistence import PlayerRepository
from src.cl_settings.application.service import SettingsApplicationService
from src.cl_settings.domain.repository import SettingsRepositoryProtocol
from src.cl_settlement.domain.engine import compute_settlement
from src.cl_settlement.domain.models import SettlementInput

logger = logging.getLogger(__name__)

_UNIQUE_DAY_CONSTRAINT = "uq_entries_account_date"

# request field -> Entry attribute
_UPDATE_FIELD_MAP = {
    "entry_date": "entry_date",
    "starting_balance_cents": "starting_balance",
    "ending_balance_cents": "ending_balance",
    "refill_cents": "refill_amount",
    "withdrawal_cents": "withdrawal",
    "account_status": "account_status",
    "notes": "notes",
    "compliance_review": "compliance_review",
}

# nullable in the request but not on the entry
_REQUIRED_FIELDS = {
    "entry_date",
    "starting_balance_cents",
    "ending_balance_cents",
    "refill_cents",
    "withdrawal_cents",
    "account_status",
    "compliance_review",
}


class EntryApplicationService:
    def __init__(
        self,
        repo: EntryRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        agent_repo: AgentRepositoryProtocol | None = None,
        broker_repo: BrokerRepositoryProtocol | None = None,
        player_repo: PlayerRepositoryProtocol | None = None,
        settings_repo: SettingsRepositoryProtocol | None = None,
    ) -> None:
        self._repo: EntryRepositoryProtocol = repo or EntryRepository()
        self._account_repo: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._agent_repo: AgentRepositoryProtocol = agent_repo or AgentRepository()
        self._broker_repo: BrokerRepositoryProtocol = broker_repo or BrokerRepository()
        self._player_repo: PlayerRepositoryProtocol = player_repo or PlayerRepository()
        self._settings = SettingsApplicationService(settings_repo)

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------

    async def _load_account(self, db: AsyncSession, account_id: str) -> Account:
        account = await self._account_repo.get_account(db, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def _load_entry(self, db: AsyncSession, entry_id: str) -> Entry:
        entry = await self._repo.get_entry(db, entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    async def _load_player(self, db: AsyncSession, player_id: str) -> Player:
        player = await self._player_repo.get_player(db, player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    async def _default_starting(
        self, db: AsyncSession, account: Account, entry_date: date
    ) -> int:
        latest = None
        if account.kind == AccountKind.PPH:
            latest = await self._repo.get_latest_before(db, account.id, entry_date)
        return default_starting_balance(account, latest)

    async def _check_unique(
        self, db: AsyncSession, account_id: str, entry_date: date, entry_id: str | None = None
    ) -> None:
        existing = await self._repo.get_by_account_date(db, account_id, entry_date)
        if existing is not None and existing.id != entry_id:
            raise DuplicateEntryError(account_id, entry_date.isoformat())

    async def _insert(self, db: AsyncSession, entry: Entry) -> Entry:
        try:
            return await self._repo.insert_entry(db, entry)
        except IntegrityError as exc:
            _raise_if_duplicate_day(exc, entry)
            raise

    async def _update(self, db: AsyncSession, entry: Entry) -> Entry:
        try:
            updated = await self._repo.update_entry(db, entry)
        except IntegrityError as exc:
            _raise_if_duplicate_day(exc, entry)
            raise
        if updated is None:
            raise EntryNotFoundError(entry.id)
        return updated

    async def _settle(
        self, db: AsyncSession, entry: Entry, account: Account, player: Player
    ) -> None:
        """Recompute entry's split from current configuration, in place."""
        agent = await self._agent_repo.get_agent(db, account.agent_id)
        if agent is None:
            logger.warning(
                "Agent %s of account %s not found; acc holder share is zero",
                account.agent_id,
                account.id,
            )
        broker = None
        if account.broker_id is not None:
            broker = await self._broker_repo.get_broker(db, account.broker_id)
            if broker is None:
                raise BrokerNotFoundError(account.broker_id)

        entry.tax_rate_bps = await self._settings.current_tax_rate_bps(db)
        result = compute_settlement(
            SettlementInput(
                starting_balance=entry.starting_balance,
                ending_balance=entry.ending_balance,
                refill_amount=entry.refill_amount,
                withdrawal=entry.withdrawal,
                account_promo_amount=account.promo_amount,
                player_commission_bps=player.commission_bps,
                agent_commission_bps=agent.commission_bps if agent else 0,
                agent_flat_commission=agent.flat_commission if agent else 0,
                broker=broker.to_commission() if broker else None,
                tax_rate_bps=entry.tax_rate_bps,
                referral_bps=account.referral_bps or 0,
            )
        )
        entry.apply_result(result)

    async def _sync_account_status(
        self, db: AsyncSession, account: Account, entry: Entry
    ) -> None:
        """Bring the account's inactive override in line with the entry's report."""
        wanted = override_for_entry_status(entry.account_status)
        if account.inactive_override != wanted:
            await self._account_repo.set_inactive_override(db, account.id, wanted)
            logger.info(
                "Account %s inactive_override=%s from entry %s", account.id, wanted, entry.id
            )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_entry(self, db: AsyncSession, body: CreateEntryRequest) -> EntryOut:
        try:
            account = await self._load_account(db, body.account_id)
            player_id = body.player_id or account.assigned_player_id
            if player_id is None:
                raise InvalidEntryError(
                    f"account {account.id} has no assigned player; player_id is required"
                )
            player = await self._load_player(db, player_id)
            if not player.is_active:
                raise PlayerNotActiveError(player.id)

            entry_date = body.entry_date or utc_today()
            await self._check_unique(db, account.id, entry_date)

            starting = body.starting_balance_cents
            if starting is None:
                starting = await self._default_starting(db, account, entry_date)

            entry = Entry(
                id="",
                account_id=account.id,
                player_id=player.id,
                entry_date=entry_date,
                starting_balance=starting,
                ending_balance=body.ending_balance_cents,
                refill_amount=body.refill_cents,
                withdrawal=body.withdrawal_cents,
                account_status=body.account_status,
                notes=body.notes,
                compliance_review=body.compliance_review,
                tax_rate_bps=0,
            )
            await self._settle(db, entry, account, player)
            created = await self._insert(db, entry)
            await self._sync_account_status(db, account, created)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Entry created: id=%s account=%s date=%s pl=%s",
            created.id,
            created.account_id,
            created.entry_date,
            cents_to_display(created.profit_loss),
        )
        return EntryOut.from_domain(created)

    async def update_entry(
        self, db: AsyncSession, entry_id: str, body: UpdateEntryRequest
    ) -> EntryOut:
        try:
            entry = await self._load_entry(db, entry_id)
            status_reported = False
            for field, value in body.model_dump(exclude_unset=True).items():
                if value is None and field in _REQUIRED_FIELDS:
                    continue
                setattr(entry, _UPDATE_FIELD_MAP[field], value)
                status_reported = status_reported or field == "account_status"
            await self._check_unique(db, entry.account_id, entry.entry_date, entry.id)
            account, updated = await self._resettle_and_save(db, entry)
            # Only an explicitly reported status may move the override;
            # a manual inactive flag survives other edits.
            if status_reported:
                await self._sync_account_status(db, account, updated)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Entry updated: id=%s", entry_id)
        return EntryOut.from_domain(updated)

    async def recompute_entry(self, db: AsyncSession, entry_id: str) -> EntryOut:
        """Re-run the split with today's configuration, raw fields untouched.

        The account's status override is left alone.
        """
        try:
            entry = await self._load_entry(db, entry_id)
            _, updated = await self._resettle_and_save(db, entry)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Entry recomputed: id=%s", entry_id)
        return EntryOut.from_domain(updated)

    async def _resettle_and_save(
        self, db: AsyncSession, entry: Entry
    ) -> tuple[Account, Entry]:
        """Recompute and store entry; returns (account, stored entry)."""
        account = await self._load_account(db, entry.account_id)
        player = await self._load_player(db, entry.player_id)
        await self._settle(db, entry, account, player)
        return account, await self._update(db, entry)

    async def delete_entry(self, db: AsyncSession, entry_id: str) -> DeleteEntryResponse:
        try:
            entry = await self._load_entry(db, entry_id)
            await self._repo.delete_entry(db, entry_id)
            account = await self._load_account(db, entry.account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Entry deleted: id=%s account=%s status=%s",
            entry_id,
            account.id,
            account.status.value,
        )
        return DeleteEntryResponse(
            entry_id=entry_id, account_id=account.id, account_status=account.status
        )

    async def set_settled(
        self, db: AsyncSession, entry_id: str, party: SettledParty, settled: bool
    ) -> EntryOut:
        try:
            updated = await self._repo.set_settled(db, entry_id, party, settled)
            if updated is None:
                raise EntryNotFoundError(entry_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Entry %s %s_settled=%s", entry_id, party.value, settled)
        return EntryOut.from_domain(updated)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_entry(self, db: AsyncSession, entry_id: str) -> EntryOut:
        return EntryOut.from_domain(await self._load_entry(db, entry_id))

    async def list_entries(
        self,
        db: AsyncSession,
        account_id: str | None,
        player_id: str | None,
        date_from: date | None,
        date_to: date | None,
        cursor: str | None,
        limit: int,
    ) -> EntryListResponse:
        cursor_date, cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_entries(
            db, account_id, player_id, date_from, date_to, cursor_date, cursor_id, limit + 1
        )
        has_more = len(entries) > limit
        page = entries[:limit]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return EntryListResponse(
            items=[EntryOut.from_domain(e) for e in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def get_draft(
        self, db: AsyncSession, account_id: str, entry_date: date | None
    ) -> EntryDraftOut:
        """Existing entry for the date if any, plus the default starting balance."""
        account = await self._load_account(db, account_id)
        day = entry_date or utc_today()
        existing = await self._repo.get_by_account_date(db, account.id, day)
        starting = await self._default_starting(db, account, day)
        return EntryDraftOut(
            account_id=account.id,
            entry_date=day.isoformat(),
            exists=existing is not None,
            entry=EntryOut.from_domain(existing) if existing else None,
            default_starting_balance_cents=starting,
            default_starting_balance_display=cents_to_display(starting),
        )


def _raise_if_duplicate_day(exc: IntegrityError, entry: Entry) -> None:
    """A concurrent write won the (account, day) slot after _check_unique passed."""
    if _UNIQUE_DAY_CONSTRAINT in str(exc.orig):
        raise DuplicateEntryError(entry.account_id, entry.entry_date.isoformat()) from exc
