"""MarketApplicationService — market lifecycle after the registry exists.

Mutations (create, update, open-entry, deposit, resolve, claim,
claim-creator-fee) each run as one unit of work: commit on success,
rollback and re-raise on any error, so a failed call leaves markets,
entries, balances and the event log untouched.

Operations on one market are serialized by a per-market asyncio.Lock
inside the process; the SQL repositories also take row locks
(SELECT ... FOR UPDATE) so concurrent processes serialize in the database.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any

from src.pm_account.domain.models import Transfer
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.datetime_utils import Clock, SystemClock
from src.pm_common.enums import LedgerEntryType, Outcome
from src.pm_common.errors import (
    AlreadyClaimedError,
    BetCompleteError,
    BetEndedError,
    BetNotCompleteError,
    BetNotEndedError,
    EntryNotFoundError,
    InvalidBetError,
    MarketNotFoundError,
    UnauthorizedError,
    UninitializedError,
    WrongBetError,
)
from src.pm_common.seeds import VAULT_ADDRESS, entry_address, market_address
from src.pm_market.application.schemas import (
    ClaimResponse,
    CreateMarketRequest,
    CreatorFeeResponse,
    DepositResponse,
    EntryResponse,
    HistoryResponse,
    MarketListResponse,
    MarketResponse,
    QuoteResponse,
    ResolveResponse,
    UpdateMarketRequest,
    cursor_decode,
    cursor_encode,
)
from src.pm_market.domain.events import (
    CompleteEvent,
    CreateEvent,
    DepositEvent,
    EventSinkProtocol,
)
from src.pm_market.domain.models import Entry, History, Market, ProbabilityPoint
from src.pm_market.domain.payout import calculate_payout, creator_fee_for, platform_fee_for
from src.pm_market.domain.pricing import current_prices, quote_deposit
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.domain.validation import (
    validate_description,
    validate_metadata,
    validate_title,
)
from src.pm_market.infrastructure.event_log import SqlEventSink
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_registry.domain.models import GlobalRegistry
from src.pm_registry.domain.repository import RegistryRepositoryProtocol
from src.pm_registry.infrastructure.persistence import RegistryRepository

logger = logging.getLogger(__name__)


def _market_response(market: Market) -> MarketResponse:
    yes_price, no_price = current_prices(market.yes_reserve, market.no_reserve)
    return MarketResponse.from_domain(market, yes_price, no_price)


class MarketApplicationService:
    def __init__(
        self,
        registry_repo: RegistryRepositoryProtocol | None = None,
        repo: MarketRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        events: EventSinkProtocol | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._registry_repo: RegistryRepositoryProtocol = registry_repo or RegistryRepository()
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._events: EventSinkProtocol = events or SqlEventSink()
        self._clock: Clock = clock or SystemClock()
        self._market_locks: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._registry_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load_registry(self, db: Any, for_update: bool = False) -> GlobalRegistry:
        registry = await self._registry_repo.get_registry(db, for_update=for_update)
        if registry is None or not registry.initialized:
            raise UninitializedError()
        return registry

    async def _load_market(self, db: Any, bet_id: int, for_update: bool = False) -> Market:
        market = await self._repo.get_market(db, bet_id, for_update=for_update)
        if market is None:
            raise MarketNotFoundError(bet_id)
        return market

    async def _load_entry(
        self, db: Any, bet_id: int, user: str, for_update: bool = False
    ) -> Entry:
        entry = await self._repo.get_entry(db, bet_id, user, for_update=for_update)
        if entry is None:
            raise EntryNotFoundError(bet_id, user)
        return entry

    async def _pay_from_vault(
        self,
        db: Any,
        recipient: str,
        amount: int,
        debit_type: LedgerEntryType,
        credit_type: LedgerEntryType,
        market: Market,
        description: str,
    ) -> None:
        await self._accounts.transfer(
            db,
            VAULT_ADDRESS,
            recipient,
            amount,
            Transfer(
                debit_type=debit_type.value,
                credit_type=credit_type.value,
                reference_type="MARKET",
                reference_id=str(market.bet_id),
                description=description,
            ),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_market(self, db: Any, bet_id: int) -> MarketResponse:
        return _market_response(await self._load_market(db, bet_id))

    async def list_markets(self, db: Any, cursor: str | None, limit: int) -> MarketListResponse:
        cursor_bet_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without COUNT(*)
        markets = await self._repo.list_markets(db, cursor_bet_id, limit + 1)
        has_more = len(markets) > limit
        page = markets[:limit]
        items = [_market_response(m) for m in page]
        next_cursor = cursor_encode(page[-1].bet_id) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_history(self, db: Any, bet_id: int) -> HistoryResponse:
        market = await self._load_market(db, bet_id)
        history = await self._repo.get_history(db, bet_id)
        if history is None:
            history = History(pool="", bet_id=market.bet_id)
        return HistoryResponse.from_domain(history)

    async def get_entry(self, db: Any, bet_id: int, user: str) -> EntryResponse:
        await self._load_market(db, bet_id)
        return EntryResponse.from_domain(await self._load_entry(db, bet_id, user))

    async def quote(self, db: Any, bet_id: int, is_yes: bool, amount: int) -> QuoteResponse:
        market = await self._load_market(db, bet_id)
        q = quote_deposit(amount, is_yes, market.yes_reserve, market.no_reserve)
        return QuoteResponse.from_quote(bet_id, is_yes, amount, q)

    # ------------------------------------------------------------------
    # create-market
    # ------------------------------------------------------------------

    async def create_market(
        self, db: Any, signer: str, body: CreateMarketRequest
    ) -> MarketResponse:
        async with self._registry_lock:
            try:
                market = await self._create_market_inner(db, signer, body)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Market created: bet_id=%d creator=%s referee=%s end_timestamp=%d",
            market.bet_id,
            market.creator,
            market.referee,
            market.end_timestamp,
        )
        return _market_response(market)

    async def _create_market_inner(
        self, db: Any, signer: str, body: CreateMarketRequest
    ) -> Market:
        registry = await self._load_registry(db, for_update=True)
        validate_metadata(body.title, body.description)

        now = self._clock.unix_timestamp()
        slot = self._clock.slot()
        bet_id = registry.allocate_bet_id()

        market = Market(
            address=market_address(bet_id),
            creator=signer,
            bet_id=bet_id,
            referee=body.referee,
            title=body.title,
            description=body.description,
            share_uuid=f"{bet_id:x}-{now:x}-{slot:x}",
            created_timestamp=now,
            end_timestamp=body.end_timestamp,
            initial_price=registry.initial_price,
            scale_factor=registry.scale_factor,
        )
        await self._repo.insert_market(db, market)
        await self._repo.save_history(db, History.seeded(market))
        await self._registry_repo.save_registry(db, registry)
        await self._events.emit(
            db,
            CreateEvent(
                creator=signer,
                bet_id=bet_id,
                title=market.title,
                description=market.description,
                end_timestamp=market.end_timestamp,
                referee=market.referee,
                share_uuid=market.share_uuid,
                timestamp=now,
            ),
        )
        return market

    # ------------------------------------------------------------------
    # update-market
    # ------------------------------------------------------------------

    async def update_market(
        self, db: Any, signer: str, bet_id: int, body: UpdateMarketRequest
    ) -> MarketResponse:
        async with self._market_locks[bet_id]:
            try:
                market = await self._load_market(db, bet_id, for_update=True)
                registry = await self._load_registry(db)
                if signer != market.creator and not registry.is_owner(signer):
                    raise UnauthorizedError()
                if market.complete:
                    raise BetCompleteError()

                if body.title is not None:
                    validate_title(body.title)
                    market.title = body.title
                if body.description is not None:
                    validate_description(body.description)
                    market.description = body.description
                if body.end_timestamp is not None:
                    market.end_timestamp = body.end_timestamp
                if body.referee is not None:
                    market.referee = body.referee

                await self._repo.save_market(db, market)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Market updated: bet_id=%d by=%s", bet_id, signer)
        return _market_response(market)

    # ------------------------------------------------------------------
    # open-entry
    # ------------------------------------------------------------------

    async def open_entry(self, db: Any, signer: str, bet_id: int) -> EntryResponse:
        """Create the caller's entry if absent. Calling again returns it unchanged."""
        async with self._market_locks[bet_id]:
            try:
                market = await self._load_market(db, bet_id, for_update=True)
                if market.complete:
                    raise BetCompleteError()
                if not market.deadline.accepts_deposits(self._clock.unix_timestamp()):
                    raise BetEndedError()

                # Insert-if-absent never overwrites an entry another session created
                created = await self._repo.insert_entry(
                    db,
                    Entry(
                        address=entry_address(market.address, signer),
                        user=signer,
                        bet_id=bet_id,
                    ),
                )
                entry = await self._load_entry(db, bet_id, signer)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        if created:
            logger.info("Entry opened: bet_id=%d user=%s", bet_id, signer)
        return EntryResponse.from_domain(entry)

    # ------------------------------------------------------------------
    # deposit
    # ------------------------------------------------------------------

    async def deposit(
        self, db: Any, signer: str, bet_id: int, is_yes: bool, amount: int
    ) -> DepositResponse:
        async with self._market_locks[bet_id]:
            try:
                result = await self._deposit_inner(db, signer, bet_id, is_yes, amount)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Deposit: bet_id=%d user=%s side=%s amount=%d tokens=%d",
            bet_id,
            signer,
            "yes" if is_yes else "no",
            amount,
            result.token_amount,
        )
        return result

    async def _deposit_inner(
        self, db: Any, signer: str, bet_id: int, is_yes: bool, amount: int
    ) -> DepositResponse:
        market = await self._load_market(db, bet_id, for_update=True)
        entry = await self._load_entry(db, bet_id, signer, for_update=True)

        now = self._clock.unix_timestamp()
        if market.complete:
            raise BetCompleteError()
        if not market.deadline.accepts_deposits(now):
            raise BetEndedError()
        if amount == 0:
            raise InvalidBetError()
        if not entry.accepts_side(is_yes):
            raise InvalidBetError()

        q = quote_deposit(amount, is_yes, market.yes_reserve, market.no_reserve)
        market.apply_deposit(is_yes, amount, q.token_amount)
        entry.apply_deposit(is_yes, amount, q.token_amount)

        await self._accounts.transfer(
            db,
            signer,
            VAULT_ADDRESS,
            amount,
            Transfer(
                debit_type=LedgerEntryType.BET_DEPOSIT.value,
                credit_type=LedgerEntryType.BET_DEPOSIT_IN.value,
                reference_type="MARKET",
                reference_id=str(bet_id),
                description=f"Deposit on {'yes' if is_yes else 'no'}",
            ),
        )
        await self._repo.save_market(db, market)
        await self._repo.save_entry(db, entry)
        await self._events.emit(
            db,
            DepositEvent(
                user=signer,
                bet_id=bet_id,
                sol_amount=amount,
                token_amount=q.token_amount,
                is_yes=is_yes,
                timestamp=now,
            ),
        )

        history = await self._repo.get_history(db, bet_id)
        if history is None:
            history = History(pool="", bet_id=bet_id)
        if not history.is_initialized():
            logger.info("Seeding missing history for bet_id=%d", bet_id)
        history.ensure_initialized(market, now)
        history.record(ProbabilityPoint(now, market.yes_reserve, market.no_reserve))
        await self._repo.save_history(db, history)

        return DepositResponse(
            bet_id=bet_id,
            sol_amount=amount,
            token_amount=q.token_amount,
            price=q.yes_price if is_yes else q.no_price,
            entry=EntryResponse.from_domain(entry),
            yes_reserve=market.yes_reserve,
            no_reserve=market.no_reserve,
        )

    # ------------------------------------------------------------------
    # resolve
    # ------------------------------------------------------------------

    async def resolve(self, db: Any, signer: str, bet_id: int, is_yes: bool) -> ResolveResponse:
        async with self._market_locks[bet_id]:
            try:
                market = await self._load_market(db, bet_id, for_update=True)
                registry = await self._load_registry(db)

                now = self._clock.unix_timestamp()
                if market.complete:
                    raise BetCompleteError()
                if signer != market.referee and not registry.is_owner(signer):
                    raise UnauthorizedError()
                if not market.deadline.has_passed(now):
                    raise BetNotEndedError()

                market.complete = True
                market.winner = Outcome.from_is_yes(is_yes)

                market.platform_fee_claimed = True
                await self._repo.save_market(db, market)

                fee = platform_fee_for(market, registry.platform_fee_bps)
                if fee > 0:
                    await self._pay_from_vault(
                        db,
                        registry.owner,
                        fee,
                        LedgerEntryType.PLATFORM_FEE_OUT,
                        LedgerEntryType.PLATFORM_FEE,
                        market,
                        "Platform fee",
                    )
                await self._events.emit(
                    db,
                    CompleteEvent(
                        referee=signer,
                        bet_id=bet_id,
                        winner=market.winner.value,
                        timestamp=now,
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Market resolved: bet_id=%d winner=%s by=%s platform_fee=%d",
            bet_id,
            market.winner.value,
            signer,
            fee,
        )
        return ResolveResponse(bet_id=bet_id, winner=market.winner.value, platform_fee=fee)

    # ------------------------------------------------------------------
    # claim
    # ------------------------------------------------------------------

    async def claim(self, db: Any, signer: str, bet_id: int) -> ClaimResponse:
        async with self._market_locks[bet_id]:
            try:
                market = await self._load_market(db, bet_id, for_update=True)
                entry = await self._load_entry(db, bet_id, signer, for_update=True)
                registry = await self._load_registry(db)

                if entry.is_claimed:
                    raise AlreadyClaimedError()
                if not market.deadline.has_passed(self._clock.unix_timestamp()):
                    raise BetNotEndedError()
                if not market.complete:
                    raise BetNotCompleteError()
                if Outcome.from_is_yes(entry.is_yes) != market.winner:
                    raise WrongBetError()

                breakdown = calculate_payout(
                    market, entry, registry.creator_fee_bps, registry.platform_fee_bps
                )
                entry.is_claimed = True
                await self._repo.save_entry(db, entry)
                await self._pay_from_vault(
                    db,
                    signer,
                    breakdown.payout,
                    LedgerEntryType.WINNER_PAYOUT_OUT,
                    LedgerEntryType.WINNER_PAYOUT,
                    market,
                    "Winner payout",
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Winnings claimed: bet_id=%d user=%s payout=%d (principal=%d profit=%d)",
            bet_id,
            signer,
            breakdown.payout,
            breakdown.principal,
            breakdown.profit_share,
        )
        return ClaimResponse.from_breakdown(bet_id, breakdown)

    # ------------------------------------------------------------------
    # claim-creator-fee
    # ------------------------------------------------------------------

    async def claim_creator_fee(self, db: Any, signer: str, bet_id: int) -> CreatorFeeResponse:
        async with self._market_locks[bet_id]:
            try:
                market = await self._load_market(db, bet_id, for_update=True)
                registry = await self._load_registry(db)

                if signer != market.creator:
                    raise UnauthorizedError()
                if market.creator_fee_claimed:
                    raise AlreadyClaimedError()
                if not market.deadline.has_passed(self._clock.unix_timestamp()):
                    raise BetNotEndedError()
                if not market.complete:
                    raise BetNotCompleteError()

                market.creator_fee_claimed = True
                await self._repo.save_market(db, market)

                fee = creator_fee_for(market, registry.creator_fee_bps)
                if fee > 0:
                    await self._pay_from_vault(
                        db,
                        market.creator,
                        fee,
                        LedgerEntryType.CREATOR_FEE_OUT,
                        LedgerEntryType.CREATOR_FEE,
                        market,
                        "Creator fee",
                    )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Creator fee claimed: bet_id=%d creator=%s fee=%d", bet_id, signer, fee)
        return CreatorFeeResponse(bet_id=bet_id, fee=fee)
