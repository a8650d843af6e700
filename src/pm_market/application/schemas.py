"""Pydantic schemas for pm_market API.

Cursor format for markets (bet ids are sequential):
  {"bet_id": <last bet_id in page>}
  Encoded as Base64 JSON string. Pages run newest bet id first.

Title and description are plain strings here; their limits are enforced by
the domain so callers get the program's TitleTooLong/TitleEmpty codes
instead of a generic validation error.
"""

import base64
import json

from pydantic import BaseModel, Field

from src.pm_common.lamports import U64_MAX, lamports_to_display
from src.pm_market.domain.models import Entry, History, Market
from src.pm_market.domain.payout import PayoutBreakdown
from src.pm_market.domain.pricing import Quote

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(bet_id: int) -> str:
    return base64.b64encode(json.dumps({"bet_id": bet_id}).encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode cursor -> bet_id, or None on a missing or malformed cursor."""
    if cursor is None:
        return None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(data["bet_id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    title: str
    description: str
    end_timestamp: int = Field(..., ge=I64_MIN, le=I64_MAX, description="Negative = open-ended")
    referee: str = Field(..., min_length=1, max_length=64)


class UpdateMarketRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    end_timestamp: int | None = Field(None, ge=I64_MIN, le=I64_MAX)
    referee: str | None = Field(None, min_length=1, max_length=64)


class DepositRequest(BaseModel):
    is_yes: bool
    # zero is accepted here and rejected by the service as InvalidBet
    amount: int = Field(..., ge=0, le=U64_MAX)


class ResolveRequest(BaseModel):
    is_yes: bool


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketResponse(BaseModel):
    bet_id: int
    address: str
    creator: str
    referee: str
    title: str
    description: str
    share_uuid: str
    created_timestamp: int
    end_timestamp: int
    open_ended: bool
    initial_price: int
    scale_factor: int
    total_supply: int
    total_reserve: int
    yes_supply: int
    yes_reserve: int
    no_supply: int
    no_reserve: int
    complete: bool
    winner: str
    creator_fee_claimed: bool
    platform_fee_claimed: bool
    yes_price: int
    no_price: int
    total_reserve_display: str

    @classmethod
    def from_domain(cls, m: Market, yes_price: int, no_price: int) -> "MarketResponse":
        return cls(
            bet_id=m.bet_id,
            address=m.address,
            creator=m.creator,
            referee=m.referee,
            title=m.title,
            description=m.description,
            share_uuid=m.share_uuid,
            created_timestamp=m.created_timestamp,
            end_timestamp=m.end_timestamp,
            open_ended=m.is_open_ended(),
            initial_price=m.initial_price,
            scale_factor=m.scale_factor,
            total_supply=m.total_supply,
            total_reserve=m.total_reserve,
            yes_supply=m.yes_supply,
            yes_reserve=m.yes_reserve,
            no_supply=m.no_supply,
            no_reserve=m.no_reserve,
            complete=m.complete,
            winner=m.winner.value,
            creator_fee_claimed=m.creator_fee_claimed,
            platform_fee_claimed=m.platform_fee_claimed,
            yes_price=yes_price,
            no_price=no_price,
            total_reserve_display=lamports_to_display(m.total_reserve),
        )


class MarketListResponse(BaseModel):
    items: list[MarketResponse]
    next_cursor: str | None
    has_more: bool


class ProbabilityPointOut(BaseModel):
    timestamp: int
    yes_reserve: int
    no_reserve: int


class HistoryResponse(BaseModel):
    bet_id: int
    pool: str
    points: list[ProbabilityPointOut]

    @classmethod
    def from_domain(cls, h: History) -> "HistoryResponse":
        return cls(
            bet_id=h.bet_id,
            pool=h.pool,
            points=[
                ProbabilityPointOut(
                    timestamp=p.timestamp, yes_reserve=p.yes_reserve, no_reserve=p.no_reserve
                )
                for p in h.points
            ],
        )


class EntryResponse(BaseModel):
    address: str
    user: str
    bet_id: int
    deposited_sol_amount: int
    token_balance: int
    is_yes: bool
    is_claimed: bool

    @classmethod
    def from_domain(cls, e: Entry) -> "EntryResponse":
        return cls(
            address=e.address,
            user=e.user,
            bet_id=e.bet_id,
            deposited_sol_amount=e.deposited_sol_amount,
            token_balance=e.token_balance,
            is_yes=e.is_yes,
            is_claimed=e.is_claimed,
        )


class QuoteResponse(BaseModel):
    bet_id: int
    is_yes: bool
    amount: int
    token_amount: int
    yes_price: int
    no_price: int

    @classmethod
    def from_quote(cls, bet_id: int, is_yes: bool, amount: int, q: Quote) -> "QuoteResponse":
        return cls(
            bet_id=bet_id,
            is_yes=is_yes,
            amount=amount,
            token_amount=q.token_amount,
            yes_price=q.yes_price,
            no_price=q.no_price,
        )


class DepositResponse(BaseModel):
    bet_id: int
    sol_amount: int
    token_amount: int
    price: int
    entry: EntryResponse
    yes_reserve: int
    no_reserve: int


class ResolveResponse(BaseModel):
    bet_id: int
    winner: str
    platform_fee: int


class ClaimResponse(BaseModel):
    bet_id: int
    payout: int
    principal: int
    profit_share: int
    total: int
    creator_fee: int
    platform_fee: int
    winning_reserve: int
    winning_supply: int
    available_profit: int
    payout_display: str

    @classmethod
    def from_breakdown(cls, bet_id: int, b: PayoutBreakdown) -> "ClaimResponse":
        return cls(
            bet_id=bet_id,
            payout=b.payout,
            principal=b.principal,
            profit_share=b.profit_share,
            total=b.total,
            creator_fee=b.creator_fee,
            platform_fee=b.platform_fee,
            winning_reserve=b.winning_reserve,
            winning_supply=b.winning_supply,
            available_profit=b.available_profit,
            payout_display=lamports_to_display(b.payout),
        )


class CreatorFeeResponse(BaseModel):
    bet_id: int
    fee: int
