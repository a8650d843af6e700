"""pm_market REST endpoints.

POST  /markets                              — create-market
GET   /markets                              — list with cursor pagination
GET   /markets/{bet_id}                     — detail incl. current prices
PATCH /markets/{bet_id}                     — update-market
GET   /markets/{bet_id}/history             — probability history
GET   /markets/{bet_id}/quote               — tokens for a hypothetical deposit
POST  /markets/{bet_id}/entries             — open-entry
GET   /markets/{bet_id}/entries/me          — caller's entry
POST  /markets/{bet_id}/deposits            — deposit
POST  /markets/{bet_id}/resolve             — resolve (referee or owner)
POST  /markets/{bet_id}/claim               — winner payout
POST  /markets/{bet_id}/creator-fee/claim   — creator fee
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, Request
from pydantic import BaseModel

from src.container import ServiceContainer, get_container
from src.pm_common.database import get_db_session
from src.pm_common.lamports import U64_MAX
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_signer
from src.pm_market.application.schemas import (
    CreateMarketRequest,
    DepositRequest,
    ResolveRequest,
    UpdateMarketRequest,
)

router = APIRouter(prefix="/markets", tags=["markets"])

BetId = Annotated[int, Path(ge=0, le=U64_MAX)]
Signer = Annotated[str, Depends(get_current_signer)]
Db = Annotated[Any, Depends(get_db_session)]
Container = Annotated[ServiceContainer, Depends(get_container)]


def _respond(request: Request, data: BaseModel) -> ApiResponse:
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("")
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    signer: Signer,
    db: Db,
    container: Container,
) -> ApiResponse:
    return _respond(request, await container.markets.create_market(db, signer, body))


@router.get("")
async def list_markets(
    request: Request,
    db: Db,
    container: Container,
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    return _respond(request, await container.markets.list_markets(db, cursor, limit))


@router.get("/{bet_id}")
async def get_market(bet_id: BetId, request: Request, db: Db, container: Container) -> ApiResponse:
    return _respond(request, await container.markets.get_market(db, bet_id))


@router.patch("/{bet_id}")
async def update_market(
    bet_id: BetId,
    body: UpdateMarketRequest,
    request: Request,
    signer: Signer,
    db: Db,
    container: Container,
) -> ApiResponse:
    return _respond(request, await container.markets.update_market(db, signer, bet_id, body))


@router.get("/{bet_id}/history")
async def get_history(
    bet_id: BetId, request: Request, db: Db, container: Container
) -> ApiResponse:
    return _respond(request, await container.markets.get_history(db, bet_id))


@router.get("/{bet_id}/quote")
async def quote(
    bet_id: BetId,
    request: Request,
    db: Db,
    container: Container,
    is_yes: bool = Query(...),
    amount: int = Query(..., ge=1, le=U64_MAX),
) -> ApiResponse:
    return _respond(request, await container.markets.quote(db, bet_id, is_yes, amount))


@router.post("/{bet_id}/entries")
async def open_entry(
    bet_id: BetId, request: Request, signer: Signer, db: Db, container: Container
) -> ApiResponse:
    return _respond(request, await container.markets.open_entry(db, signer, bet_id))


@router.get("/{bet_id}/entries/me")
async def get_my_entry(
    bet_id: BetId, request: Request, signer: Signer, db: Db, container: Container
) -> ApiResponse:
    return _respond(request, await container.markets.get_entry(db, bet_id, signer))


@router.post("/{bet_id}/deposits")
async def deposit(
    bet_id: BetId,
    body: DepositRequest,
    request: Request,
    signer: Signer,
    db: Db,
    container: Container,
) -> ApiResponse:
    result = await container.markets.deposit(db, signer, bet_id, body.is_yes, body.amount)
    return _respond(request, result)


@router.post("/{bet_id}/resolve")
async def resolve(
    bet_id: BetId,
    body: ResolveRequest,
    request: Request,
    signer: Signer,
    db: Db,
    container: Container,
) -> ApiResponse:
    return _respond(request, await container.markets.resolve(db, signer, bet_id, body.is_yes))


@router.post("/{bet_id}/claim")
async def claim(
    bet_id: BetId, request: Request, signer: Signer, db: Db, container: Container
) -> ApiResponse:
    return _respond(request, await container.markets.claim(db, signer, bet_id))


@router.post("/{bet_id}/creator-fee/claim")
async def claim_creator_fee(
    bet_id: BetId, request: Request, signer: Signer, db: Db, container: Container
) -> ApiResponse:
    return _respond(request, await container.markets.claim_creator_fee(db, signer, bet_id))
