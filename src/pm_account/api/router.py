"""pm_account REST API — lamport wallet of the authenticated signer."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request

from src.container import ServiceContainer, get_container
from src.pm_account.application.schemas import AirdropRequest
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_signer

router = APIRouter(prefix="/account", tags=["account"])


@router.get("/balance")
async def get_balance(
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
    request: Request,
) -> ApiResponse:
    data = await container.accounts.get_balance(db, signer)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/airdrop")
async def airdrop(
    body: AirdropRequest,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
    request: Request,
) -> ApiResponse:
    data = await container.accounts.airdrop(db, signer, body.amount)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/ledger")
async def list_ledger(
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    entry_type: str | None = Query(None, description="Filter by LedgerEntryType"),
) -> ApiResponse:
    data = await container.accounts.list_ledger(db, signer, cursor, limit, entry_type)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
