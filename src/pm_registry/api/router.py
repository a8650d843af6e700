"""pm_registry REST endpoints.

POST /registry/init   — init-registry (caller becomes owner)
PUT  /registry        — update-registry (owner only)
GET  /registry        — current registry values
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from src.container import ServiceContainer, get_container
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_signer
from src.pm_registry.application.schemas import UpdateRegistryRequest

router = APIRouter(prefix="/registry", tags=["registry"])


@router.post("/init")
async def init_registry(
    request: Request,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> ApiResponse:
    result = await container.registry.init_registry(db, signer)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.put("")
async def update_registry(
    body: UpdateRegistryRequest,
    request: Request,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> ApiResponse:
    result = await container.registry.update_registry(db, signer, body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def get_registry(
    request: Request,
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> ApiResponse:
    result = await container.registry.get_registry(db)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
