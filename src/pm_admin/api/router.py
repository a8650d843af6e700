# src/pm_admin/api/router.py
"""Admin REST API."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from src.container import ServiceContainer, get_container
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_signer

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/invariants")
async def verify_invariants(
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[Any, Depends(get_db_session)],
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> ApiResponse:
    result = await container.admin.verify_all_invariants(db, signer)
    return success_response(result.model_dump())
