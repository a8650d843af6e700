"""Pydantic schemas for pm_registry API."""

from pydantic import BaseModel, Field

from src.pm_common.lamports import U64_MAX
from src.pm_registry.domain.models import GlobalRegistry


class UpdateRegistryRequest(BaseModel):
    owner: str = Field(..., min_length=1, max_length=64)
    initial_price: int = Field(..., ge=0, le=U64_MAX)
    scale_factor: int = Field(..., ge=0, le=U64_MAX)
    creator_fee_bps: int = Field(..., ge=0, le=U64_MAX)
    platform_fee_bps: int = Field(..., ge=0, le=U64_MAX)


class RegistryResponse(BaseModel):
    initialized: bool
    owner: str
    initial_price: int
    scale_factor: int
    current_bet_id: int
    creator_fee_bps: int
    platform_fee_bps: int

    @classmethod
    def from_domain(cls, r: GlobalRegistry) -> "RegistryResponse":
        return cls(
            initialized=r.initialized,
            owner=r.owner,
            initial_price=r.initial_price,
            scale_factor=r.scale_factor,
            current_bet_id=r.current_bet_id,
            creator_fee_bps=r.creator_fee_bps,
            platform_fee_bps=r.platform_fee_bps,
        )
