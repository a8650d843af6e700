"""RegistryRepository — one row in `registry`, keyed by the seed "main"."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.seeds import REGISTRY_SEED
from src.pm_registry.domain.models import GlobalRegistry

_SEED = REGISTRY_SEED.decode()

_GET_REGISTRY_SQL = text("""
    SELECT initialized, owner, initial_price, scale_factor,
           current_bet_id, creator_fee_bps, platform_fee_bps
    FROM registry
    WHERE seed = :seed
""")

_GET_REGISTRY_FOR_UPDATE_SQL = text("""
    SELECT initialized, owner, initial_price, scale_factor,
           current_bet_id, creator_fee_bps, platform_fee_bps
    FROM registry
    WHERE seed = :seed
    FOR UPDATE
""")

_UPSERT_REGISTRY_SQL = text("""
    INSERT INTO registry
        (seed, initialized, owner, initial_price, scale_factor,
         current_bet_id, creator_fee_bps, platform_fee_bps)
    VALUES
        (:seed, :initialized, :owner, :initial_price, :scale_factor,
         :current_bet_id, :creator_fee_bps, :platform_fee_bps)
    ON CONFLICT (seed) DO UPDATE
        SET initialized      = EXCLUDED.initialized,
            owner            = EXCLUDED.owner,
            initial_price    = EXCLUDED.initial_price,
            scale_factor     = EXCLUDED.scale_factor,
            current_bet_id   = EXCLUDED.current_bet_id,
            creator_fee_bps  = EXCLUDED.creator_fee_bps,
            platform_fee_bps = EXCLUDED.platform_fee_bps,
            updated_at       = NOW()
""")


def _row_to_registry(row: object) -> GlobalRegistry:
    return GlobalRegistry(
        initialized=row.initialized,  # type: ignore[attr-defined]
        owner=row.owner,  # type: ignore[attr-defined]
        initial_price=int(row.initial_price),  # type: ignore[attr-defined]
        scale_factor=int(row.scale_factor),  # type: ignore[attr-defined]
        current_bet_id=int(row.current_bet_id),  # type: ignore[attr-defined]
        creator_fee_bps=int(row.creator_fee_bps),  # type: ignore[attr-defined]
        platform_fee_bps=int(row.platform_fee_bps),  # type: ignore[attr-defined]
    )


class RegistryRepository:
    async def get_registry(
        self, db: AsyncSession, for_update: bool = False
    ) -> GlobalRegistry | None:
        sql = _GET_REGISTRY_FOR_UPDATE_SQL if for_update else _GET_REGISTRY_SQL
        result = await db.execute(sql, {"seed": _SEED})
        row = result.fetchone()
        return _row_to_registry(row) if row else None

    async def save_registry(self, db: AsyncSession, registry: GlobalRegistry) -> None:
        await db.execute(
            _UPSERT_REGISTRY_SQL,
            {
                "seed": _SEED,
                "initialized": registry.initialized,
                "owner": registry.owner,
                "initial_price": registry.initial_price,
                "scale_factor": registry.scale_factor,
                "current_bet_id": registry.current_bet_id,
                "creator_fee_bps": registry.creator_fee_bps,
                "platform_fee_bps": registry.platform_fee_bps,
            },
        )
