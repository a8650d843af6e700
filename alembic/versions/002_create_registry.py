"""002: create registry table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE registry (
            seed                VARCHAR(16)     PRIMARY KEY,
            initialized         BOOLEAN         NOT NULL DEFAULT FALSE,
            owner               VARCHAR(64)     NOT NULL,
            initial_price       NUMERIC(20, 0)  NOT NULL,
            scale_factor        NUMERIC(20, 0)  NOT NULL,
            current_bet_id      NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            creator_fee_bps     NUMERIC(20, 0)  NOT NULL,
            platform_fee_bps    NUMERIC(20, 0)  NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_registry_fee_sum CHECK (creator_fee_bps + platform_fee_bps < 10000)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_registry_updated_at
            BEFORE UPDATE ON registry
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE registry IS 'Global registry singleton, keyed by seed ''main''';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS registry CASCADE;")
