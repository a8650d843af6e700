"""006: create market_histories table

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_histories (
            bet_id      NUMERIC(20, 0)  PRIMARY KEY REFERENCES markets (bet_id),
            pool        VARCHAR(64)     NOT NULL,
            points      JSONB           NOT NULL DEFAULT '[]'::jsonb,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_histories_cap CHECK (jsonb_array_length(points) <= 40)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_market_histories_updated_at
            BEFORE UPDATE ON market_histories
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE market_histories IS 'Last 40 probability points per market, oldest first';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_histories CASCADE;")
