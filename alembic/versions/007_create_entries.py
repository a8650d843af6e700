"""007: create entries table

Revision ID: 007
Revises: 006
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE entries (
            bet_id                  NUMERIC(20, 0)  NOT NULL REFERENCES markets (bet_id),
            user_address            VARCHAR(64)     NOT NULL,
            address                 VARCHAR(64)     NOT NULL,
            deposited_sol_amount    NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            token_balance           NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            is_yes                  BOOLEAN         NOT NULL DEFAULT TRUE,
            is_claimed              BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (bet_id, user_address),
            CONSTRAINT uq_entries_address UNIQUE (address)
        );
    """)
    op.execute("CREATE INDEX idx_entries_user ON entries (user_address);")
    op.execute("""
        CREATE TRIGGER trg_entries_updated_at
            BEFORE UPDATE ON entries
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE entries IS 'Per-(market, user) position';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS entries CASCADE;")
