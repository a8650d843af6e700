"""008: create program_events table

Revision ID: 008
Revises: 007
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE program_events (
            id          BIGSERIAL       PRIMARY KEY,
            bet_id      NUMERIC(20, 0)  NOT NULL,
            event_type  VARCHAR(20)     NOT NULL,
            payload     JSONB           NOT NULL,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_program_events_type CHECK (
                event_type IN ('CreateEvent', 'DepositEvent', 'CompleteEvent')
            )
        );
    """)
    op.execute("CREATE INDEX idx_program_events_bet ON program_events (bet_id, id);")
    op.execute("COMMENT ON TABLE program_events IS 'Append-only event log for indexers';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS program_events CASCADE;")
