"""005: create markets table

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            bet_id                  NUMERIC(20, 0)  PRIMARY KEY,
            address                 VARCHAR(64)     NOT NULL,
            creator                 VARCHAR(64)     NOT NULL,
            referee                 VARCHAR(64)     NOT NULL,
            title                   VARCHAR(100)    NOT NULL,
            description             VARCHAR(500)    NOT NULL,
            share_uuid              VARCHAR(64)     NOT NULL,
            created_timestamp       BIGINT          NOT NULL,
            end_timestamp           BIGINT          NOT NULL,
            initial_price           NUMERIC(20, 0)  NOT NULL,
            scale_factor            NUMERIC(20, 0)  NOT NULL,
            total_supply            NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            total_reserve           NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            yes_supply              NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            yes_reserve             NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            no_supply               NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            no_reserve              NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            complete                BOOLEAN         NOT NULL DEFAULT FALSE,
            winner                  VARCHAR(3)      NOT NULL DEFAULT '',
            creator_fee_claimed     BOOLEAN         NOT NULL DEFAULT FALSE,
            platform_fee_claimed    BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_markets_address UNIQUE (address),
            CONSTRAINT ck_markets_winner CHECK (winner IN ('', 'yes', 'no')),
            CONSTRAINT ck_markets_supply_sum CHECK (total_supply = yes_supply + no_supply),
            CONSTRAINT ck_markets_reserve_sum CHECK (total_reserve = yes_reserve + no_reserve)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE markets IS 'One row per bet; end_timestamp < 0 means open-ended';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
