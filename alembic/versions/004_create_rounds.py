"""004: create rounds table

Revision ID: 004
Revises: 003
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE rounds (
            round_id                BIGINT          PRIMARY KEY,
            asset_symbol            VARCHAR(16)     NOT NULL,
            start_price             BIGINT          NOT NULL,
            end_price               BIGINT          NOT NULL DEFAULT 0,
            start_time              BIGINT          NOT NULL,
            betting_end_time        BIGINT          NOT NULL,
            end_time                BIGINT          NOT NULL,
            status                  VARCHAR(10)     NOT NULL DEFAULT 'OPEN',
            left_pool               NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            right_pool              NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            left_weighted_pool      NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            right_weighted_pool     NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            bet_count               BIGINT          NOT NULL DEFAULT 0,
            payouts_processed       BIGINT          NOT NULL DEFAULT 0,
            winning_side            SMALLINT,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_rounds_status CHECK (
                status IN ('OPEN', 'LOCKED', 'SETTLING', 'SETTLED')
            ),
            CONSTRAINT ck_rounds_symbol_len CHECK (LENGTH(asset_symbol) BETWEEN 1 AND 16),
            CONSTRAINT ck_rounds_window CHECK (
                start_time <= betting_end_time AND betting_end_time <= end_time
            ),
            CONSTRAINT ck_rounds_pools_gte_0 CHECK (
                left_pool >= 0 AND right_pool >= 0
                AND left_weighted_pool >= 0 AND right_weighted_pool >= 0
            ),
            CONSTRAINT ck_rounds_counts CHECK (
                payouts_processed >= 0
                AND payouts_processed <= bet_count
                AND bet_count <= 4294967295
            ),
            CONSTRAINT ck_rounds_winning_side CHECK (
                winning_side IS NULL OR winning_side IN (0, 1)
            )
        );
    """)
    op.execute("CREATE INDEX idx_rounds_status ON rounds (status, round_id DESC);")
    op.execute("""
        CREATE TRIGGER trg_rounds_updated_at
            BEFORE UPDATE ON rounds
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS rounds CASCADE;")
