"""003: create game_config singleton table

Revision ID: 003
Revises: 002
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE game_config (
            id                  SMALLINT        PRIMARY KEY,
            admin               VARCHAR(64)     NOT NULL,
            treasury            VARCHAR(64)     NOT NULL,
            fee_bps             INTEGER         NOT NULL,
            referrer_fee_bps    INTEGER         NOT NULL,
            min_bet             NUMERIC(20, 0)  NOT NULL,
            max_bet             NUMERIC(20, 0)  NOT NULL,
            round_counter       NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            version             BIGINT          NOT NULL DEFAULT 1,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_game_config_singleton CHECK (id = 1),
            CONSTRAINT ck_game_config_fees CHECK (
                referrer_fee_bps >= 0
                AND referrer_fee_bps <= fee_bps
                AND fee_bps <= 10000
            ),
            CONSTRAINT ck_game_config_limits CHECK (
                min_bet >= 0
                AND min_bet < max_bet
                AND max_bet <= 18446744073709551615
            ),
            CONSTRAINT ck_game_config_counter CHECK (round_counter >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_game_config_updated_at
            BEFORE UPDATE ON game_config
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS game_config CASCADE;")
