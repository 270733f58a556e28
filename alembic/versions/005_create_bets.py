"""005: create bets table

Revision ID: 005
Revises: 004
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bets (
            id                  BIGSERIAL       PRIMARY KEY,
            round_id            BIGINT          NOT NULL REFERENCES rounds (round_id),
            bet_index           BIGINT          NOT NULL,
            bettor              VARCHAR(64)     NOT NULL,
            side                SMALLINT        NOT NULL,
            amount              NUMERIC(20, 0)  NOT NULL,
            original_amount     NUMERIC(20, 0)  NOT NULL,
            bet_time            BIGINT          NOT NULL,
            weight              SMALLINT        NOT NULL,
            paid_out            BOOLEAN         NOT NULL DEFAULT FALSE,
            referrer            VARCHAR(64),
            payout              NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_bets_round_index UNIQUE (round_id, bet_index),
            CONSTRAINT ck_bets_side CHECK (side IN (0, 1)),
            CONSTRAINT ck_bets_weight CHECK (weight IN (100, 115, 130, 150)),
            CONSTRAINT ck_bets_amounts CHECK (
                amount >= 0 AND amount <= original_amount AND payout >= 0
            ),
            CONSTRAINT ck_bets_no_self_referral CHECK (
                referrer IS NULL OR referrer <> bettor
            ),
            CONSTRAINT ck_bets_unpaid_zero CHECK (paid_out OR payout = 0)
        );
    """)
    op.execute("CREATE INDEX idx_bets_bettor ON bets (bettor, id DESC);")
    op.execute("""
        CREATE INDEX idx_bets_unpaid ON bets (round_id, bet_index)
        WHERE paid_out = FALSE;
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
