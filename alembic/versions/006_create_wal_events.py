"""006: create wal_events table

Revision ID: 006
Revises: 005
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wal_events (
            id              BIGSERIAL       PRIMARY KEY,
            round_id        BIGINT,
            event_type      VARCHAR(30)     NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wal_event_type CHECK (
                event_type IN (
                    'CONFIG_UPDATED',
                    'ROUND_STARTED',
                    'BET_PLACED',
                    'REFERRER_PAID',
                    'ROUND_SETTLED',
                    'PAYOUT_PROCESSED'
                )
            )
        );
    """)
    op.execute("CREATE INDEX idx_wal_round_time ON wal_events (round_id, created_at);")
    op.execute("COMMENT ON TABLE wal_events IS 'Domain event log, append-only';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wal_events CASCADE;")
