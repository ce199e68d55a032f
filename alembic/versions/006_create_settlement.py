"""006: create winning_records and payout_configurations

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE winning_records (
            id              BIGSERIAL     PRIMARY KEY,
            ticket_id       BIGINT        NOT NULL REFERENCES tickets(id),
            draw_id         BIGINT        NOT NULL REFERENCES draws(id),
            prize_amount    NUMERIC(14,2) NOT NULL,
            created_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_winning_records_ticket_draw UNIQUE (ticket_id, draw_id),
            CONSTRAINT ck_winning_records_prize_gt_0  CHECK (prize_amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_winning_records_draw ON winning_records (draw_id);")
    op.execute("CREATE INDEX idx_winning_records_created ON winning_records (created_at);")

    # POOLED: multiplier = 3 distinct digits, double_multiplier = exactly 2 distinct
    op.execute("""
        CREATE TABLE payout_configurations (
            wager_type          VARCHAR(10)   PRIMARY KEY,
            multiplier          NUMERIC(10,2) NOT NULL,
            double_multiplier   NUMERIC(10,2),
            is_active           BOOLEAN       NOT NULL DEFAULT TRUE,
            updated_by          VARCHAR(64),
            created_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_payout_type        CHECK (wager_type IN ('STRAIGHT','POOLED')),
            CONSTRAINT ck_payout_gt_0        CHECK (multiplier > 0),
            CONSTRAINT ck_payout_double_gt_0 CHECK (double_multiplier IS NULL OR double_multiplier > 0)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payout_configurations CASCADE;")
    op.execute("DROP TABLE IF EXISTS winning_records CASCADE;")
