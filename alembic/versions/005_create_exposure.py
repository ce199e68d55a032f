"""005: create exposure_totals and bet limits

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE exposure_totals (
            draw_id         BIGINT        NOT NULL REFERENCES draws(id),
            wager_type      VARCHAR(10)   NOT NULL,
            combination     CHAR(3)       NOT NULL,
            cumulative      NUMERIC(14,2) NOT NULL DEFAULT 0,
            sold_out        BOOLEAN       NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            PRIMARY KEY (draw_id, wager_type, combination),
            CONSTRAINT ck_exposure_type          CHECK (wager_type IN ('STRAIGHT','POOLED')),
            CONSTRAINT ck_exposure_cumulative    CHECK (cumulative >= 0)
        );
    """)
    op.execute("""
        CREATE INDEX idx_exposure_sold_out ON exposure_totals (draw_id) WHERE sold_out;
    """)

    op.execute("""
        CREATE TABLE bet_limits (
            wager_type      VARCHAR(10)   PRIMARY KEY,
            limit_amount    NUMERIC(14,2) NOT NULL,
            is_active       BOOLEAN       NOT NULL DEFAULT TRUE,
            updated_by      VARCHAR(64),
            created_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bet_limits_type   CHECK (wager_type IN ('STRAIGHT','POOLED')),
            CONSTRAINT ck_bet_limits_gt_0   CHECK (limit_amount > 0)
        );
    """)

    op.execute("""
        CREATE TABLE bet_limits_per_draw (
            draw_id         BIGINT        NOT NULL REFERENCES draws(id),
            wager_type      VARCHAR(10)   NOT NULL,
            combination     CHAR(3)       NOT NULL,
            limit_amount    NUMERIC(14,2) NOT NULL,
            updated_by      VARCHAR(64),
            created_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            PRIMARY KEY (draw_id, wager_type, combination),
            CONSTRAINT ck_bet_limits_per_draw_type  CHECK (wager_type IN ('STRAIGHT','POOLED')),
            CONSTRAINT ck_bet_limits_per_draw_gt_0  CHECK (limit_amount > 0)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bet_limits_per_draw CASCADE;")
    op.execute("DROP TABLE IF EXISTS bet_limits CASCADE;")
    op.execute("DROP TABLE IF EXISTS exposure_totals CASCADE;")
