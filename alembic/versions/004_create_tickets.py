"""004: create tickets and wagers

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE tickets (
            id              BIGSERIAL     PRIMARY KEY,
            ticket_number   VARCHAR(32)   NOT NULL,
            owner_id        VARCHAR(64)   NOT NULL REFERENCES accounts(id),
            draw_id         BIGINT        NOT NULL REFERENCES draws(id),
            total_stake     NUMERIC(14,2) NOT NULL,
            status          VARCHAR(10)   NOT NULL DEFAULT 'PENDING',
            created_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_tickets_number     UNIQUE (ticket_number),
            CONSTRAINT ck_tickets_stake_gt_0 CHECK (total_stake > 0),
            CONSTRAINT ck_tickets_status     CHECK (status IN ('PENDING','VALIDATED','CANCELLED'))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_tickets_updated_at
            BEFORE UPDATE ON tickets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_tickets_draw_status ON tickets (draw_id, status);")
    op.execute("CREATE INDEX idx_tickets_owner ON tickets (owner_id, id DESC);")

    op.execute("""
        CREATE TABLE wagers (
            id              BIGSERIAL     PRIMARY KEY,
            ticket_id       BIGINT        NOT NULL REFERENCES tickets(id) ON DELETE CASCADE,
            combination     CHAR(3)       NOT NULL,
            wager_type      VARCHAR(10)   NOT NULL,
            stake           NUMERIC(14,2) NOT NULL,
            CONSTRAINT uq_wagers_ticket_combo   UNIQUE (ticket_id, combination, wager_type),
            CONSTRAINT ck_wagers_combination    CHECK (combination ~ '^[0-9]{3}$'),
            CONSTRAINT ck_wagers_type           CHECK (wager_type IN ('STRAIGHT','POOLED')),
            CONSTRAINT ck_wagers_stake_gt_0     CHECK (stake > 0)
        );
    """)
    op.execute("CREATE INDEX idx_wagers_ticket ON wagers (ticket_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wagers CASCADE;")
    op.execute("DROP TABLE IF EXISTS tickets CASCADE;")
