"""003: create draws and draw_results

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE draws (
            id              BIGSERIAL    PRIMARY KEY,
            draw_date       DATE         NOT NULL,
            slot            VARCHAR(10)  NOT NULL,
            cutoff_at       TIMESTAMPTZ  NOT NULL,
            status          VARCHAR(10)  NOT NULL DEFAULT 'OPEN',
            winning_number  CHAR(3),
            settled_at      TIMESTAMPTZ,
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_draws_date_slot  UNIQUE (draw_date, slot),
            CONSTRAINT ck_draws_slot       CHECK (slot IN ('TWO_PM','FIVE_PM','NINE_PM')),
            CONSTRAINT ck_draws_status     CHECK (status IN ('OPEN','CLOSED','SETTLED')),
            CONSTRAINT ck_draws_winning_number CHECK (
                winning_number IS NULL OR winning_number ~ '^[0-9]{3}$'),
            CONSTRAINT ck_draws_settled_has_result CHECK (
                (status = 'SETTLED') = (winning_number IS NOT NULL AND settled_at IS NOT NULL))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_draws_updated_at
            BEFORE UPDATE ON draws
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # Status sweep scans OPEN draws by cutoff
    op.execute("""
        CREATE INDEX idx_draws_open_cutoff ON draws (cutoff_at) WHERE status = 'OPEN';
    """)

    op.execute("""
        CREATE TABLE draw_results (
            id              BIGSERIAL    PRIMARY KEY,
            draw_id         BIGINT       NOT NULL REFERENCES draws(id),
            winning_number  CHAR(3)      NOT NULL,
            input_by        VARCHAR(64)  NOT NULL,
            input_at        TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_draw_results_draw UNIQUE (draw_id)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS draw_results CASCADE;")
    op.execute("DROP TABLE IF EXISTS draws CASCADE;")
