"""002: create accounts and balance_transactions

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Account rows are provisioned by the terminal/user service; this engine
    # only reads role/upline and moves available_balance.
    op.execute("""
        CREATE TABLE accounts (
            id                  VARCHAR(64)   PRIMARY KEY,
            username            VARCHAR(64)   NOT NULL,
            role                VARCHAR(20)   NOT NULL,
            upline_id           VARCHAR(64)   REFERENCES accounts(id),
            available_balance   NUMERIC(14,2) NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_accounts_username         UNIQUE (username),
            CONSTRAINT ck_accounts_available_gte_0  CHECK (available_balance >= 0),
            CONSTRAINT ck_accounts_role             CHECK (role IN (
                'AGENT','COORDINATOR','AREA_COORDINATOR','ADMIN','SUPERADMIN'))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_accounts_updated_at
            BEFORE UPDATE ON accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_accounts_upline ON accounts (upline_id);")

    op.execute("""
        CREATE TABLE balance_transactions (
            id              BIGSERIAL     PRIMARY KEY,
            account_id      VARCHAR(64)   NOT NULL REFERENCES accounts(id),
            entry_type      VARCHAR(20)   NOT NULL,
            amount          NUMERIC(14,2) NOT NULL,
            balance_after   NUMERIC(14,2) NOT NULL,
            reference_id    VARCHAR(64)   NOT NULL,
            processed_by    VARCHAR(64)   NOT NULL,
            description     TEXT,
            created_at      TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_balance_tx_entry_type CHECK (entry_type IN (
                'TICKET_PURCHASE','TICKET_REFUND'))
        );
    """)
    op.execute("""
        CREATE INDEX idx_balance_tx_account ON balance_transactions (account_id, id DESC);
    """)
    op.execute("COMMENT ON TABLE balance_transactions IS 'Append-only; amounts in pesos, 2 places';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS balance_transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
