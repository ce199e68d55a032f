"""007: seed default payout schedule and bet limits

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO payout_configurations (wager_type, multiplier, double_multiplier, updated_by)
        VALUES ('STRAIGHT', 450, NULL, 'SYSTEM'),
               ('POOLED',    75,  150, 'SYSTEM');
    """)
    op.execute("""
        INSERT INTO bet_limits (wager_type, limit_amount, updated_by)
        VALUES ('STRAIGHT', 1000.00, 'SYSTEM'),
               ('POOLED',   1000.00, 'SYSTEM');
    """)


def downgrade() -> None:
    op.execute("DELETE FROM bet_limits WHERE updated_by = 'SYSTEM';")
    op.execute("DELETE FROM payout_configurations WHERE updated_by = 'SYSTEM';")
