"""002: create bids table

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
    op.execute("""
        CREATE TABLE bids (
            id              VARCHAR(26)     PRIMARY KEY,
            listing_id      VARCHAR(26)     NOT NULL REFERENCES listings (id),
            bidder_id       VARCHAR(64)     NOT NULL,
            amount          BIGINT          NOT NULL,
            placed_at       TIMESTAMPTZ     NOT NULL,
            status          VARCHAR(10)     NOT NULL DEFAULT 'ACTIVE',
            CONSTRAINT ck_bids_amount  CHECK (amount > 0),
            CONSTRAINT ck_bids_status  CHECK (status IN ('ACTIVE', 'OUTBID', 'WINNING', 'VOID'))
        );
    """)
    op.execute("CREATE INDEX idx_bids_listing_rank ON bids (listing_id, amount DESC, placed_at ASC);")
    # At most one WINNING bid per listing, enforced by the database as well
    op.execute("""
        CREATE UNIQUE INDEX uq_bids_one_winning
        ON bids (listing_id)
        WHERE status = 'WINNING';
    """)
    op.execute("COMMENT ON TABLE bids IS 'Append-only bid ledger; rows are never deleted, only re-statused';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bids CASCADE;")
