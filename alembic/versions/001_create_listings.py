"""001: create listings table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_touch_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE listings (
            id                        VARCHAR(26)     PRIMARY KEY,
            seller_id                 VARCHAR(64)     NOT NULL,
            title                     VARCHAR(200)    NOT NULL,
            description               TEXT,
            base_price                BIGINT          NOT NULL DEFAULT 0,
            reserve_price             BIGINT,
            is_auction                BOOLEAN         NOT NULL DEFAULT FALSE,
            auction_end_time          TIMESTAMPTZ,
            auction_duration_seconds  INT,
            deleted_at                TIMESTAMPTZ,
            created_at                TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at                TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_base_price      CHECK (base_price >= 0),
            CONSTRAINT ck_listings_reserve_price   CHECK (reserve_price IS NULL OR reserve_price >= 0),
            CONSTRAINT ck_listings_duration        CHECK (
                auction_duration_seconds IS NULL OR auction_duration_seconds > 0
            ),
            CONSTRAINT ck_listings_fixed_no_end    CHECK (
                is_auction OR (auction_end_time IS NULL AND auction_duration_seconds IS NULL)
            ),
            CONSTRAINT ck_listings_auction_has_end CHECK (
                NOT is_auction OR auction_end_time IS NOT NULL
            )
        );
    """)
    op.execute("""
        CREATE INDEX idx_listings_auction_end
        ON listings (auction_end_time)
        WHERE is_auction AND deleted_at IS NULL;
    """)
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE listings IS 'Items for sale; auction state is derived from auction_end_time and the clock';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_touch_updated_at();")
