"""004: create accounts table

Revision ID: 004
Revises: 003
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # status is derived on read; only the manual inactive override is stored
    op.execute("""
        CREATE TABLE accounts (
            id                  VARCHAR(64)  PRIMARY KEY DEFAULT gen_random_uuid()::text,
            kind                VARCHAR(10)  NOT NULL,
            agent_id            VARCHAR(64)  NOT NULL REFERENCES agents (id),
            broker_id           VARCHAR(64)  REFERENCES brokers (id),
            username            VARCHAR(200),
            website_url         VARCHAR(500),
            name                VARCHAR(200),
            deposit_amount      BIGINT,
            referral_bps        INTEGER,
            promo_amount        BIGINT       NOT NULL DEFAULT 0,
            assigned_player_id  VARCHAR(64)  REFERENCES players (id) ON DELETE SET NULL,
            inactive_override   BOOLEAN      NOT NULL DEFAULT FALSE,
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_accounts_kind CHECK (kind IN ('pph', 'legal')),
            CONSTRAINT ck_accounts_pph_identity CHECK (
                kind <> 'pph' OR (username IS NOT NULL AND website_url IS NOT NULL
                                  AND name IS NULL AND deposit_amount IS NULL)
            ),
            CONSTRAINT ck_accounts_legal_identity CHECK (
                kind <> 'legal' OR (name IS NOT NULL AND deposit_amount IS NOT NULL
                                    AND username IS NULL AND website_url IS NULL)
            ),
            CONSTRAINT ck_accounts_deposit_gte_0 CHECK (deposit_amount IS NULL OR deposit_amount >= 0),
            CONSTRAINT ck_accounts_promo_gte_0   CHECK (promo_amount >= 0),
            CONSTRAINT ck_accounts_referral_bps  CHECK (referral_bps IS NULL OR referral_bps BETWEEN 0 AND 10000)
        );
    """)
    op.execute("CREATE INDEX idx_accounts_agent ON accounts (agent_id);")
    op.execute("CREATE INDEX idx_accounts_broker ON accounts (broker_id);")
    op.execute("CREATE INDEX idx_accounts_player ON accounts (assigned_player_id);")
    op.execute("""
        CREATE TRIGGER trg_accounts_updated_at
            BEFORE UPDATE ON accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE accounts IS 'Betting accounts — amounts in cents, rates in bps';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
