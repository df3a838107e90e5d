"""002: create agents and brokers tables

Revision ID: 002
Revises: 001
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE agents (
            id                  VARCHAR(64)  PRIMARY KEY DEFAULT gen_random_uuid()::text,
            name                VARCHAR(200) NOT NULL,
            commission_bps      INTEGER      NOT NULL DEFAULT 0,
            flat_commission     BIGINT       NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_agents_commission_bps CHECK (commission_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_agents_flat_gte_0     CHECK (flat_commission >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_agents_updated_at
            BEFORE UPDATE ON agents
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE agents IS 'Account holders — amounts in cents, rates in bps';")

    op.execute("""
        CREATE TABLE brokers (
            id                  VARCHAR(64)  PRIMARY KEY DEFAULT gen_random_uuid()::text,
            name                VARCHAR(200) NOT NULL,
            commission_type     VARCHAR(20)  NOT NULL DEFAULT 'both',
            commission_bps      INTEGER      NOT NULL DEFAULT 0,
            flat_commission     BIGINT       NOT NULL DEFAULT 0,
            referral_bps        INTEGER      NOT NULL DEFAULT 0,
            referral_flat       BIGINT       NOT NULL DEFAULT 0,
            special_scenarios   TEXT[]       NOT NULL DEFAULT '{}',
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_brokers_commission_type CHECK (commission_type IN ('percentage', 'flat', 'both')),
            CONSTRAINT ck_brokers_commission_bps  CHECK (commission_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_brokers_referral_bps    CHECK (referral_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_brokers_flats_gte_0     CHECK (flat_commission >= 0 AND referral_flat >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_brokers_updated_at
            BEFORE UPDATE ON brokers
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS brokers CASCADE;")
    op.execute("DROP TABLE IF EXISTS agents CASCADE;")
