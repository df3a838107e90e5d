"""003: create players table

Revision ID: 003
Revises: 002
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE players (
            id                  VARCHAR(64)  PRIMARY KEY DEFAULT gen_random_uuid()::text,
            email               VARCHAR(320) NOT NULL,
            name                VARCHAR(200) NOT NULL,
            commission_bps      INTEGER      NOT NULL DEFAULT 0,
            status              VARCHAR(20)  NOT NULL DEFAULT 'pending',
            auth_uid            VARCHAR(128),
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_players_status         CHECK (status IN ('pending', 'active')),
            CONSTRAINT ck_players_commission_bps CHECK (commission_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_players_active_has_uid CHECK (status = 'pending' OR auth_uid IS NOT NULL)
        );
    """)
    op.execute("CREATE UNIQUE INDEX uq_players_email_lower ON players (LOWER(email));")
    op.execute("CREATE UNIQUE INDEX uq_players_auth_uid ON players (auth_uid) WHERE auth_uid IS NOT NULL;")
    op.execute("""
        CREATE TRIGGER trg_players_updated_at
            BEFORE UPDATE ON players
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS players CASCADE;")
