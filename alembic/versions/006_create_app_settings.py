"""006: create app_settings table

Revision ID: 006
Revises: 005
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE app_settings (
            id                  SMALLINT     PRIMARY KEY DEFAULT 1,
            tax_rate_bps        INTEGER      NOT NULL,
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_app_settings_singleton CHECK (id = 1),
            CONSTRAINT ck_app_settings_tax_rate  CHECK (tax_rate_bps BETWEEN 0 AND 10000)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_app_settings_updated_at
            BEFORE UPDATE ON app_settings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("INSERT INTO app_settings (id, tax_rate_bps) VALUES (1, 1000);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS app_settings CASCADE;")
