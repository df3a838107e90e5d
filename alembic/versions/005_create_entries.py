"""005: create entries table

Revision ID: 005
Revises: 004
Create Date: 2026-09-28
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE entries (
            id                  VARCHAR(64)  PRIMARY KEY DEFAULT gen_random_uuid()::text,
            account_id          VARCHAR(64)  NOT NULL REFERENCES accounts (id) ON DELETE CASCADE,
            player_id           VARCHAR(64)  NOT NULL REFERENCES players (id),
            entry_date          DATE         NOT NULL,
            starting_balance    BIGINT       NOT NULL,
            ending_balance      BIGINT       NOT NULL,
            refill_amount       BIGINT       NOT NULL DEFAULT 0,
            withdrawal          BIGINT       NOT NULL DEFAULT 0,
            account_status      VARCHAR(10)  NOT NULL DEFAULT 'active',
            notes               TEXT,
            compliance_review   VARCHAR(200) NOT NULL DEFAULT 'Requested Document',
            tax_rate_bps        INTEGER      NOT NULL,
            profit_loss         BIGINT       NOT NULL,
            clicker_amount      BIGINT       NOT NULL,
            acc_holder_amount   BIGINT       NOT NULL,
            broker_amount       BIGINT       NOT NULL,
            taxable_amount      BIGINT       NOT NULL,
            referral_amount     BIGINT       NOT NULL,
            company_amount      BIGINT       NOT NULL,
            clicker_settled     BOOLEAN      NOT NULL DEFAULT FALSE,
            acc_holder_settled  BOOLEAN      NOT NULL DEFAULT FALSE,
            broker_settled      BOOLEAN      NOT NULL DEFAULT FALSE,
            company_settled     BOOLEAN      NOT NULL DEFAULT FALSE,
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_entries_account_date     UNIQUE (account_id, entry_date),
            CONSTRAINT ck_entries_account_status   CHECK (account_status IN ('active', 'inactive')),
            CONSTRAINT ck_entries_refill_gte_0     CHECK (refill_amount >= 0),
            CONSTRAINT ck_entries_withdrawal_gte_0 CHECK (withdrawal >= 0),
            CONSTRAINT ck_entries_tax_rate_bps     CHECK (tax_rate_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_entries_split_conserves  CHECK (
                clicker_amount + acc_holder_amount + broker_amount
                + taxable_amount + referral_amount + company_amount = profit_loss
            )
        );
    """)
    op.execute("CREATE INDEX idx_entries_date ON entries (entry_date DESC, id DESC);")
    op.execute("CREATE INDEX idx_entries_player_date ON entries (player_id, entry_date DESC);")
    op.execute("""
        CREATE TRIGGER trg_entries_updated_at
            BEFORE UPDATE ON entries
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE entries IS 'Daily balance entries with their settlement split — cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS entries CASCADE;")
