from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def _account_columns():
    return [
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("number", sa.String(length=30), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("initial_balance", sa.Numeric(15, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
    ]

def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="viewer"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "account_receivables",
        sa.Column("ar_id", sa.String(length=20), nullable=False),
        sa.Column("cnic", sa.String(length=25), nullable=True),
        *_account_columns(),
    )
    op.create_index("ix_account_receivables_ar_id", "account_receivables", ["ar_id"], unique=True)
    op.create_index("ix_account_receivables_name", "account_receivables", ["name"], unique=False)

    op.create_table(
        "account_payables",
        sa.Column("ap_id", sa.String(length=20), nullable=False),
        *_account_columns(),
    )
    op.create_index("ix_account_payables_ap_id", "account_payables", ["ap_id"], unique=True)
    op.create_index("ix_account_payables_name", "account_payables", ["name"], unique=False)

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("type", sa.String(length=48), nullable=False),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("total_amount", sa.Numeric(15, 2), nullable=True),
        sa.Column("paid_amount", sa.Numeric(15, 2), nullable=True),
        sa.Column("remaining_payment", sa.Numeric(15, 2), nullable=True),
        sa.Column("mode_of_payment", sa.String(length=16), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "account_receivable_id",
            sa.String(length=32),
            sa.ForeignKey("account_receivables.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "account_payable_id",
            sa.String(length=32),
            sa.ForeignKey("account_payables.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
    )
    op.create_index("ix_transactions_type", "transactions", ["type"], unique=False)
    op.create_index("ix_transactions_date", "transactions", ["date"], unique=False)
    op.create_index("ix_transactions_date_created", "transactions", ["date", "created_at"], unique=False)
    op.create_index("ix_transactions_account_receivable_id", "transactions", ["account_receivable_id"], unique=False)
    op.create_index("ix_transactions_account_payable_id", "transactions", ["account_payable_id"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(length=32), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
    )
    for col in ("created_at", "username", "action", "entity_type", "entity_id"):
        op.create_index(f"ix_audit_logs_{col}", "audit_logs", [col])
    op.create_index("ix_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"])

def downgrade():
    op.drop_index("ix_audit_logs_entity", table_name="audit_logs")
    for col in ("entity_id", "entity_type", "action", "username", "created_at"):
        op.drop_index(f"ix_audit_logs_{col}", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_transactions_account_payable_id", table_name="transactions")
    op.drop_index("ix_transactions_account_receivable_id", table_name="transactions")
    op.drop_index("ix_transactions_date_created", table_name="transactions")
    op.drop_index("ix_transactions_date", table_name="transactions")
    op.drop_index("ix_transactions_type", table_name="transactions")
    op.drop_table("transactions")

    op.drop_index("ix_account_payables_name", table_name="account_payables")
    op.drop_index("ix_account_payables_ap_id", table_name="account_payables")
    op.drop_table("account_payables")

    op.drop_index("ix_account_receivables_name", table_name="account_receivables")
    op.drop_index("ix_account_receivables_ar_id", table_name="account_receivables")
    op.drop_table("account_receivables")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
