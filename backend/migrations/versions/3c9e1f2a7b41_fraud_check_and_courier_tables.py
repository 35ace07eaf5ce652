"""fraud check and courier tables

Revision ID: 3c9e1f2a7b41
Revises:
Create Date: 2026-10-16 10:12:44.118302

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9e1f2a7b41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())

    if "orders" not in tables:
        op.create_table(
            "orders",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("order_id", sa.String(length=64), nullable=False),
            sa.Column("customer_name", sa.String(length=120), nullable=False, server_default=""),
            sa.Column("phone", sa.String(length=32), nullable=False),
            sa.Column("address", sa.String(length=400), nullable=False, server_default=""),
            sa.Column("items", sa.JSON(), nullable=False),
            sa.Column("total", sa.Float(), nullable=False, server_default="0"),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
            sa.Column("fraud_checked", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("fraud_check_result", sa.JSON(), nullable=True),
            sa.Column("fraud_check_at", sa.DateTime(), nullable=True),
            sa.Column("steadfast_consignment_id", sa.Integer(), nullable=True),
            sa.Column("steadfast_tracking_code", sa.String(length=64), nullable=True),
            sa.Column("steadfast_status", sa.String(length=64), nullable=True),
            sa.Column("steadfast_sent_at", sa.DateTime(), nullable=True),
            sa.Column("steadfast_checked_at", sa.DateTime(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.Column("version_id", sa.Integer(), nullable=False, server_default="1"),
        )
        op.create_index("ix_orders_order_id", "orders", ["order_id"], unique=True)
        op.create_index("ix_orders_phone", "orders", ["phone"])
        op.create_index("ix_orders_status", "orders", ["status"])
        op.create_index("ix_orders_steadfast_consignment_id", "orders", ["steadfast_consignment_id"])

    if "order_events" not in tables:
        op.create_table(
            "order_events",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
            sa.Column("event", sa.String(length=64), nullable=False),
            sa.Column("note", sa.String(length=250), nullable=True),
            sa.Column("idempotency_key", sa.String(length=160), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_order_events_order_id", "order_events", ["order_id"])
        op.create_index("ix_order_events_idempotency_key", "order_events", ["idempotency_key"], unique=True)

    if "modules" not in tables:
        op.create_table(
            "modules",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("module_id", sa.String(length=64), nullable=False),
            sa.Column("name", sa.String(length=120), nullable=False, server_default=""),
            sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("settings", sa.JSON(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_modules_module_id", "modules", ["module_id"], unique=True)


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = set(insp.get_table_names())
    if "modules" in tables:
        op.drop_table("modules")
    if "order_events" in tables:
        op.drop_table("order_events")
    if "orders" in tables:
        op.drop_table("orders")
