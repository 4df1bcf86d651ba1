"""create organizations, items, stock movements and ad-hoc charges

Revision ID: 20241001_01
Revises:
Create Date: 2024-10-01
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20241001_01"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    uuid_type = sa.Uuid(as_uuid=True)

    op.create_table(
        "organizations",
        sa.Column("id", uuid_type, primary_key=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("billing_address", sa.String(512), nullable=True),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(32), nullable=True),
        sa.Column("company_reg_no", sa.String(64), nullable=True),
        sa.Column("date_joined", sa.Date(), nullable=True),
        # NULL -> default rate card
        sa.Column("pricing", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_organizations_created_at", "organizations", ["created_at"])

    op.create_table(
        "items",
        sa.Column("id", uuid_type, primary_key=True, nullable=False),
        sa.Column(
            "organization_id",
            uuid_type,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("warehouse", sa.String(128), nullable=False),
        sa.Column("brand", sa.String(255), nullable=True),
        sa.Column("description", sa.String(512), nullable=True),
        sa.Column("net_weight_volume", sa.String(64), nullable=True),
        sa.Column("uom", sa.String(16), nullable=False, server_default="Ctn"),
        sa.Column("length_cm", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("width_cm", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("height_cm", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("weight_kg", sa.Numeric(10, 3), nullable=False, server_default="0"),
        sa.Column("starting_stock", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("organization_id", "warehouse", "sku", name="uq_items_org_warehouse_sku"),
    )
    op.create_index("ix_items_organization_id", "items", ["organization_id"])
    op.create_index("ix_items_sku", "items", ["sku"])
    op.create_index("ix_items_created_at", "items", ["created_at"])

    op.create_table(
        "stock_ins",
        sa.Column("id", uuid_type, primary_key=True, nullable=False),
        sa.Column(
            "organization_id",
            uuid_type,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("arrival_date", sa.Date(), nullable=False),
        sa.Column("do_no", sa.String(64), nullable=True),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("warehouse", sa.String(128), nullable=False),
        sa.Column("uom", sa.String(16), nullable=False, server_default="Ctn"),
        sa.Column("arrived_qty", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_stock_ins_organization_id", "stock_ins", ["organization_id"])
    op.create_index("ix_stock_ins_arrival_date", "stock_ins", ["arrival_date"])
    op.create_index("ix_stock_ins_org_sku_wh", "stock_ins", ["organization_id", "sku", "warehouse"])

    op.create_table(
        "stock_outs",
        sa.Column("id", uuid_type, primary_key=True, nullable=False),
        sa.Column(
            "organization_id",
            uuid_type,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("do_no", sa.String(64), nullable=True),
        sa.Column("consignee_name", sa.String(255), nullable=True),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("warehouse", sa.String(128), nullable=False),
        sa.Column("uom", sa.String(16), nullable=False, server_default="Ctn"),
        sa.Column("ordered_qty", sa.Integer(), nullable=False),
        # snapshot: ordered_qty * item weight at creation time
        sa.Column("total_weight_kg", sa.Numeric(12, 3), nullable=False, server_default="0"),
        sa.Column("fulfillment_status", sa.String(16), nullable=False, server_default="Pending"),
        sa.Column("delivered_date", sa.Date(), nullable=True),
        sa.Column("delivered_by", sa.String(255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "fulfillment_status IN ('Pending', 'Delivered', 'Self collect')",
            name="ck_stock_outs_fulfillment_status",
        ),
    )
    op.create_index("ix_stock_outs_organization_id", "stock_outs", ["organization_id"])
    op.create_index("ix_stock_outs_order_date", "stock_outs", ["order_date"])
    op.create_index("ix_stock_outs_org_sku_wh", "stock_outs", ["organization_id", "sku", "warehouse"])

    op.create_table(
        "ad_hoc_charges",
        sa.Column("id", uuid_type, primary_key=True, nullable=False),
        sa.Column(
            "organization_id",
            uuid_type,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("charge_date", sa.Date(), nullable=False),
        sa.Column("charge_type", sa.String(16), nullable=False),  # Handling | Consumable
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("charge_type IN ('Handling', 'Consumable')", name="ck_ad_hoc_charges_charge_type"),
        sa.CheckConstraint("amount >= 0", name="ck_ad_hoc_charges_amount"),
    )
    op.create_index("ix_ad_hoc_charges_organization_id", "ad_hoc_charges", ["organization_id"])
    op.create_index("ix_ad_hoc_charges_charge_date", "ad_hoc_charges", ["charge_date"])


def downgrade() -> None:
    op.drop_index("ix_ad_hoc_charges_charge_date", table_name="ad_hoc_charges")
    op.drop_index("ix_ad_hoc_charges_organization_id", table_name="ad_hoc_charges")
    op.drop_table("ad_hoc_charges")

    op.drop_index("ix_stock_outs_org_sku_wh", table_name="stock_outs")
    op.drop_index("ix_stock_outs_order_date", table_name="stock_outs")
    op.drop_index("ix_stock_outs_organization_id", table_name="stock_outs")
    op.drop_table("stock_outs")

    op.drop_index("ix_stock_ins_org_sku_wh", table_name="stock_ins")
    op.drop_index("ix_stock_ins_arrival_date", table_name="stock_ins")
    op.drop_index("ix_stock_ins_organization_id", table_name="stock_ins")
    op.drop_table("stock_ins")

    op.drop_index("ix_items_created_at", table_name="items")
    op.drop_index("ix_items_sku", table_name="items")
    op.drop_index("ix_items_organization_id", table_name="items")
    op.drop_table("items")

    op.drop_index("ix_organizations_created_at", table_name="organizations")
    op.drop_table("organizations")
