"""Initial schema: storefronts, products, variations, events, ticket types, attendees.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "storefronts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("default_currency", sa.String(3), nullable=False, server_default=sa.text("'AUD'")),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_storefronts_id", "storefronts", ["id"])

    # products.event_id has no foreign key: RSVP products are created before their event
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("bundle", sa.String(32), nullable=False, server_default=sa.text("'ticket'")),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("event_id", sa.Integer(), nullable=True),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.Column("storefront_id", sa.Integer(), sa.ForeignKey("storefronts.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_products_id", "products", ["id"])
    op.create_index("ix_products_event_id", "products", ["event_id"])

    # Variations are soft-deleted only (published = false); historic orders keep their SKU
    op.create_table(
        "product_variations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("handle", sa.Uuid(), nullable=False),
        sa.Column("sku", sa.String(255), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("price_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=True),
        sa.Column("event_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("handle", name="uq_product_variations_handle"),
        sa.UniqueConstraint("sku", name="uq_product_variations_sku"),
        sa.CheckConstraint("price_amount >= 0", name="check_variation_price_non_negative"),
    )
    op.create_index("ix_product_variations_id", "product_variations", ["id"])
    op.create_index("ix_product_variations_product_id", "product_variations", ["product_id"])
    # Hybrid detection and orphan retirement both read live variations per product
    op.create_index(
        "ix_product_variations_product_published", "product_variations", ["product_id", "published"]
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=True),
        sa.Column("bundle", sa.String(32), nullable=False, server_default=sa.text("'event'")),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=True),
        sa.Column("external_url", sa.String(2048), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rsvp_capacity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("rsvp_capacity >= 0", name="check_rsvp_capacity_non_negative"),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_owner_id", "events", ["owner_id"])
    op.create_index("ix_events_start_at", "events", ["start_at"])

    op.create_table(
        "ticket_type_configs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("label_mode", sa.String(10), nullable=False, server_default=sa.text("'preset'")),
        sa.Column("preset_key", sa.String(64), nullable=True),
        sa.Column("custom_label", sa.String(255), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("variation_handle", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        sa.CheckConstraint("capacity >= 0", name="check_ticket_capacity_non_negative"),
        sa.CheckConstraint("label_mode IN ('preset', 'custom')", name="check_ticket_label_mode"),
    )
    op.create_index("ix_ticket_type_configs_id", "ticket_type_configs", ["id"])
    op.create_index("ix_ticket_type_configs_event_id", "ticket_type_configs", ["event_id"])

    op.create_table(
        "event_attendees",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("source", sa.String(20), nullable=False, server_default=sa.text("'rsvp'")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'confirmed'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('confirmed', 'cancelled')", name="check_attendee_status"),
    )
    op.create_index("ix_event_attendees_id", "event_attendees", ["id"])
    op.create_index("ix_event_attendees_event_id", "event_attendees", ["event_id"])
    # Capacity checks count confirmed RSVPs per event
    op.create_index("ix_event_attendees_event_status", "event_attendees", ["event_id", "source", "status"])


def downgrade() -> None:
    op.drop_table("event_attendees")
    op.drop_table("ticket_type_configs")
    op.drop_table("events")
    op.drop_table("product_variations")
    op.drop_table("products")
    op.drop_table("storefronts")
