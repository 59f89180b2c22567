"""
Commerce tables: storefronts, products and their variations.

Key design decisions:
- Variations are never deleted; retired ones are kept with published = false
  so historic orders can still resolve their SKU
- `handle` is the stable reference stored on ticket type configs
- `products.event_id` is a plain column, not a foreign key: an RSVP product can
  exist before its event does, and the back-reference is repaired on sync
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from eventlane.db.base import Base, TimestampMixin


class StorefrontModel(Base, TimestampMixin):
    __tablename__ = "storefronts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    default_currency = Column(String(3), nullable=False, default="AUD")
    is_default = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Storefront(id={self.id}, name={self.name}, currency={self.default_currency})>"


class ProductModel(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    bundle = Column(String(32), nullable=False, default="ticket")
    published = Column(Boolean, nullable=False, default=True)
    event_id = Column(Integer, nullable=True, index=True)
    owner_id = Column(Integer, nullable=True)
    storefront_id = Column(Integer, ForeignKey("storefronts.id"), nullable=True)

    storefront = relationship("StorefrontModel", lazy="selectin")
    variations = relationship(
        "VariationModel",
        back_populates="product",
        order_by="VariationModel.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, title={self.title}, event={self.event_id})>"


class VariationModel(Base, TimestampMixin):
    __tablename__ = "product_variations"

    id = Column(Integer, primary_key=True, index=True)
    handle = Column(Uuid, nullable=False, unique=True)
    sku = Column(String(255), nullable=False, unique=True)
    title = Column(String(512), nullable=False)
    price_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    published = Column(Boolean, nullable=False, default=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    event_id = Column(Integer, nullable=True)

    product = relationship("ProductModel", back_populates="variations")

    __table_args__ = (
        CheckConstraint("price_amount >= 0", name="check_variation_price_non_negative"),
        Index("ix_product_variations_product_published", "product_id", "published"),
    )

    def __repr__(self) -> str:
        return f"<Variation(id={self.id}, sku={self.sku}, published={self.published})>"
