"""
Event, ticket type config and attendee tables.

Key design decisions:
- `event_type` is stored; the effective booking mode is derived and never stored
- Ticket type configs are ordered by `position` and deleted with their event
- Attendee status allows cancellation without deleting records
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from eventlane.db.base import Base, TimestampMixin


class EventModel(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    event_type = Column(String(20), nullable=True)  # rsvp, paid, both, external
    bundle = Column(String(32), nullable=False, default="event")
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    external_url = Column(String(2048), nullable=True)
    start_at = Column(DateTime(timezone=True), nullable=True)
    end_at = Column(DateTime(timezone=True), nullable=True)
    rsvp_capacity = Column(Integer, nullable=False, default=0)
    owner_id = Column(Integer, nullable=True, index=True)
    published = Column(Boolean, nullable=False, default=True)

    product = relationship("ProductModel", lazy="selectin")
    ticket_types = relationship(
        "TicketTypeConfigModel",
        back_populates="event",
        order_by="TicketTypeConfigModel.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("rsvp_capacity >= 0", name="check_rsvp_capacity_non_negative"),
        Index("ix_events_start_at", "start_at"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, type={self.event_type})>"


class TicketTypeConfigModel(Base, TimestampMixin):
    __tablename__ = "ticket_type_configs"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    label_mode = Column(String(10), nullable=False, default="preset")
    preset_key = Column(String(64), nullable=True)
    custom_label = Column(String(255), nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    capacity = Column(Integer, nullable=False, default=0)
    variation_handle = Column(Uuid, nullable=True)

    event = relationship("EventModel", back_populates="ticket_types")

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        CheckConstraint("capacity >= 0", name="check_ticket_capacity_non_negative"),
        CheckConstraint("label_mode IN ('preset', 'custom')", name="check_ticket_label_mode"),
    )


class AttendeeModel(Base, TimestampMixin):
    __tablename__ = "event_attendees"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    source = Column(String(20), nullable=False, default="rsvp")  # rsvp, ticket
    status = Column(String(20), nullable=False, default="confirmed")  # confirmed, cancelled

    __table_args__ = (
        CheckConstraint("status IN ('confirmed', 'cancelled')", name="check_attendee_status"),
        Index("ix_event_attendees_event_status", "event_id", "source", "status"),
    )
