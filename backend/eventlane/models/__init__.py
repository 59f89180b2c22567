from eventlane.models.commerce import ProductModel, StorefrontModel, VariationModel
from eventlane.models.event import AttendeeModel, EventModel, TicketTypeConfigModel

__all__ = [
    "ProductModel",
    "StorefrontModel",
    "VariationModel",
    "AttendeeModel",
    "EventModel",
    "TicketTypeConfigModel",
]
