"""
RSVP availability from event capacity and confirmed attendees.
"""

from eventlane.domain import EVENT_BUNDLE, Availability, Event
from eventlane.services.interfaces.availability import AvailabilityOracle
from eventlane.services.interfaces.repositories import EventRepository


class CapacityAvailabilityOracle(AvailabilityOracle):
    """
    Capacity <= 0 means unlimited. Otherwise remaining spots are the
    capacity minus confirmed RSVP attendees, floored at zero.
    """

    def __init__(self, events: EventRepository):
        self._events = events

    async def get_availability(self, event: Event) -> Availability:
        if event.bundle != EVENT_BUNDLE:
            return Availability(available=False, reason="Not an event.", remaining=0)

        current_count = await self._events.count_rsvp_attendees(event.id) if event.id else 0
        capacity = event.rsvp_capacity

        if capacity <= 0:
            return Availability(
                available=True,
                reason="Unlimited spots available.",
                capacity=0,
                current_count=current_count,
                remaining=None,
            )

        remaining = capacity - current_count
        if remaining <= 0:
            return Availability(
                available=False,
                reason="This event is at capacity.",
                capacity=capacity,
                current_count=current_count,
                remaining=0,
            )

        return Availability(
            available=True,
            reason=f"{remaining} spots remaining.",
            capacity=capacity,
            current_count=current_count,
            remaining=remaining,
        )
