"""
Availability oracle interface.
Answers "are there RSVP slots left" for an event.
"""

from abc import ABC, abstractmethod

from eventlane.domain import Availability, Event


class AvailabilityOracle(ABC):
    """
    Interface for RSVP capacity lookups.

    Implementations:
    - CapacityAvailabilityOracle: event capacity minus confirmed RSVP attendees
    """

    @abstractmethod
    async def get_availability(self, event: Event) -> Availability:
        """
        Return remaining RSVP capacity for an event.

        Args:
            event: Event to check

        Returns:
            Availability with remaining=None when capacity is unlimited
        """
        pass
