from abc import ABC, abstractmethod

from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def book(self, *, event_id: int, quantity: int) -> Ticket:
        """
        Issue exactly one booking request

        Raises:
            AvailabilityError: not enough tickets left
            DomainError: invalid event state or quantity
            SessionExpiredError: credential rejected
            NetworkError: transport failure or timeout
        """
        pass
