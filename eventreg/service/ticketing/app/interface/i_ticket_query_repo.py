from abc import ABC, abstractmethod
from typing import List

from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket


class ITicketQueryRepo(ABC):
    @abstractmethod
    async def list_mine(self) -> List[Ticket]:
        """Tickets owned by the current identity"""
        pass
