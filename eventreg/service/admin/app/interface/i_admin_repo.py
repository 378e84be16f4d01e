from abc import ABC, abstractmethod
from typing import List

from eventreg.service.admin.domain.entity.dashboard_stats_entity import DashboardStats
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket


class IAdminRepo(ABC):
    """Admin-only endpoints; the server re-checks the role on every call"""

    @abstractmethod
    async def get_stats(self) -> DashboardStats:
        pass

    @abstractmethod
    async def list_events(self) -> List[Event]:
        pass

    @abstractmethod
    async def list_recent_tickets(self, *, limit: int) -> List[Ticket]:
        pass

    @abstractmethod
    async def delete_event(self, *, event_id: int) -> None:
        pass
