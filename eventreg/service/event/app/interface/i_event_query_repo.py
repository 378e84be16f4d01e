from abc import ABC, abstractmethod
from typing import List

from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.event.domain.enum.event_enum import EventCategory


class IEventQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, event_id: int) -> Event:
        """
        Raises:
            NotFoundError: no event with this id
        """
        pass

    @abstractmethod
    async def list_available(self) -> List[Event]:
        pass

    @abstractmethod
    async def list_upcoming(self) -> List[Event]:
        pass

    @abstractmethod
    async def search(self, *, keyword: str) -> List[Event]:
        pass

    @abstractmethod
    async def list_by_category(self, *, category: EventCategory) -> List[Event]:
        pass
