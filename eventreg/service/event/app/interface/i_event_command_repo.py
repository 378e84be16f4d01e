from abc import ABC, abstractmethod

from eventreg.service.event.domain.entity.event_draft import EventDraft
from eventreg.service.event.domain.entity.event_entity import Event


class IEventCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, draft: EventDraft) -> Event:
        """Submit a validated draft; requires an authenticated session"""
        pass
