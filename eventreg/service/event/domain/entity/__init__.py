"""Event Domain Entities"""

from eventreg.service.event.domain.entity.event_draft import EventDraft
from eventreg.service.event.domain.entity.event_entity import Event

__all__ = ['Event', 'EventDraft']
