"""Event Domain Enums"""

from eventreg.service.event.domain.enum.event_enum import EventCategory, EventStatus

__all__ = ['EventCategory', 'EventStatus']
