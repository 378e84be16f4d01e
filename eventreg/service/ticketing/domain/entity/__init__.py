"""Ticketing Domain Entities"""

from eventreg.service.ticketing.domain.entity.booking_session import BookingSession
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket

__all__ = ['BookingSession', 'Ticket']
