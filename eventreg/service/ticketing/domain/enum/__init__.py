"""Ticketing Domain Enums"""

from eventreg.service.ticketing.domain.enum.ticket_enum import (
    BookingStage,
    OpenOutcome,
    TicketStatus,
)

__all__ = ['BookingStage', 'OpenOutcome', 'TicketStatus']
