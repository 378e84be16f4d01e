from decimal import Decimal
from typing import Optional

import attrs

from eventreg.platform.exception.exceptions import CustomBaseError
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.event.domain.money import line_total
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket
from eventreg.service.ticketing.domain.enum.ticket_enum import BookingStage


@attrs.define(frozen=True)
class BookingSession:
    """
    Transient state of one booking attempt, never persisted.

    `generation` identifies the attempt: a response that comes back for an
    older generation belongs to a dialog that was closed or reopened.
    """

    event: Event
    generation: int
    quantity: int = 1
    stage: BookingStage = BookingStage.SELECTING
    ticket: Optional[Ticket] = None
    error: Optional[CustomBaseError] = None

    @property
    def max_quantity(self) -> int:
        return max(self.event.tickets_available, 1)

    @property
    def total(self) -> Decimal:
        return line_total(self.event.price, self.quantity)

    def clamp(self, quantity: int) -> int:
        return min(max(quantity, 1), self.max_quantity)
