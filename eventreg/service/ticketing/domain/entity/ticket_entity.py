from datetime import datetime
from decimal import Decimal
from typing import Optional

import attrs

from eventreg.service.event.domain.money import to_money
from eventreg.service.ticketing.domain.enum.ticket_enum import TicketStatus


def _validate_quantity(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value <= 0:
        raise ValueError('Ticket quantity must be positive')


@attrs.define(frozen=True)
class Ticket:
    id: int
    event_id: int
    quantity: int = attrs.field(validator=_validate_quantity)
    total_amount: Decimal = attrs.field(converter=to_money)
    status: TicketStatus = TicketStatus.CONFIRMED
    user_id: Optional[int | str] = None
    event_title: Optional[str] = None
    ticket_number: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == TicketStatus.CONFIRMED
