from datetime import datetime
from decimal import Decimal
from typing import Optional

import attrs

from eventreg.service.event.domain.enum.event_enum import EventCategory, EventStatus
from eventreg.service.event.domain.money import to_money


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value: int | Decimal) -> None:
    if value < 0:
        raise ValueError(f'Event {attribute.name} cannot be negative')


@attrs.define(frozen=True)
class Event:
    id: int
    title: str
    description: str
    category: EventCategory
    location: str
    start_date_time: datetime
    price: Decimal = attrs.field(converter=to_money, validator=_validate_non_negative)
    capacity: int = attrs.field(validator=_validate_non_negative)
    tickets_available: int = attrs.field(validator=_validate_non_negative)
    status: EventStatus = EventStatus.ACTIVE
    image_url: Optional[str] = None

    @tickets_available.validator
    def _check_within_capacity(self, attribute: attrs.Attribute, value: int) -> None:
        if value > self.capacity:
            raise ValueError('Event tickets_available cannot exceed capacity')

    @property
    def is_sold_out(self) -> bool:
        return self.tickets_available <= 0

    @property
    def is_bookable(self) -> bool:
        return self.status == EventStatus.ACTIVE and not self.is_sold_out

    def with_tickets_available(self, tickets_available: int) -> 'Event':
        return attrs.evolve(self, tickets_available=tickets_available)
