from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from eventreg.service.event.domain.money import line_total, to_money
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket
from eventreg.service.ticketing.domain.enum.ticket_enum import TicketStatus


_STATUS_ALIASES = {
    'ACTIVE': TicketStatus.CONFIRMED,
    'VALIDATED': TicketStatus.CONFIRMED,
    'EXPIRED': TicketStatus.CANCELLED,
}


class TicketEventRef(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: int
    title: Optional[str] = None
    price: Optional[Decimal] = None

    @field_validator('price', mode='before')
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        return str(v) if isinstance(v, float) else v


class BookTicketRequest(BaseModel):
    event_id: int = Field(serialization_alias='eventId')
    quantity: int = Field(gt=0)


class TicketResponse(BaseModel):
    """Ticket as returned by the API, flat or with the event nested"""

    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={
            'example': {
                'id': 42,
                'eventId': 1,
                'quantity': 2,
                'totalAmount': 50.0,
                'status': 'CONFIRMED',
                'createdAt': '2030-07-01T12:00:00',
            }
        },
    )

    id: int
    event_id: Optional[int] = Field(default=None, validation_alias=AliasChoices('eventId', 'event_id'))
    event: Optional[TicketEventRef] = None
    quantity: int = 1
    total_amount: Optional[Decimal] = Field(
        default=None, validation_alias=AliasChoices('totalAmount', 'total_amount', 'totalPrice')
    )
    status: TicketStatus = TicketStatus.CONFIRMED
    user_id: Optional[int | str] = Field(default=None, validation_alias=AliasChoices('userId', 'user_id'))
    ticket_number: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('ticketNumber', 'ticket_number')
    )
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices('createdAt', 'purchasedAt', 'created_at')
    )

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, v: Any) -> TicketStatus:
        if v is None:
            return TicketStatus.CONFIRMED
        normalized = str(v).strip().upper()
        return _STATUS_ALIASES.get(normalized) or TicketStatus(normalized)

    @field_validator('total_amount', mode='before')
    @classmethod
    def parse_total(cls, v: Any) -> Any:
        return str(v) if isinstance(v, float) else v

    @model_validator(mode='after')
    def resolve_event(self) -> 'TicketResponse':
        if self.event_id is None and self.event is not None:
            self.event_id = self.event.id
        if self.event_id is None:
            raise ValueError('Ticket response does not reference an event')
        if self.total_amount is None:
            if self.event is None or self.event.price is None:
                raise ValueError('Ticket response has no total amount')
            self.total_amount = line_total(to_money(self.event.price), self.quantity)
        return self

    def to_entity(self) -> Ticket:
        return Ticket(
            id=self.id,
            event_id=self.event_id,
            quantity=self.quantity,
            total_amount=self.total_amount,
            status=self.status,
            user_id=self.user_id,
            event_title=self.event.title if self.event else None,
            ticket_number=self.ticket_number,
            created_at=self.created_at,
        )
