from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.event.domain.enum.event_enum import EventCategory, EventStatus


# Server statuses outside DRAFT/ACTIVE/CANCELLED
_STATUS_ALIASES = {
    'PUBLISHED': EventStatus.ACTIVE,
    'COMPLETED': EventStatus.CANCELLED,
}


class EventResponse(BaseModel):
    """Event as returned by the API (backend or frontend field names)"""

    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={
            'example': {
                'id': 1,
                'title': 'PyCon Taipei',
                'description': 'Annual Python conference',
                'category': 'Technology',
                'location': 'Taipei Expo Hall 1',
                'startDateTime': '2030-08-01T09:00:00',
                'price': 25.0,
                'capacity': 500,
                'availableTickets': 120,
                'status': 'PUBLISHED',
                'imageUrl': None,
            }
        },
    )

    id: int
    title: str
    description: str = ''
    category: EventCategory = EventCategory.OTHER
    location: str = Field(default='', validation_alias=AliasChoices('location', 'venue'))
    start_date_time: datetime = Field(
        validation_alias=AliasChoices('startDateTime', 'date', 'start_date_time')
    )
    price: Decimal = Decimal('0')
    capacity: int = 0
    tickets_available: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices('availableTickets', 'ticketsAvailable', 'tickets_available'),
    )
    status: EventStatus = EventStatus.ACTIVE
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices('imageUrl', 'image_url'))

    @field_validator('category', mode='before')
    @classmethod
    def parse_category(cls, v: Any) -> EventCategory:
        if v is None:
            return EventCategory.OTHER
        return EventCategory.parse(str(v))

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, v: Any) -> EventStatus:
        if v is None:
            return EventStatus.ACTIVE
        normalized = str(v).strip().upper()
        if normalized in _STATUS_ALIASES:
            return _STATUS_ALIASES[normalized]
        return EventStatus(normalized)

    @field_validator('price', mode='before')
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        # Floats through str() keep their shortest repr (25.1 -> '25.1')
        return str(v) if isinstance(v, float) else v

    @model_validator(mode='after')
    def default_availability(self) -> 'EventResponse':
        if self.tickets_available is None:
            self.tickets_available = self.capacity
        if self.capacity < self.tickets_available:
            self.capacity = self.tickets_available
        return self

    def to_entity(self) -> Event:
        return Event(
            id=self.id,
            title=self.title,
            description=self.description,
            category=self.category,
            location=self.location,
            start_date_time=self.start_date_time,
            price=self.price,
            capacity=self.capacity,
            tickets_available=self.tickets_available or 0,
            status=self.status,
            image_url=self.image_url,
        )
