from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import attrs

from eventreg.platform.exception.exceptions import DomainError
from eventreg.service.event.domain.enum.event_enum import EventCategory


@attrs.define
class EventDraft:
    """Create-Event form contents, validated client-side before submission"""

    title: str = ''
    description: str = ''
    category: Optional[EventCategory] = None
    venue: str = ''
    date: Optional[datetime] = None
    price: Any = None
    capacity: Any = None
    image_url: str = ''

    def _parsed_price(self) -> Decimal:
        try:
            price = Decimal(str(self.price).strip())
        except InvalidOperation:
            raise DomainError('Price must be a number')
        if not price.is_finite():
            raise DomainError('Price must be a number')
        return price

    def _parsed_capacity(self) -> int:
        try:
            return int(str(self.capacity).strip())
        except ValueError:
            raise DomainError('Capacity must be a whole number')

    def validate(self, now: Optional[datetime] = None) -> None:
        """
        Raises:
            DomainError: first violated rule, in form order
        """
        if not self.title.strip():
            raise DomainError('Event title is required')
        if not self.description.strip():
            raise DomainError('Event description is required')
        if self.category is None:
            raise DomainError('Please select a category')
        if not self.venue.strip():
            raise DomainError('Venue is required')
        if self.price is None or str(self.price).strip() == '':
            raise DomainError('Price is required')
        if self._parsed_price() < 0:
            raise DomainError('Price cannot be negative')
        if self.capacity is None or self._parsed_capacity() <= 0:
            raise DomainError('Capacity must be greater than 0')
        if self.date is None:
            raise DomainError('Event date is required')

        now = now or datetime.now(timezone.utc)
        date = self.date if self.date.tzinfo else self.date.astimezone()
        if date <= now:
            raise DomainError('Event date must be in the future')

    def to_payload(self) -> dict[str, Any]:
        if self.category is None or self.date is None:
            raise DomainError('Event draft is incomplete')
        return {
            'title': self.title.strip(),
            'description': self.description.strip(),
            'category': self.category.value,
            'venue': self.venue.strip(),
            'location': self.venue.strip(),
            'date': self.date.isoformat(),
            'startDateTime': self.date.isoformat(),
            'price': str(self._parsed_price()),
            'capacity': self._parsed_capacity(),
            'imageUrl': self.image_url.strip() or None,
        }
