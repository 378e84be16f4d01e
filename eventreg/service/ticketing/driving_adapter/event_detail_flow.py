"""
Event detail view flow

Connects the event page, the booking dialog and the login redirect:
an anonymous "Book Now" goes to login carrying the way back (and a flag to
reopen the dialog) in navigation state; entering the page again with that
state reopens the dialog without another click.
"""

from typing import Any, Mapping, Optional

import attrs

from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.event.app.query.get_event_use_case import GetEventUseCase
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.session.driving_adapter.router import NavigationResult, Router
from eventreg.service.ticketing.app.command.booking_workflow import BookingWorkflow
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket
from eventreg.service.ticketing.domain.enum.ticket_enum import OpenOutcome


RESUME_BOOKING_KEY = 'resume_booking'

BOOK_NOW_LABEL = 'Book Now'
SOLD_OUT_LABEL = 'Sold Out'


def event_path(event_id: int) -> str:
    return f'/events/{event_id}'


@attrs.define(frozen=True)
class BookButton:
    label: str
    enabled: bool


class EventDetailFlow:
    def __init__(
        self,
        *,
        event_id: int,
        get_event_use_case: GetEventUseCase,
        booking_workflow: BookingWorkflow,
        session_gate: SessionGate,
        router: Router,
    ) -> None:
        self.event_id = event_id
        self.get_event_use_case = get_event_use_case
        self.booking = booking_workflow
        self.session_gate = session_gate
        self.router = router

        self._event: Event | None = None
        self.booking.on_event_refreshed = self._on_event_refreshed

    @property
    def event(self) -> Event | None:
        return self._event

    @property
    def book_button(self) -> BookButton:
        if self._event is None or not self._event.is_bookable:
            return BookButton(label=SOLD_OUT_LABEL, enabled=False)
        return BookButton(label=BOOK_NOW_LABEL, enabled=not self.booking.is_submitting)

    @Logger.io
    async def load(self) -> Event:
        self._event = await self.get_event_use_case.get_event(event_id=self.event_id)
        return self._event

    @Logger.io
    async def enter(self, state: Optional[Mapping[str, Any]] = None) -> Event:
        """Load the page; reopen the booking dialog when returning from login"""
        event = await self.load()
        if (state or {}).get(RESUME_BOOKING_KEY) and self.session_gate.is_authenticated():
            Logger.base.info(f'🔁 [EVENT_DETAIL] Resuming booking for event {self.event_id}')
            self.booking.open(event)
        return event

    def request_booking(self) -> OpenOutcome:
        """The "Book Now" click"""
        if self._event is None:
            raise RuntimeError('Event not loaded')

        outcome = self.booking.open(self._event)
        if outcome == OpenOutcome.LOGIN_REQUIRED:
            self.redirect_to_login()
        return outcome

    def redirect_to_login(self) -> NavigationResult:
        return self.router.redirect_to_login(
            return_to=event_path(self.event_id), **{RESUME_BOOKING_KEY: True}
        )

    async def submit_booking(self) -> Ticket | None:
        return await self.booking.submit()

    def close_booking(self) -> None:
        self.booking.close()

    def _on_event_refreshed(self, event: Event) -> None:
        if event.id == self.event_id:
            self._event = event
