"""
Booking Workflow

Drives one ticket purchase for one event:

    SELECTING -> SUBMITTING -> CONFIRMED
                 SUBMITTING -> FAILED -> (retry) SELECTING

- at most one booking request is in flight per session (SUBMITTING guard)
- every open()/close() bumps the generation; a response that arrives for an
  older generation is discarded instead of being applied to the new dialog
- after CONFIRMED or FAILED the event is re-fetched so the remaining
  availability is accurate; a failed refresh keeps the stale count
"""

from decimal import Decimal
from typing import Callable, Optional

import attrs

from eventreg.platform.exception.exceptions import CustomBaseError, InvalidStateTransitionError
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.event.app.interface.i_event_query_repo import IEventQueryRepo
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from eventreg.service.ticketing.domain.entity.booking_session import BookingSession
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket
from eventreg.service.ticketing.domain.enum.ticket_enum import BookingStage, OpenOutcome


class BookingWorkflow:
    def __init__(
        self,
        *,
        ticket_command_repo: ITicketCommandRepo,
        event_query_repo: IEventQueryRepo,
        session_gate: SessionGate,
        on_event_refreshed: Optional[Callable[[Event], None]] = None,
    ) -> None:
        self.ticket_command_repo = ticket_command_repo
        self.event_query_repo = event_query_repo
        self.session_gate = session_gate
        self.on_event_refreshed = on_event_refreshed

        self._session: BookingSession | None = None
        self._generation = 0
        self._latest_event: Event | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def session(self) -> BookingSession | None:
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def stage(self) -> BookingStage | None:
        return self._session.stage if self._session else None

    @property
    def quantity(self) -> int | None:
        return self._session.quantity if self._session else None

    @property
    def total(self) -> Decimal | None:
        return self._session.total if self._session else None

    @property
    def ticket(self) -> Ticket | None:
        return self._session.ticket if self._session else None

    @property
    def error(self) -> CustomBaseError | None:
        return self._session.error if self._session else None

    @property
    def is_submitting(self) -> bool:
        return self.stage == BookingStage.SUBMITTING

    @property
    def latest_event(self) -> Event | None:
        """Most recent copy of the event, re-fetched after each terminal state"""
        return self._latest_event

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    @Logger.io
    def open(self, event: Event) -> OpenOutcome:
        """
        Start a fresh session for `event`, discarding any previous one.

        Anonymous callers get LOGIN_REQUIRED and must redirect to login
        themselves (the return path lives in navigation state). An event that
        cannot be booked gives SOLD_OUT and leaves the current session alone.
        """
        if not self.session_gate.is_authenticated():
            return OpenOutcome.LOGIN_REQUIRED
        if not event.is_bookable:
            Logger.base.info(f'🎟️ [BOOKING] Event {event.id} is not bookable ({event.status})')
            return OpenOutcome.SOLD_OUT

        self._generation += 1
        self._latest_event = event
        self._session = BookingSession(event=event, generation=self._generation)
        Logger.base.info(f'🎟️ [BOOKING] Opened booking for event {event.id}')
        return OpenOutcome.OPENED

    def set_quantity(self, quantity: int) -> int:
        session = self._require_stage(BookingStage.SELECTING, action='change quantity')
        clamped = session.clamp(quantity)
        self._session = attrs.evolve(session, quantity=clamped)
        return clamped

    @Logger.io
    async def submit(self) -> Ticket | None:
        """
        Send the booking request.

        Returns:
            The confirmed ticket, or None when the booking failed (see
            `error`) or the response belonged to a closed session

        Raises:
            InvalidStateTransitionError: not in SELECTING, including a second
                submit while the first one is still in flight
        """
        session = self._require_stage(BookingStage.SELECTING, action='submit')
        generation = session.generation
        event_id = session.event.id
        self._session = attrs.evolve(session, stage=BookingStage.SUBMITTING, error=None)
        Logger.base.info(f'📤 [BOOKING] Booking {session.quantity} ticket(s) for event {event_id}')

        try:
            ticket = await self.ticket_command_repo.book(
                event_id=event_id, quantity=session.quantity
            )
        except CustomBaseError as e:
            if not self._is_current(generation):
                Logger.base.info(f'🗑️ [BOOKING] Discarding failure of closed session: {e}')
                return None
            Logger.base.warning(f'❌ [BOOKING] Booking failed ({e.kind}): {e}')
            self._session = attrs.evolve(self._session, stage=BookingStage.FAILED, error=e)
            await self._refresh_event(generation=generation, event_id=event_id)
            return None

        if not self._is_current(generation):
            Logger.base.warning(f'🗑️ [BOOKING] Discarding ticket {ticket.id} of closed session')
            return None

        self._session = attrs.evolve(self._session, stage=BookingStage.CONFIRMED, ticket=ticket)
        Logger.base.info(f'✅ [BOOKING] Ticket {ticket.id} confirmed, total {ticket.total_amount}')
        await self._refresh_event(generation=generation, event_id=event_id)
        return ticket

    def retry(self) -> None:
        """FAILED -> SELECTING, keeping the quantity the user picked"""
        session = self._require_stage(BookingStage.FAILED, action='retry')
        self._session = attrs.evolve(session, stage=BookingStage.SELECTING, error=None)

    def close(self) -> None:
        """Discard the session; an in-flight response will be ignored"""
        self._generation += 1
        self._session = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_stage(self, stage: BookingStage, *, action: str) -> BookingSession:
        session = self._session
        if session is None:
            raise InvalidStateTransitionError(f'Cannot {action}: no booking in progress')
        if session.stage != stage:
            raise InvalidStateTransitionError(
                f'Cannot {action} while booking is {session.stage.value.lower()}'
            )
        return session

    def _is_current(self, generation: int) -> bool:
        return self._session is not None and self._session.generation == generation

    async def _refresh_event(self, *, generation: int, event_id: int) -> None:
        try:
            event = await self.event_query_repo.get_by_id(event_id=event_id)
        except CustomBaseError as e:
            Logger.base.warning(
                f'⚠️ [BOOKING] Could not refresh availability of event {event_id}: {e}'
            )
            return

        if not self._is_current(generation):
            return
        self._latest_event = event
        self._session = attrs.evolve(self._session, event=event)
        if self.on_event_refreshed is not None:
            self.on_event_refreshed(event)
