from datetime import datetime
from typing import Optional

from eventreg.platform.exception.exceptions import AuthenticationError, AuthErrorCode, ForbiddenError
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.event.app.interface.i_event_command_repo import IEventCommandRepo
from eventreg.service.event.domain.entity.event_draft import EventDraft
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.session.domain.entity.identity_entity import Role


CREATOR_ROLES = frozenset({Role.USER, Role.ADMIN})


class CreateEventUseCase:
    def __init__(self, event_command_repo: IEventCommandRepo, session_gate: SessionGate) -> None:
        self.event_command_repo = event_command_repo
        self.session_gate = session_gate

    @Logger.io
    async def create_event(self, *, draft: EventDraft, now: Optional[datetime] = None) -> Event:
        """
        Raises:
            AuthenticationError: LOGIN_REQUIRED when anonymous
            ForbiddenError: role may not create events
            DomainError: draft fails validation (nothing is sent)
        """
        if not self.session_gate.is_authenticated():
            raise AuthenticationError('Please log in to create an event', AuthErrorCode.LOGIN_REQUIRED)
        if not self.session_gate.has_role(CREATOR_ROLES):
            raise ForbiddenError('Only users and admins can create events')

        draft.validate(now=now)

        event = await self.event_command_repo.create(draft=draft)
        Logger.base.info(f'✅ [CREATE_EVENT] Created event {event.id}: {event.title}')
        return event
