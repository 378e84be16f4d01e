"""
Admin dashboard state

Deleting an event is optimistic: the row leaves the local list first and
comes back at its original position if the server refuses. Errors show
the server message when there is one.
"""

from typing import List, Optional

from eventreg.platform.config.core_setting import settings
from eventreg.platform.exception.exceptions import CustomBaseError, ForbiddenError, NotFoundError
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.admin.app.interface.i_admin_repo import IAdminRepo
from eventreg.service.admin.domain.entity.dashboard_stats_entity import DashboardStats
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.session.domain.entity.identity_entity import Role
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket


ADMIN_ROLES = frozenset({Role.ADMIN})


class AdminDashboard:
    def __init__(
        self,
        admin_repo: IAdminRepo,
        session_gate: SessionGate,
        recent_tickets_limit: int = settings.RECENT_TICKETS_LIMIT,
    ) -> None:
        self.admin_repo = admin_repo
        self.session_gate = session_gate
        self.recent_tickets_limit = recent_tickets_limit

        self.stats = DashboardStats()
        self.events: List[Event] = []
        self.recent_tickets: List[Ticket] = []
        self.loading = False
        self.error: Optional[str] = None
        self._deleting: set[int] = set()

    def _require_admin(self) -> None:
        # Checked before every call: the identity can change while the page is open
        if not self.session_gate.has_role(ADMIN_ROLES):
            raise ForbiddenError('Admin access required')

    def is_deleting(self, event_id: int) -> bool:
        return event_id in self._deleting

    @Logger.io
    async def load(self) -> bool:
        self._require_admin()
        self.loading = True
        self.error = None
        try:
            stats = await self.admin_repo.get_stats()
            events = await self.admin_repo.list_events()
            recent_tickets = await self.admin_repo.list_recent_tickets(
                limit=self.recent_tickets_limit
            )
        except CustomBaseError as e:
            self.error = e.user_message if e.status_code else 'Failed to load dashboard data'
            Logger.base.warning(f'📊 [ADMIN] Dashboard load failed ({e.kind}): {e}')
            return False
        finally:
            self.loading = False

        self.stats = stats
        self.events = events
        self.recent_tickets = recent_tickets
        Logger.base.info(
            f'📊 [ADMIN] Loaded {len(events)} events, {len(recent_tickets)} recent tickets'
        )
        return True

    def _restore(self, event: Event, order: List[int]) -> None:
        # Counted against the current list, other deletes may have finished meanwhile
        position = order.index(event.id)
        earlier = set(order[:position])
        index = sum(1 for current in self.events if current.id in earlier)
        self.events.insert(index, event)
        self.stats = self.stats.after_event_restored()

    @Logger.io
    async def delete_event(self, event_id: int) -> bool:
        """
        Returns:
            True once the server confirmed the delete, False if it was reverted
        """
        self._require_admin()
        if event_id in self._deleting:
            return False
        index = next((i for i, event in enumerate(self.events) if event.id == event_id), None)
        if index is None:
            raise NotFoundError(f'Event {event_id} is not on the dashboard')

        order = [event.id for event in self.events]
        removed = self.events.pop(index)
        self.stats = self.stats.after_event_removed()
        self._deleting.add(event_id)
        self.error = None
        try:
            await self.admin_repo.delete_event(event_id=event_id)
        except NotFoundError:
            # Already gone on the server, the local removal stands
            Logger.base.info(f'🗑️ [ADMIN] Event {event_id} was already deleted')
            return True
        except CustomBaseError as e:
            self._restore(removed, order)
            self.error = e.user_message if e.status_code else 'Failed to delete event'
            Logger.base.warning(f'🗑️ [ADMIN] Delete of event {event_id} reverted ({e.kind}): {e}')
            return False
        finally:
            self._deleting.discard(event_id)

        Logger.base.info(f'🗑️ [ADMIN] Deleted event {event_id}')
        return True
