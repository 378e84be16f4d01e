from typing import List

from pydantic import ValidationError

from eventreg.platform.constant.route_constant import (
    ADMIN_EVENT_DELETE,
    ADMIN_EVENTS,
    ADMIN_RECENT_TICKETS,
    ADMIN_STATS,
)
from eventreg.platform.exception.exceptions import ServerError
from eventreg.platform.http.api_client import ApiClient
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.admin.app.interface.i_admin_repo import IAdminRepo
from eventreg.service.admin.domain.entity.dashboard_stats_entity import DashboardStats
from eventreg.service.admin.driven_adapter.schema.admin_schema import DashboardStatsResponse
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.event.driven_adapter.repo.event_api_repo_impl import parse_events
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket
from eventreg.service.ticketing.driven_adapter.repo.ticket_api_repo_impl import parse_ticket


class AdminApiRepoImpl(IAdminRepo):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def get_stats(self) -> DashboardStats:
        body = await self.api_client.get(ADMIN_STATS, authenticated=True)
        try:
            return DashboardStatsResponse.model_validate(body or {}).to_entity()
        except ValidationError as e:
            raise ServerError('The server sent unexpected dashboard statistics') from e

    @Logger.io
    async def list_events(self) -> List[Event]:
        return parse_events(await self.api_client.get(ADMIN_EVENTS, authenticated=True))

    @Logger.io
    async def list_recent_tickets(self, *, limit: int) -> List[Ticket]:
        body = await self.api_client.get(
            ADMIN_RECENT_TICKETS, params={'limit': limit}, authenticated=True
        )
        if body is None:
            return []
        if not isinstance(body, list):
            raise ServerError('The server sent an unexpected ticket list')
        return [parse_ticket(item) for item in body][:limit]

    @Logger.io
    async def delete_event(self, *, event_id: int) -> None:
        await self.api_client.delete(ADMIN_EVENT_DELETE.format(event_id=event_id), authenticated=True)
