from typing import Any, List

from pydantic import ValidationError

from eventreg.platform.constant.route_constant import (
    EVENT_CREATE,
    EVENT_GET,
    EVENT_PUBLIC_AVAILABLE,
    EVENT_PUBLIC_CATEGORY,
    EVENT_PUBLIC_SEARCH,
    EVENT_PUBLIC_UPCOMING,
)
from eventreg.platform.exception.exceptions import ServerError
from eventreg.platform.http.api_client import ApiClient
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.event.app.interface.i_event_command_repo import IEventCommandRepo
from eventreg.service.event.app.interface.i_event_query_repo import IEventQueryRepo
from eventreg.service.event.domain.entity.event_draft import EventDraft
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.event.domain.enum.event_enum import EventCategory
from eventreg.service.event.driven_adapter.schema.event_schema import EventResponse


def parse_event(body: Any) -> Event:
    try:
        return EventResponse.model_validate(body).to_entity()
    except (ValidationError, ValueError) as e:
        raise ServerError('The server sent an unexpected event') from e


def parse_events(body: Any) -> List[Event]:
    if body is None:
        return []
    if not isinstance(body, list):
        raise ServerError('The server sent an unexpected event list')
    return [parse_event(item) for item in body]


class EventQueryApiRepoImpl(IEventQueryRepo):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Event:
        body = await self.api_client.get(EVENT_GET.format(event_id=event_id))
        return parse_event(body)

    @Logger.io
    async def list_available(self) -> List[Event]:
        return parse_events(await self.api_client.get(EVENT_PUBLIC_AVAILABLE))

    @Logger.io
    async def list_upcoming(self) -> List[Event]:
        return parse_events(await self.api_client.get(EVENT_PUBLIC_UPCOMING))

    @Logger.io
    async def search(self, *, keyword: str) -> List[Event]:
        body = await self.api_client.get(EVENT_PUBLIC_SEARCH, params={'keyword': keyword})
        return parse_events(body)

    @Logger.io
    async def list_by_category(self, *, category: EventCategory) -> List[Event]:
        body = await self.api_client.get(EVENT_PUBLIC_CATEGORY.format(category=category.value))
        return parse_events(body)


class EventCommandApiRepoImpl(IEventCommandRepo):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def create(self, *, draft: EventDraft) -> Event:
        body = await self.api_client.post(EVENT_CREATE, json=draft.to_payload(), authenticated=True)
        return parse_event(body)
