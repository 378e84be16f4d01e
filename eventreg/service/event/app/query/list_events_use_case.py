from typing import List, Optional

from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.event.app.interface.i_event_query_repo import IEventQueryRepo
from eventreg.service.event.domain.entity.event_entity import Event
from eventreg.service.event.domain.enum.event_enum import EventCategory


ALL_CATEGORIES = 'all'


class ListEventsUseCase:
    def __init__(self, event_query_repo: IEventQueryRepo) -> None:
        self.event_query_repo = event_query_repo

    @Logger.io
    async def list_available(self) -> List[Event]:
        Logger.base.info('🌟 [LIST_AVAILABLE] Loading all available events')
        events = await self.event_query_repo.list_available()
        Logger.base.info(f'✅ [LIST_AVAILABLE] Found {len(events)} available events')
        return events

    @Logger.io
    async def list_upcoming(self, *, limit: Optional[int] = None) -> List[Event]:
        """Upcoming events, soonest first (home page shows the first few)"""
        events = await self.event_query_repo.list_upcoming()
        events = sorted(events, key=lambda event: event.start_date_time)
        return events[:limit] if limit is not None else events

    @Logger.io
    async def search(self, *, keyword: str) -> List[Event]:
        keyword = keyword.strip()
        if not keyword:
            return await self.list_available()
        Logger.base.info(f'🔍 [SEARCH] Searching events for "{keyword}"')
        return await self.event_query_repo.search(keyword=keyword)

    @Logger.io
    async def by_category(self, *, category: EventCategory | str) -> List[Event]:
        if isinstance(category, str) and not isinstance(category, EventCategory):
            if category.strip().lower() in ('', ALL_CATEGORIES):
                return await self.list_available()
            category = EventCategory.parse(category)
        return await self.event_query_repo.list_by_category(category=category)
