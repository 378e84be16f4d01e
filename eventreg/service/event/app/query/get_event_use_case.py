from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.event.app.interface.i_event_query_repo import IEventQueryRepo
from eventreg.service.event.domain.entity.event_entity import Event


class GetEventUseCase:
    def __init__(self, event_query_repo: IEventQueryRepo) -> None:
        self.event_query_repo = event_query_repo

    @Logger.io
    async def get_event(self, *, event_id: int) -> Event:
        """
        Raises:
            NotFoundError: the event does not exist (or was deleted)
        """
        Logger.base.info(f'🎫 [GET_EVENT] Loading event {event_id}')
        event = await self.event_query_repo.get_by_id(event_id=event_id)
        Logger.base.info(
            f'✅ [GET_EVENT] Found event {event_id} ({event.tickets_available} tickets available)'
        )
        return event
