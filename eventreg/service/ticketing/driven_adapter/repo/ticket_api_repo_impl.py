from typing import Any, List

from pydantic import ValidationError

from eventreg.platform.constant.route_constant import TICKET_BOOK, TICKET_MINE
from eventreg.platform.exception.exceptions import AvailabilityError, DomainError, ServerError
from eventreg.platform.http.api_client import ApiClient
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from eventreg.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket
from eventreg.service.ticketing.driven_adapter.schema.ticket_schema import (
    BookTicketRequest,
    TicketResponse,
)


# The booking endpoint answers every rejection with 400; these mark availability ones
_AVAILABILITY_MARKERS = ('available', 'sold out', 'insufficient', 'capacity', 'remaining')


def parse_ticket(body: Any) -> Ticket:
    try:
        return TicketResponse.model_validate(body).to_entity()
    except (ValidationError, ValueError) as e:
        raise ServerError('The server sent an unexpected ticket') from e


def is_availability_rejection(error: DomainError) -> bool:
    message = error.message.lower()
    return any(marker in message for marker in _AVAILABILITY_MARKERS)


class TicketCommandApiRepoImpl(ITicketCommandRepo):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def book(self, *, event_id: int, quantity: int) -> Ticket:
        request = BookTicketRequest(event_id=event_id, quantity=quantity)
        try:
            body = await self.api_client.post(
                TICKET_BOOK, json=request.model_dump(by_alias=True), authenticated=True
            )
        except DomainError as e:
            if is_availability_rejection(e):
                raise AvailabilityError(e.message, e.status_code) from e
            raise
        return parse_ticket(body)


class TicketQueryApiRepoImpl(ITicketQueryRepo):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def list_mine(self) -> List[Ticket]:
        body = await self.api_client.get(TICKET_MINE, authenticated=True)
        if body is None:
            return []
        if not isinstance(body, list):
            raise ServerError('The server sent an unexpected ticket list')
        return [parse_ticket(item) for item in body]
