from typing import List

from eventreg.platform.exception.exceptions import AuthenticationError, AuthErrorCode
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from eventreg.service.ticketing.domain.entity.ticket_entity import Ticket


class ListMyTicketsUseCase:
    def __init__(self, ticket_query_repo: ITicketQueryRepo, session_gate: SessionGate) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.session_gate = session_gate

    @Logger.io
    async def list_my_tickets(self) -> List[Ticket]:
        identity = self.session_gate.current_identity()
        if identity is None:
            raise AuthenticationError('Please log in to see your tickets', AuthErrorCode.LOGIN_REQUIRED)

        tickets = await self.ticket_query_repo.list_mine()
        Logger.base.info(f'🎫 [MY_TICKETS] {identity.username} has {len(tickets)} ticket(s)')
        return sorted(
            tickets,
            key=lambda ticket: (ticket.created_at is not None, ticket.created_at or 0),
            reverse=True,
        )
