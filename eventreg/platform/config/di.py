"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from eventreg.platform.config.core_setting import Settings
from eventreg.platform.event.in_memory_broadcaster import InMemoryBroadcaster
from eventreg.platform.http.api_client import ApiClient
from eventreg.service.admin.app.command.admin_dashboard import AdminDashboard
from eventreg.service.admin.driven_adapter.repo.admin_api_repo_impl import AdminApiRepoImpl
from eventreg.service.event.app.command.create_event_use_case import CreateEventUseCase
from eventreg.service.event.app.query.get_event_use_case import GetEventUseCase
from eventreg.service.event.app.query.list_events_use_case import ListEventsUseCase
from eventreg.service.event.driven_adapter.repo.event_api_repo_impl import (
    EventCommandApiRepoImpl,
    EventQueryApiRepoImpl,
)
from eventreg.service.session.app.interface.i_auth_api import IAuthApi
from eventreg.service.session.app.interface.i_credential_store import ICredentialStore
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.session.driven_adapter.repo.auth_api_impl import AuthApiImpl
from eventreg.service.session.driven_adapter.repo.credential_store_impl import FileCredentialStore
from eventreg.service.session.driving_adapter.router import Router
from eventreg.service.ticketing.app.command.booking_workflow import BookingWorkflow
from eventreg.service.ticketing.app.query.list_my_tickets_use_case import ListMyTicketsUseCase
from eventreg.service.ticketing.driven_adapter.repo.ticket_api_repo_impl import (
    TicketCommandApiRepoImpl,
    TicketQueryApiRepoImpl,
)
from eventreg.service.ticketing.driving_adapter.event_detail_flow import EventDetailFlow
from eventreg.service.user.app.command.profile_editor import ProfileEditor
from eventreg.service.user.driven_adapter.repo.profile_api_repo_impl import ProfileApiRepoImpl


def build_session_gate(
    *,
    api_client: ApiClient,
    auth_api: IAuthApi,
    credential_store: ICredentialStore,
    broadcaster: InMemoryBroadcaster,
    verify_on_restore: bool,
) -> SessionGate:
    """The gate reads through the API client and the client reads credentials from the gate"""
    session_gate = SessionGate(
        auth_api=auth_api,
        credential_store=credential_store,
        broadcaster=broadcaster,
        verify_on_restore=verify_on_restore,
    )
    api_client.bind_credential_source(session_gate)
    return session_gate


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # HTTP transport (tests override with httpx.MockTransport)
    http_transport = providers.Object(None)
    api_client = providers.Singleton(ApiClient, config=config_service, transport=http_transport)

    # Session
    credential_store = providers.Singleton(
        FileCredentialStore,
        path=config_service.provided.SESSION_STORE_PATH,
        storage_key=config_service.provided.SESSION_STORAGE_KEY,
    )
    session_broadcaster = providers.Singleton(InMemoryBroadcaster, name='SESSION')
    auth_api = providers.Singleton(AuthApiImpl, api_client=api_client)
    session_gate = providers.Singleton(
        build_session_gate,
        api_client=api_client,
        auth_api=auth_api,
        credential_store=credential_store,
        broadcaster=session_broadcaster,
        verify_on_restore=config_service.provided.VERIFY_SESSION_ON_RESTORE,
    )
    router = providers.Singleton(Router, session_gate=session_gate)

    # Repositories (stateless, share the API client)
    event_query_repo = providers.Singleton(EventQueryApiRepoImpl, api_client=api_client)
    event_command_repo = providers.Singleton(EventCommandApiRepoImpl, api_client=api_client)
    ticket_command_repo = providers.Singleton(TicketCommandApiRepoImpl, api_client=api_client)
    ticket_query_repo = providers.Singleton(TicketQueryApiRepoImpl, api_client=api_client)
    profile_repo = providers.Singleton(ProfileApiRepoImpl, api_client=api_client)
    admin_repo = providers.Singleton(AdminApiRepoImpl, api_client=api_client)

    # Use cases (stateless, can be Singleton)
    list_events_use_case = providers.Singleton(ListEventsUseCase, event_query_repo=event_query_repo)
    get_event_use_case = providers.Singleton(GetEventUseCase, event_query_repo=event_query_repo)
    create_event_use_case = providers.Singleton(
        CreateEventUseCase, event_command_repo=event_command_repo, session_gate=session_gate
    )
    list_my_tickets_use_case = providers.Singleton(
        ListMyTicketsUseCase, ticket_query_repo=ticket_query_repo, session_gate=session_gate
    )

    # Per-view state (one instance per page/dialog)
    booking_workflow = providers.Factory(
        BookingWorkflow,
        ticket_command_repo=ticket_command_repo,
        event_query_repo=event_query_repo,
        session_gate=session_gate,
    )
    event_detail_flow = providers.Factory(
        EventDetailFlow,
        get_event_use_case=get_event_use_case,
        booking_workflow=booking_workflow,
        session_gate=session_gate,
        router=router,
    )
    profile_editor = providers.Factory(
        ProfileEditor, profile_repo=profile_repo, session_gate=session_gate
    )
    admin_dashboard = providers.Factory(
        AdminDashboard,
        admin_repo=admin_repo,
        session_gate=session_gate,
        recent_tickets_limit=config_service.provided.RECENT_TICKETS_LIMIT,
    )


container = Container()


async def setup() -> SessionGate:
    """Wire the session and rehydrate a persisted identity"""
    session_gate = container.session_gate()
    await session_gate.restore()
    return session_gate


async def cleanup() -> None:
    await container.api_client().aclose()
    container.reset_singletons()
