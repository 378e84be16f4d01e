"""
BDD Step Definitions for user journeys

Each scenario drives the real flows (router, event page, booking dialog,
admin dashboard) against the in-memory fake API.

Note: pytest-bdd steps must be synchronous, so async operations run on a
per-scenario asyncio.Runner.
"""

import asyncio
from decimal import Decimal
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from eventreg.platform.exception.exceptions import NotFoundError
from eventreg.service.admin.app.command.admin_dashboard import AdminDashboard
from eventreg.service.admin.driven_adapter.repo.admin_api_repo_impl import AdminApiRepoImpl
from eventreg.service.event.app.query.get_event_use_case import GetEventUseCase
from eventreg.service.session.driving_adapter.router import FROM_KEY, LOGIN_PATH
from eventreg.service.ticketing.app.command.booking_workflow import BookingWorkflow
from eventreg.service.ticketing.domain.enum.ticket_enum import BookingStage, OpenOutcome
from eventreg.service.ticketing.driving_adapter.event_detail_flow import (
    RESUME_BOOKING_KEY,
    EventDetailFlow,
    event_path,
)


@pytest.fixture
def context() -> dict[str, Any]:
    """Shared test context for storing state between steps"""
    return {}


@pytest.fixture
def run_async(api_client):
    with asyncio.Runner() as runner:
        yield runner.run
        runner.run(api_client.aclose())


@pytest.fixture
def enter_event_page(
    context, router, event_query_repo, ticket_command_repo, session_gate, run_async
):
    """Mount the event page for context['event_id'] with the given navigation state"""

    def _enter(state: dict[str, Any]) -> EventDetailFlow:
        flow = EventDetailFlow(
            event_id=context['event_id'],
            get_event_use_case=GetEventUseCase(event_query_repo=event_query_repo),
            booking_workflow=BookingWorkflow(
                ticket_command_repo=ticket_command_repo,
                event_query_repo=event_query_repo,
                session_gate=session_gate,
            ),
            session_gate=session_gate,
            router=router,
        )
        run_async(flow.enter(state))
        context['flow'] = flow
        return flow

    return _enter


# =============================================================================
# Given Steps
# =============================================================================
@given(
    parsers.parse('an active event "{title}" priced {price} with {available:d} tickets available')
)
def active_event(context, fake_api, title: str, price: str, available: int) -> None:
    event = fake_api.add_event(
        title=title, price=float(price), capacity=max(available, 10), availableTickets=available
    )
    context['event_id'] = event['id']


@given('I am not logged in')
def not_logged_in(session_gate) -> None:
    assert not session_gate.is_authenticated()


@given(parsers.parse('I am logged in as "{username}"'))
def logged_in_as(run_async, login_as, username: str) -> None:
    run_async(login_as(username))


# =============================================================================
# When Steps
# =============================================================================
@when('I open the event page')
def open_event_page(context, router, enter_event_page) -> None:
    navigation = router.navigate(event_path(context['event_id']))
    enter_event_page(navigation.state)


@when('I click Book Now')
def click_book_now(context) -> None:
    context['outcome'] = context['flow'].request_booking()


@when(parsers.parse('I log in as "{username}"'))
def log_in_and_return(context, router, login_as, enter_event_page, run_async, username: str) -> None:
    run_async(login_as(username))
    context['navigation'] = router.complete_login()
    if router.location == event_path(context['event_id']):
        enter_event_page(context['navigation'].state)


@when(parsers.parse('I select {quantity:d} tickets'))
def select_quantity(context, quantity: int) -> None:
    context['flow'].booking.set_quantity(quantity)


@when('another buyer takes 2 tickets')
def another_buyer_books(context, fake_api) -> None:
    fake_api.events[context['event_id']]['availableTickets'] -= 2


@when('I submit the booking')
def submit_booking(context, run_async) -> None:
    context['ticket'] = run_async(context['flow'].submit_booking())


@when(parsers.parse('I retry with {quantity:d} tickets'))
def retry_booking(context, quantity: int) -> None:
    booking = context['flow'].booking
    booking.retry()
    booking.set_quantity(quantity)


@when('my session is revoked by the server')
def revoke_session(fake_api) -> None:
    fake_api.revoke_all_tokens()


@when('I open the admin dashboard')
def open_admin_dashboard(context, router, api_client, session_gate, run_async) -> None:
    assert router.navigate('/admin').location == '/admin'
    dashboard = AdminDashboard(
        admin_repo=AdminApiRepoImpl(api_client=api_client), session_gate=session_gate
    )
    assert run_async(dashboard.load()) is True
    context['dashboard'] = dashboard


@when('I delete the event')
def delete_event(context, run_async) -> None:
    assert run_async(context['dashboard'].delete_event(context['event_id'])) is True


@when(parsers.parse('I navigate to "{path}"'))
def navigate_to(context, router, path: str) -> None:
    context['navigation'] = router.navigate(path)


# =============================================================================
# Then Steps
# =============================================================================
@then('I am on the login page with a way back to the event')
def on_login_page(context, router) -> None:
    assert context['outcome'] == OpenOutcome.LOGIN_REQUIRED
    assert router.location == LOGIN_PATH
    assert router.current.state[FROM_KEY] == event_path(context['event_id'])
    assert router.current.state[RESUME_BOOKING_KEY] is True


@then('I am back on the event page with the booking dialog open')
def back_on_event_page(context, router) -> None:
    assert router.location == event_path(context['event_id'])
    assert context['flow'].booking.stage == BookingStage.SELECTING


@then(parsers.parse('my ticket is confirmed with a total of {total}'))
def ticket_confirmed(context, total: str) -> None:
    ticket = context['ticket']
    assert ticket is not None
    assert ticket.is_confirmed
    assert ticket.total_amount == Decimal(total)
    assert context['flow'].booking.stage == BookingStage.CONFIRMED


@then(parsers.parse('the event shows {available:d} tickets available'))
def event_availability(context, available: int) -> None:
    assert context['flow'].event.tickets_available == available


@then(parsers.parse('the book button reads "{label}" and is disabled'))
def book_button_disabled(context, label: str) -> None:
    button = context['flow'].book_button
    assert button.label == label
    assert button.enabled is False


@then(parsers.parse('the booking fails with "{message}"'))
def booking_failed(context, message: str) -> None:
    booking = context['flow'].booking
    assert context['ticket'] is None
    assert booking.stage == BookingStage.FAILED
    assert booking.error.user_message == message


@then(parsers.parse('the selected quantity is {quantity:d}'))
def selected_quantity(context, quantity: int) -> None:
    assert context['flow'].booking.quantity == quantity


@then('I am logged out')
def logged_out(session_gate) -> None:
    assert not session_gate.is_authenticated()


@then('the event is no longer on the dashboard')
def event_removed_from_dashboard(context) -> None:
    dashboard = context['dashboard']
    assert context['event_id'] not in {event.id for event in dashboard.events}
    assert dashboard.error is None


@then('the event page reports it was not found')
def event_not_found(context, event_query_repo, run_async) -> None:
    with pytest.raises(NotFoundError):
        get_event_use_case = GetEventUseCase(event_query_repo=event_query_repo)
        run_async(get_event_use_case.get_event(event_id=context['event_id']))


@then(parsers.parse('I am redirected to "{path}"'))
def redirected_to(context, router, path: str) -> None:
    assert context['navigation'].redirected
    assert router.location == path
