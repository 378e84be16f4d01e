"""
Test Configuration and Fixtures

This module provides:
- Test environment variables (log directory) set before any eventreg import
- FakeRestApi: an in-memory REST API served through httpx.MockTransport
- Fixtures wiring the real ApiClient / SessionGate / adapters to the fake API

Every test talks HTTP to the fake API through the real client stack, so
credential attachment, error mapping and forced logout are exercised the
same way in every feature test.
"""

# =============================================================================
# Environment setup MUST happen before any eventreg import
# (settings and log sinks are configured at import time)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import Awaitable, Callable  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
import itertools  # noqa: E402
import json  # noqa: E402
import re  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import jwt  # noqa: E402
import pytest  # noqa: E402

from eventreg.platform.config.core_setting import Settings  # noqa: E402
from eventreg.platform.config.di import build_session_gate  # noqa: E402
from eventreg.platform.event.in_memory_broadcaster import InMemoryBroadcaster  # noqa: E402
from eventreg.platform.http.api_client import ApiClient  # noqa: E402
from eventreg.service.event.domain.entity.event_entity import Event  # noqa: E402
from eventreg.service.event.driven_adapter.repo.event_api_repo_impl import (  # noqa: E402
    EventCommandApiRepoImpl,
    EventQueryApiRepoImpl,
)
from eventreg.service.event.driven_adapter.schema.event_schema import EventResponse  # noqa: E402
from eventreg.service.session.app.session_gate import SessionGate  # noqa: E402
from eventreg.service.session.domain.entity.identity_entity import Identity  # noqa: E402
from eventreg.service.session.domain.value_object.credentials import Credentials  # noqa: E402
from eventreg.service.session.driven_adapter.repo.auth_api_impl import AuthApiImpl  # noqa: E402
from eventreg.service.session.driven_adapter.repo.credential_store_impl import (  # noqa: E402
    InMemoryCredentialStore,
)
from eventreg.service.session.driving_adapter.router import Router  # noqa: E402
from eventreg.service.ticketing.driven_adapter.repo.ticket_api_repo_impl import (  # noqa: E402
    TicketCommandApiRepoImpl,
    TicketQueryApiRepoImpl,
)


# =============================================================================
# Constants
# =============================================================================
TEST_API_BASE_URL = 'http://testserver/api'
TEST_JWT_SECRET = 'test-secret-key-for-jwt-signing-only'

DEFAULT_PASSWORD = 'P@ssw0rd'
TEST_USER_NAME = 'alice'
TEST_ADMIN_NAME = 'root'


def make_jwt(subject: str, *, expires_in: timedelta = timedelta(hours=1), jti: int = 0) -> str:
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {'sub': subject, 'iat': now, 'exp': now + expires_in, 'jti': str(jti)},
        TEST_JWT_SECRET,
        algorithm='HS256',
    )


# =============================================================================
# Fake REST API
# =============================================================================
Handler = Callable[[httpx.Request, re.Match[str]], Awaitable[httpx.Response]]


def _error(status_code: int, message: str, *, key: str = 'message') -> httpx.Response:
    return httpx.Response(status_code, json={key: message})


class FakeRestApi:
    """
    In-memory event registration API

    - users / events / tickets live in plain dicts (backend JSON shapes)
    - `fail(method, path, ...)` queues a one-shot failure for a route
    - `hold(method, path)` makes the next matching request wait until the
      returned asyncio.Event is set (requests "in flight")
    - every request is recorded in `requests`
    """

    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.tokens: dict[str, str] = {}
        self.events: dict[int, dict[str, Any]] = {}
        self.tickets: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.token_ttl = timedelta(hours=1)

        self._ids = itertools.count(1)
        self._failures: dict[tuple[str, str], list[httpx.Response | Exception]] = {}
        self._holds: dict[tuple[str, str], list[asyncio.Event]] = {}
        self._routes: list[tuple[str, re.Pattern[str], Handler]] = [
            ('POST', re.compile(r'^/auth/login$'), self._login),
            ('POST', re.compile(r'^/auth/logout$'), self._logout),
            ('GET', re.compile(r'^/auth/validate$'), self._validate),
            ('POST', re.compile(r'^/auth/register$'), self._register),
            ('GET', re.compile(r'^/events/public/available$'), self._list_available),
            ('GET', re.compile(r'^/events/public/upcoming$'), self._list_upcoming),
            ('GET', re.compile(r'^/events/public/search$'), self._search),
            ('GET', re.compile(r'^/events/public/category/(?P<category>[^/]+)$'), self._by_category),
            ('GET', re.compile(r'^/events/(?P<event_id>\d+)$'), self._get_event),
            ('POST', re.compile(r'^/events$'), self._create_event),
            ('POST', re.compile(r'^/tickets/book$'), self._book),
            ('GET', re.compile(r'^/tickets/mine$'), self._my_tickets),
            ('GET', re.compile(r'^/users/profile$'), self._get_profile),
            ('PUT', re.compile(r'^/users/profile$'), self._put_profile),
            ('GET', re.compile(r'^/admin/stats$'), self._admin_stats),
            ('GET', re.compile(r'^/admin/events$'), self._admin_events),
            ('DELETE', re.compile(r'^/admin/events/(?P<event_id>\d+)$'), self._admin_delete),
            ('GET', re.compile(r'^/admin/recent-tickets$'), self._admin_recent_tickets),
        ]

    # ------------------------------------------------------------------
    # Seeding / control
    # ------------------------------------------------------------------
    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add_user(
        self, username: str, password: str = DEFAULT_PASSWORD, role: str = 'USER', **profile: Any
    ) -> dict[str, Any]:
        user = {
            'id': next(self._ids),
            'username': username,
            'password': password,
            'role': role,
            'email': profile.pop('email', f'{username}@example.com'),
            'firstName': profile.pop('firstName', username.capitalize()),
            'lastName': profile.pop('lastName', 'Tester'),
            'phone': profile.pop('phone', ''),
            'address': profile.pop('address', ''),
            'bio': profile.pop('bio', ''),
        }
        self.users[username] = user
        return user

    def add_event(self, **fields: Any) -> dict[str, Any]:
        event_id = fields.pop('id', None) or next(self._ids)
        capacity = fields.pop('capacity', 100)
        event = {
            'id': event_id,
            'title': fields.pop('title', f'Event {event_id}'),
            'description': fields.pop('description', 'A test event'),
            'category': fields.pop('category', 'Technology'),
            'location': fields.pop('location', 'Main Hall'),
            'startDateTime': fields.pop(
                'startDateTime', (datetime.now() + timedelta(days=30)).isoformat(timespec='seconds')
            ),
            'price': fields.pop('price', 25.0),
            'capacity': capacity,
            'availableTickets': fields.pop('availableTickets', capacity),
            'status': fields.pop('status', 'PUBLISHED'),
            'imageUrl': fields.pop('imageUrl', None),
        }
        event.update(fields)
        self.events[event_id] = event
        return event

    def issue_token(self, username: str, *, expires_in: timedelta = timedelta(hours=1)) -> str:
        token = make_jwt(username, expires_in=expires_in, jti=next(self._ids))
        self.tokens[token] = username
        return token

    def revoke_all_tokens(self) -> None:
        self.tokens.clear()

    def fail(
        self,
        method: str,
        path: str,
        status_code: int = 500,
        message: str | None = None,
        *,
        exception: Exception | None = None,
        key: str = 'message',
    ) -> None:
        """Queue a one-shot failure for the next request to `method path`"""
        outcome: httpx.Response | Exception
        if exception is not None:
            outcome = exception
        elif message is None:
            outcome = httpx.Response(status_code)
        else:
            outcome = _error(status_code, message, key=key)
        self._failures.setdefault((method, path), []).append(outcome)

    def respond(self, method: str, path: str, response: httpx.Response) -> None:
        """Queue a one-shot canned response"""
        self._failures.setdefault((method, path), []).append(response)

    def hold(self, method: str, path: str) -> asyncio.Event:
        release = asyncio.Event()
        self._holds.setdefault((method, path), []).append(release)
        return release

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and self._path(r) == path)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix('/api')

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, self._path(request)

        holds = self._holds.get((method, path))
        if holds:
            await holds.pop(0).wait()

        failures = self._failures.get((method, path))
        if failures:
            outcome = failures.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        for route_method, pattern, handler in self._routes:
            if route_method != method:
                continue
            match = pattern.match(path)
            if match:
                return await handler(request, match)
        return _error(404, f'No route for {method} {path}')

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _json(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content or b'{}')

    def _user_of(self, request: httpx.Request) -> dict[str, Any] | None:
        header = request.headers.get('Authorization', '')
        token = header.removeprefix('Bearer ').strip()
        username = self.tokens.get(token)
        return self.users.get(username) if username else None

    def _published(self) -> list[dict[str, Any]]:
        return [e for e in self.events.values() if e['status'] == 'PUBLISHED']

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    async def _login(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        body = self._json(request)
        user = self.users.get(body.get('username', ''))
        if user is None or user['password'] != body.get('password'):
            return _error(400, 'Invalid username or password', key='error')
        token = self.issue_token(user['username'], expires_in=self.token_ttl)
        return httpx.Response(
            200,
            json={
                'token': token,
                'type': 'Bearer',
                'userId': user['id'],
                'username': user['username'],
                'email': user['email'],
                'firstName': user['firstName'],
                'lastName': user['lastName'],
                'role': user['role'],
            },
        )

    async def _logout(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        token = request.headers.get('Authorization', '').removeprefix('Bearer ').strip()
        self.tokens.pop(token, None)
        return httpx.Response(200, json={'message': 'Logged out'})

    async def _validate(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        if self._user_of(request) is None:
            return _error(401, 'Invalid token')
        return httpx.Response(200, json={'valid': True})

    async def _register(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        body = self._json(request)
        if body['username'] in self.users:
            return _error(400, 'Username is already taken', key='error')
        self.add_user(
            body['username'],
            body['password'],
            email=body.get('email'),
            firstName=body.get('firstName'),
            lastName=body.get('lastName'),
        )
        return httpx.Response(200, json={'message': 'User registered successfully'})

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    async def _list_available(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        return httpx.Response(
            200, json=[e for e in self._published() if e['availableTickets'] > 0]
        )

    async def _list_upcoming(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        events = sorted(self._published(), key=lambda e: e['startDateTime'], reverse=True)
        return httpx.Response(200, json=events)

    async def _search(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        keyword = request.url.params.get('keyword', '').lower()
        return httpx.Response(
            200, json=[e for e in self._published() if keyword in e['title'].lower()]
        )

    async def _by_category(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        category = match['category'].lower()
        return httpx.Response(
            200, json=[e for e in self._published() if e['category'].lower() == category]
        )

    async def _get_event(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        event = self.events.get(int(match['event_id']))
        if event is None:
            return _error(404, 'Event not found')
        return httpx.Response(200, json=event)

    async def _create_event(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        if self._user_of(request) is None:
            return _error(401, 'Unauthorized')
        body = self._json(request)
        event = self.add_event(
            title=body['title'],
            description=body['description'],
            category=body['category'],
            location=body['location'],
            startDateTime=body['startDateTime'],
            price=float(body['price']),
            capacity=body['capacity'],
            imageUrl=body.get('imageUrl'),
        )
        return httpx.Response(201, json=event)

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------
    async def _book(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        user = self._user_of(request)
        if user is None:
            return _error(401, 'Unauthorized')
        body = self._json(request)
        event = self.events.get(body.get('eventId'))
        if event is None:
            return _error(404, 'Event not found')
        if event['status'] != 'PUBLISHED':
            return _error(400, 'Event is not open for booking')
        quantity = body.get('quantity', 0)
        if quantity <= 0:
            return _error(400, 'Invalid quantity')
        if quantity > event['availableTickets']:
            return _error(400, 'Not enough tickets available')

        event['availableTickets'] -= quantity
        ticket = {
            'id': next(self._ids),
            'eventId': event['id'],
            'userId': user['id'],
            'quantity': quantity,
            'totalAmount': round(event['price'] * quantity, 2),
            'status': 'CONFIRMED',
            'createdAt': datetime.now().isoformat(timespec='seconds'),
        }
        self.tickets.append(ticket)
        return httpx.Response(201, json=ticket)

    async def _my_tickets(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        user = self._user_of(request)
        if user is None:
            return _error(401, 'Unauthorized')
        return httpx.Response(200, json=[t for t in self.tickets if t['userId'] == user['id']])

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------
    _PROFILE_KEYS = ('firstName', 'lastName', 'email', 'phone', 'address', 'bio')

    async def _get_profile(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        user = self._user_of(request)
        if user is None:
            return _error(401, 'Unauthorized')
        return httpx.Response(200, json={key: user[key] for key in self._PROFILE_KEYS})

    async def _put_profile(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        user = self._user_of(request)
        if user is None:
            return _error(401, 'Unauthorized')
        body = self._json(request)
        if body.get('email') is not None and '@' not in body['email']:
            return _error(400, 'Email is not valid')
        for key in self._PROFILE_KEYS:
            if key in body and body[key] is not None:
                user[key] = body[key]
        return httpx.Response(200, json={key: user[key] for key in self._PROFILE_KEYS})

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------
    def _admin_check(self, request: httpx.Request) -> httpx.Response | None:
        user = self._user_of(request)
        if user is None:
            return _error(401, 'Unauthorized')
        if user['role'] != 'ADMIN':
            return _error(403, 'Access denied')
        return None

    async def _admin_stats(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        if denied := self._admin_check(request):
            return denied
        return httpx.Response(
            200,
            json={
                'totalEvents': len(self.events),
                'totalUsers': len(self.users),
                'totalTickets': sum(t['quantity'] for t in self.tickets),
                'totalRevenue': round(sum(t['totalAmount'] for t in self.tickets), 2),
            },
        )

    async def _admin_events(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        if denied := self._admin_check(request):
            return denied
        return httpx.Response(200, json=list(self.events.values()))

    async def _admin_delete(self, request: httpx.Request, match: re.Match[str]) -> httpx.Response:
        if denied := self._admin_check(request):
            return denied
        if self.events.pop(int(match['event_id']), None) is None:
            return _error(404, 'Event not found')
        return httpx.Response(204)

    async def _admin_recent_tickets(
        self, request: httpx.Request, match: re.Match[str]
    ) -> httpx.Response:
        if denied := self._admin_check(request):
            return denied
        limit = int(request.url.params.get('limit', 10))
        return httpx.Response(200, json=list(reversed(self.tickets))[:limit])


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
def fake_api() -> FakeRestApi:
    api = FakeRestApi()
    api.add_user(TEST_USER_NAME)
    api.add_user(TEST_ADMIN_NAME, role='ADMIN')
    return api


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        API_BASE_URL=TEST_API_BASE_URL,
        REQUEST_TIMEOUT_SECONDS=2.0,
        SESSION_STORE_PATH=tmp_path / 'session.json',
        LOGOUT_ON_FORBIDDEN=True,
    )


@pytest.fixture
def api_client(test_settings: Settings, fake_api: FakeRestApi) -> ApiClient:
    return ApiClient(config=test_settings, transport=fake_api.transport)


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def session_gate(api_client: ApiClient, credential_store: InMemoryCredentialStore) -> SessionGate:
    return build_session_gate(
        api_client=api_client,
        auth_api=AuthApiImpl(api_client=api_client),
        credential_store=credential_store,
        broadcaster=InMemoryBroadcaster(name='SESSION'),
        verify_on_restore=True,
    )


@pytest.fixture
def router(session_gate: SessionGate) -> Router:
    return Router(session_gate=session_gate)


@pytest.fixture
def login_as(session_gate: SessionGate) -> Callable[..., Awaitable[Identity]]:
    async def _login(username: str = TEST_USER_NAME, password: str = DEFAULT_PASSWORD) -> Identity:
        return await session_gate.login(credentials=Credentials(username, password))

    return _login


@pytest.fixture
def event_query_repo(api_client: ApiClient) -> EventQueryApiRepoImpl:
    return EventQueryApiRepoImpl(api_client=api_client)


@pytest.fixture
def event_command_repo(api_client: ApiClient) -> EventCommandApiRepoImpl:
    return EventCommandApiRepoImpl(api_client=api_client)


@pytest.fixture
def ticket_command_repo(api_client: ApiClient) -> TicketCommandApiRepoImpl:
    return TicketCommandApiRepoImpl(api_client=api_client)


@pytest.fixture
def ticket_query_repo(api_client: ApiClient) -> TicketQueryApiRepoImpl:
    return TicketQueryApiRepoImpl(api_client=api_client)


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Build an Event entity from backend-shaped overrides"""

    def _make(**overrides: Any) -> Event:
        body = {
            'id': 1,
            'title': 'PyCon',
            'description': 'Annual conference',
            'category': 'Technology',
            'location': 'Main Hall',
            'startDateTime': (datetime.now() + timedelta(days=30)).isoformat(timespec='seconds'),
            'price': 25.0,
            'capacity': 100,
            'availableTickets': 5,
            'status': 'PUBLISHED',
        }
        body.update(overrides)
        return EventResponse.model_validate(body).to_entity()

    return _make


@pytest.fixture
def wait_until() -> Callable[[Callable[[], bool]], Awaitable[None]]:
    """Yield to the event loop until `predicate()` holds (requests reach the fake API)"""

    async def _wait(predicate: Callable[[], bool], attempts: int = 500) -> None:
        for _ in range(attempts):
            if predicate():
                return
            await asyncio.sleep(0)
        raise AssertionError('Condition was not reached')

    return _wait
