"""
REST API client

The one place where the bearer credential is attached and where HTTP
failures are translated into the client error taxonomy. Every feature
adapter (events, tickets, profile, admin) goes through here, so a 401 on
any authenticated call ends the session exactly once no matter which
feature triggered it.
"""

from types import TracebackType
from typing import Any, Mapping, Optional, Self

import httpx
import orjson

from eventreg.platform.config.core_setting import Settings, settings as default_settings
from eventreg.platform.exception.exceptions import (
    AuthenticationError,
    AuthErrorCode,
    AvailabilityError,
    CustomBaseError,
    DomainError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    ServerError,
    SessionExpiredError,
)
from eventreg.platform.http.i_credential_source import CredentialSnapshot, ICredentialSource
from eventreg.platform.logging.loguru_io import Logger


def extract_error_message(response: httpx.Response) -> str | None:
    """Server-provided message from `message`, `error` or `detail`, if any"""
    if not response.content:
        return None
    try:
        body = orjson.loads(response.content)
    except orjson.JSONDecodeError:
        text = response.text.strip()
        return text or None
    if isinstance(body, dict):
        for key in ('message', 'error', 'detail'):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def map_error_response(response: httpx.Response) -> CustomBaseError:
    status = response.status_code
    message = extract_error_message(response)

    if status == 401:
        return AuthenticationError(message)
    if status == 403:
        return ForbiddenError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return AvailabilityError(message)
    if status >= 500:
        return ServerError(message, status)
    return DomainError(message or 'Invalid request', status)


class ApiClient:
    def __init__(
        self,
        *,
        config: Settings = default_settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        credential_source: Optional[ICredentialSource] = None,
    ) -> None:
        self._config = config
        self._credential_source = credential_source
        self._client = httpx.AsyncClient(
            base_url=config.API_BASE_URL,
            timeout=config.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
            headers={
                'Accept': 'application/json',
                'User-Agent': config.USER_AGENT,
            },
        )

    def bind_credential_source(self, credential_source: ICredentialSource) -> None:
        self._credential_source = credential_source

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _authenticated_snapshot(self) -> CredentialSnapshot:
        snapshot = (
            self._credential_source.credential_snapshot() if self._credential_source else None
        )
        if snapshot is None:
            raise AuthenticationError('Please log in to continue', AuthErrorCode.LOGIN_REQUIRED)
        if snapshot.is_expired():
            Logger.base.info('🔒 [API] Credential expired before sending, forcing logout')
            self._expire(snapshot)
            raise SessionExpiredError()
        return snapshot

    def _expire(self, snapshot: CredentialSnapshot) -> None:
        if self._credential_source is not None:
            self._credential_source.expire_session(snapshot.epoch)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        authenticated: bool = False,
        bearer_token: Optional[str] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Args:
            authenticated: attach the session credential; a 401 (or 403 when
                LOGOUT_ON_FORBIDDEN) then forces a logout
            bearer_token: explicit token for calls made outside the live
                session (server-side logout); never forces a logout

        Raises:
            CustomBaseError subclasses, see map_error_response
        """
        snapshot: CredentialSnapshot | None = None
        headers: dict[str, str] = {}
        if authenticated:
            snapshot = self._authenticated_snapshot()
            headers['Authorization'] = f'Bearer {snapshot.token}'
        elif bearer_token:
            headers['Authorization'] = f'Bearer {bearer_token}'

        content = orjson.dumps(json) if json is not None else None
        if content is not None:
            headers['Content-Type'] = 'application/json'

        try:
            response = await self._client.request(
                method, path, content=content, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            raise NetworkError('The request timed out, please try again') from e
        except httpx.TransportError as e:
            raise NetworkError() from e

        if response.is_success:
            if not response.content:
                return None
            try:
                return orjson.loads(response.content)
            except orjson.JSONDecodeError as e:
                raise ServerError('The server sent a malformed response', response.status_code) from e

        error = map_error_response(response)
        if snapshot is not None and self._is_session_rejection(response.status_code):
            Logger.base.warning(
                f'🔒 [API] {method} {path} rejected with {response.status_code}, forcing logout'
            )
            self._expire(snapshot)
            if response.status_code == 401:
                raise SessionExpiredError() from error
            if isinstance(error, ForbiddenError):
                error.session_expired = True
        raise error

    def _is_session_rejection(self, status_code: int) -> bool:
        if status_code == 401:
            return True
        return status_code == 403 and self._config.LOGOUT_ON_FORBIDDEN

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request('GET', path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request('POST', path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request('PUT', path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request('DELETE', path, **kwargs)
