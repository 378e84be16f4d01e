"""
Session / Authorization Gate

Sole owner and sole writer of the process-wide Identity.

Ordering of identity-changing operations:
- every operation that can change the identity (login start, logout,
  forced logout, restore) takes a new epoch
- a login applies its result only if its epoch is still the latest one,
  so a forced logout that lands while a login is in flight wins
- forced logout carries the epoch of the identity the failing request was
  sent with; it is a no-op once that identity is gone or replaced, which
  makes concurrent 401s clear the session exactly once
"""

from collections.abc import Iterable

import attrs
from anyio.streams.memory import MemoryObjectReceiveStream

from eventreg.platform.event.in_memory_broadcaster import InMemoryBroadcaster
from eventreg.platform.exception.exceptions import (
    AuthenticationError,
    AuthErrorCode,
    CustomBaseError,
    ForbiddenError,
    NetworkError,
    ServerError,
    SessionExpiredError,
)
from eventreg.platform.http.i_credential_source import CredentialSnapshot, ICredentialSource
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.session.app.interface.i_auth_api import IAuthApi
from eventreg.service.session.app.interface.i_credential_store import ICredentialStore
from eventreg.service.session.app.session_change import SessionChange, SessionChangeKind
from eventreg.service.session.domain.entity.identity_entity import Identity, Role
from eventreg.service.session.domain.route_guard import has_role
from eventreg.service.session.domain.value_object.credentials import Credentials, Registration


PROFILE_FIELDS = frozenset({'email', 'first_name', 'last_name', 'phone', 'address', 'bio'})


class SessionGate(ICredentialSource):
    def __init__(
        self,
        *,
        auth_api: IAuthApi,
        credential_store: ICredentialStore,
        broadcaster: InMemoryBroadcaster[SessionChange] | None = None,
        verify_on_restore: bool = True,
    ) -> None:
        self._auth_api = auth_api
        self._credential_store = credential_store
        self._broadcaster = broadcaster or InMemoryBroadcaster[SessionChange](name='SESSION')
        self._verify_on_restore = verify_on_restore

        self._identity: Identity | None = None
        self._identity_epoch = 0
        self._epoch = 0
        self._pending_logins = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def current_identity(self) -> Identity | None:
        return self._identity

    def is_authenticated(self) -> bool:
        return self._identity is not None

    def has_role(self, required_roles: Iterable[Role]) -> bool:
        return has_role(self._identity, required_roles)

    @property
    def login_pending(self) -> bool:
        return self._pending_logins > 0

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self) -> MemoryObjectReceiveStream[SessionChange]:
        return self._broadcaster.subscribe()

    def unsubscribe(self, stream: MemoryObjectReceiveStream[SessionChange]) -> None:
        self._broadcaster.unsubscribe(stream)

    # ------------------------------------------------------------------
    # Identity lifecycle
    # ------------------------------------------------------------------
    @Logger.io
    async def login(self, *, credentials: Credentials) -> Identity:
        """
        Raises:
            DomainError: username or password missing (no request sent)
            AuthenticationError: INVALID_CREDENTIALS, or SUPERSEDED when another
                identity change happened while this login was in flight
            NetworkError, ServerError
        """
        credentials.validate()

        epoch = self._next_epoch()
        self._pending_logins += 1
        try:
            identity = await self._auth_api.login(credentials=credentials)
        finally:
            self._pending_logins -= 1

        if epoch != self._epoch:
            Logger.base.warning(
                f'🔐 [SESSION] Discarding stale login result for {identity.username} '
                f'(epoch {epoch}, current {self._epoch})'
            )
            raise AuthenticationError(
                'The session changed while logging in, please try again',
                AuthErrorCode.SUPERSEDED,
            )

        self._install(identity, epoch=epoch, kind=SessionChangeKind.LOGIN)
        Logger.base.info(f'🔐 [SESSION] Logged in as {identity.username} ({identity.role})')
        return identity

    @Logger.io
    async def logout(self) -> None:
        """Clears local state before any network call; never raises for server failures"""
        identity = self._identity
        if identity is None:
            # Nothing to clear, but a login still in flight must not land afterwards
            if self._pending_logins:
                self._next_epoch()
            return
        self._clear(SessionChangeKind.LOGOUT)

        Logger.base.info(f'🔓 [SESSION] Logged out {identity.username}')
        try:
            await self._auth_api.logout(identity=identity)
        except CustomBaseError as e:
            Logger.base.warning(f'🔓 [SESSION] Server-side logout failed ({e.kind}): {e}')

    def expire_session(self, epoch: int) -> bool:
        if self._identity is None or self._identity_epoch != epoch:
            return False
        username = self._identity.username
        self._clear(SessionChangeKind.EXPIRED)
        Logger.base.warning(f'⏰ [SESSION] Session of {username} expired, identity cleared')
        return True

    @Logger.io
    async def restore(self) -> Identity | None:
        """
        Rehydrate the identity persisted by a previous process.

        A credential rejected by the API (401 or 403 on the validation call)
        goes through the forced-logout path. An unreachable or failing API
        (network error, 5xx) keeps the identity.
        """
        identity = self._credential_store.load()
        if identity is None:
            return None

        if identity.is_expired():
            Logger.base.info(f'⏰ [SESSION] Stored credential of {identity.username} has expired')
            self._clear_store()
            return None

        epoch = self._next_epoch()
        self._install(identity, epoch=epoch, kind=SessionChangeKind.RESTORED, persist=False)

        if self._verify_on_restore:
            try:
                await self._auth_api.validate()
            except (SessionExpiredError, ForbiddenError):
                self.expire_session(epoch)
                return None
            except (NetworkError, ServerError) as e:
                Logger.base.warning(
                    f'🔐 [SESSION] Could not verify restored session, keeping it: {e}'
                )

        return self._identity

    def update_profile(self, **profile_fields: str | None) -> Identity | None:
        """
        Copy saved profile fields onto the current identity.

        The principal (user id, role, token) never changes here, so no epoch
        is taken; subscribers get PROFILE_UPDATED.
        """
        if self._identity is None:
            return None
        allowed = {key: value for key, value in profile_fields.items() if key in PROFILE_FIELDS}
        identity = attrs.evolve(self._identity, **allowed)
        self._install(identity, epoch=self._identity_epoch, kind=SessionChangeKind.PROFILE_UPDATED)
        return identity

    @Logger.io
    async def register(self, *, registration: Registration) -> None:
        registration.validate()
        await self._auth_api.register(registration=registration)
        Logger.base.info(f'📝 [SESSION] Registered {registration.username}')

    # ------------------------------------------------------------------
    # ICredentialSource
    # ------------------------------------------------------------------
    def credential_snapshot(self) -> CredentialSnapshot | None:
        if self._identity is None:
            return None
        return CredentialSnapshot(
            token=self._identity.token,
            epoch=self._identity_epoch,
            expires_at=self._identity.token_expires_at(),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _next_epoch(self) -> int:
        self._epoch += 1
        return self._epoch

    def _install(
        self, identity: Identity, *, epoch: int, kind: SessionChangeKind, persist: bool = True
    ) -> None:
        self._identity = identity
        self._identity_epoch = epoch
        if persist:
            self._credential_store.save(identity)
        self._broadcaster.broadcast(SessionChange(kind=kind, identity=identity))

    def _clear(self, kind: SessionChangeKind) -> None:
        self._next_epoch()
        self._identity = None
        self._identity_epoch = 0
        self._clear_store()
        self._broadcaster.broadcast(SessionChange(kind=kind, identity=None))

    def _clear_store(self) -> None:
        try:
            self._credential_store.clear()
        except OSError as e:
            # In-memory state is already cleared; the stale record is rejected on next start
            Logger.base.error(f'💾 [SESSION] Failed to clear stored credential: {e}')
