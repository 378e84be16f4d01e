"""
Navigation router

Guards every navigation attempt against the session gate. The guard is
evaluated on each call (never cached at mount) and again whenever the
identity changes, so a logout elsewhere or an expired credential moves the
user off a protected view.
"""

from typing import Any, Optional

import attrs

from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.session.domain.entity.identity_entity import Role
from eventreg.service.session.domain.route_guard import GuardVerdict, RouteRule


HOME_PATH = '/'
LOGIN_PATH = '/login'

# Return path key carried in navigation state across the login redirect
FROM_KEY = 'from'

DEFAULT_ROUTES: tuple[RouteRule, ...] = (
    RouteRule('/'),
    RouteRule('/login'),
    RouteRule('/register'),
    RouteRule('/events'),
    RouteRule('/events/{event_id}'),
    RouteRule('/create-event', protected=True, roles={Role.ADMIN, Role.USER}),
    RouteRule('/my-tickets', protected=True, roles={Role.USER}),
    RouteRule('/profile', protected=True),
    RouteRule('/admin', protected=True, roles={Role.ADMIN}),
)


@attrs.define(frozen=True)
class NavigationResult:
    location: str
    params: dict[str, str] = attrs.field(factory=dict)
    state: dict[str, Any] = attrs.field(factory=dict)
    verdict: GuardVerdict = GuardVerdict.ALLOW
    redirected_from: Optional[str] = None

    @property
    def redirected(self) -> bool:
        return self.redirected_from is not None


class Router:
    def __init__(
        self,
        *,
        session_gate: SessionGate,
        routes: tuple[RouteRule, ...] = DEFAULT_ROUTES,
    ) -> None:
        self._session_gate = session_gate
        self._routes = routes
        self._current = NavigationResult(location=HOME_PATH)

    @property
    def current(self) -> NavigationResult:
        return self._current

    @property
    def location(self) -> str:
        return self._current.location

    def _resolve(self, path: str) -> tuple[RouteRule, dict[str, str]] | None:
        for rule in self._routes:
            params = rule.match(path)
            if params is not None:
                return rule, params
        return None

    @Logger.io
    def navigate(self, path: str, *, state: Optional[dict[str, Any]] = None) -> NavigationResult:
        state = dict(state or {})
        resolved = self._resolve(path)
        if resolved is None:
            # Unknown paths fall back to home
            return self._go(NavigationResult(location=HOME_PATH, redirected_from=path))

        rule, params = resolved
        verdict = rule.check(self._session_gate.current_identity())

        if verdict == GuardVerdict.REDIRECT_LOGIN:
            Logger.base.info(f'🧭 [ROUTER] {path} requires login, redirecting')
            return self._go(
                NavigationResult(
                    location=LOGIN_PATH,
                    state={**state, FROM_KEY: path},
                    verdict=verdict,
                    redirected_from=path,
                )
            )
        if verdict == GuardVerdict.REDIRECT_HOME:
            Logger.base.info(f'🧭 [ROUTER] {path} not permitted for current role, redirecting home')
            return self._go(
                NavigationResult(location=HOME_PATH, verdict=verdict, redirected_from=path)
            )

        return self._go(NavigationResult(location=path, params=params, state=state))

    def redirect_to_login(self, *, return_to: str, **resume_state: Any) -> NavigationResult:
        """Send the user to login, remembering where (and how) to come back"""
        return self._go(
            NavigationResult(
                location=LOGIN_PATH,
                state={**resume_state, FROM_KEY: return_to},
                verdict=GuardVerdict.REDIRECT_LOGIN,
                redirected_from=return_to,
            )
        )

    def complete_login(self) -> NavigationResult:
        """Return to the view that sent the user to login (home by default)"""
        state = dict(self._current.state)
        target = state.pop(FROM_KEY, None) or HOME_PATH
        return self.navigate(target, state=state)

    def refresh(self) -> NavigationResult:
        """Re-run the guard for the current view"""
        current = self._current
        if current.location == LOGIN_PATH:
            return current
        return self.navigate(current.location, state=current.state)

    async def follow_session(self) -> None:
        """Re-guard the current view on every identity change until cancelled"""
        stream = self._session_gate.subscribe()
        try:
            async with stream:
                async for change in stream:
                    Logger.base.debug(f'🧭 [ROUTER] Session changed ({change.kind}), re-guarding')
                    self.refresh()
        finally:
            self._session_gate.unsubscribe(stream)

    def _go(self, result: NavigationResult) -> NavigationResult:
        self._current = result
        return result
