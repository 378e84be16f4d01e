"""
Route guard rules

Views never inspect Identity fields for authorization decisions; they ask
these functions (or the session gate, which delegates here).
"""

from collections.abc import Iterable
from enum import StrEnum
import re
from typing import Optional

import attrs

from eventreg.service.session.domain.entity.identity_entity import Identity, Role


class GuardVerdict(StrEnum):
    ALLOW = 'allow'
    REDIRECT_LOGIN = 'redirect_login'
    REDIRECT_HOME = 'redirect_home'


def has_role(identity: Optional[Identity], required_roles: Iterable[Role]) -> bool:
    """Empty role-set means any authenticated identity"""
    if identity is None:
        return False
    roles = frozenset(required_roles)
    return not roles or identity.role in roles


def evaluate_access(identity: Optional[Identity], required_roles: Iterable[Role]) -> GuardVerdict:
    if identity is None:
        return GuardVerdict.REDIRECT_LOGIN
    if not has_role(identity, required_roles):
        return GuardVerdict.REDIRECT_HOME
    return GuardVerdict.ALLOW


def _compile_pattern(pattern: str) -> re.Pattern[str]:
    regex = re.sub(r'\{(\w+)\}', r'(?P<\1>[^/]+)', pattern.rstrip('/') or '/')
    return re.compile(f'^{regex}/?$')


@attrs.define(frozen=True)
class RouteRule:
    pattern: str
    protected: bool = False
    roles: frozenset[Role] = attrs.field(factory=frozenset, converter=frozenset)
    _regex: re.Pattern[str] = attrs.field(init=False, repr=False, eq=False)

    def __attrs_post_init__(self) -> None:
        object.__setattr__(self, '_regex', _compile_pattern(self.pattern))

    def match(self, path: str) -> Optional[dict[str, str]]:
        found = self._regex.match(path.split('?', 1)[0])
        return found.groupdict() if found else None

    def check(self, identity: Optional[Identity]) -> GuardVerdict:
        if not self.protected:
            return GuardVerdict.ALLOW
        return evaluate_access(identity, self.roles)
