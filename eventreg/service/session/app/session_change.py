from enum import StrEnum
from typing import Optional

import attrs

from eventreg.service.session.domain.entity.identity_entity import Identity


class SessionChangeKind(StrEnum):
    LOGIN = 'login'
    LOGOUT = 'logout'
    EXPIRED = 'expired'
    RESTORED = 'restored'
    PROFILE_UPDATED = 'profile_updated'


@attrs.define(frozen=True)
class SessionChange:
    kind: SessionChangeKind
    identity: Optional[Identity] = None
