from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

import attrs


@attrs.define(frozen=True)
class CredentialSnapshot:
    """Bearer credential as it was when a request was sent"""

    token: str = attrs.field(repr=False)
    epoch: int
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(timezone.utc))


class ICredentialSource(ABC):
    """
    Owner of the bearer credential used by authenticated API calls.

    Implemented by the session gate; the API client only reads snapshots
    and reports authorization failures back.
    """

    @abstractmethod
    def credential_snapshot(self) -> CredentialSnapshot | None:
        """Current credential, or None when anonymous"""
        pass

    @abstractmethod
    def expire_session(self, epoch: int) -> bool:
        """
        Forced logout for the identity installed at `epoch`.

        Returns:
            True if this call cleared the identity, False if it was already
            gone or replaced
        """
        pass
