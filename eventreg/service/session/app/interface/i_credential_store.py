from abc import ABC, abstractmethod

from eventreg.service.session.domain.entity.identity_entity import Identity


class ICredentialStore(ABC):
    """
    Durable client-local storage for the session record.

    Holds at most one serialized Identity under a single well-known key,
    overwritten wholesale on every save/clear.
    """

    @abstractmethod
    def load(self) -> Identity | None:
        """Stored identity, or None if nothing (usable) is stored"""
        pass

    @abstractmethod
    def save(self, identity: Identity) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
