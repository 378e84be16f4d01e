from abc import ABC, abstractmethod

from eventreg.service.session.domain.entity.identity_entity import Identity
from eventreg.service.session.domain.value_object.credentials import Credentials, Registration


class IAuthApi(ABC):
    @abstractmethod
    async def login(self, *, credentials: Credentials) -> Identity:
        """
        Exchange username/password for a role-bearing identity

        Raises:
            AuthenticationError: INVALID_CREDENTIALS
            NetworkError, ServerError
        """
        pass

    @abstractmethod
    async def logout(self, *, identity: Identity) -> None:
        """Best-effort server-side invalidation of the identity's token"""
        pass

    @abstractmethod
    async def validate(self) -> None:
        """Authenticated round trip proving the current credential is accepted"""
        pass

    @abstractmethod
    async def register(self, *, registration: Registration) -> None:
        pass
