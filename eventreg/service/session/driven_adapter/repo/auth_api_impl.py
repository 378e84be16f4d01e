from pydantic import ValidationError

from eventreg.platform.constant.route_constant import (
    AUTH_LOGIN,
    AUTH_LOGOUT,
    AUTH_REGISTER,
    AUTH_VALIDATE,
)
from eventreg.platform.exception.exceptions import (
    AuthenticationError,
    AuthErrorCode,
    DomainError,
    ServerError,
)
from eventreg.platform.http.api_client import ApiClient
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.session.app.interface.i_auth_api import IAuthApi
from eventreg.service.session.domain.entity.identity_entity import Identity
from eventreg.service.session.domain.value_object.credentials import Credentials, Registration
from eventreg.service.session.driven_adapter.schema.auth_schema import LoginResponse


class AuthApiImpl(IAuthApi):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def login(self, *, credentials: Credentials) -> Identity:
        try:
            body = await self.api_client.post(AUTH_LOGIN, json=credentials.to_payload())
        except AuthenticationError as e:
            raise AuthenticationError(e.message, AuthErrorCode.INVALID_CREDENTIALS) from e
        except DomainError as e:
            # The API answers bad credentials with 400 + {"error": "..."}
            raise AuthenticationError(
                'Invalid username or password', AuthErrorCode.INVALID_CREDENTIALS
            ) from e

        try:
            return LoginResponse.model_validate(body).to_entity()
        except (ValidationError, DomainError) as e:
            raise ServerError('The server sent an unexpected login response') from e

    @Logger.io
    async def logout(self, *, identity: Identity) -> None:
        await self.api_client.post(AUTH_LOGOUT, bearer_token=identity.token)

    @Logger.io
    async def validate(self) -> None:
        await self.api_client.get(AUTH_VALIDATE, authenticated=True)

    @Logger.io
    async def register(self, *, registration: Registration) -> None:
        await self.api_client.post(AUTH_REGISTER, json=registration.to_payload())
