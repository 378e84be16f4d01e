from typing import Any

from pydantic import ValidationError

from eventreg.platform.constant.route_constant import USER_PROFILE
from eventreg.platform.exception.exceptions import ServerError
from eventreg.platform.http.api_client import ApiClient
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.user.app.interface.i_profile_repo import IProfileRepo
from eventreg.service.user.domain.entity.user_profile_entity import UserProfile
from eventreg.service.user.driven_adapter.schema.profile_schema import ProfileSchema


class ProfileApiRepoImpl(IProfileRepo):
    def __init__(self, *, api_client: ApiClient) -> None:
        self.api_client = api_client

    @staticmethod
    def _parse(body: Any, fallback: UserProfile | None = None) -> UserProfile:
        if body is None and fallback is not None:
            return fallback
        try:
            return ProfileSchema.model_validate(body).to_entity()
        except ValidationError as e:
            raise ServerError('The server sent an unexpected profile') from e

    @Logger.io
    async def get_profile(self) -> UserProfile:
        return self._parse(await self.api_client.get(USER_PROFILE, authenticated=True))

    @Logger.io
    async def update_profile(self, *, profile: UserProfile) -> UserProfile:
        payload = ProfileSchema.from_entity(profile).model_dump(by_alias=True)
        body = await self.api_client.put(USER_PROFILE, json=payload, authenticated=True)
        return self._parse(body, fallback=profile)
