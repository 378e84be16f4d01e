from abc import ABC, abstractmethod

from eventreg.service.user.domain.entity.user_profile_entity import UserProfile


class IProfileRepo(ABC):
    @abstractmethod
    async def get_profile(self) -> UserProfile:
        pass

    @abstractmethod
    async def update_profile(self, *, profile: UserProfile) -> UserProfile:
        """Persist the profile; returns what the server stored"""
        pass
