from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from eventreg.service.user.domain.entity.user_profile_entity import UserProfile


class ProfileSchema(BaseModel):
    model_config = ConfigDict(
        extra='ignore',
        populate_by_name=True,
        json_schema_extra={
            'example': {
                'firstName': 'Alice',
                'lastName': 'Doe',
                'email': 'alice@example.com',
                'phone': '+886 912 345 678',
                'address': 'Taipei',
                'bio': 'Conference goer',
            }
        },
    )

    first_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('firstName', 'first_name'),
        serialization_alias='firstName',
    )
    last_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('lastName', 'last_name'),
        serialization_alias='lastName',
    )
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None

    @classmethod
    def from_entity(cls, profile: UserProfile) -> 'ProfileSchema':
        return cls(**profile.as_dict())

    def to_entity(self) -> UserProfile:
        return UserProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            address=self.address,
            bio=self.bio,
        )
