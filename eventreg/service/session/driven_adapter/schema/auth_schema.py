from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from eventreg.service.session.domain.entity.identity_entity import Identity, Role


class LoginResponse(BaseModel):
    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={
            'example': {
                'token': 'eyJhbGciOiJIUzI1NiJ9...',
                'type': 'Bearer',
                'userId': 7,
                'username': 'alice',
                'email': 'alice@example.com',
                'firstName': 'Alice',
                'lastName': 'Doe',
                'role': 'USER',
            }
        },
    )

    token: str = Field(validation_alias=AliasChoices('token', 'accessToken'))
    user_id: int | str = Field(validation_alias=AliasChoices('id', 'userId'))
    username: str
    role: Role
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, validation_alias='firstName')
    last_name: Optional[str] = Field(default=None, validation_alias='lastName')
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None

    @field_validator('role', mode='before')
    @classmethod
    def parse_role(cls, v: object) -> Role:
        return Role.parse(str(v))

    def to_entity(self) -> Identity:
        return Identity(
            user_id=self.user_id,
            username=self.username,
            role=self.role,
            token=self.token,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            phone=self.phone,
            address=self.address,
            bio=self.bio,
        )
