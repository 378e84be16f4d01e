from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Optional

import attrs
import jwt

from eventreg.platform.exception.exceptions import DomainError


class Role(StrEnum):
    USER = 'USER'
    ADMIN = 'ADMIN'

    @classmethod
    def parse(cls, value: str) -> 'Role':
        normalized = value.strip().upper().removeprefix('ROLE_')
        try:
            return cls(normalized)
        except ValueError:
            raise DomainError(f'Unknown role: {value}')


@attrs.define(frozen=True)
class Identity:
    """The authenticated principal of this client session"""

    user_id: int | str
    username: str
    role: Role
    token: str = attrs.field(repr=False)
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None

    @property
    def display_name(self) -> str:
        full_name = ' '.join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username

    def token_expires_at(self) -> Optional[datetime]:
        """
        `exp` claim of a JWT credential.

        The signature is not verified here: the server stays the authority,
        this only avoids sending a credential that is known to be dead.
        Opaque (non-JWT) tokens have no client-side expiry.
        """
        try:
            claims = jwt.decode(
                self.token,
                options={'verify_signature': False, 'verify_exp': False},
                algorithms=['HS256', 'HS384', 'HS512', 'RS256', 'ES256'],
            )
        except jwt.PyJWTError:
            return None
        exp = claims.get('exp')
        if not isinstance(exp, int | float):
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = self.token_expires_at()
        if expires_at is None:
            return False
        return expires_at <= (now or datetime.now(timezone.utc))

    def to_record(self) -> dict[str, Any]:
        record = attrs.asdict(self)
        record['role'] = self.role.value
        return record

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> 'Identity':
        fields = {field.name for field in attrs.fields(cls)}
        values = {key: value for key, value in record.items() if key in fields}
        values['role'] = Role.parse(str(values['role']))
        return cls(**values)
