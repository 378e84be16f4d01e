import re

import attrs
from pydantic import SecretStr

from eventreg.platform.exception.exceptions import DomainError


_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def _to_secret(value: str | SecretStr) -> SecretStr:
    return value if isinstance(value, SecretStr) else SecretStr(value)


@attrs.define(frozen=True)
class Credentials:
    username: str
    password: SecretStr = attrs.field(converter=_to_secret)

    def validate(self) -> None:
        if not self.username or not self.username.strip():
            raise DomainError('Username is required')
        if not self.password.get_secret_value():
            raise DomainError('Password is required')

    def to_payload(self) -> dict[str, str]:
        return {'username': self.username.strip(), 'password': self.password.get_secret_value()}


@attrs.define(frozen=True)
class Registration:
    username: str
    email: str
    password: SecretStr = attrs.field(converter=_to_secret)
    first_name: str = ''
    last_name: str = ''

    def validate(self) -> None:
        if not self.username or not self.username.strip():
            raise DomainError('Username is required')
        if not _EMAIL_PATTERN.match(self.email or ''):
            raise DomainError('A valid email address is required')
        if len(self.password.get_secret_value()) < 6:
            raise DomainError('Password must be at least 6 characters')

    def to_payload(self) -> dict[str, str]:
        return {
            'username': self.username.strip(),
            'email': self.email.strip(),
            'password': self.password.get_secret_value(),
            'firstName': self.first_name,
            'lastName': self.last_name,
        }
