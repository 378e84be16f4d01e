from typing import Any

import attrs


PROFILE_FIELD_NAMES = ('first_name', 'last_name', 'email', 'phone', 'address', 'bio')


def _blank_if_none(value: str | None) -> str:
    return value or ''


@attrs.define(frozen=True)
class UserProfile:
    """Editable account details of the logged-in user"""

    first_name: str = attrs.field(default='', converter=_blank_if_none)
    last_name: str = attrs.field(default='', converter=_blank_if_none)
    email: str = attrs.field(default='', converter=_blank_if_none)
    phone: str = attrs.field(default='', converter=_blank_if_none)
    address: str = attrs.field(default='', converter=_blank_if_none)
    bio: str = attrs.field(default='', converter=_blank_if_none)

    @property
    def initials(self) -> str:
        return f'{self.first_name[:1]}{self.last_name[:1]}'.upper()

    def with_changes(self, **changes: Any) -> 'UserProfile':
        unknown = set(changes) - set(PROFILE_FIELD_NAMES)
        if unknown:
            raise ValueError(f'Unknown profile field(s): {", ".join(sorted(unknown))}')
        return attrs.evolve(self, **changes)

    def as_dict(self) -> dict[str, str]:
        return attrs.asdict(self)
