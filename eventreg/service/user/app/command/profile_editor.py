from typing import Optional

from eventreg.platform.exception.exceptions import (
    AuthenticationError,
    AuthErrorCode,
    CustomBaseError,
    InvalidStateTransitionError,
)
from eventreg.platform.logging.loguru_io import Logger
from eventreg.service.session.app.session_gate import SessionGate
from eventreg.service.user.app.interface.i_profile_repo import IProfileRepo
from eventreg.service.user.domain.entity.user_profile_entity import UserProfile


SAVE_SUCCESS_MESSAGE = 'Profile updated successfully!'


class ProfileEditor:
    """
    Profile page state: view mode, edit mode with a working copy, save/cancel.

    Failures never raise out of load()/save(); they leave `error` set and the
    pending flags cleared so the page can retry.
    """

    def __init__(self, profile_repo: IProfileRepo, session_gate: SessionGate) -> None:
        self.profile_repo = profile_repo
        self.session_gate = session_gate

        self.saved: UserProfile = UserProfile()
        self.draft: UserProfile = UserProfile()
        self.is_editing = False
        self.loading = False
        self.saving = False
        self.error: Optional[str] = None
        self.success: Optional[str] = None

    def _require_login(self) -> None:
        if not self.session_gate.is_authenticated():
            raise AuthenticationError('Please log in to see your profile', AuthErrorCode.LOGIN_REQUIRED)

    def _reset_messages(self) -> None:
        self.error = None
        self.success = None

    @Logger.io
    async def load(self) -> UserProfile | None:
        self._require_login()
        self.loading = True
        self._reset_messages()
        try:
            profile = await self.profile_repo.get_profile()
        except CustomBaseError as e:
            self.error = e.user_message if e.status_code else 'Failed to load profile'
            Logger.base.warning(f'👤 [PROFILE] Load failed ({e.kind}): {e}')
            return None
        finally:
            self.loading = False

        self.saved = profile
        self.draft = profile
        return profile

    def begin_edit(self) -> None:
        self.is_editing = True
        self._reset_messages()

    def change(self, **fields: str) -> UserProfile:
        if not self.is_editing:
            raise InvalidStateTransitionError('Cannot change the profile outside edit mode')
        self.draft = self.draft.with_changes(**fields)
        self._reset_messages()
        return self.draft

    def cancel(self) -> None:
        """Drop unsaved changes and go back to the last saved profile"""
        self.draft = self.saved
        self.is_editing = False
        self._reset_messages()

    @Logger.io
    async def save(self) -> bool:
        if not self.is_editing:
            raise InvalidStateTransitionError('Nothing to save outside edit mode')
        if self.saving:
            raise InvalidStateTransitionError('Profile is already being saved')

        self.saving = True
        self._reset_messages()
        try:
            stored = await self.profile_repo.update_profile(profile=self.draft)
        except CustomBaseError as e:
            # The API message is shown verbatim when there is one
            self.error = e.user_message if e.status_code else 'Failed to update profile'
            Logger.base.warning(f'👤 [PROFILE] Save failed ({e.kind}): {e}')
            return False
        finally:
            self.saving = False

        self.saved = stored
        self.draft = stored
        self.is_editing = False
        self.success = SAVE_SUCCESS_MESSAGE
        self.session_gate.update_profile(**stored.as_dict())
        Logger.base.info('👤 [PROFILE] Profile saved')
        return True
