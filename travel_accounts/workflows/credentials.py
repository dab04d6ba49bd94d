"""Password change for the current session."""

import logging

from .. import config
from ..domain import UpdateResult, UpdateStatus
from ..exceptions import PasswordMismatch, PasswordTooShort
from ..services.interfaces import IdentityService
from .base import STAGE_FAILURES, Workflow, failure_message

logger = logging.getLogger(__name__)


def check_password(new_password: str, confirm_password: str,
                   min_length: int = config.MIN_PASSWORD_LENGTH) -> None:
    """
    Validate a new password and its confirmation, in that order.

    Raises
    ------
    :class:`.PasswordMismatch`
    :class:`.PasswordTooShort`

    """
    if new_password != confirm_password:
        raise PasswordMismatch('Passwords do not match')
    if len(new_password) < min_length:
        raise PasswordTooShort(
            f'Password must be at least {min_length} characters'
        )


class CredentialUpdate(Workflow):
    """Validates and submits a new password. The session stays the same."""

    def __init__(self, identity: IdentityService,
                 min_length: int = config.MIN_PASSWORD_LENGTH,
                 dismiss_after: float = config.RESET_DISMISS_DELAY) -> None:
        super().__init__()
        self._identity = identity
        self.min_length = min_length
        self.dismiss_after = dismiss_after

    async def update_password(self, new_password: str,
                              confirm_password: str) -> UpdateResult:
        """Set a new password, after local validation."""
        try:
            check_password(new_password, confirm_password, self.min_length)
        except PasswordMismatch as e:
            return UpdateResult(status=UpdateStatus.PASSWORD_MISMATCH,
                                message=str(e))
        except PasswordTooShort as e:
            return UpdateResult(status=UpdateStatus.PASSWORD_TOO_SHORT,
                                message=str(e))

        if self._identity.get_current_session() is None:
            return UpdateResult(status=UpdateStatus.NO_ACTIVE_SESSION,
                                message='Login required')

        async with self._in_flight():
            try:
                await self._identity.update_credential(new_password)
            except STAGE_FAILURES as e:
                logger.info('Password change failed: %s', failure_message(e))
                return UpdateResult(status=UpdateStatus.IDENTITY_ERROR,
                                    message=failure_message(e))
        return UpdateResult(status=UpdateStatus.SUCCESS,
                            message='Password changed',
                            dismiss_after=self.dismiss_after)
