"""
Session recovery from a password-reset link.

The reset email links back to the app with one-time tokens in the URL
fragment. :class:`SessionRecovery` turns those tokens into an authenticated
session, then clears the fragment so that reloading the page or navigating
back cannot submit the same tokens again. A token is never retried.
"""

import logging

from .. import config
from ..domain import RecoveryResult, RecoveryStatus
from ..fragments import Location, parse_fragment
from ..services.interfaces import IdentityService
from .base import STAGE_FAILURES, Workflow, failure_message

logger = logging.getLogger(__name__)

TOKEN_INVALID = 'token expired or invalid'


class SessionRecovery(Workflow):
    """Re-establishes a session from the recovery tokens in a location."""

    def __init__(self, identity: IdentityService,
                 require_refresh_token: bool =
                 config.RECOVERY_REQUIRE_REFRESH_TOKEN) -> None:
        super().__init__()
        self._identity = identity
        self.require_refresh_token = require_refresh_token

    async def recover(self, location: Location) -> RecoveryResult:
        """
        Recover a session from ``location``, if it carries a recovery link.

        Safe to call on every navigation. Locations without an access token,
        or whose ``type`` is not ``recovery``, are left alone and no service
        is called.

        Parameters
        ----------
        location : :class:`.Location`
            Its fragment is cleared after a successful recovery.

        Returns
        -------
        :class:`.RecoveryResult`
            ``recovered`` with ``show_password_change`` set, ``failed`` with a
            reason for the user, or ``not_applicable``.

        """
        request = parse_fragment(location.fragment)
        if request is None or not request.is_recovery:
            return RecoveryResult(status=RecoveryStatus.NOT_APPLICABLE)

        async with self._in_flight():
            if request.refresh_token is None and self.require_refresh_token:
                logger.info('Refused recovery link without a refresh token')
                return RecoveryResult(
                    status=RecoveryStatus.FAILED, reason=TOKEN_INVALID,
                    message='The recovery link has no refresh token'
                )

            # A link without a refresh token is still tried, with an empty one.
            refresh_token = request.refresh_token or ''
            try:
                session = await self._identity.establish_session(
                    request.access_token, refresh_token
                )
            except STAGE_FAILURES as e:
                logger.info('Session recovery failed: %s', failure_message(e))
                return RecoveryResult(status=RecoveryStatus.FAILED,
                                      reason=TOKEN_INVALID,
                                      message=failure_message(e))

            location.replace_state(location.pathname)
            logger.info('Recovered session for %s', session.user_id)
            return RecoveryResult(status=RecoveryStatus.RECOVERED,
                                  session=session,
                                  show_password_change=True)
