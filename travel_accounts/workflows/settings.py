"""
Settings update: home country preference plus an optional password change.

Steps run in this order and the first failure stops the rest:

1. If a new password was given, it must match its confirmation. Nothing has
   been touched yet.
2. If the home country changed, save it to the user's profile.
3. If a new password was given, submit it to the identity service.

There is no compensating transaction. When step 3 fails after step 2
succeeded, the new home country stays saved and the result says so.
"""

import logging

import pycountry

from .. import config
from ..domain import SettingsStage, SettingsStatus, SettingsUpdateResult
from ..exceptions import InvalidCountry
from ..services.interfaces import IdentityService, RecordStore
from .base import STAGE_FAILURES, Workflow, failure_message

logger = logging.getLogger(__name__)


def _normal(code: str) -> str:
    return (code or '').strip().upper()


def check_country(code: str) -> str:
    """
    Normalize an ISO 3166-1 alpha-2 country code.

    Raises
    ------
    :class:`.InvalidCountry`

    """
    code = _normal(code)
    country = pycountry.countries.get(alpha_2=code) if len(code) == 2 \
        else None
    if country is None:
        raise InvalidCountry(f'Unknown country code: {code!r}')
    return code


class SettingsUpdate(Workflow):
    """Applies the settings form of the current user."""

    def __init__(self, identity: IdentityService, records: RecordStore,
                 profiles_table: str = config.PROFILES_TABLE,
                 dismiss_after: float = config.SETTINGS_DISMISS_DELAY) -> None:
        super().__init__()
        self._identity = identity
        self._records = records
        self.profiles_table = profiles_table
        self.dismiss_after = dismiss_after

    async def apply_settings(self, selected_home_country: str,
                             current_home_country: str,
                             new_password: str = '',
                             confirm_password: str = '') \
            -> SettingsUpdateResult:
        """
        Save the settings form.

        Parameters
        ----------
        selected_home_country : str
            Country code chosen in the form.
        current_home_country : str
            Country code on record. The profile is only written if the two
            differ.
        new_password : str
            Empty to leave the password alone.
        confirm_password : str

        Returns
        -------
        :class:`.SettingsUpdateResult`

        """
        session = self._identity.get_current_session()
        if session is None or session.user_id is None:
            return SettingsUpdateResult(
                status=SettingsStatus.NO_ACTIVE_SESSION,
                message='Login required'
            )

        if new_password and new_password != confirm_password:
            return SettingsUpdateResult(
                status=SettingsStatus.PASSWORD_MISMATCH,
                message='Passwords do not match'
            )

        home_country = current_home_country
        country_changed = _normal(selected_home_country) \
            != _normal(current_home_country)
        if country_changed:
            try:
                home_country = check_country(selected_home_country)
            except InvalidCountry as e:
                return SettingsUpdateResult(
                    status=SettingsStatus.INVALID_COUNTRY, message=str(e)
                )

        async with self._in_flight():
            profile_updated = False
            if country_changed:
                try:
                    await self._records.update(
                        self.profiles_table, {'id': session.user_id},
                        {'home_country': home_country}
                    )
                except STAGE_FAILURES as e:
                    logger.info('Profile update failed: %s',
                                failure_message(e))
                    return SettingsUpdateResult(
                        status=SettingsStatus.FAILED,
                        stage=SettingsStage.PROFILE,
                        message=failure_message(e),
                        home_country=current_home_country
                    )
                profile_updated = True
                logger.debug('Home country of %s is now %s',
                             session.user_id, home_country)

            if new_password:
                try:
                    await self._identity.update_credential(new_password)
                except STAGE_FAILURES as e:
                    logger.info('Password change failed after profile '
                                'update=%s: %s', profile_updated,
                                failure_message(e))
                    return SettingsUpdateResult(
                        status=SettingsStatus.FAILED,
                        stage=SettingsStage.CREDENTIAL,
                        message=failure_message(e),
                        home_country=home_country,
                        profile_updated=profile_updated
                    )

        return SettingsUpdateResult(status=SettingsStatus.SUCCESS,
                                    message='Settings updated',
                                    home_country=home_country,
                                    profile_updated=profile_updated,
                                    credential_updated=bool(new_password),
                                    dismiss_after=self.dismiss_after)
