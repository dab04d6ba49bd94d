"""
One object for the whole settings surface.

:class:`AccountConsole` builds every workflow over one set of adapters and
keeps the little state the surface needs between calls: the cached profile.
It is what a UI layer holds on to.
"""

import logging
from types import TracebackType
from typing import Optional, Type

import httpx

from . import config
from .domain import DeletionResult, DeletionStatus, RecoveryResult, Session, \
    SettingsUpdateResult, UpdateResult, UserProfile
from .fragments import Location
from .services import http
from .services.datastore import SQLRecordStore
from .services.functions import HostedFunctions
from .services.identity import HostedIdentityService
from .services.interfaces import IdentityService, RecordStore, \
    RemoteFunctions
from .services.records import HostedRecordStore
from .workflows import AccountDeletion, CredentialUpdate, SessionRecovery, \
    SettingsUpdate

logger = logging.getLogger(__name__)


class AccountConsole(object):
    """The settings and account lifecycle operations of one client."""

    def __init__(self, identity: IdentityService, records: RecordStore,
                 functions: RemoteFunctions,
                 profile: Optional[UserProfile] = None) -> None:
        self.identity = identity
        self.recovery = SessionRecovery(identity)
        self.credentials = CredentialUpdate(identity)
        self.settings = SettingsUpdate(identity, records)
        self.deletion = AccountDeletion(identity, records, functions)
        self.profile = profile
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(cls, transport: Optional[httpx.AsyncBaseTransport] = None) \
            -> 'AccountConsole':
        """
        Build a console against the configured backend.

        Records go to the SQL database at ``DATABASE_URI`` if it is set, and
        to the hosted record store otherwise.
        """
        client = http.create_client(transport=transport)
        identity = HostedIdentityService(client)
        records: RecordStore
        if config.DATABASE_URI:
            records = SQLRecordStore.from_uri(config.DATABASE_URI)
        else:
            records = HostedRecordStore(client, config.SUPABASE_ANON_KEY,
                                        identity.get_current_session)
        console = cls(identity, records, HostedFunctions(client))
        console._client = client
        return console

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> 'AccountConsole':
        return self

    async def __aexit__(self, exc_type: Optional[Type[BaseException]],
                        exc: Optional[BaseException],
                        tb: Optional[TracebackType]) -> None:
        await self.aclose()

    @property
    def busy(self) -> bool:
        """True while any workflow is running."""
        return any(w.busy for w in (self.recovery, self.credentials,
                                    self.settings, self.deletion))

    async def resume(self, access_token: str,
                     refresh_token: str = '') -> Session:
        """Adopt an existing session (e.g. one saved by the client)."""
        return await self.identity.establish_session(access_token,
                                                     refresh_token)

    async def recover(self, location: Location) -> RecoveryResult:
        return await self.recovery.recover(location)

    async def update_password(self, new_password: str,
                              confirm_password: str) -> UpdateResult:
        return await self.credentials.update_password(new_password,
                                                      confirm_password)

    async def apply_settings(self, selected_home_country: str,
                             new_password: str = '',
                             confirm_password: str = '',
                             current_home_country: Optional[str] = None) \
            -> SettingsUpdateResult:
        """
        Save the settings form against the cached profile.

        The cached home country follows the profile write, even when the
        password change after it fails.
        """
        if current_home_country is None:
            current_home_country = self.profile.home_country \
                if self.profile else ''
        result = await self.settings.apply_settings(
            selected_home_country, current_home_country,
            new_password, confirm_password
        )
        session = self.identity.get_current_session()
        if result.profile_updated and result.home_country and session:
            self.profile = UserProfile(id=session.user_id,
                                       home_country=result.home_country)
        return result

    async def delete_account(self, confirmed: bool = False) -> DeletionResult:
        """
        Delete the current user's account.

        Each call is a fresh attempt that needs fresh confirmations; a
        finished earlier attempt is discarded first. The cached profile is
        dropped only if deletion completed.
        """
        session = self.identity.get_current_session()
        if session is None or session.user_id is None:
            return DeletionResult(status=DeletionStatus.ABORTED,
                                  message='Login required')
        if self.deletion.state.terminal:
            self.deletion.reset()
        result = await self.deletion.delete_account(session.user_id,
                                                    confirmed=confirmed)
        if result.ok:
            logger.info('Account %s deleted; dropping local state',
                        session.user_id)
            self.profile = None
        return result
