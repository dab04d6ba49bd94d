"""Defines the core data structures for the account settings engine."""

from abc import abstractmethod
from datetime import datetime
from enum import Enum, IntEnum
from typing import List, NoReturn, Optional

from pydantic import BaseModel, ConfigDict
from pytz import UTC

from . import exceptions


class Session(BaseModel):
    """An authenticated identity, as issued by the identity service."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    """Bearer credential for the identity service and the record store."""

    refresh_token: str = ''
    """May be empty when the session came from a recovery link without one."""

    user_id: Optional[str] = None
    """Identity the session belongs to (the token's ``sub``)."""

    expires_at: Optional[datetime] = None
    """When the access token stops being accepted, if known."""

    @property
    def expired(self) -> bool:
        """Whether the access token is past its expiry."""
        return self.expires_at is not None \
            and self.expires_at <= datetime.now(tz=UTC)


class RecoveryType(str, Enum):
    """The ``type`` of a link fragment. Anything but a recovery is ``other``."""

    RECOVERY = 'recovery'
    OTHER = 'other'


class RecoveryRequest(BaseModel):
    """Tokens carried by a password-reset link."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: Optional[str] = None
    type: RecoveryType = RecoveryType.OTHER

    @property
    def is_recovery(self) -> bool:
        return self.type is RecoveryType.RECOVERY


class UserProfile(BaseModel):
    """Profile record, keyed by user identity."""

    id: str
    home_country: str
    """ISO 3166-1 alpha-2 code, upper case."""


class Outcome(BaseModel):
    """
    Base for the values workflows report back to their caller.

    Abstract; only the per-workflow results below are instantiated.
    """

    message: Optional[str] = None
    """User-facing text, passed through verbatim from the failing service."""

    @property
    @abstractmethod
    def ok(self) -> bool:
        """Whether the workflow did what it was asked to."""

    def raise_for_status(self) -> None:
        """Raise the exception matching this outcome, if it is a failure."""
        if not self.ok:
            self._raise()

    @abstractmethod
    def _raise(self) -> NoReturn:
        """Raise the exception for this failure."""


# Session recovery.

class RecoveryStatus(str, Enum):
    NOT_APPLICABLE = 'not_applicable'
    RECOVERED = 'recovered'
    FAILED = 'failed'


class RecoveryResult(Outcome):
    """What happened to a recovery link."""

    status: RecoveryStatus
    session: Optional[Session] = None
    show_password_change: bool = False
    """The caller should present the new-password form."""

    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not RecoveryStatus.FAILED

    def _raise(self) -> NoReturn:
        raise exceptions.IdentityServiceError(
            self.message or self.reason or 'Session recovery failed',
            stage='recovery'
        )


# Password change.

class UpdateStatus(str, Enum):
    SUCCESS = 'success'
    PASSWORD_MISMATCH = 'password_mismatch'
    PASSWORD_TOO_SHORT = 'password_too_short'
    NO_ACTIVE_SESSION = 'no_active_session'
    IDENTITY_ERROR = 'identity_error'


class UpdateResult(Outcome):
    """Result of a password change."""

    status: UpdateStatus
    dismiss_after: Optional[float] = None
    """Seconds to keep the confirmation on screen before closing the form."""

    @property
    def ok(self) -> bool:
        return self.status is UpdateStatus.SUCCESS

    def _raise(self) -> NoReturn:
        if self.status is UpdateStatus.PASSWORD_MISMATCH:
            raise exceptions.PasswordMismatch(self.message)
        if self.status is UpdateStatus.PASSWORD_TOO_SHORT:
            raise exceptions.PasswordTooShort(self.message)
        if self.status is UpdateStatus.NO_ACTIVE_SESSION:
            raise exceptions.NoActiveSession(self.message)
        raise exceptions.IdentityServiceError(self.message or '',
                                              stage='credential')


# Settings (home country + optional password).

class SettingsStage(str, Enum):
    PROFILE = 'profile'
    CREDENTIAL = 'credential'


class SettingsStatus(str, Enum):
    SUCCESS = 'success'
    PASSWORD_MISMATCH = 'password_mismatch'
    INVALID_COUNTRY = 'invalid_country'
    NO_ACTIVE_SESSION = 'no_active_session'
    FAILED = 'failed'


class SettingsUpdateResult(Outcome):
    """
    Result of a settings update.

    A profile change is not rolled back when the password change that follows
    it fails. Check :attr:`profile_updated` (or :attr:`partial`) to learn
    whether the home country was saved.
    """

    status: SettingsStatus
    stage: Optional[SettingsStage] = None
    home_country: Optional[str] = None
    """The home country now on record, when known."""

    profile_updated: bool = False
    credential_updated: bool = False
    dismiss_after: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.status is SettingsStatus.SUCCESS

    @property
    def partial(self) -> bool:
        return self.status is SettingsStatus.FAILED and self.profile_updated

    def _raise(self) -> NoReturn:
        if self.status is SettingsStatus.PASSWORD_MISMATCH:
            raise exceptions.PasswordMismatch(self.message)
        if self.status is SettingsStatus.INVALID_COUNTRY:
            raise exceptions.InvalidCountry(self.message)
        if self.status is SettingsStatus.NO_ACTIVE_SESSION:
            raise exceptions.NoActiveSession(self.message)
        stage = self.stage.value if self.stage else None
        if self.partial:
            raise exceptions.PartialFailure(self.message or '', stage=stage,
                                            completed=['profile'])
        if self.stage is SettingsStage.PROFILE:
            raise exceptions.RecordStoreError(self.message or '', stage=stage)
        raise exceptions.IdentityServiceError(self.message or '', stage=stage)


# Account deletion.

class DeletionState(str, Enum):
    IDLE = 'idle'
    CONFIRMED_1 = 'confirmed_1'
    CONFIRMED_2 = 'confirmed_2'
    DELETING = 'deleting'
    COMPLETED = 'completed'
    ABORTED = 'aborted'

    @property
    def terminal(self) -> bool:
        return self in (DeletionState.COMPLETED, DeletionState.ABORTED)


class DeletionStage(IntEnum):
    """Steps of account deletion, in the order they run."""

    RECORDS = 1
    PROFILE = 2
    ACCOUNT = 3
    SIGNOUT = 4

    @property
    def label(self) -> str:
        return self.name.lower()


class DeletionStatus(str, Enum):
    COMPLETED = 'completed'
    FAILED = 'failed'
    ABORTED = 'aborted'
    """Nothing was attempted (e.g. the caller had no confirmation)."""


class DeletionResult(Outcome):
    """
    Result of an account deletion attempt.

    Deletion is not transactional. A failure at :attr:`DeletionStage.PROFILE`
    or later leaves the stages in :attr:`completed_stages` done: travel
    records deleted, profile intact, and so on.
    """

    status: DeletionStatus
    stage: Optional[DeletionStage] = None
    """The stage that failed."""

    completed_stages: List[DeletionStage] = []
    account_erased: bool = False
    """False if the erasure step was skipped for lack of a token."""

    @property
    def ok(self) -> bool:
        return self.status is DeletionStatus.COMPLETED

    @property
    def partial(self) -> bool:
        return self.status is DeletionStatus.FAILED \
            and bool(self.completed_stages)

    def _raise(self) -> NoReturn:
        if self.status is DeletionStatus.ABORTED:
            raise exceptions.InvalidTransition(self.message)
        stage = self.stage.label if self.stage else None
        message = self.message or ''
        if self.partial:
            raise exceptions.PartialFailure(
                message, stage=stage,
                completed=[s.label for s in self.completed_stages]
            )
        if self.stage is DeletionStage.ACCOUNT:
            raise exceptions.RemoteFunctionError(message, stage=stage)
        if self.stage is DeletionStage.SIGNOUT:
            raise exceptions.IdentityServiceError(message, stage=stage)
        raise exceptions.RecordStoreError(message, stage=stage)
