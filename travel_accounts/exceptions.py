"""Exceptions."""

from typing import Optional, Sequence


class AccountsError(RuntimeError):
    """Base class for errors raised by the account settings engine."""


class ValidationError(AccountsError):
    """Input was rejected locally, before any service was called."""


class PasswordMismatch(ValidationError):
    """The password and its confirmation differ."""


class PasswordTooShort(ValidationError):
    """The new password is shorter than the configured minimum."""


class InvalidCountry(ValidationError):
    """Not an ISO 3166-1 alpha-2 country code."""


class SessionError(AccountsError):
    """Problem with the authenticated session."""


class NoActiveSession(SessionError):
    """The operation requires a session and there is none."""


class ServiceError(AccountsError):
    """
    An external service failed.

    ``message`` is the service's own message and is meant to be shown to the
    user as-is. ``stage`` names the workflow step that was running, if any.
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage


class IdentityServiceError(ServiceError):
    """The identity service rejected or failed a request."""


class RecordStoreError(ServiceError):
    """The record store rejected or failed a request."""


class RemoteFunctionError(ServiceError):
    """A remote function call failed."""


class PartialFailure(ServiceError):
    """A multi-step workflow stopped after some of its stages completed."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 completed: Sequence[str] = ()) -> None:
        super().__init__(message, stage=stage)
        self.completed = list(completed)


class WorkflowBusy(AccountsError):
    """The workflow is already running; it does not run twice at once."""


class InvalidTransition(AccountsError):
    """The workflow is not in a state that allows the requested operation."""
