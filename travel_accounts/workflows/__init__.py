"""The account lifecycle workflows."""

from .credentials import CredentialUpdate, check_password
from .deletion import AccountDeletion
from .recovery import SessionRecovery
from .settings import SettingsUpdate, check_country
