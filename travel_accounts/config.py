"""Configuration for the account settings engine."""
import os

#################### External services ####################
SUPABASE_URL = os.environ.get('SUPABASE_URL', 'http://localhost:54321')
"""Base URL of the hosted backend.

The identity service lives under ``/auth/v1``, the record store under
``/rest/v1`` and remote functions under ``/functions/v1``.
"""

SUPABASE_ANON_KEY = os.environ.get('SUPABASE_ANON_KEY', '')
"""Public API key sent as the ``apikey`` header on every request."""

HTTP_TIMEOUT = float(os.environ.get('HTTP_TIMEOUT', '10'))
"""Seconds before an adapter gives up on a request.

The workflows impose no timeout of their own. An adapter timeout is reported
as an ordinary stage failure."""

DATABASE_URI = os.environ.get('DATABASE_URI')
"""SQLAlchemy URI for the local record store.

If not set, the HTTP record store is used."""


#################### Records ####################
PROFILES_TABLE = os.environ.get('PROFILES_TABLE', 'user_profiles')
TRAVELS_TABLE = os.environ.get('TRAVELS_TABLE', 'user_travels')
DELETE_USER_FUNCTION = os.environ.get('DELETE_USER_FUNCTION', 'delete-user')
"""Remote function that erases the account from the identity store."""


#################### Workflow policy ####################
MIN_PASSWORD_LENGTH = int(os.environ.get('MIN_PASSWORD_LENGTH', '6'))

RECOVERY_REQUIRE_REFRESH_TOKEN = bool(int(
    os.environ.get('RECOVERY_REQUIRE_REFRESH_TOKEN', '0')
))
"""Refuse recovery links that carry no refresh token.

Off by default: a missing refresh token is sent to the identity service as an
empty string, which is what the travel app has always done."""

DELETION_REQUIRE_ACCOUNT_ERASURE = bool(int(
    os.environ.get('DELETION_REQUIRE_ACCOUNT_ERASURE', '0')
))
"""Fail account deletion when there is no token to erase the account with.

Off by default: without an active session the erasure step is skipped and
deletion proceeds to sign-out."""

RESET_DISMISS_DELAY = float(os.environ.get('RESET_DISMISS_DELAY', '2.0'))
"""Seconds the password-reset confirmation stays on screen."""

SETTINGS_DISMISS_DELAY = float(os.environ.get('SETTINGS_DISMISS_DELAY', '1.5'))
"""Seconds the settings confirmation stays on screen."""


#################### Logging ####################
LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))
