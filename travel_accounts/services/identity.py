"""
Adapter for the hosted identity service.

Holds the current :class:`.domain.Session` for the lifetime of the process and
talks to the identity service's REST API (``/auth/v1``) on its behalf.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
import jwt
from pydantic import ValidationError as PydanticValidationError
from pytz import UTC

from ..domain import Session
from ..exceptions import IdentityServiceError
from .http import bearer, send

logger = logging.getLogger(__name__)

ALREADY_GONE = (401, 403, 404)
"""Sign-out statuses meaning the session was already terminated upstream."""


def peek_claims(access_token: str) -> Dict[str, Any]:
    """
    Read the claims of an access token without verifying it.

    Only the identity service can say whether a token is valid; this is for
    the ``sub`` and ``exp`` hints. Tokens that are not JWTs have no claims.
    """
    try:
        claims: Dict[str, Any] = jwt.decode(
            access_token, options={'verify_signature': False}
        )
    except jwt.exceptions.PyJWTError:
        return {}
    return claims


def _expiry(claims: Dict[str, Any]) -> Optional[datetime]:
    if 'exp' not in claims:
        return None
    try:
        return datetime.fromtimestamp(int(claims['exp']), tz=UTC)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise IdentityServiceError(f'Token expiry malformed: {e}') from e


def _payload(response: httpx.Response) -> Dict[str, Any]:
    """The JSON object in a successful identity service response."""
    try:
        data = response.json()
    except ValueError as e:
        raise IdentityServiceError(f'Response malformed: {e}') from e
    if not isinstance(data, dict):
        raise IdentityServiceError('Response malformed: expected an object')
    return data


def _session(**fields: Any) -> Session:
    try:
        return Session(**fields)
    except PydanticValidationError as e:
        raise IdentityServiceError(f'Session malformed: {e}') from e


class HostedIdentityService(object):
    """
    Session state plus the identity service calls that act on it.

    The session is set by :meth:`establish_session` and dropped by
    :meth:`sign_out`. An expired session is treated as absent.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._session: Optional[Session] = None

    def get_current_session(self) -> Optional[Session]:
        """The current session, or None if there is none or it expired."""
        if self._session is not None and self._session.expired:
            logger.debug('Session for %s has expired', self._session.user_id)
            return None
        return self._session

    async def establish_session(self, access_token: str,
                                refresh_token: str) -> Session:
        """
        Adopt a session from a pair of tokens.

        A still-valid access token is checked against the identity service. An
        expired one is exchanged using ``refresh_token``.

        Raises
        ------
        :class:`.IdentityServiceError`
            If the identity service does not accept the tokens.

        """
        claims = peek_claims(access_token)
        expires_at = _expiry(claims)
        if expires_at is not None and expires_at <= datetime.now(tz=UTC):
            if not refresh_token:
                raise IdentityServiceError('Access token has expired')
            session = await self._refresh(refresh_token)
        else:
            response = await send(
                self._client, 'GET', '/auth/v1/user', IdentityServiceError,
                headers={'Authorization': bearer(access_token)}
            )
            user = _payload(response)
            session = _session(access_token=access_token,
                               refresh_token=refresh_token,
                               user_id=user.get('id', claims.get('sub')),
                               expires_at=expires_at)
        self._session = session
        logger.debug('Established session for %s', session.user_id)
        return session

    async def _refresh(self, refresh_token: str) -> Session:
        response = await send(
            self._client, 'POST', '/auth/v1/token', IdentityServiceError,
            params={'grant_type': 'refresh_token'},
            json={'refresh_token': refresh_token}
        )
        data = _payload(response)
        access_token = data.get('access_token')
        if not access_token or not isinstance(access_token, str):
            raise IdentityServiceError('Response malformed: no access_token')
        claims = peek_claims(access_token)
        user = data.get('user')
        if not isinstance(user, dict):
            user = {}
        return _session(access_token=access_token,
                        refresh_token=data.get('refresh_token', refresh_token),
                        user_id=user.get('id', claims.get('sub')),
                        expires_at=_expiry(claims))

    async def update_credential(self, new_password: str) -> None:
        """Set the password of the current session's user."""
        session = self.get_current_session()
        if session is None:
            raise IdentityServiceError('Auth session missing!')
        await send(self._client, 'PUT', '/auth/v1/user', IdentityServiceError,
                   headers={'Authorization': bearer(session.access_token)},
                   json={'password': new_password})
        logger.info('Updated credential for %s', session.user_id)

    async def sign_out(self) -> None:
        """
        Terminate the current session.

        The local session is dropped once the identity service has revoked it,
        or reported that it was already gone. On any other failure the session
        is kept and :class:`.IdentityServiceError` is raised.
        """
        session = self._session
        if session is None:
            return
        await send(self._client, 'POST', '/auth/v1/logout',
                   IdentityServiceError, ignore=ALREADY_GONE,
                   headers={'Authorization': bearer(session.access_token)})
        self._session = None
        logger.info('Signed out %s', session.user_id)
