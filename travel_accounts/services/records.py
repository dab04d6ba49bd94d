"""Adapter for the hosted record store (``/rest/v1``)."""

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from ..domain import Session
from ..exceptions import RecordStoreError
from .http import bearer, send
from .interfaces import Filter

logger = logging.getLogger(__name__)


def _equality(filter: Filter) -> Dict[str, str]:
    if not filter:
        raise ValueError('Refusing to touch a table without a filter')
    return {column: f'eq.{value}' for column, value in filter.items()}


class HostedRecordStore(object):
    """
    Row-level access to the hosted record store.

    Requests carry the current session's access token, so the store applies
    the user's own row policies. Without a session the public API key is used.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str,
                 current_session: Callable[[], Optional[Session]]) -> None:
        self._client = client
        self._api_key = api_key
        self._current_session = current_session

    def _headers(self) -> Dict[str, str]:
        session = self._current_session()
        token = session.access_token if session else self._api_key
        return {'Authorization': bearer(token)}

    async def delete_where(self, table: str, filter: Filter) -> None:
        """Delete every row of ``table`` matching ``filter``."""
        await send(self._client, 'DELETE', f'/rest/v1/{table}',
                   RecordStoreError, params=_equality(filter),
                   headers=self._headers())
        logger.debug('Deleted from %s where %s', table, list(filter))

    async def update(self, table: str, filter: Filter,
                     fields: Dict[str, Any]) -> None:
        """Set ``fields`` on every row of ``table`` matching ``filter``."""
        await send(self._client, 'PATCH', f'/rest/v1/{table}',
                   RecordStoreError, params=_equality(filter),
                   headers=self._headers(), json=fields)
        logger.debug('Updated %s on %s', list(fields), table)
