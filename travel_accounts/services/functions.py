"""Adapter for remote functions (``/functions/v1``)."""

import logging
from typing import Any

import httpx

from ..exceptions import RemoteFunctionError
from .http import send

logger = logging.getLogger(__name__)


class HostedFunctions(object):
    """Invokes server-side procedures by name."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def invoke(self, name: str, authorization: str) -> Any:
        """
        Call a remote function once.

        Parameters
        ----------
        name : str
            Function name, e.g. ``delete-user``.
        authorization : str
            Full value of the Authorization header, e.g. ``Bearer <token>``.

        Returns
        -------
        Any
            The decoded JSON body, or the text body if it is not JSON.

        Raises
        ------
        :class:`.RemoteFunctionError`

        """
        logger.debug('Invoke remote function %s', name)
        response = await send(self._client, 'POST', f'/functions/v1/{name}',
                              RemoteFunctionError,
                              headers={'Authorization': authorization})
        if 'application/json' in response.headers.get('content-type', ''):
            return response.json()
        return response.text
