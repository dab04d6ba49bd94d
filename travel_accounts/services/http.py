"""HTTP plumbing shared by the hosted service adapters."""

import logging
from typing import Any, Collection, Optional, Type

import httpx

from .. import config
from ..exceptions import ServiceError

logger = logging.getLogger(__name__)

_MESSAGE_KEYS = ('msg', 'message', 'error_description', 'error')


def create_client(base_url: str = config.SUPABASE_URL,
                  api_key: str = config.SUPABASE_ANON_KEY,
                  timeout: float = config.HTTP_TIMEOUT,
                  transport: Optional[httpx.AsyncBaseTransport] = None) \
        -> httpx.AsyncClient:
    """
    Create the client shared by the identity, record and function adapters.

    Parameters
    ----------
    base_url : str
        Root of the hosted backend.
    api_key : str
        Sent as the ``apikey`` header on every request.
    timeout : float
        Seconds; applies to connect, read and write.
    transport : :class:`httpx.AsyncBaseTransport`
        Override the network transport (tests use :class:`httpx.MockTransport`).

    """
    logger.debug('New HTTP client for %s', base_url)
    return httpx.AsyncClient(base_url=base_url, headers={'apikey': api_key},
                             timeout=timeout, transport=transport)


def bearer(token: str) -> str:
    return f'Bearer {token}'


def error_message(response: httpx.Response) -> str:
    """Get the service's own message out of a failed response."""
    try:
        data: Any = response.json()
    except ValueError:
        return response.text or f'HTTP {response.status_code}'
    if isinstance(data, dict):
        for key in _MESSAGE_KEYS:
            if data.get(key):
                return str(data[key])
    return response.text or f'HTTP {response.status_code}'


async def send(client: httpx.AsyncClient, method: str, url: str,
               error: Type[ServiceError] = ServiceError,
               ignore: Collection[int] = (), **kwargs: Any) -> httpx.Response:
    """
    Make a request, turning every kind of failure into ``error``.

    Raises
    ------
    :class:`.ServiceError`
        Of type ``error``, on a timeout, a transport problem, or a 4xx/5xx
        response. For responses the message is the one the service sent.
        Statuses listed in ``ignore`` are returned instead.

    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise error(f'Request timed out: {method} {url}') from e
    except httpx.HTTPError as e:
        raise error(f'Connection failed: {e}') from e
    if response.is_error and response.status_code not in ignore:
        logger.debug('%s %s responded with status %i', method, url,
                     response.status_code)
        raise error(error_message(response))
    return response
