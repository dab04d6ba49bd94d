"""
Recovery links and the location they arrive on.

A password-reset email links back to the app with the recovery tokens in the
URL fragment::

    https://travel.example/#access_token=...&refresh_token=...&type=recovery

The fragment is never sent to a server, so the client hands it to
:class:`.SessionRecovery` together with a :class:`Location` that can be
rewritten once the tokens have been used.
"""

from typing import List, Optional
from urllib.parse import parse_qs, urlsplit, urlunsplit

from .domain import RecoveryRequest, RecoveryType


def parse_fragment(fragment: str) -> Optional[RecoveryRequest]:
    """
    Extract a :class:`.RecoveryRequest` from a URL fragment.

    The fragment is decoded as an ordinary query string; the leading ``#`` is
    optional. When a key repeats, the first value wins.

    Returns
    -------
    :class:`.RecoveryRequest` or None
        None if the fragment carries no ``access_token``.

    """
    params = parse_qs(fragment.lstrip('#'), keep_blank_values=True)
    access_token = params.get('access_token', [''])[0]
    if not access_token:
        return None
    refresh_token = params.get('refresh_token', [None])[0]
    if params.get('type', [''])[0] == RecoveryType.RECOVERY.value:
        kind = RecoveryType.RECOVERY
    else:
        kind = RecoveryType.OTHER
    return RecoveryRequest(access_token=access_token,
                           refresh_token=refresh_token or None,
                           type=kind)


class Location:
    """
    The client's navigable location.

    :meth:`replace_state` swaps the current URL in place, without a reload and
    without adding a history entry. Every replacement is kept in
    :attr:`replaced` so callers (and tests) can see what was done.
    """

    def __init__(self, scheme: str = '', netloc: str = '', pathname: str = '/',
                 query: str = '', fragment: str = '') -> None:
        self.scheme = scheme
        self.netloc = netloc
        self.pathname = pathname or '/'
        self.query = query
        self.fragment = fragment
        self.replaced: List[str] = []

    @classmethod
    def from_url(cls, url: str) -> 'Location':
        parts = urlsplit(url)
        return cls(parts.scheme, parts.netloc, parts.path, parts.query,
                   parts.fragment)

    @property
    def href(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.pathname,
                           self.query, self.fragment))

    def replace_state(self, url: str) -> None:
        """Replace the current URL with ``url`` (a path or an absolute URL)."""
        parts = urlsplit(url)
        if parts.scheme:
            self.scheme = parts.scheme
        if parts.netloc:
            self.netloc = parts.netloc
        self.pathname = parts.path or '/'
        self.query = parts.query
        self.fragment = parts.fragment
        self.replaced.append(self.href)

    def __repr__(self) -> str:
        return f'Location({self.href!r})'
