"""
Contracts the workflows expect from external services.

Adapters signal failure by raising a subclass of
:class:`.exceptions.ServiceError` carrying the service's own message.
Timeouts are the adapter's business; the workflows treat them like any other
failure.
"""

from typing import Any, Dict, Mapping, Optional, Protocol

from ..domain import Session

Filter = Mapping[str, Any]
"""Equality filter, ``{column: value}``."""


class IdentityService(Protocol):
    """Issues, updates and terminates sessions."""

    async def establish_session(self, access_token: str,
                                refresh_token: str) -> Session:
        """Make the session described by these tokens the current one."""
        ...

    async def update_credential(self, new_password: str) -> None:
        """Set a new password for the user of the current session."""
        ...

    def get_current_session(self) -> Optional[Session]:
        ...

    async def sign_out(self) -> None:
        """Terminate the current session locally and with the service."""
        ...


class RecordStore(Protocol):
    """Table-oriented persistence scoped by equality filters."""

    async def delete_where(self, table: str, filter: Filter) -> None:
        ...

    async def update(self, table: str, filter: Filter,
                     fields: Dict[str, Any]) -> None:
        ...


class RemoteFunctions(Protocol):
    """One-shot server-side procedures."""

    async def invoke(self, name: str, authorization: str) -> Any:
        """Call ``name`` with ``authorization`` as its Authorization header."""
        ...
