"""Pieces shared by the workflows."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ..exceptions import ServiceError, SessionError, WorkflowBusy

STAGE_FAILURES = (ServiceError, SessionError, asyncio.TimeoutError)
"""What a stage may raise that is reported to the caller instead of raised."""


def failure_message(error: BaseException) -> str:
    if isinstance(error, ServiceError):
        return error.message
    if isinstance(error, asyncio.TimeoutError):
        return 'The request timed out'
    return str(error)


class Workflow(object):
    """A workflow instance runs at most once at a time."""

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        """True while a run is in progress; callers must not resubmit."""
        return self._busy

    @asynccontextmanager
    async def _in_flight(self) -> AsyncIterator[None]:
        if self._busy:
            raise WorkflowBusy(f'{type(self).__name__} is already running')
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
