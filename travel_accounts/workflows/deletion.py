"""
Account deletion.

Deleting an account runs four destructive steps, strictly in order, each
one only after the previous one succeeded:

1. ``records``: delete the user's travel records.
2. ``profile``: delete the user's profile.
3. ``account``: ask the ``delete-user`` remote function to erase the account,
   authorized with the current session's access token.
4. ``signout``: terminate the session.

Nothing is compensated. If step 2 fails the travel records are already gone
and stay gone; the result lists the completed stages so the caller can tell
the user exactly where things stand.

The orchestrator never asks the user anything. The caller collects two
confirmations and passes ``confirmed=True`` (or calls :meth:`confirm` twice).

.. code-block:: text

   idle -> confirmed_1 -> confirmed_2 -> deleting (1..4) -> completed
                                                         -> aborted

"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Tuple

from .. import config
from ..domain import DeletionResult, DeletionStage, DeletionState, \
    DeletionStatus
from ..exceptions import InvalidTransition, NoActiveSession, WorkflowBusy
from ..services.interfaces import IdentityService, RecordStore, \
    RemoteFunctions
from .base import STAGE_FAILURES, Workflow, failure_message

logger = logging.getLogger(__name__)

Step = Tuple[DeletionStage, Callable[[], Awaitable[object]]]


class AccountDeletion(Workflow):
    """
    Runs the account deletion sequence for one user identity.

    There is no retry. Once an attempt has completed or aborted, :meth:`reset`
    must be called before trying again.
    """

    def __init__(self, identity: IdentityService, records: RecordStore,
                 functions: RemoteFunctions,
                 travels_table: str = config.TRAVELS_TABLE,
                 profiles_table: str = config.PROFILES_TABLE,
                 function_name: str = config.DELETE_USER_FUNCTION,
                 require_account_erasure: bool =
                 config.DELETION_REQUIRE_ACCOUNT_ERASURE) -> None:
        super().__init__()
        self._identity = identity
        self._records = records
        self._functions = functions
        self.travels_table = travels_table
        self.profiles_table = profiles_table
        self.function_name = function_name
        self.require_account_erasure = require_account_erasure

        self.state = DeletionState.IDLE
        self.step: Optional[DeletionStage] = None
        """The stage running while :attr:`state` is ``deleting``."""
        self.result: Optional[DeletionResult] = None
        """Outcome of the last attempt."""

    def confirm(self) -> DeletionState:
        """Record one confirmation from the user."""
        if self.state is DeletionState.IDLE:
            self.state = DeletionState.CONFIRMED_1
        elif self.state is DeletionState.CONFIRMED_1:
            self.state = DeletionState.CONFIRMED_2
        elif self.state is not DeletionState.CONFIRMED_2:
            raise InvalidTransition(f'Cannot confirm while {self.state.value}')
        return self.state

    def reset(self) -> None:
        """Go back to ``idle``, discarding confirmations and the last result."""
        if self.busy:
            raise WorkflowBusy('Account deletion is running')
        self.state = DeletionState.IDLE
        self.step = None
        self.result = None

    async def delete_account(self, user_id: str,
                             confirmed: bool = False) -> DeletionResult:
        """
        Delete everything belonging to ``user_id``, then sign out.

        Parameters
        ----------
        user_id : str
        confirmed : bool
            The caller already has both confirmations from the user. Without
            it, the orchestrator must have been confirmed twice.

        Returns
        -------
        :class:`.DeletionResult`
            ``completed``; ``failed`` with the stage that failed; or
            ``aborted`` if there was no confirmation. On anything but
            ``completed`` the caller must not sign out or clear local state.

        Raises
        ------
        :class:`.WorkflowBusy`
            If a deletion is already running.
        :class:`.InvalidTransition`
            If the last attempt finished and :meth:`reset` was not called.

        """
        if self.busy:
            raise WorkflowBusy('Account deletion is already running')
        if self.state.terminal:
            raise InvalidTransition(
                f'Account deletion already {self.state.value}; reset first'
            )
        if not (confirmed or self.state is DeletionState.CONFIRMED_2):
            logger.info('Account deletion requested without confirmation')
            return self._finish(DeletionResult(
                status=DeletionStatus.ABORTED,
                message='Confirmation required'
            ))

        async with self._in_flight():
            self.state = DeletionState.DELETING
            run = asyncio.ensure_future(self._run(user_id))
            cancelled = False
            try:
                while not run.done():
                    try:
                        await asyncio.shield(run)
                    except asyncio.CancelledError:
                        if run.cancelled():
                            raise
                        logger.warning('Account deletion cannot be '
                                       'cancelled once started; letting it '
                                       'finish')
                        cancelled = True
                result = self._finish(run.result())
            finally:
                if self.state is DeletionState.DELETING:
                    self.state = DeletionState.ABORTED
                    self.step = None
        if cancelled:
            raise asyncio.CancelledError()
        return result

    def _steps(self, user_id: str) -> List[Step]:
        return [
            (DeletionStage.RECORDS, lambda: self._records.delete_where(
                self.travels_table, {'user_id': user_id})),
            (DeletionStage.PROFILE, lambda: self._records.delete_where(
                self.profiles_table, {'id': user_id})),
            (DeletionStage.ACCOUNT, self._erase_account),
            (DeletionStage.SIGNOUT, self._identity.sign_out),
        ]

    async def _run(self, user_id: str) -> DeletionResult:
        completed: List[DeletionStage] = []
        erased = False
        for stage, step in self._steps(user_id):
            self.step = stage
            logger.info('Account deletion step %i (%s) for %s',
                        stage, stage.label, user_id)
            try:
                outcome = await step()
            except STAGE_FAILURES as e:
                logger.error('Account deletion failed at %s: %s',
                             stage.label, failure_message(e))
                return DeletionResult(status=DeletionStatus.FAILED,
                                      stage=stage,
                                      message=failure_message(e),
                                      completed_stages=completed,
                                      account_erased=erased)
            if stage is DeletionStage.ACCOUNT:
                erased = bool(outcome)
            completed.append(stage)
        return DeletionResult(status=DeletionStatus.COMPLETED,
                              message='Account deleted',
                              completed_stages=completed,
                              account_erased=erased)

    async def _erase_account(self) -> bool:
        """Invoke the erasure function; False if skipped for want of a token."""
        session = self._identity.get_current_session()
        if session is None or not session.access_token:
            if self.require_account_erasure:
                raise NoActiveSession('No active session to erase the '
                                      'account with')
            logger.warning('No active session; skipping account erasure')
            return False
        await self._functions.invoke(
            self.function_name,
            authorization=f'Bearer {session.access_token}'
        )
        return True

    def _finish(self, result: DeletionResult) -> DeletionResult:
        self.step = None
        self.result = result
        if result.status is DeletionStatus.COMPLETED:
            self.state = DeletionState.COMPLETED
        else:
            self.state = DeletionState.ABORTED
        return result
