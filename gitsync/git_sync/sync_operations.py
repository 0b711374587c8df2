"""Terminal sync actions: push, fast-forward, rebase-then-push or abort."""

import logging
from typing import Callable, Dict, Optional

from ..errors import (
    FetchFailedError,
    NonFastForwardableError,
    NoUpstreamError,
    PushFailedError,
    RebaseConflictError,
    SyncIncompleteError,
)
from .operations import GitAdapter
from .repository_info import BranchContext, SyncState
from .state import RepositoryStateInspector
from .upstream_tracking import SyncStateClassifier


class SyncActionDispatcher:
    """
    Selects and performs the single action that fits the current SyncState.

    | state       | action                      | on failure           |
    |-------------|-----------------------------|----------------------|
    | NO_UPSTREAM | none                        | NoUpstreamError      |
    | EQUAL       | none                        |                      |
    | AHEAD       | push (never forced)         | PushFailedError      |
    | BEHIND      | merge --ff-only             | NonFastForwardable   |
    | DIVERGED    | rebase, then push if clean  | RebaseConflictError  |

    Every successful action is followed by a re-check that must report
    EQUAL; anything else ends the run with SyncIncompleteError. Nothing is
    retried, and a failed rebase is left in place for the operator.
    """

    def __init__(
        self,
        adapter: GitAdapter,
        classifier: SyncStateClassifier,
        inspector: RepositoryStateInspector,
        logger: Optional[logging.LoggerAdapter] = None,
    ):
        self.adapter = adapter
        self.classifier = classifier
        self.inspector = inspector
        self.logger = logger or logging.getLogger('gitsync.git_sync.sync_operations')

        self._actions: Dict[SyncState, Callable[[BranchContext], SyncState]] = {
            SyncState.NO_UPSTREAM: self._no_upstream,
            SyncState.EQUAL: self._exit_assuming_sync,
            SyncState.AHEAD: self._push,
            SyncState.BEHIND: self._fast_forward,
            SyncState.DIVERGED: self._rebase_then_push,
        }

    def fetch(self, context: BranchContext) -> None:
        """Fetch the remote branch; a failure ends the run as transient."""
        self.logger.debug(f"Fetching from {context.remote_ref}")
        outcome = self.adapter.fetch(context.remote_name, context.branch_name)
        if not outcome.success:
            raise FetchFailedError(
                f"'git fetch {context.remote_name}' returned non-zero. Likely a network problem; exiting."
                + (f" ({outcome.stderr})" if outcome.stderr else "")
            )

    def dispatch(self, context: BranchContext) -> SyncState:
        """
        Classify and act.

        Returns:
            SyncState.EQUAL once the branch matches the remote

        Raises:
            GitSyncError subclasses for every terminal failure
        """
        sync_state = self.classifier.classify_context(context)
        self.logger.debug(f"Sync state: {sync_state.value}")
        return self._actions[sync_state](context)

    def _no_upstream(self, context: BranchContext) -> SyncState:
        raise NoUpstreamError(
            f"Cannot compare HEAD with '{context.remote_ref}'. "
            "Strange state; manual intervention required."
        )

    def _push(self, context: BranchContext) -> SyncState:
        self.logger.debug(f"Pushing changes: git push {context.remote_name} {context.refspec}")
        outcome = self.adapter.push(context.remote_name, context.refspec)
        if not outcome.success:
            raise PushFailedError(
                "'git push' returned non-zero. Likely a connection failure."
                + (f" ({outcome.stderr})" if outcome.stderr else "")
            )
        return self._exit_assuming_sync(context)

    def _fast_forward(self, context: BranchContext) -> SyncState:
        self.logger.info("We are behind, fast-forwarding...")
        outcome = self.adapter.merge_ff_only(context.remote_ref)
        if not outcome.success:
            raise NonFastForwardableError(
                f"'git merge --ff --ff-only' returned non-zero ({outcome.status}). Exiting.",
                show_status=True,
            )
        return self._exit_assuming_sync(context)

    def _rebase_then_push(self, context: BranchContext) -> SyncState:
        self.logger.info("We have diverged. Trying to rebase...")
        outcome = self.adapter.rebase(context.remote_ref)

        sync_state = self.classifier.classify_context(context)
        repo_state = self.inspector.inspect()

        if outcome.success and repo_state.is_normal_clean and sync_state == SyncState.AHEAD:
            self.logger.info("Rebasing went fine, pushing...")
            return self._push(context)

        raise RebaseConflictError(repo_state, sync_state)

    def _exit_assuming_sync(self, context: BranchContext) -> SyncState:
        sync_state = self.classifier.classify_context(context)
        if sync_state != SyncState.EQUAL:
            raise SyncIncompleteError(sync_state)
        return sync_state
