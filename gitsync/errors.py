"""Exceptions raised by git-sync components.

Every phase of a run either returns a definitive result or raises one of these.
GitSyncManager converts them into a failed SyncResult at a single boundary.
"""

from typing import Optional

from .git_sync import error_types


class GitSyncError(Exception):
    """Base class for all classified sync failures."""

    error_code: str = "SYNC_FAILED"

    def __init__(self, message: str, *, show_status: bool = False):
        super().__init__(message)
        self.message = message
        self.show_status = show_status

    @property
    def exit_code(self) -> int:
        return error_types.exit_code_for(self.error_code)


class GitUnavailableError(GitSyncError):
    """The git executable cannot be run at all."""
    error_code = error_types.GIT_UNAVAILABLE


class NoRepositoryError(GitSyncError):
    error_code = error_types.NO_REPOSITORY


class UnsafeStateError(GitSyncError):
    """The repository is in a special state (rebase, merge, ...) or not a work tree."""
    error_code = error_types.UNSAFE_STATE

    def __init__(self, state):
        super().__init__(f"Git repo state considered unsafe for sync. State: '{state}'")
        self.state = state


class NotOnBranchError(GitSyncError):
    error_code = error_types.NOT_ON_BRANCH

    def __init__(self):
        super().__init__("Syncing is only possible on a branch.", show_status=True)


class NoRemoteConfiguredError(GitSyncError):
    error_code = error_types.NO_REMOTE_CONFIGURED

    def __init__(self, branch_name: str):
        super().__init__(f"The current branch '{branch_name}' does not have a configured remote.")
        self.branch_name = branch_name


class NotSyncableError(GitSyncError):
    error_code = error_types.NOT_SYNCABLE

    def __init__(self, branch_name: str):
        super().__init__(f"Branch '{branch_name}' is not configured for synchronization.")
        self.branch_name = branch_name


class OwnershipMismatchError(GitSyncError):
    error_code = error_types.OWNERSHIP_MISMATCH

    def __init__(self, remote_name: str, remote_owner: str, operator_identity: str):
        super().__init__(
            f"Remote owner ({remote_owner}) of '{remote_name}' is not the same as git user ({operator_identity})."
        )
        self.remote_name = remote_name
        self.remote_owner = remote_owner
        self.operator_identity = operator_identity


class CommitFailedError(GitSyncError):
    error_code = error_types.COMMIT_FAILED

    def __init__(self, message: str = "Auto-commit failed.", output: Optional[str] = None):
        super().__init__(message, show_status=True)
        self.output = output


class CommitLeftDirtyError(GitSyncError):
    error_code = error_types.COMMIT_LEFT_DIRTY

    def __init__(self, state):
        super().__init__(f"Auto-commit left uncommitted changes (state: {state})", show_status=True)
        self.state = state


class FetchFailedError(GitSyncError):
    error_code = error_types.FETCH_FAILED


class PushFailedError(GitSyncError):
    error_code = error_types.PUSH_FAILED


class SyncIncompleteError(GitSyncError):
    error_code = error_types.SYNC_INCOMPLETE

    def __init__(self, sync_state):
        super().__init__(f"Synchronization failed ({sync_state.value}) | Check your repo carefully.", show_status=True)
        self.sync_state = sync_state


class NonFastForwardableError(GitSyncError):
    error_code = error_types.NON_FAST_FORWARDABLE


class RebaseConflictError(GitSyncError):
    error_code = error_types.REBASE_CONFLICT

    def __init__(self, repo_state, sync_state):
        super().__init__(
            "Rebasing failed, likely there are conflicting changes. "
            f"Repo state: {repo_state} - Sync state: {sync_state.value}",
            show_status=True,
        )
        self.repo_state = repo_state
        self.sync_state = sync_state


class NoUpstreamError(GitSyncError):
    error_code = error_types.NO_UPSTREAM
