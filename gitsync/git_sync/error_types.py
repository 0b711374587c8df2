"""Error codes, categories and exit codes for git synchronization runs."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class ErrorCategory(Enum):
    """Categories of sync failures, which decide how an operator should react."""
    PRECONDITION = "precondition"
    TRUST = "trust"
    LOCAL_MUTATION = "local_mutation"
    TRANSIENT = "transient"
    STRUCTURAL_CONFLICT = "structural_conflict"


class RecoveryAction(Enum):
    """What has to happen before the next run can succeed."""
    RETRY_LATER = "retry_later"
    USER_ACTION_REQUIRED = "user_action_required"
    RESOLVE_CONFLICT = "resolve_conflict"


@dataclass
class ErrorResolution:
    """Information about how to resolve a specific failure."""
    category: ErrorCategory
    action: RecoveryAction
    user_message: str
    resolution_steps: List[str]


# Outcome codes reported in SyncResult.error_code
IN_SYNC = "IN_SYNC"
CHECK_OK = "CHECK_OK"
NO_REPOSITORY = "NO_REPOSITORY"
GIT_UNAVAILABLE = "GIT_UNAVAILABLE"
UNSAFE_STATE = "UNSAFE_STATE"
NOT_ON_BRANCH = "NOT_ON_BRANCH"
NO_REMOTE_CONFIGURED = "NO_REMOTE_CONFIGURED"
NOT_SYNCABLE = "NOT_SYNCABLE"
OWNERSHIP_MISMATCH = "OWNERSHIP_MISMATCH"
COMMIT_FAILED = "COMMIT_FAILED"
COMMIT_LEFT_DIRTY = "COMMIT_LEFT_DIRTY"
FETCH_FAILED = "FETCH_FAILED"
PUSH_FAILED = "PUSH_FAILED"
SYNC_INCOMPLETE = "SYNC_INCOMPLETE"
NON_FAST_FORWARDABLE = "NON_FAST_FORWARDABLE"
REBASE_CONFLICT = "REBASE_CONFLICT"
NO_UPSTREAM = "NO_UPSTREAM"


# Process exit codes, the contract other tooling (schedulers, monitoring) keys on.
# 128 matches git's own "not a git repository" status.
EXIT_CODES: Dict[str, int] = {
    IN_SYNC: 0,
    CHECK_OK: 0,
    NO_REPOSITORY: 128,
    GIT_UNAVAILABLE: 128,
    UNSAFE_STATE: 2,
    NOT_ON_BRANCH: 2,
    NO_REMOTE_CONFIGURED: 2,
    NOT_SYNCABLE: 1,
    OWNERSHIP_MISMATCH: 1,
    COMMIT_FAILED: 1,
    COMMIT_LEFT_DIRTY: 1,
    FETCH_FAILED: 3,
    PUSH_FAILED: 3,
    SYNC_INCOMPLETE: 3,
    NON_FAST_FORWARDABLE: 2,
    REBASE_CONFLICT: 1,
    NO_UPSTREAM: 2,
}


ERROR_CATEGORIES: Dict[str, ErrorCategory] = {
    NO_REPOSITORY: ErrorCategory.PRECONDITION,
    GIT_UNAVAILABLE: ErrorCategory.PRECONDITION,
    UNSAFE_STATE: ErrorCategory.PRECONDITION,
    NOT_ON_BRANCH: ErrorCategory.PRECONDITION,
    NO_REMOTE_CONFIGURED: ErrorCategory.PRECONDITION,
    NOT_SYNCABLE: ErrorCategory.PRECONDITION,
    NO_UPSTREAM: ErrorCategory.PRECONDITION,
    OWNERSHIP_MISMATCH: ErrorCategory.TRUST,
    COMMIT_FAILED: ErrorCategory.LOCAL_MUTATION,
    COMMIT_LEFT_DIRTY: ErrorCategory.LOCAL_MUTATION,
    FETCH_FAILED: ErrorCategory.TRANSIENT,
    PUSH_FAILED: ErrorCategory.TRANSIENT,
    SYNC_INCOMPLETE: ErrorCategory.TRANSIENT,
    NON_FAST_FORWARDABLE: ErrorCategory.STRUCTURAL_CONFLICT,
    REBASE_CONFLICT: ErrorCategory.STRUCTURAL_CONFLICT,
}


def exit_code_for(error_code: str) -> int:
    """Exit code for an outcome code; unknown codes map to a generic failure."""
    return EXIT_CODES.get(error_code, 1)
