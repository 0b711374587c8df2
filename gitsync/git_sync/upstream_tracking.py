"""How the local branch relates to its remote counterpart."""

import logging
from typing import Optional, Tuple

from .operations import GitAdapter
from .repository_info import BranchContext, SyncState


def classify_counts(counts: Optional[Tuple[int, int]]) -> SyncState:
    """
    Map the left/right commit counts of '<remote>/<branch>...HEAD' to a SyncState.

    Args:
        counts: (commits only on the remote ref, commits only on HEAD), or
            None when git could not compare the two

    Returns:
        NO_UPSTREAM for None, otherwise EQUAL, AHEAD, BEHIND or DIVERGED
    """
    if counts is None:
        return SyncState.NO_UPSTREAM

    remote_only, local_only = counts
    if remote_only < 0 or local_only < 0:
        raise ValueError(f"Commit counts must be non-negative, got {counts}")

    if remote_only == 0 and local_only == 0:
        return SyncState.EQUAL
    if remote_only == 0:
        return SyncState.AHEAD
    if local_only == 0:
        return SyncState.BEHIND
    return SyncState.DIVERGED


class SyncStateClassifier:
    """Computes the SyncState with a single rev-list query; never mutates anything."""

    def __init__(self, adapter: GitAdapter, logger: Optional[logging.LoggerAdapter] = None):
        self.adapter = adapter
        self.logger = logger or logging.getLogger('gitsync.git_sync.upstream_tracking')

    def classify(self, remote_name: str, branch_name: str) -> SyncState:
        counts = self.adapter.rev_list_count_left_right(f"{remote_name}/{branch_name}", "HEAD")
        state = classify_counts(counts)
        self.logger.debug(f"Sync state: {state.value} (counts: {counts})")
        return state

    def classify_context(self, context: BranchContext) -> SyncState:
        return self.classify(context.remote_name, context.branch_name)
