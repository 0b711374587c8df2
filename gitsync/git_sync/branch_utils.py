"""Branch and remote resolution for Git synchronization."""

import logging
from typing import Optional

from ..errors import NoRemoteConfiguredError, NotOnBranchError, NotSyncableError
from .operations import GitAdapter
from .repository_info import BranchContext


HEADS_PREFIX = "refs/heads/"


class BranchRemoteResolver:
    """Determines the branch to sync and the remote to push it to."""

    def __init__(self, adapter: GitAdapter, logger: Optional[logging.LoggerAdapter] = None):
        self.adapter = adapter
        self.logger = logger or logging.getLogger('gitsync.git_sync.branch_utils')

    def current_branch(self) -> str:
        """Name of the checked-out branch; raises NotOnBranchError when HEAD is detached."""
        ref = self.adapter.symbolic_ref_head()
        if not ref:
            raise NotOnBranchError()

        branch_name = ref[len(HEADS_PREFIX):] if ref.startswith(HEADS_PREFIX) else ref
        if not branch_name:
            raise NotOnBranchError()
        return branch_name

    def push_remote(self, branch_name: str) -> str:
        """
        Remote for the branch, first non-empty of:
        branch.<name>.pushRemote, remote.pushDefault, branch.<name>.remote.

        A "." remote (the local repository itself) counts as not configured.
        """
        for key in (f"branch.{branch_name}.pushRemote", "remote.pushDefault", f"branch.{branch_name}.remote"):
            remote_name = self.adapter.config_get(key)
            if remote_name:
                self.logger.debug(f"Remote '{remote_name}' from {key}")
                break
        else:
            remote_name = None

        if not remote_name or remote_name == ".":
            raise NoRemoteConfiguredError(branch_name)
        return remote_name

    def resolve(self) -> BranchContext:
        """Resolve the branch context of the current run. No side effects."""
        branch_name = self.current_branch()
        return BranchContext(branch_name=branch_name, remote_name=self.push_remote(branch_name))

    def ensure_syncable(self, branch_name: str, force: bool = False) -> None:
        """
        Require branch.<name>.sync to be true, unless forced.

        Raises:
            NotSyncableError: the branch is not enlisted for synchronization
        """
        if force:
            self.logger.debug(f"Branch '{branch_name}' forced syncable")
            return

        if not self.adapter.config_get_bool(f"branch.{branch_name}.sync"):
            raise NotSyncableError(branch_name)
