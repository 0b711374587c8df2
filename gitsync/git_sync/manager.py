"""Git synchronization manager: one end-to-end sync or check run."""

import logging
from typing import List, Optional

from ..config import SyncConfig
from ..errors import GitSyncError, GitUnavailableError, OwnershipMismatchError, CommitFailedError
from ..logging_config import get_repo_logger
from . import error_types
from .branch_utils import BranchRemoteResolver
from .commit_policy import ChangeCommitPolicy
from .error_strategies import get_error_resolution
from .operations import GitAdapter
from .remote_utils import OwnershipGuard
from .repository_info import BranchContext, RepositoryState, SyncState
from .state import RepositoryStateInspector
from .submodules import SubmoduleSynchronizer
from .sync_operations import SyncActionDispatcher
from .upstream_tracking import SyncStateClassifier
from .utils import SyncResult, create_sync_result


class GitSyncManager:
    """
    Runs the synchronization procedure for one repository.

    Phases, strictly in order, each depending on the previous one:
    1. repository state gate (normal work tree only)
    2. branch and remote resolution, syncable gate
    3. remote ownership gate (unless bypassed)
    4. [check mode stops here]
    5. auto-commit of local changes (submodules first, when recursive)
    6. fetch
    7. classification and the terminal action

    Every failure is raised by the phase as a GitSyncError and turned into a
    failed SyncResult here; no partial success is reported as success.
    """

    def __init__(self, config: SyncConfig, adapter: Optional[GitAdapter] = None):
        """
        Args:
            config: Immutable configuration of this run
            adapter: Git adapter to use; built from the config when omitted
        """
        self.config = config
        self.adapter = adapter or GitAdapter(config.repo_dir, git_dir=config.git_dir, work_tree=config.work_tree)
        self.inspector = RepositoryStateInspector(self.adapter)
        self.submodule_results: List[SyncResult] = []

    @property
    def operation(self) -> str:
        return self.config.mode

    def run(self) -> SyncResult:
        """Run the configured mode and return its classified result."""
        repo_name = self.config.repo_dir.name
        context: Optional[BranchContext] = None
        repo_state: Optional[RepositoryState] = None
        sync_state: Optional[SyncState] = None

        try:
            repo_name = self.inspector.repo_name()
            log = get_repo_logger('gitsync.git_sync.manager', repo_name)
            self.inspector.logger = get_repo_logger(self.inspector.logger.name, repo_name)

            repo_state = self.inspector.inspect()
            log.info(f"Repo state: {repo_state}")
            self.inspector.ensure_safe()
            log.debug(f"Preparing. Repo in {self.adapter.git_dir()}")

            resolver = BranchRemoteResolver(self.adapter, logger=get_repo_logger('gitsync.git_sync.branch_utils', repo_name))
            context = resolver.resolve()
            resolver.ensure_syncable(context.branch_name, force=self.config.sync_branch)

            guard = OwnershipGuard(
                self.adapter,
                allow_nonowner=self.config.allow_nonowner,
                logger=get_repo_logger('gitsync.git_sync.remote_utils', repo_name),
            )
            guard.verify(context.remote_name, self.config.provider_user)

            log.debug(f"In mode '{self.config.mode}'")
            if self.config.check_only:
                log.success("Check OK; sync may start.")
                return self._result(True, "Check OK; sync may start.", error_types.CHECK_OK,
                                    repo_name, repo_state, None, context)

            policy = ChangeCommitPolicy(
                self.adapter,
                self.inspector,
                sync_new_files=self.config.sync_new_files,
                before_commit=(lambda: self._sync_submodules(log)) if self.config.recursive else None,
                logger=get_repo_logger('gitsync.git_sync.commit_policy', repo_name),
            )
            log.info(f"Syncing with '{context.remote_ref}'")
            policy.maybe_commit(context.branch_name)

            classifier = SyncStateClassifier(self.adapter, logger=get_repo_logger('gitsync.git_sync.upstream_tracking', repo_name))
            dispatcher = SyncActionDispatcher(self.adapter, classifier, self.inspector, logger=log)
            dispatcher.fetch(context)
            sync_state = dispatcher.dispatch(context)

            log.success("In sync, all fine.")
            return self._result(True, "In sync, all fine.", error_types.IN_SYNC,
                                repo_name, self.inspector.inspect(), sync_state, context)

        except GitSyncError as error:
            log = get_repo_logger('gitsync.git_sync.manager', repo_name)
            return self._failure(error, log, repo_name, repo_state, sync_state, context)

    def _sync_submodules(self, log: logging.LoggerAdapter) -> None:
        log.debug("Syncing submodules recursively.")
        synchronizer = SubmoduleSynchronizer(self.config, self.adapter, sync_repository, logger=log)
        self.submodule_results.extend(synchronizer.sync_all())

    def _failure(
        self,
        error: GitSyncError,
        log: logging.LoggerAdapter,
        repo_name: str,
        repo_state: Optional[RepositoryState],
        sync_state: Optional[SyncState],
        context: Optional[BranchContext],
    ) -> SyncResult:
        log.error(error.message)

        if isinstance(error, OwnershipMismatchError):
            log.info(f"    ⟩ Inferred owner of remote '{error.remote_name}': '{error.remote_owner}'")
            log.info(f"    ⟩ Inferred git user: '{error.operator_identity}'")

        if isinstance(error, CommitFailedError) and error.output:
            for line in error.output.splitlines():
                log.info(f"    {line}")

        resolution = get_error_resolution(error.error_code, context.branch_name if context else None)
        if resolution is not None:
            for step in resolution.resolution_steps:
                log.info(f"    {step}")

        if error.show_status and not isinstance(error, GitUnavailableError):
            self._show_status(log)

        repo_state = getattr(error, 'repo_state', None) or getattr(error, 'state', None) or repo_state
        sync_state = getattr(error, 'sync_state', None) or sync_state

        return self._result(False, error.message, error.error_code, repo_name, repo_state, sync_state, context)

    def _show_status(self, log: logging.LoggerAdapter) -> None:
        """Surface git's own status output verbatim so the operator sees what git sees."""
        status = self.adapter.short_status(color=self.config.color)
        for line in status.splitlines():
            log.info(line)

    def _result(
        self,
        success: bool,
        message: str,
        error_code: str,
        repo_name: str,
        repo_state: Optional[RepositoryState],
        sync_state: Optional[SyncState],
        context: Optional[BranchContext],
    ) -> SyncResult:
        return create_sync_result(
            success=success,
            message=message,
            operation=self.operation,
            error_code=error_code,
            repository=repo_name,
            repository_state=str(repo_state) if repo_state is not None else None,
            sync_state=sync_state.value if sync_state is not None else None,
            branch_used=context.branch_name if context else None,
            remote_used=context.remote_name if context else None,
            submodule_results=self.submodule_results,
        )


def sync_repository(config: SyncConfig) -> SyncResult:
    """
    Convenience function: run one synchronization for the given configuration.

    Also the procedure each submodule is synchronized with.
    """
    return GitSyncManager(config).run()
