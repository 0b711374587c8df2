"""Auto-commit of pending local modifications before syncing."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from ..errors import CommitFailedError, CommitLeftDirtyError
from ..platform import get_host_name
from .operations import GitAdapter, GitOutcome
from .repository_info import StatusEntry
from .state import RepositoryStateInspector


MESSAGE_PLACEHOLDER = "%message"


@dataclass(frozen=True)
class ConfiguredScript:
    """branch.<name>.autoCommitScript: an opaque shell command template."""
    command_template: str

    def render(self, message: str) -> str:
        return self.command_template.replace(MESSAGE_PLACEHOLDER, message)


@dataclass(frozen=True)
class AllFiles:
    """Stage everything, new files included ('git add -A'), then commit."""


@dataclass(frozen=True)
class ModifiedOnly:
    """Stage tracked modifications only ('git add -u'), then commit."""


CommitStrategy = Union[ConfiguredScript, AllFiles, ModifiedOnly]


@dataclass(frozen=True)
class CommitPlan:
    """The strategy selected for this run and the message it commits with."""
    strategy: CommitStrategy
    message: str

    def describe(self) -> str:
        if isinstance(self.strategy, ConfiguredScript):
            return self.strategy.render(self.message)
        if isinstance(self.strategy, AllFiles):
            return f'git add -A; git commit -m "{self.message}"'
        return f'git add -u; git commit -m "{self.message}"'


class CommitOutcome(Enum):
    COMMITTED = "committed"
    NO_CHANGES = "no_changes"
    COMMIT_FAILED = "commit_failed"
    COMMIT_LEFT_DIRTY = "commit_left_dirty"


def default_commit_message() -> str:
    return f"changes from {get_host_name()}"


class ChangeCommitPolicy:
    """
    Decides whether and how to auto-commit local changes.

    Strategy precedence (first match wins):
    1. a per-branch autoCommitScript
    2. AllFiles, when syncNewFiles is set in git config or by the caller
    3. ModifiedOnly
    """

    def __init__(
        self,
        adapter: GitAdapter,
        inspector: RepositoryStateInspector,
        sync_new_files: bool = False,
        before_commit: Optional[Callable[[], None]] = None,
        logger: Optional[logging.LoggerAdapter] = None,
    ):
        """
        Args:
            adapter: Git adapter for the repository
            inspector: State inspector used to verify the result of the commit
            sync_new_files: Caller override enabling the AllFiles strategy
            before_commit: Hook run after changes were detected and before the
                commit executes (used to sync submodules first)
        """
        self.adapter = adapter
        self.inspector = inspector
        self.sync_new_files = sync_new_files
        self.before_commit = before_commit
        self.logger = logger or logging.getLogger('gitsync.git_sync.commit_policy')

    def local_changes(self) -> List[StatusEntry]:
        """Status entries that call for an auto-commit."""
        return [entry for entry in self.adapter.status() if entry.is_local_change]

    def select_strategy(self, branch_name: str) -> CommitStrategy:
        script = self.adapter.config_get(f"branch.{branch_name}.autoCommitScript")
        if script:
            self.logger.debug("Using autocommit command from config.")
            return ConfiguredScript(script)

        if self.sync_new_files or self.adapter.config_get_bool(f"branch.{branch_name}.syncNewFiles"):
            self.logger.debug("Using all autocommit command.")
            return AllFiles()

        self.logger.debug("No autocommit command found; using default.")
        return ModifiedOnly()

    def commit_message(self, branch_name: str) -> str:
        message = self.adapter.config_get(f"branch.{branch_name}.syncCommitMsg")
        if not message:
            self.logger.debug("No custom commit message found; using default.")
            return default_commit_message()
        return message

    def plan(self, branch_name: str) -> CommitPlan:
        return CommitPlan(strategy=self.select_strategy(branch_name), message=self.commit_message(branch_name))

    def maybe_commit(self, branch_name: str) -> CommitOutcome:
        """
        Commit pending local changes, if there are any.

        Returns COMMITTED or NO_CHANGES. The failure outcomes are raised as
        CommitFailedError and CommitLeftDirtyError, since neither allows the
        run to continue.
        """
        changes = self.local_changes()
        if not changes:
            self.logger.info("No local changes to commit.")
            return CommitOutcome.NO_CHANGES

        self.logger.debug(f"{len(changes)} local change(s): {', '.join(entry.path for entry in changes)}")
        plan = self.plan(branch_name)

        if self.before_commit is not None:
            self.before_commit()

        self.logger.debug(f"Committing local changes using: {plan.describe()}")
        outcome = self._execute(plan)

        if outcome is None:
            self.logger.info("Nothing staged for commit; untracked files left alone.")
            return CommitOutcome.NO_CHANGES

        if not outcome.success:
            raise CommitFailedError(
                f"Auto-commit failed. Commands: {plan.describe()}",
                output=outcome.output,
            )

        # after autocommit, we should be clean
        state = self.inspector.inspect()
        if not state.is_normal_clean:
            raise CommitLeftDirtyError(state)

        self.logger.debug("Auto-commit done.")
        return CommitOutcome.COMMITTED

    def _execute(self, plan: CommitPlan) -> Optional[GitOutcome]:
        """Run the plan; None means the built-in staging left nothing to commit."""
        strategy = plan.strategy

        if isinstance(strategy, ConfiguredScript):
            return self.adapter.run_script(strategy.render(plan.message))

        staged = self.adapter.stage_all() if isinstance(strategy, AllFiles) else self.adapter.stage_tracked()
        if not staged.success:
            return staged

        if not self.adapter.has_staged_changes():
            return None

        return self.adapter.commit(plan.message)
