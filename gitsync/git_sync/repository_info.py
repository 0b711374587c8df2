"""Repository information and state data structures."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RepositoryPhase(Enum):
    """What git is in the middle of, judged from the marker files in the git dir."""
    NO_REPO = "NOGIT"
    REBASE_INTERACTIVE = "REBASE-i"
    REBASE_MERGE = "REBASE-m"
    AM_OR_REBASE_APPLY = "AM/REBASE"
    MERGING = "MERGING"
    CHERRY_PICKING = "CHERRY-PICKING"
    BISECTING = "BISECTING"
    NORMAL = "NORMAL"


class RepositoryKind(Enum):
    """Where the current directory sits relative to the repository."""
    BARE = "BARE"
    GIT_DIR = "GIT_DIR"
    WORK_TREE = "WORK_TREE"


@dataclass(frozen=True)
class RepositoryState:
    """Snapshot of the repository state. Never cached across mutating operations."""
    phase: RepositoryPhase
    kind: Optional[RepositoryKind] = None
    clean: Optional[bool] = None

    @classmethod
    def no_repo(cls) -> "RepositoryState":
        return cls(phase=RepositoryPhase.NO_REPO)

    @property
    def exists(self) -> bool:
        return self.phase != RepositoryPhase.NO_REPO

    @property
    def is_safe(self) -> bool:
        """Only a normal work tree, clean or dirty, may be synced."""
        return self.phase == RepositoryPhase.NORMAL and self.kind == RepositoryKind.WORK_TREE

    @property
    def is_normal_clean(self) -> bool:
        return self.is_safe and self.clean is True

    def __str__(self) -> str:
        if not self.exists:
            return self.phase.value
        if self.kind == RepositoryKind.WORK_TREE:
            qualifier = "CLEAN" if self.clean else "DIRTY"
        else:
            qualifier = self.kind.value if self.kind else "UNKNOWN"
        return f"{self.phase.value} | {qualifier}"


class SyncState(Enum):
    """How the local branch relates to its remote counterpart."""
    NO_UPSTREAM = "noUpstream"
    EQUAL = "equal"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"


@dataclass(frozen=True)
class BranchContext:
    """The branch being synced and the remote it is pushed to."""
    branch_name: str
    remote_name: str

    @property
    def remote_ref(self) -> str:
        return f"{self.remote_name}/{self.branch_name}"

    @property
    def refspec(self) -> str:
        return f"{self.branch_name}:{self.branch_name}"


@dataclass(frozen=True)
class StatusEntry:
    """One record of 'git status --porcelain'."""
    index: str
    worktree: str
    path: str
    orig_path: Optional[str] = None

    @property
    def is_untracked(self) -> bool:
        return self.index == "?" and self.worktree == "?"

    @property
    def is_local_change(self) -> bool:
        """
        Whether this entry should trigger an auto-commit.

        Untracked files, staged entries (added, modified, deleted, type-changed,
        renamed or copied) with an unchanged work tree, and work tree
        modifications, deletions or type changes on top of an unchanged or
        staged entry. Unmerged and ignored entries never count.
        """
        if self.is_untracked:
            return True
        if self.index in "MADTRC" and self.worktree == " ":
            return True
        return self.index in " MATRC" and self.worktree in "MDT"
