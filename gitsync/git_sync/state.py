"""Repository state detection: is the working copy safe to touch?"""

import logging
import re
from pathlib import Path
from typing import Optional

from ..errors import NoRepositoryError, UnsafeStateError
from .operations import GitAdapter
from .repository_info import RepositoryKind, RepositoryPhase, RepositoryState


_SUBMODULE_GIT_DIR = re.compile(r"modules/([^/]+)$")


class RepositoryStateInspector:
    """
    Classifies the repository into a RepositoryState.

    The special-state markers are checked in a fixed order, first match wins:
    interactive rebase, rebase (merge backend), am/rebase (apply backend),
    merge, cherry-pick, bisect. Nothing here mutates the repository, and
    every call re-reads the on-disk state.
    """

    # (marker path inside the git dir, must be a directory, resulting phase)
    _MARKERS = (
        ("rebase-merge/interactive", False, RepositoryPhase.REBASE_INTERACTIVE),
        ("rebase-merge", True, RepositoryPhase.REBASE_MERGE),
        ("rebase-apply", True, RepositoryPhase.AM_OR_REBASE_APPLY),
        ("MERGE_HEAD", False, RepositoryPhase.MERGING),
        ("CHERRY_PICK_HEAD", False, RepositoryPhase.CHERRY_PICKING),
        ("BISECT_LOG", False, RepositoryPhase.BISECTING),
    )

    def __init__(self, adapter: GitAdapter):
        self.adapter = adapter
        self.logger = logging.getLogger('gitsync.git_sync.state')

    def inspect(self) -> RepositoryState:
        """Detect the current state of the repository."""
        git_dir = self.adapter.git_dir()
        if git_dir is None:
            return RepositoryState.no_repo()

        phase = self._detect_phase(git_dir)

        if self.adapter.is_inside_git_dir():
            kind = RepositoryKind.BARE if self.adapter.is_bare_repository() else RepositoryKind.GIT_DIR
            return RepositoryState(phase=phase, kind=kind)

        if self.adapter.is_inside_work_tree():
            return RepositoryState(phase=phase, kind=RepositoryKind.WORK_TREE, clean=self.adapter.diff_quiet())

        # e.g. a bare repository inspected from outside its directory via GIT_DIR
        kind = RepositoryKind.BARE if self.adapter.is_bare_repository() else RepositoryKind.GIT_DIR
        return RepositoryState(phase=phase, kind=kind)

    def _detect_phase(self, git_dir: Path) -> RepositoryPhase:
        for marker, is_dir, phase in self._MARKERS:
            path = git_dir / marker
            if (is_dir and path.is_dir()) or (not is_dir and path.is_file()):
                return phase
        return RepositoryPhase.NORMAL

    def ensure_safe(self) -> RepositoryState:
        """
        Gate a run on the repository state.

        Raises:
            NoRepositoryError: no git repository found
            UnsafeStateError: any state other than a normal work tree
        """
        state = self.inspect()

        if not state.exists:
            raise NoRepositoryError("No git repository detected. Exiting.")

        if not state.is_safe:
            raise UnsafeStateError(state)

        return state

    def repo_name(self) -> str:
        """
        Display name of the repository for log lines.

        Submodules keep their git dir in '<parent>/.git/modules/<name>', which
        gives the submodule name; otherwise the git dir's parent directory name
        is used.
        """
        git_dir: Optional[Path] = self.adapter.git_dir()
        if git_dir is None:
            return self.adapter.work_dir.name

        real_git_dir = git_dir.resolve()
        match = _SUBMODULE_GIT_DIR.search(real_git_dir.as_posix())
        if match:
            return match.group(1)
        if real_git_dir.name != ".git":
            # bare repository: the directory itself is the repository
            return real_git_dir.name
        return real_git_dir.parent.name
