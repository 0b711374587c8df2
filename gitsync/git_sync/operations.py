"""Git command operations and execution logic using GitPython."""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from git import Git
from git.exc import GitCommandNotFound

from ..errors import GitUnavailableError
from .repository_info import StatusEntry


@dataclass
class GitOutcome:
    """Normalized outcome of one git invocation."""
    status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.status == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for showing to the operator."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class GitAdapter:
    """
    Thin pass-through to the git command line.

    Every query and mutation of a sync run goes through this class. Commands
    never raise on a non-zero exit status; callers inspect the returned
    GitOutcome instead. Only a missing git executable raises
    (GitUnavailableError).
    """

    def __init__(self, work_dir: Path, git_dir: Optional[Path] = None, work_tree: Optional[Path] = None):
        """
        Args:
            work_dir: Directory git commands are run from
            git_dir: Optional GIT_DIR override (e.g. a bare dotfiles repository)
            work_tree: Optional GIT_WORK_TREE override
        """
        self.work_dir = Path(work_dir)
        self.logger = logging.getLogger('gitsync.git_sync.operations')

        self._environment = {}
        if git_dir is not None:
            self._environment['GIT_DIR'] = str(git_dir)
        if work_tree is not None:
            self._environment['GIT_WORK_TREE'] = str(work_tree)

        self._git = Git(str(self.work_dir))
        if self._environment:
            self._git.update_environment(**self._environment)

    def run(self, *args: str) -> GitOutcome:
        """Run 'git <args>' and return its normalized outcome."""
        command = [Git.GIT_PYTHON_GIT_EXECUTABLE or "git", *args]
        self.logger.debug(f"Running: git {' '.join(args)}")

        try:
            status, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as e:
            raise GitUnavailableError(f"git executable not available: {e}")

        return GitOutcome(status=status, stdout=stdout or "", stderr=stderr or "")

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    def rev_parse(self, flag: str) -> Optional[str]:
        """Output of 'git rev-parse <flag>', or None if git refused."""
        outcome = self.run("rev-parse", flag)
        if not outcome.success:
            return None
        return outcome.stdout.strip()

    def _rev_parse_bool(self, flag: str) -> bool:
        return self.rev_parse(flag) == "true"

    def git_dir(self) -> Optional[Path]:
        """Absolute path of the git directory, or None outside a repository."""
        value = self.rev_parse("--absolute-git-dir")
        return Path(value) if value else None

    def is_inside_work_tree(self) -> bool:
        return self._rev_parse_bool("--is-inside-work-tree")

    def is_inside_git_dir(self) -> bool:
        return self._rev_parse_bool("--is-inside-git-dir")

    def is_bare_repository(self) -> bool:
        return self._rev_parse_bool("--is-bare-repository")

    def diff_quiet(self) -> bool:
        """True when the work tree has no content changes against the index."""
        return self.run("diff", "--no-ext-diff", "--quiet", "--exit-code").success

    def status(self) -> List[StatusEntry]:
        """Structured 'git status --porcelain' listing."""
        outcome = self.run("status", "--porcelain=v1", "-z")
        if not outcome.success:
            self.logger.debug(f"git status failed: {outcome.stderr}")
            return []
        return parse_porcelain_status(outcome.stdout)

    def short_status(self, color: bool = False) -> str:
        """'git status --short --branch' output, verbatim, for the operator."""
        args = ("-c", "color.ui=always") if color else ("-c", "color.ui=never")
        return self.run(*args, "status", "--short", "--branch").stdout

    def symbolic_ref_head(self) -> Optional[str]:
        """Full ref HEAD points to (e.g. 'refs/heads/main'), or None when detached."""
        outcome = self.run("symbolic-ref", "-q", "HEAD")
        if not outcome.success:
            return None
        return outcome.stdout.strip() or None

    def config_get(self, key: str, value_type: Optional[str] = None) -> Optional[str]:
        """
        Read a git config value.

        Args:
            key: Config key, e.g. 'branch.main.pushRemote'
            value_type: Optional git type canonicalization, e.g. 'bool'

        Returns:
            The value, or None when the key is unset
        """
        args = ["config", "--get"]
        if value_type:
            args.append(f"--{value_type}")
        args.append(key)

        outcome = self.run(*args)
        if not outcome.success:
            return None
        return outcome.stdout.strip()

    def config_get_bool(self, key: str) -> bool:
        return self.config_get(key, "bool") == "true"

    def remote_get_url(self, name: str) -> Optional[str]:
        outcome = self.run("remote", "get-url", name)
        if not outcome.success:
            return None
        return outcome.stdout.strip() or None

    def rev_list_count_left_right(self, remote_ref: str, head: str = "HEAD") -> Optional[Tuple[int, int]]:
        """
        Count commits only reachable from remote_ref and only from head.

        Returns:
            (remote_only, local_only), or None when the comparison cannot be made
        """
        outcome = self.run("rev-list", "--count", "--left-right", f"{remote_ref}...{head}")
        if not outcome.success:
            return None

        parts = outcome.stdout.split()
        if len(parts) != 2:
            return None

        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            return None

    def submodule_paths(self) -> List[str]:
        """Paths of initialized submodules, relative to the work directory."""
        outcome = self.run("submodule", "status")
        if not outcome.success:
            self.logger.debug(f"git submodule status failed: {outcome.stderr}")
            return []

        paths = []
        for line in outcome.stdout.splitlines():
            if not line.strip():
                continue
            # "<flag><sha1> <path> (<describe>)"; '-' marks uninitialized
            if line.startswith("-"):
                self.logger.debug(f"Skipping uninitialized submodule: {line.split()[1]}")
                continue
            fields = line[1:].split()
            if len(fields) >= 2:
                paths.append(fields[1])
        return paths

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def fetch(self, remote: str, branch: str) -> GitOutcome:
        return self.run("fetch", "--quiet", remote, branch)

    def push(self, remote: str, refspec: str) -> GitOutcome:
        return self.run("push", "--quiet", remote, refspec)

    def merge_ff_only(self, ref: str) -> GitOutcome:
        return self.run("merge", "--quiet", "--ff", "--ff-only", ref)

    def rebase(self, ref: str) -> GitOutcome:
        return self.run("rebase", "--quiet", ref)

    def stage_all(self) -> GitOutcome:
        return self.run("add", "-A")

    def stage_tracked(self) -> GitOutcome:
        return self.run("add", "-u")

    def has_staged_changes(self) -> bool:
        return not self.run("diff", "--cached", "--quiet", "--exit-code").success

    def commit(self, message: str) -> GitOutcome:
        return self.run("commit", "--quiet", "-m", message)

    def run_script(self, command: str) -> GitOutcome:
        """
        Execute an opaque shell command in the work directory.

        The command sees the same GIT_DIR/GIT_WORK_TREE as every git call
        made through this adapter. Its content is never interpreted.
        """
        self.logger.debug(f"Running script: {command}")
        env = dict(os.environ)
        env.update(self._environment)

        result = subprocess.run(
            command,
            shell=True,
            cwd=self.work_dir,
            env=env,
            capture_output=True,
            text=True,
        )
        return GitOutcome(status=result.returncode, stdout=result.stdout.strip(), stderr=result.stderr.strip())


def parse_porcelain_status(output: str) -> List[StatusEntry]:
    """
    Parse NUL-separated 'git status --porcelain=v1 -z' output.

    Renamed and copied entries carry their original path in the following
    NUL-separated field.
    """
    entries = []
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        record = fields[i]
        i += 1
        if len(record) < 4:
            continue

        index, worktree, path = record[0], record[1], record[3:]
        orig_path = None
        if index in "RC" and i < len(fields):
            orig_path = fields[i]
            i += 1

        entries.append(StatusEntry(index=index, worktree=worktree, path=path, orig_path=orig_path))
    return entries
