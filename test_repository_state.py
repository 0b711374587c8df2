#!/usr/bin/env python3
"""
Unit tests for repository state detection.

This test suite validates RepositoryState rendering, the special-state marker
detection of RepositoryStateInspector and the porcelain status parsing, using
real throwaway git repositories.
"""

import os
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from gitsync.errors import NoRepositoryError, UnsafeStateError
from gitsync.git_sync.operations import GitAdapter, parse_porcelain_status
from gitsync.git_sync.repository_info import (
    RepositoryKind,
    RepositoryPhase,
    RepositoryState,
    StatusEntry,
)
from gitsync.git_sync.state import RepositoryStateInspector


def run_git(repo_dir: Path, *args: str) -> str:
    """Run a git command in repo_dir and return its stdout."""
    result = subprocess.run(["git", *args], cwd=repo_dir, check=True, capture_output=True, text=True)
    return result.stdout


def setup_git_repo(repo_dir: Path) -> None:
    """Initialize a repository on branch 'main' with one commit."""
    repo_dir.mkdir(parents=True, exist_ok=True)
    run_git(repo_dir, "init", "-q")
    run_git(repo_dir, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(repo_dir, "config", "user.name", "Test User")
    run_git(repo_dir, "config", "user.email", "test@example.com")
    run_git(repo_dir, "config", "commit.gpgsign", "false")
    (repo_dir / "notes.txt").write_text("first line\n")
    run_git(repo_dir, "add", "notes.txt")
    run_git(repo_dir, "commit", "-q", "-m", "initial")


class TestRepositoryStateRendering(unittest.TestCase):
    """RepositoryState value semantics, no git involved."""

    def test_no_repo(self):
        state = RepositoryState.no_repo()
        self.assertFalse(state.exists)
        self.assertFalse(state.is_safe)
        self.assertEqual(str(state), "NOGIT")

    def test_work_tree_rendering(self):
        self.assertEqual(str(RepositoryState(RepositoryPhase.NORMAL, RepositoryKind.WORK_TREE, True)), "NORMAL | CLEAN")
        self.assertEqual(str(RepositoryState(RepositoryPhase.MERGING, RepositoryKind.WORK_TREE, False)), "MERGING | DIRTY")
        self.assertEqual(str(RepositoryState(RepositoryPhase.NORMAL, RepositoryKind.BARE)), "NORMAL | BARE")

    def test_only_normal_work_tree_is_safe(self):
        for phase in RepositoryPhase:
            for kind in RepositoryKind:
                state = RepositoryState(phase, kind, True)
                expected = phase == RepositoryPhase.NORMAL and kind == RepositoryKind.WORK_TREE
                self.assertEqual(state.is_safe, expected, f"{phase} / {kind}")

    def test_dirty_normal_is_safe_but_not_clean(self):
        state = RepositoryState(RepositoryPhase.NORMAL, RepositoryKind.WORK_TREE, False)
        self.assertTrue(state.is_safe)
        self.assertFalse(state.is_normal_clean)


class TestRepositoryStateInspector(unittest.TestCase):
    """State detection against real repositories."""

    def setUp(self):
        """Set up test environment before each test."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.repo_dir = self.temp_dir / "repo"
        # keep git from discovering a repository above the temp dir
        self.env_patch = patch.dict(os.environ, {"GIT_CEILING_DIRECTORIES": str(self.temp_dir)})
        self.env_patch.start()

    def tearDown(self):
        """Clean up test environment after each test."""
        self.env_patch.stop()
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def _inspector(self, work_dir: Path = None) -> RepositoryStateInspector:
        return RepositoryStateInspector(GitAdapter(work_dir or self.repo_dir))

    def test_clean_work_tree(self):
        setup_git_repo(self.repo_dir)
        state = self._inspector().inspect()

        self.assertEqual(state.phase, RepositoryPhase.NORMAL)
        self.assertEqual(state.kind, RepositoryKind.WORK_TREE)
        self.assertTrue(state.is_normal_clean)
        self.assertEqual(str(state), "NORMAL | CLEAN")

    def test_modified_work_tree_is_dirty(self):
        setup_git_repo(self.repo_dir)
        (self.repo_dir / "notes.txt").write_text("changed\n")

        state = self._inspector().inspect()
        self.assertEqual(str(state), "NORMAL | DIRTY")
        self.assertTrue(state.is_safe)

    def test_untracked_files_do_not_make_it_dirty(self):
        setup_git_repo(self.repo_dir)
        (self.repo_dir / "scratch.txt").write_text("new\n")

        self.assertEqual(str(self._inspector().inspect()), "NORMAL | CLEAN")

    def test_no_repository(self):
        self.repo_dir.mkdir()
        inspector = self._inspector()

        self.assertEqual(inspector.inspect(), RepositoryState.no_repo())
        with self.assertRaises(NoRepositoryError) as ctx:
            inspector.ensure_safe()
        self.assertEqual(ctx.exception.exit_code, 128)

    def test_marker_files_select_phase(self):
        setup_git_repo(self.repo_dir)
        git_dir = self.repo_dir / ".git"

        cases = [
            (lambda: (git_dir / "BISECT_LOG").write_text(""), RepositoryPhase.BISECTING),
            (lambda: (git_dir / "CHERRY_PICK_HEAD").write_text(""), RepositoryPhase.CHERRY_PICKING),
            (lambda: (git_dir / "MERGE_HEAD").write_text(""), RepositoryPhase.MERGING),
            (lambda: (git_dir / "rebase-apply").mkdir(), RepositoryPhase.AM_OR_REBASE_APPLY),
            (lambda: (git_dir / "rebase-merge").mkdir(), RepositoryPhase.REBASE_MERGE),
            (lambda: (git_dir / "rebase-merge" / "interactive").write_text(""), RepositoryPhase.REBASE_INTERACTIVE),
        ]

        # markers accumulate; each newly added one has higher precedence
        for create_marker, expected_phase in cases:
            create_marker()
            inspector = self._inspector()
            state = inspector.inspect()
            self.assertEqual(state.phase, expected_phase)
            self.assertFalse(state.is_safe)

            with self.assertRaises(UnsafeStateError) as ctx:
                inspector.ensure_safe()
            self.assertEqual(ctx.exception.exit_code, 2)
            self.assertIn(expected_phase.value, ctx.exception.message)

    def test_marker_directory_must_be_a_directory(self):
        setup_git_repo(self.repo_dir)
        (self.repo_dir / ".git" / "rebase-apply").write_text("")

        self.assertEqual(self._inspector().inspect().phase, RepositoryPhase.NORMAL)

    def test_bare_repository(self):
        bare_dir = self.temp_dir / "remote.git"
        bare_dir.mkdir()
        run_git(bare_dir, "init", "-q", "--bare")

        inspector = self._inspector(bare_dir)
        state = inspector.inspect()
        self.assertEqual(state.kind, RepositoryKind.BARE)
        self.assertEqual(str(state), "NORMAL | BARE")
        self.assertRaises(UnsafeStateError, inspector.ensure_safe)
        self.assertEqual(inspector.repo_name(), "remote.git")

    def test_inside_git_dir(self):
        setup_git_repo(self.repo_dir)
        state = self._inspector(self.repo_dir / ".git").inspect()

        self.assertEqual(state.kind, RepositoryKind.GIT_DIR)
        self.assertFalse(state.is_safe)

    def test_repo_name(self):
        setup_git_repo(self.repo_dir)
        self.assertEqual(self._inspector().repo_name(), "repo")

    def test_repo_name_of_submodule(self):
        adapter = Mock()
        adapter.git_dir.return_value = Path("/work/parent/.git/modules/plugin")
        self.assertEqual(RepositoryStateInspector(adapter).repo_name(), "plugin")


class TestPorcelainStatus(unittest.TestCase):
    """Parsing of 'git status --porcelain=v1 -z' and the local change rule."""

    def test_parse_entries(self):
        output = " M notes.txt\0?? new file.txt\0R  renamed.txt\0old.txt\0D  gone.txt\0"
        entries = parse_porcelain_status(output)

        self.assertEqual(entries, [
            StatusEntry(" ", "M", "notes.txt"),
            StatusEntry("?", "?", "new file.txt"),
            StatusEntry("R", " ", "renamed.txt", "old.txt"),
            StatusEntry("D", " ", "gone.txt"),
        ])

    def test_parse_empty(self):
        self.assertEqual(parse_porcelain_status(""), [])

    def test_local_change_rule(self):
        cases = {
            ("?", "?"): True,
            ("M", " "): True,
            ("A", " "): True,
            ("R", " "): True,
            (" ", "M"): True,
            (" ", "D"): True,
            ("M", "M"): True,
            ("A", "D"): True,
            ("D", " "): True,
            ("T", " "): True,
            (" ", "T"): True,
            ("M", "T"): True,
            ("U", "U"): False,
            ("!", "!"): False,
        }
        for (index, worktree), expected in cases.items():
            entry = StatusEntry(index, worktree, "file")
            self.assertEqual(entry.is_local_change, expected, f"'{index}{worktree}'")


if __name__ == "__main__":
    unittest.main(verbosity=2)
