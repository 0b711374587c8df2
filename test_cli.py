#!/usr/bin/env python3
"""
Tests for the git-sync command line.

GitSyncManager is patched out; these tests cover argument handling, the
configuration handed to the manager and the process exit codes.
"""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from gitsync.cli import main
from gitsync.git_sync import create_sync_result
from gitsync.git_sync import error_types


class TestCli(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.repo_dir = Path(self.temp_dir.name)

        self.env_patch = patch.dict(os.environ, {}, clear=True)
        self.env_patch.start()
        self.dotenv_patch = patch("gitsync.config.load_dotenv")
        self.dotenv_patch.start()

        self.manager_patch = patch("gitsync.cli.GitSyncManager")
        self.manager_cls = self.manager_patch.start()
        self._returns(error_types.IN_SYNC)

    def tearDown(self):
        # drop the handler bound to the runner's captured stderr
        logger = logging.getLogger('gitsync')
        logger.handlers.clear()
        logger.propagate = True

        self.manager_patch.stop()
        self.dotenv_patch.stop()
        self.env_patch.stop()
        self.temp_dir.cleanup()

    def _returns(self, error_code):
        self.manager_cls.return_value.run.return_value = create_sync_result(
            success=error_code in (error_types.IN_SYNC, error_types.CHECK_OK),
            message=error_code,
            operation="sync",
            error_code=error_code,
        )

    def _invoke(self, *args):
        return self.runner.invoke(main, ["-C", str(self.repo_dir), *args])

    def _config(self):
        return self.manager_cls.call_args[0][0]

    def test_default_mode_is_sync(self):
        result = self._invoke()

        self.assertEqual(result.exit_code, 0, result.output)
        config = self._config()
        self.assertEqual(config.mode, "sync")
        self.assertEqual(config.repo_dir, self.repo_dir.resolve())

    def test_check_mode(self):
        self._returns(error_types.CHECK_OK)

        result = self._invoke("check")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(self._config().check_only)

    def test_flags(self):
        result = self._invoke("-n", "-s", "-r", "-d", "-u", "alice", "--allow-nonowner")

        self.assertEqual(result.exit_code, 0, result.output)
        config = self._config()
        self.assertTrue(config.sync_new_files)
        self.assertTrue(config.sync_branch)
        self.assertTrue(config.recursive)
        self.assertTrue(config.debug)
        self.assertTrue(config.allow_nonowner)
        self.assertEqual(config.provider_user, "alice")

    def test_exit_code_follows_result(self):
        cases = {
            error_types.NO_REPOSITORY: 128,
            error_types.UNSAFE_STATE: 2,
            error_types.OWNERSHIP_MISMATCH: 1,
            error_types.PUSH_FAILED: 3,
            error_types.REBASE_CONFLICT: 1,
        }
        for error_code, expected in cases.items():
            self._returns(error_code)
            result = self._invoke()
            self.assertEqual(result.exit_code, expected, error_code)

    def test_invalid_mode(self):
        result = self._invoke("pull")

        self.assertEqual(result.exit_code, 2)
        self.manager_cls.assert_not_called()

    def test_missing_directory(self):
        result = self.runner.invoke(main, ["-C", str(self.repo_dir / "missing")])

        self.assertEqual(result.exit_code, 1)
        self.manager_cls.assert_not_called()

    def test_invalid_environment(self):
        with patch.dict(os.environ, {"GIT_SYNC_LOG_LEVEL": "chatty"}):
            result = self._invoke()

        self.assertEqual(result.exit_code, 1)
        self.manager_cls.assert_not_called()


if __name__ == "__main__":
    unittest.main(verbosity=2)
