#!/usr/bin/env python3
"""Tests for the 'gs ⟩ <repo> | <message>' log output."""

import io
import logging
import unittest

from gitsync.config import SyncConfig
from gitsync.logging_config import PREFIX, RepoFormatter, get_repo_logger, setup_logging


class TestRepoLogging(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()
        setup_logging(SyncConfig(color=False), stream=self.stream)

    def tearDown(self):
        logger = logging.getLogger('gitsync')
        logger.handlers.clear()
        logger.propagate = True

    def test_repo_prefix(self):
        get_repo_logger('gitsync.git_sync.manager', 'notes').info("Repo state: NORMAL | CLEAN")

        self.assertEqual(self.stream.getvalue(), f"{PREFIX}notes | Repo state: NORMAL | CLEAN\n")

    def test_debug_hidden_at_info(self):
        get_repo_logger('gitsync.git_sync.state', 'notes').debug("Running: git status")
        self.assertEqual(self.stream.getvalue(), "")

    def test_debug_flag_shows_debug(self):
        setup_logging(SyncConfig(debug=True, color=False), stream=self.stream)
        get_repo_logger('gitsync.git_sync.state', 'notes').debug("Running: git status")

        self.assertIn("Running: git status", self.stream.getvalue())
        self.assertEqual(len(logging.getLogger('gitsync').handlers), 1)

    def test_success_is_green(self):
        record = logging.LogRecord('gitsync', logging.INFO, __file__, 1, "In sync, all fine.", None, None)
        record.repo = "notes"
        record.success = True

        line = RepoFormatter(color=True).format(record)
        self.assertTrue(line.startswith("\033[1;32m"))
        self.assertTrue(line.endswith("\033[0m"))

    def test_records_without_repo(self):
        logging.getLogger('gitsync.cli').warning("no repo here")
        self.assertEqual(self.stream.getvalue(), f"{PREFIX}- | no repo here\n")


if __name__ == "__main__":
    unittest.main(verbosity=2)
