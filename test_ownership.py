#!/usr/bin/env python3
"""
Unit tests for the remote ownership check.

Owner extraction must give the same answer for every transport form of the
same remote, and OwnershipGuard must refuse foreign remotes unless bypassed.
"""

import unittest
from unittest.mock import Mock

from gitsync.errors import OwnershipMismatchError
from gitsync.git_sync.remote_utils import (
    Ownership,
    OwnershipGuard,
    extract_email_user,
    extract_remote_owner,
)


class TestExtractRemoteOwner(unittest.TestCase):

    def test_transport_forms_agree(self):
        urls = [
            "git@github.com:alice/notes.git",
            "github.com:alice/notes.git",
            "https://github.com/alice/notes.git",
            "https://token@github.com/alice/notes",
            "ssh://git@github.com/alice/notes.git",
            "ssh://git@github.com:2222/alice/notes.git",
            "git://example.org/alice/notes",
        ]
        for url in urls:
            self.assertEqual(extract_remote_owner(url), "alice", url)

    def test_local_paths_have_no_owner(self):
        for url in ("/srv/git/notes.git", "../notes.git", "C:/repos/notes.git", "", None):
            self.assertEqual(extract_remote_owner(url), "", repr(url))

    def test_file_url_uses_first_path_segment(self):
        self.assertEqual(extract_remote_owner("file:///srv/git/notes.git"), "srv")


class TestExtractEmailUser(unittest.TestCase):

    def test_local_part(self):
        self.assertEqual(extract_email_user("alice@example.com"), "alice")
        self.assertEqual(extract_email_user("bob"), "bob")
        self.assertEqual(extract_email_user(None), "")


class TestOwnershipGuard(unittest.TestCase):
    """OwnershipGuard against a mocked adapter."""

    def setUp(self):
        self.adapter = Mock()
        self.adapter.remote_get_url.return_value = "git@github.com:alice/notes.git"
        self.adapter.config_get.return_value = "alice@example.com"

    def test_owner_matches_email_user(self):
        ownership = OwnershipGuard(self.adapter).verify("origin")

        self.assertEqual(ownership, Ownership("alice", "alice"))
        self.adapter.config_get.assert_called_once_with("user.email")

    def test_mismatch_raises(self):
        self.adapter.config_get.return_value = "mallory@example.com"

        with self.assertRaises(OwnershipMismatchError) as ctx:
            OwnershipGuard(self.adapter).verify("origin")

        error = ctx.exception
        self.assertEqual(error.remote_owner, "alice")
        self.assertEqual(error.operator_identity, "mallory")
        self.assertEqual(error.exit_code, 1)

    def test_operator_override_wins_over_email(self):
        self.adapter.config_get.return_value = "mallory@example.com"

        ownership = OwnershipGuard(self.adapter).verify("origin", operator_override="alice")
        self.assertTrue(ownership.matches)
        self.adapter.config_get.assert_not_called()

    def test_bypass_skips_all_queries(self):
        self.adapter.config_get.return_value = "mallory@example.com"

        self.assertIsNone(OwnershipGuard(self.adapter, allow_nonowner=True).verify("origin"))
        self.adapter.remote_get_url.assert_not_called()

    def test_local_remote_needs_empty_identity(self):
        self.adapter.remote_get_url.return_value = "/srv/git/notes.git"

        self.assertRaises(OwnershipMismatchError, OwnershipGuard(self.adapter).verify, "origin")

        self.adapter.config_get.return_value = None
        self.assertTrue(OwnershipGuard(self.adapter).verify("origin").matches)


if __name__ == "__main__":
    unittest.main(verbosity=2)
