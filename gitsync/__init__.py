"""
git-sync - Safe, unattended synchronization of tracking git repositories.

This package commits trivial local changes, fetches from the branch's remote and
then fast-forwards, pushes or rebases, refusing to act as soon as something
non-trivial (conflicts, special repository states, foreign remotes) shows up.
"""

__version__ = "1.0.0"
__author__ = "git-sync Team"
__description__ = "Synchronize tracking git repositories without losing data"

from .config import SyncConfig, load_configuration
from .git_sync import GitSyncManager, SyncResult, sync_repository

__all__ = [
    "SyncConfig",
    "load_configuration",
    "GitSyncManager",
    "SyncResult",
    "sync_repository",
]
