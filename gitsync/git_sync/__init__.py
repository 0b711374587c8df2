"""Git synchronization functionality for git-sync."""

from .manager import GitSyncManager, sync_repository
from .utils import SyncResult, create_sync_result
from .operations import GitAdapter, GitOutcome
from .repository_info import BranchContext, RepositoryState, SyncState
from .state import RepositoryStateInspector

__all__ = [
    'GitSyncManager',
    'sync_repository',
    'SyncResult',
    'create_sync_result',
    'GitAdapter',
    'GitOutcome',
    'BranchContext',
    'RepositoryState',
    'SyncState',
    'RepositoryStateInspector'
]
