"""Result type for Git synchronization runs."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .error_types import ERROR_CATEGORIES, exit_code_for


@dataclass
class SyncResult:
    """Result of one synchronization (or check) run."""
    success: bool
    message: str
    operation: str
    error_code: str
    exit_code: int = 0
    repository: Optional[str] = None
    repository_state: Optional[str] = None
    sync_state: Optional[str] = None
    branch_used: Optional[str] = None
    remote_used: Optional[str] = None
    submodule_results: List["SyncResult"] = field(default_factory=list)

    @property
    def category(self) -> Optional[str]:
        category = ERROR_CATEGORIES.get(self.error_code)
        return category.value if category else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-friendly dictionary."""
        result = {
            "success": self.success,
            "message": self.message,
            "operation": self.operation,
            "error_code": self.error_code,
            "exit_code": self.exit_code,
            "category": self.category,
            "repository": self.repository,
            "repository_state": self.repository_state,
            "sync_state": self.sync_state,
            "branch": self.branch_used,
            "remote": self.remote_used,
        }
        if self.submodule_results:
            result["submodules"] = [sub.to_dict() for sub in self.submodule_results]
        return result


def create_sync_result(
    success: bool,
    message: str,
    operation: str,
    error_code: str,
    repository: Optional[str] = None,
    repository_state: Optional[str] = None,
    sync_state: Optional[str] = None,
    branch_used: Optional[str] = None,
    remote_used: Optional[str] = None,
    submodule_results: Optional[List[SyncResult]] = None,
) -> SyncResult:
    """
    Helper function to create SyncResult instances.

    The exit code is derived from the outcome code so the two can never
    disagree.

    Args:
        success: Whether the run succeeded
        message: Descriptive message about the outcome
        operation: "sync" or "check"
        error_code: Outcome code from error_types (IN_SYNC, PUSH_FAILED, ...)
        repository: Display name of the repository
        repository_state: Last observed repository state, rendered
        sync_state: Last observed sync state value
        branch_used: Branch that was synced
        remote_used: Remote that was synced with
        submodule_results: Results of recursive submodule runs

    Returns:
        SyncResult instance with all fields populated
    """
    return SyncResult(
        success=success,
        message=message,
        operation=operation,
        error_code=error_code,
        exit_code=exit_code_for(error_code),
        repository=repository,
        repository_state=repository_state,
        sync_state=sync_state,
        branch_used=branch_used,
        remote_used=remote_used,
        submodule_results=list(submodule_results or []),
    )
