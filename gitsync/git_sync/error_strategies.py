"""Operator guidance for each kind of sync failure."""

from typing import Dict, Optional

from . import error_types
from .error_types import ErrorCategory, ErrorResolution, RecoveryAction


def build_error_strategies(branch_name: Optional[str] = None) -> Dict[str, ErrorResolution]:
    """Build resolution guidance for each outcome code."""
    branch = branch_name or "<branch>"

    return {
        error_types.NO_REPOSITORY: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="No git repository detected",
            resolution_steps=[
                "Run git-sync from inside a git work tree, or pass --directory",
            ],
        ),

        error_types.GIT_UNAVAILABLE: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="The git executable could not be run",
            resolution_steps=[
                "Install git and make sure it is on PATH",
                "Or point GIT_PYTHON_GIT_EXECUTABLE at the git binary",
            ],
        ),

        error_types.UNSAFE_STATE: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="The repository is in a state that is unsafe to sync",
            resolution_steps=[
                "Finish or abort the rebase, merge, cherry-pick or bisect in progress",
                "Run 'git status' to see what git is in the middle of",
            ],
        ),

        error_types.NOT_ON_BRANCH: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="HEAD is detached",
            resolution_steps=[
                "Check out the branch you want to sync, e.g. 'git switch main'",
            ],
        ),

        error_types.NO_REMOTE_CONFIGURED: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="The current branch does not have a configured remote",
            resolution_steps=[
                "Create a remote first, e.g. 'git remote add origin <url>'",
                f"Set it as the upstream for this branch, e.g. 'git branch --set-upstream-to=origin/{branch}'",
                "Then, try again",
            ],
        ),

        error_types.NOT_SYNCABLE: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message=f"Branch '{branch}' is not configured for synchronization",
            resolution_steps=[
                f"Enlist the branch with 'git config --bool branch.{branch}.sync true'",
                "Or pass --sync-branch for a one-off run",
                f"Branch '{branch}' has to have a same-named remote branch for git-sync to work",
            ],
        ),

        error_types.NO_UPSTREAM: ErrorResolution(
            category=ErrorCategory.PRECONDITION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="The remote branch could not be compared with HEAD",
            resolution_steps=[
                f"Make sure the remote has a branch named '{branch}'",
                f"Push it once manually, e.g. 'git push -u origin {branch}'",
            ],
        ),

        error_types.OWNERSHIP_MISMATCH: ErrorResolution(
            category=ErrorCategory.TRUST,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="Refusing to push automated commits to a remote you do not own",
            resolution_steps=[
                "If the inferred git user is wrong, set the GIT_SYNC_USER env var (or --user)",
                "Or change your git email to e.g. <github_user>@users.noreply.github.com",
                "Repos are expected to have the same owner regardless of the provider (github, gitlab, etc)",
                "Set GIT_SYNC_ALLOW_NONOWNER (or --allow-nonowner) to skip this check",
            ],
        ),

        error_types.COMMIT_FAILED: ErrorResolution(
            category=ErrorCategory.LOCAL_MUTATION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="Auto-commit failed",
            resolution_steps=[
                f"Check branch.{branch}.autoCommitScript if one is configured",
                "If this repo has submodules that you are trying to sync, run 'git-sync -r'",
            ],
        ),

        error_types.COMMIT_LEFT_DIRTY: ErrorResolution(
            category=ErrorCategory.LOCAL_MUTATION,
            action=RecoveryAction.USER_ACTION_REQUIRED,
            user_message="Auto-commit left uncommitted changes",
            resolution_steps=[
                "Please add or remove them as desired and retry",
                "If this is a submodule, run 'git-sync -r' from the parent repository",
            ],
        ),

        error_types.FETCH_FAILED: ErrorResolution(
            category=ErrorCategory.TRANSIENT,
            action=RecoveryAction.RETRY_LATER,
            user_message="Fetching from the remote failed, likely a network problem",
            resolution_steps=[
                "Check your network connection and credentials",
                "Try again later",
            ],
        ),

        error_types.PUSH_FAILED: ErrorResolution(
            category=ErrorCategory.TRANSIENT,
            action=RecoveryAction.RETRY_LATER,
            user_message="Pushing to the remote failed, likely a connection failure",
            resolution_steps=[
                "Check your network connection and push permissions",
                "Try again later",
            ],
        ),

        error_types.SYNC_INCOMPLETE: ErrorResolution(
            category=ErrorCategory.TRANSIENT,
            action=RecoveryAction.RETRY_LATER,
            user_message="The branch is still not equal to the remote after syncing",
            resolution_steps=[
                "Possibly a transient network problem? Please try again in that case",
                "Otherwise check your repo carefully",
            ],
        ),

        error_types.NON_FAST_FORWARDABLE: ErrorResolution(
            category=ErrorCategory.STRUCTURAL_CONFLICT,
            action=RecoveryAction.RESOLVE_CONFLICT,
            user_message="Fast-forward was not possible",
            resolution_steps=[
                "History diverged unexpectedly; inspect 'git log --graph --all'",
                "Integrate the remote changes manually, then rerun git-sync",
            ],
        ),

        error_types.REBASE_CONFLICT: ErrorResolution(
            category=ErrorCategory.STRUCTURAL_CONFLICT,
            action=RecoveryAction.RESOLVE_CONFLICT,
            user_message="Rebasing onto the remote branch failed",
            resolution_steps=[
                "Resolve the conflicts and finish the rebase ('git rebase --continue')",
                "Then repeat git-sync",
            ],
        ),
    }


def get_error_resolution(error_code: str, branch_name: Optional[str] = None) -> Optional[ErrorResolution]:
    """Resolution guidance for one outcome code, or None for successes."""
    return build_error_strategies(branch_name).get(error_code)
