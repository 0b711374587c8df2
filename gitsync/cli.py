"""
git-sync command line.

Entry point: gitsync.cli:main
"""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import load_configuration, validate_configuration
from .git_sync import GitSyncManager
from .logging_config import setup_logging


# Exit code for invalid configuration (bad GIT_SYNC_* values, missing directory)
CONFIG_ERROR_EXIT = 1


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="git-sync")
@click.argument("mode", type=click.Choice(["sync", "check"]), default="sync")
@click.option("-n", "--sync-new-files", is_flag=True,
              help="Commit new (untracked) files even without branch.<b>.syncNewFiles.")
@click.option("-s", "--sync-branch", is_flag=True,
              help="Sync the current branch even without branch.<b>.sync.")
@click.option("-r", "--recursive", is_flag=True,
              help="Sync initialized submodules before committing the parent.")
@click.option("-d", "--debug", is_flag=True,
              help="Show debug output, including every git command.")
@click.option("-u", "--user", "provider_user", default=None, metavar="NAME",
              help="Identity compared against the remote owner (default: user.email local part).")
@click.option("--allow-nonowner", is_flag=True,
              help="Skip the remote ownership check.")
@click.option("-C", "--directory", "repo_dir", default=None,
              type=click.Path(file_okay=False, path_type=Path),
              help="Repository to sync (default: current directory).")
def main(mode, sync_new_files, sync_branch, recursive, debug, provider_user, allow_nonowner, repo_dir):
    """Synchronize a tracking git repository with its remote.

    \b
    sync   commit trivial local changes, fetch, then push, fast-forward or
           rebase; refuse anything that needs a human (default)
    check  only verify that a sync may start, without changing anything

    Per-branch git config: branch.<b>.sync, syncNewFiles, syncCommitMsg,
    autoCommitScript, pushRemote.
    """
    try:
        config = load_configuration(
            mode=mode,
            sync_new_files=sync_new_files,
            sync_branch=sync_branch,
            recursive=recursive,
            debug=debug,
            provider_user=provider_user,
            allow_nonowner=allow_nonowner,
            repo_dir=repo_dir,
        )
    except ValueError as e:
        click.echo(f"git-sync: {e}", err=True)
        sys.exit(CONFIG_ERROR_EXIT)

    setup_logging(config)
    logger = logging.getLogger('gitsync.cli')

    problems = validate_configuration(config)
    for problem in problems:
        if problem.startswith("ERROR"):
            logger.error(problem)
        else:
            logger.warning(problem)
    if any(problem.startswith("ERROR") for problem in problems):
        sys.exit(CONFIG_ERROR_EXIT)

    result = GitSyncManager(config).run()
    logger.debug(f"Finished with {result.error_code} (exit {result.exit_code})")
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
