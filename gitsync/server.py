"""MCP server exposing git-sync as tools for agents."""

import asyncio
import logging
import sys

from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import SyncConfig, load_configuration, validate_configuration
from .git_sync import GitSyncManager
from .logging_config import setup_logging


def _run(config: SyncConfig) -> dict:
    """Validate and run one git-sync procedure; blocking, called off the event loop."""
    problems = [p for p in validate_configuration(config) if p.startswith("ERROR")]
    if problems:
        return {
            "success": False,
            "message": "; ".join(problems),
            "operation": config.mode,
            "error_code": "CONFIGURATION_ERROR",
            "exit_code": 1,
        }
    return GitSyncManager(config).run().to_dict()


def register_tools(server: FastMCP) -> None:
    """Register MCP tools with the server instance."""

    @server.tool()
    async def sync_repository(path: str, sync_new_files: bool = False, sync_branch: bool = False,
                              recursive: bool = False) -> dict:
        """
        Synchronize a git repository with its remote.

        Commits trivial local changes, fetches, then pushes, fast-forwards or
        rebases. Anything that needs a human (conflicts, a rebase or merge in
        progress, a detached HEAD, a remote owned by someone else) stops the run
        without touching the repository further.

        Args:
            path: Directory of the repository to sync
            sync_new_files: Also commit untracked files
            sync_branch: Sync even if branch.<name>.sync is not set
            recursive: Sync initialized submodules first

        Returns:
            Dictionary with success, message, error_code, exit_code, category,
            repository state and sync state
        """
        try:
            config = load_configuration(
                repo_dir=path,
                sync_new_files=sync_new_files,
                sync_branch=sync_branch,
                recursive=recursive,
                color=False,
            )
        except ValueError as e:
            return {"success": False, "message": str(e), "operation": "sync",
                    "error_code": "CONFIGURATION_ERROR", "exit_code": 1}
        return await asyncio.to_thread(_run, config)

    @server.tool()
    async def check_repository(path: str) -> dict:
        """
        Check whether a git repository may be synchronized, without changing it.

        Runs the repository state, branch, remote and ownership checks only.

        Args:
            path: Directory of the repository to check

        Returns:
            Dictionary with the outcome; error_code is CHECK_OK when a sync may start
        """
        try:
            config = load_configuration(repo_dir=path, mode="check", color=False)
        except ValueError as e:
            return {"success": False, "message": str(e), "operation": "check",
                    "error_code": "CONFIGURATION_ERROR", "exit_code": 1}
        return await asyncio.to_thread(_run, config)


def initialize_server() -> FastMCP:
    """Create the FastMCP server and register the git-sync tools."""
    server = FastMCP("git-sync")
    register_tools(server)
    return server


def main():
    """Main entry point for the git-sync MCP server with stdio transport."""
    startup_logger = None

    try:
        config = load_configuration(color=False)
        # stdout carries the MCP protocol; all logging goes to stderr
        setup_logging(config, stream=sys.stderr)
        startup_logger = logging.getLogger('gitsync.startup')

        startup_logger.info("=" * 60)
        startup_logger.info("git-sync MCP Server")
        startup_logger.info(f"Version: {__version__}")
        startup_logger.info("=" * 60)

        python_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
        if sys.version_info < (3, 10):
            startup_logger.error(f"Python 3.10+ required, found {python_version}")
            sys.exit(1)
        startup_logger.info(f"Python version: {python_version} ✓")

        server = initialize_server()
        startup_logger.info("Starting server with stdio transport")
        server.run(transport="stdio")

    except KeyboardInterrupt:
        if startup_logger:
            startup_logger.info("Server stopped by user (Ctrl+C)")
        else:
            print("\nServer stopped by user", file=sys.stderr)
    except SystemExit:
        raise
    except Exception as e:
        if startup_logger:
            startup_logger.critical(f"Server failed to start: {e}", exc_info=True)
        else:
            print(f"CRITICAL: Server failed to start: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
