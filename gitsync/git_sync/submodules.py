"""Recursive synchronization of submodules."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional

from ..config import SyncConfig
from .operations import GitAdapter
from .utils import SyncResult


# Upper bound on concurrently synced submodules
MAX_PARALLEL_SUBMODULES = 8


class SubmoduleSynchronizer:
    """
    Runs the full sync procedure on every initialized submodule.

    Each submodule run is independent and uses its own adapter, so the runs
    execute concurrently on a thread pool and are joined before returning.
    Ordering between siblings is not guaranteed.
    """

    def __init__(
        self,
        config: SyncConfig,
        adapter: GitAdapter,
        sync_func: Callable[[SyncConfig], SyncResult],
        logger: Optional[logging.LoggerAdapter] = None,
    ):
        """
        Args:
            config: Configuration of the parent run
            adapter: Adapter of the parent repository, used for discovery
            sync_func: The synchronization procedure to run per submodule
            logger: Logger of the parent run
        """
        self.config = config
        self.adapter = adapter
        self.sync_func = sync_func
        self.logger = logger or logging.getLogger('gitsync.git_sync.submodules')

    def discover(self) -> List[Path]:
        return [self.adapter.work_dir / path for path in self.adapter.submodule_paths()]

    def sync_all(self) -> List[SyncResult]:
        paths = self.discover()
        if not paths:
            self.logger.debug("No initialized submodules found")
            return []

        self.logger.info(f"Syncing {len(paths)} submodule(s)")
        results = []

        with ThreadPoolExecutor(max_workers=min(len(paths), MAX_PARALLEL_SUBMODULES)) as executor:
            futures = {
                executor.submit(self.sync_func, self.config.for_submodule(path)): path
                for path in paths
            }

            for future in as_completed(futures):
                path = futures[future]
                result = future.result()
                results.append(result)

                if result.success:
                    self.logger.debug(f"Submodule {path.name}: {result.message}")
                else:
                    self.logger.warning(
                        f"Submodule {path.name} failed ({result.error_code}, exit {result.exit_code})"
                    )

        return results
