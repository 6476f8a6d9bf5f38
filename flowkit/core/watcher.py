"""Watch repository metadata and request refreshes on change."""

import asyncio
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..io.logger import get_logger
from .constants import SystemDefaults
from .synchronizer import StateSynchronizer

logger = get_logger("watcher")


def is_repository_change(path: str) -> bool:
    """Whether a saved file can change branch state.

    Anything under ``.git/`` counts, as does a ``.gitignore``.
    """
    normalized = "/" + Path(path).as_posix().lstrip("/")
    metadata = f"/{SystemDefaults.GIT_METADATA_DIR}"
    return (
        normalized.endswith(".gitignore")
        or f"{metadata}/" in normalized
        or normalized.endswith(metadata)
    )


class RepositoryChangeHandler(FileSystemEventHandler):
    """Forward relevant file events to the synchronizer's event loop."""

    def __init__(
        self,
        synchronizer: StateSynchronizer,
        loop: asyncio.AbstractEventLoop,
    ):
        self.synchronizer = synchronizer
        self.loop = loop

    def on_any_event(self, event: FileSystemEvent):
        """Runs on the observer thread."""
        if event.event_type == "opened" or event.event_type == "closed_no_write":
            return
        path = getattr(event, "dest_path", "") or event.src_path
        if isinstance(path, bytes):
            path = path.decode(errors="replace")
        if not is_repository_change(path):
            return
        reason = f"{event.event_type} {path}"
        self.loop.call_soon_threadsafe(self.synchronizer.request_refresh, reason)


class RepositoryWatcher:
    """Watch ``.git`` and the workspace root for changes."""

    def __init__(self, synchronizer: StateSynchronizer, workspace: Path):
        self.synchronizer = synchronizer
        self.workspace = Path(workspace)
        self.observer: Optional[Observer] = None
        self.handler: Optional[RepositoryChangeHandler] = None

    async def start(self):
        """Start watching for repository changes."""
        loop = asyncio.get_running_loop()
        self.handler = RepositoryChangeHandler(self.synchronizer, loop)
        self.observer = Observer()

        git_dir = self.workspace / SystemDefaults.GIT_METADATA_DIR
        if git_dir.is_dir():
            self.observer.schedule(self.handler, str(git_dir), recursive=True)
        else:
            logger.warning(f"No {git_dir}, only watching the workspace root")
        # Workspace root catches .gitignore saves
        self.observer.schedule(self.handler, str(self.workspace), recursive=False)
        self.observer.start()
        logger.debug(f"Watching {self.workspace}")

    async def stop(self):
        """Stop watching and drop any scheduled refresh."""
        if self.observer:
            self.observer.stop()
            await asyncio.to_thread(self.observer.join)
            self.observer = None
        self.synchronizer.cancel_pending()
