from __future__ import annotations

from typing import Optional

from src.logging_config import get_logger
from src.repositories.synced_folders import FolderListener, SyncedFolder


class FolderChangeNotifier:
    """Event channel handed to the store to fan out folder changes.

    Listeners are called in subscription order. A listener that raises is
    logged and skipped so the remaining listeners still see the change.
    """

    def __init__(self) -> None:
        self._listeners: list[FolderListener] = []
        self._logger = get_logger()

    def subscribe(self, listener: FolderListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: FolderListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __call__(self, folder: SyncedFolder) -> None:
        self.notify(folder)

    def notify(self, folder: SyncedFolder) -> None:
        for listener in list(self._listeners):
            try:
                listener(folder)
            except Exception:
                self._logger.exception(
                    "Folder change listener failed", extra={"local_path": folder.local_path}
                )


class WatcherRestartListener:
    """Keeps the folder state a file watcher should be (re)started with.

    Each notification replaces the watched entry for the folder's local path.
    Disabled folders stop being watched.
    """

    def __init__(self, on_restart: Optional[FolderListener] = None) -> None:
        self._watched: dict[str, SyncedFolder] = {}
        self._on_restart = on_restart
        self.restarts = 0
        self._logger = get_logger()

    def __call__(self, folder: SyncedFolder) -> None:
        self.restart_observer(folder)

    def restart_observer(self, folder: SyncedFolder) -> None:
        self._watched.pop(folder.local_path, None)
        if not folder.enabled:
            self._logger.info("Stopped watching folder", extra={"local_path": folder.local_path})
            return
        self._watched[folder.local_path] = folder
        self.restarts += 1
        self._logger.info("Restarted folder watcher", extra={"local_path": folder.local_path})
        if self._on_restart is not None:
            self._on_restart(folder)

    def watched(self) -> list[SyncedFolder]:
        return list(self._watched.values())

    def is_watching(self, local_path: str) -> bool:
        return local_path in self._watched
