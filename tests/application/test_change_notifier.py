from __future__ import annotations

import sqlite3

from src.application.services.change_notifier import FolderChangeNotifier, WatcherRestartListener
from src.repositories.sqlite.synced_folders_sqlite import SyncedFoldersRepoSqlite
from src.repositories.synced_folders import SyncedFolder


def _folder(path: str = "/sdcard/DCIM", enabled: bool = True) -> SyncedFolder:
    return SyncedFolder(
        id=1, local_path=path, remote_path="/Photos", account="acc", enabled=enabled
    )


def test_notify_calls_listeners_in_order() -> None:
    calls: list[str] = []
    notifier = FolderChangeNotifier()
    notifier.subscribe(lambda f: calls.append("a:" + f.local_path))
    notifier.subscribe(lambda f: calls.append("b:" + f.local_path))

    notifier.notify(_folder("/x"))
    assert calls == ["a:/x", "b:/x"]


def test_subscribe_is_idempotent_and_unsubscribe() -> None:
    calls: list[SyncedFolder] = []
    notifier = FolderChangeNotifier()
    notifier.subscribe(calls.append)
    notifier.subscribe(calls.append)
    notifier(_folder())
    assert len(calls) == 1

    notifier.unsubscribe(calls.append)
    notifier.unsubscribe(calls.append)
    notifier(_folder())
    assert len(calls) == 1


def test_failing_listener_is_skipped() -> None:
    calls: list[SyncedFolder] = []

    def boom(folder: SyncedFolder) -> None:
        raise RuntimeError("boom")

    notifier = FolderChangeNotifier()
    notifier.subscribe(boom)
    notifier.subscribe(calls.append)
    notifier.notify(_folder())
    assert len(calls) == 1


def test_watcher_restarts_and_drops_disabled() -> None:
    restarted: list[str] = []
    watcher = WatcherRestartListener(on_restart=lambda f: restarted.append(f.local_path))

    watcher(_folder("/a"))
    watcher(_folder("/b"))
    watcher(_folder("/a"))
    assert watcher.restarts == 3
    assert restarted == ["/a", "/b", "/a"]
    assert {f.local_path for f in watcher.watched()} == {"/a", "/b"}

    watcher(_folder("/a", enabled=False))
    assert not watcher.is_watching("/a")
    assert watcher.is_watching("/b")
    assert watcher.restarts == 3


def test_store_drives_watcher_through_notifier() -> None:
    conn = sqlite3.connect(":memory:")
    notifier = FolderChangeNotifier()
    watcher = WatcherRestartListener()
    notifier.subscribe(watcher)
    repo = SyncedFoldersRepoSqlite(conn, listener=notifier)

    fid = repo.store(
        SyncedFolder(id=None, local_path="/sdcard/Music", remote_path="/Music", account="acc")
    )
    assert watcher.is_watching("/sdcard/Music")

    repo.update_enabled(fid, False)
    assert not watcher.is_watching("/sdcard/Music")
    conn.close()
