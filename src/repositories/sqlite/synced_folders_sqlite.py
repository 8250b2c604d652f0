from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import Any, Optional

from src.domain.value_objects.enums import UploadAction
from src.logging_config import get_logger

from ..synced_folders import FolderListener, INSERT_FAILED, SyncedFolder, SyncedFoldersRepo

_COLUMNS = (
    "id",
    "local_path",
    "remote_path",
    "wifi_only",
    "charging_only",
    "subfolder_by_date",
    "account",
    "upload_action",
    "enabled",
)
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM synced_folders"


class SyncedFoldersRepoSqlite(SyncedFoldersRepo):
    """SQLite implementation of :class:`SyncedFoldersRepo`.

    ``listener`` is called with the affected folder after every successful
    insert or update, typically to restart the watcher for that folder.

    Example:
        >>> conn = sqlite3.connect(":memory:")
        >>> repo = SyncedFoldersRepoSqlite(conn)
        >>> folder_id = repo.store(SyncedFolder(None, "/sdcard/DCIM", "/Photos"))
        >>> repo.get_by_id(folder_id).remote_path
        '/Photos'
    """

    def __init__(
        self, conn: sqlite3.Connection, listener: Optional[FolderListener] = None
    ) -> None:
        if conn is None:
            raise ValueError("Cannot create a synced folder repository without a connection")
        self._conn = conn
        self._listener = listener
        self._logger = get_logger()
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS synced_folders (
                id INTEGER PRIMARY KEY,
                local_path TEXT NOT NULL,
                remote_path TEXT NOT NULL,
                wifi_only INTEGER NOT NULL DEFAULT 0,
                charging_only INTEGER NOT NULL DEFAULT 0,
                subfolder_by_date INTEGER NOT NULL DEFAULT 0,
                account TEXT NOT NULL,
                upload_action INTEGER NOT NULL DEFAULT 0,
                enabled INTEGER NOT NULL DEFAULT 1
            )
            """
        )
        self._conn.commit()

    def store(self, folder: SyncedFolder) -> int:
        self._logger.debug(
            "Inserting synced folder",
            extra={"local_path": folder.local_path, "enabled": folder.enabled},
        )
        if folder.id is not None:
            self._logger.error(
                "Synced folder already has an id, not inserting",
                extra={"folder_id": folder.id, "local_path": folder.local_path},
            )
            return INSERT_FAILED
        try:
            with closing(
                self._conn.execute(
                    "INSERT INTO synced_folders (local_path, remote_path, wifi_only, "
                    "charging_only, subfolder_by_date, account, upload_action, enabled) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    _to_params(folder),
                )
            ) as cur:
                rowid = cur.lastrowid
            self._conn.commit()
        except sqlite3.Error:
            self._logger.exception(
                "Failed to insert synced folder", extra={"local_path": folder.local_path}
            )
            self._rollback()
            return INSERT_FAILED
        if rowid is None:
            self._logger.error(
                "Insert returned no row id", extra={"local_path": folder.local_path}
            )
            return INSERT_FAILED

        folder.id = int(rowid)
        self._notify(folder)
        return folder.id

    def list_all(self) -> list[SyncedFolder]:
        rows = self._fetch(f"{_SELECT} ORDER BY id", ())
        if rows is None:
            self._logger.error("DB error reading all synced folders")
            return []
        return [_from_row(row) for row in rows]

    def get_by_id(self, folder_id: int) -> Optional[SyncedFolder]:
        rows = self._fetch(f"{_SELECT} WHERE id = ?", (folder_id,))
        if rows:
            return _from_row(rows[0])
        return None

    def find_by_local_path(self, local_path: str) -> Optional[SyncedFolder]:
        rows = self._fetch(f"{_SELECT} WHERE local_path = ?", (local_path,))
        if rows is None:
            self._logger.error(
                "DB error looking up synced folder", extra={"local_path": local_path}
            )
            return None
        if len(rows) != 1:
            self._logger.error(
                "Expected exactly one synced folder for local path",
                extra={"local_path": local_path, "matches": len(rows)},
            )
            return None
        return _from_row(rows[0])

    def update_enabled(self, folder_id: int, enabled: bool) -> int:
        self._logger.debug(
            "Storing synced folder enabled flag",
            extra={"folder_id": folder_id, "enabled": enabled},
        )
        rows = self._fetch(f"{_SELECT} WHERE id = ?", (folder_id,))
        if rows is None:
            self._logger.error(
                "DB error loading synced folder", extra={"folder_id": folder_id}
            )
            return 0
        if len(rows) != 1:
            self._logger.error(
                "Expected exactly one synced folder for id, not updating",
                extra={"folder_id": folder_id, "matches": len(rows)},
            )
            return 0

        folder = _from_row(rows[0])
        folder.enabled = enabled
        return self.update(folder)

    def update(self, folder: SyncedFolder) -> int:
        self._logger.debug(
            "Updating synced folder",
            extra={"folder_id": folder.id, "local_path": folder.local_path},
        )
        if folder.id is None:
            self._logger.error(
                "Cannot update a synced folder without id",
                extra={"local_path": folder.local_path},
            )
            return 0
        try:
            with closing(
                self._conn.execute(
                    "UPDATE synced_folders SET local_path = ?, remote_path = ?, wifi_only = ?, "
                    "charging_only = ?, subfolder_by_date = ?, account = ?, upload_action = ?, "
                    "enabled = ? WHERE id = ?",
                    (*_to_params(folder), folder.id),
                )
            ) as cur:
                count = cur.rowcount
            self._conn.commit()
        except sqlite3.Error:
            self._logger.exception(
                "Failed to update synced folder", extra={"folder_id": folder.id}
            )
            self._rollback()
            return 0

        if count > 0:
            self._notify(folder)
        return max(count, 0)

    def _fetch(self, sql: str, params: tuple[Any, ...]) -> Optional[list[tuple[Any, ...]]]:
        """Run a query and return its rows, or ``None`` when the backend fails."""
        try:
            with closing(self._conn.execute(sql, params)) as cur:
                return cur.fetchall()
        except sqlite3.Error:
            self._logger.exception("Synced folder query failed", extra={"sql": sql})
            self._rollback()
            return None

    def _rollback(self) -> None:
        # Drop statements left pending by a failed execute or commit.
        try:
            self._conn.rollback()
        except sqlite3.Error:
            self._logger.exception("Synced folder rollback failed")

    def _notify(self, folder: SyncedFolder) -> None:
        if self._listener is None:
            return
        try:
            self._listener(folder)
        except Exception:
            self._logger.exception(
                "Synced folder listener failed", extra={"local_path": folder.local_path}
            )
            return
        self._logger.debug(
            "Notified synced folder listener", extra={"local_path": folder.local_path}
        )


def _to_params(folder: SyncedFolder) -> tuple[Any, ...]:
    return (
        folder.local_path,
        folder.remote_path,
        int(bool(folder.wifi_only)),
        int(bool(folder.charging_only)),
        int(bool(folder.subfolder_by_date)),
        folder.account,
        int(folder.upload_action),
        int(bool(folder.enabled)),
    )


def _from_row(row: tuple[Any, ...]) -> SyncedFolder:
    (
        folder_id,
        local_path,
        remote_path,
        wifi_only,
        charging_only,
        subfolder_by_date,
        account,
        upload_action,
        enabled,
    ) = row
    action: int
    try:
        action = UploadAction(int(upload_action))
    except ValueError:
        action = int(upload_action)
    return SyncedFolder(
        id=int(folder_id),
        local_path=local_path,
        remote_path=remote_path,
        wifi_only=wifi_only == 1,
        charging_only=charging_only == 1,
        subfolder_by_date=subfolder_by_date == 1,
        account=account,
        upload_action=action,
        enabled=enabled == 1,
    )
