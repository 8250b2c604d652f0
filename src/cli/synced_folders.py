from __future__ import annotations

import argparse
import sqlite3
from pathlib import Path
from typing import Iterable, List, Sequence

from src.application.services.change_notifier import FolderChangeNotifier, WatcherRestartListener
from src.db.migrate import apply_migrations
from src.domain.value_objects.enums import UploadAction
from src.logging_config import get_logger
from src.repositories.sqlite.synced_folders_sqlite import SyncedFoldersRepoSqlite
from src.repositories.synced_folders import INSERT_FAILED, SyncedFolder


def _format_folder(f: SyncedFolder) -> str:
    flags = [
        name
        for name, on in (
            ("wifi-only", f.wifi_only),
            ("charging-only", f.charging_only),
            ("by-date", f.subfolder_by_date),
        )
        if on
    ]
    try:
        action = UploadAction(int(f.upload_action)).name.lower()
    except ValueError:
        action = str(f.upload_action)
    state = "enabled" if f.enabled else "disabled"
    extra = f" [{', '.join(flags)}]" if flags else ""
    return f"{f.id}: {f.local_path} -> {f.remote_path} ({f.account}, {action}, {state}){extra}"


def _format_rows(folders: Iterable[SyncedFolder]) -> str:
    out_lines: List[str] = [_format_folder(f) for f in folders]
    return "\n".join(out_lines)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Manage synced folder pairings")
    p.add_argument("--db", type=Path, default=None, help="Path to SQLite DB file")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all synced folders")

    add = sub.add_parser("add", help="Add a synced folder")
    add.add_argument("local_path")
    add.add_argument("remote_path")
    add.add_argument("--account", required=True)
    add.add_argument("--wifi-only", action="store_true")
    add.add_argument("--charging-only", action="store_true")
    add.add_argument("--subfolder-by-date", action="store_true")
    add.add_argument(
        "--upload-action",
        choices=[a.name.lower() for a in UploadAction],
        default=UploadAction.COPY.name.lower(),
    )
    add.add_argument("--disabled", action="store_true", help="Store the folder disabled")

    for name in ("enable", "disable"):
        toggle = sub.add_parser(name, help=f"{name.capitalize()} a synced folder by id")
        toggle.add_argument("folder_id", type=int)

    show = sub.add_parser("show", help="Show the synced folder for a local path")
    show.add_argument("local_path")
    return p


def _connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    from src.config.settings import settings

    get_logger(settings.log_file, settings.log_level)

    notifier = FolderChangeNotifier()
    notifier.subscribe(WatcherRestartListener())

    conn = _connect(args.db or settings.db_path)
    try:
        apply_migrations(conn)
        repo = SyncedFoldersRepoSqlite(conn, listener=notifier)

        if args.command == "list":
            folders = repo.list_all()
            if not folders:
                print("No synced folders configured.")
            else:
                print(_format_rows(folders))
            return 0

        if args.command == "add":
            folder = SyncedFolder(
                id=None,
                local_path=args.local_path,
                remote_path=args.remote_path,
                wifi_only=args.wifi_only,
                charging_only=args.charging_only,
                subfolder_by_date=args.subfolder_by_date,
                account=args.account,
                upload_action=UploadAction.from_name(args.upload_action),
                enabled=not args.disabled,
            )
            folder_id = repo.store(folder)
            if folder_id == INSERT_FAILED:
                print(f"Failed to store {args.local_path}")
                return 1
            print(f"Stored {args.local_path} with id={folder_id}")
            return 0

        if args.command in ("enable", "disable"):
            count = repo.update_enabled(args.folder_id, args.command == "enable")
            if count == 0:
                print(f"No synced folder updated for id={args.folder_id}")
                return 1
            print(f"Synced folder {args.folder_id} {args.command}d")
            return 0

        found = repo.find_by_local_path(args.local_path)
        if found is None:
            print(f"No synced folder for {args.local_path}")
            return 1
        print(_format_folder(found))
        return 0
    finally:
        conn.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
