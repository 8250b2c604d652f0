"""Simple SQLite migration runner."""

from __future__ import annotations

import re
import sqlite3
from pathlib import Path
from typing import Iterable

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def applied_versions(cursor: sqlite3.Cursor) -> set[str]:
    cursor.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version TEXT PRIMARY KEY)")
    rows = cursor.execute("SELECT version FROM schema_migrations").fetchall()
    return {row[0] for row in rows}


def available_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> Iterable[tuple[str, Path]]:
    pattern = re.compile(r"V(\d+)__.+\.sql$")
    paths = migrations_dir.glob("V*__*.sql")
    for path in sorted(paths, key=lambda p: _version_key(p.name)):
        match = pattern.match(path.name)
        if match:
            yield match.group(1), path


def _version_key(name: str) -> int:
    match = re.match(r"V(\d+)__", name)
    return int(match.group(1)) if match else -1


def apply_migrations(conn: sqlite3.Connection, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending migrations on ``conn`` and return the versions applied."""
    cursor = conn.cursor()
    done = applied_versions(cursor)
    applied: list[str] = []
    for version, path in available_migrations(migrations_dir):
        if version in done:
            continue
        sql = path.read_text()
        cursor.executescript(sql)
        cursor.execute("INSERT INTO schema_migrations (version) VALUES (?)", (version,))
        conn.commit()
        applied.append(version)
    return applied


def run_migrations(db_path: Path | None = None) -> list[str]:
    if db_path is None:
        from src.config.settings import settings

        db_path = settings.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        return apply_migrations(conn)
    finally:
        conn.close()


if __name__ == "__main__":
    run_migrations()
