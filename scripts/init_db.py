from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main() -> int:
    # Ensure project root (containing 'src') is importable
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    from src.db.migrate import run_migrations

    parser = argparse.ArgumentParser(description="Initialize the synced folder database schema")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to SQLite DB file (defaults to FOLDER_SYNC_DB or data/folder_sync.sqlite3)",
    )
    args = parser.parse_args()

    applied = run_migrations(args.db.resolve() if args.db else None)
    print(f"Applied migrations: {', '.join(applied) if applied else 'none'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
