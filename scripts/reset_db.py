"""Drop every application table. Run init_db.py afterwards to recreate them."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.bootstrap import drop_all_tables


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if "--yes" not in sys.argv[1:]:
        raise SystemExit(f"Refusing to drop tables in '{db_config.get('database')}' without --yes")

    for table in drop_all_tables(db_config):
        print(f"Dropped table: {table}")
    print("OK: Database reset complete.")


if __name__ == "__main__":
    main()
