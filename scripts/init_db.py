"""Create the database (if needed) and apply the attendance schema.

    python scripts/init_db.py
    python scripts/init_db.py --schema path/to/schema.sql --settings config.production
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_portal.attendance_portal.core.exceptions import TransientStoreError
from src.attendance_portal.attendance_portal.database.bootstrap import DEFAULT_SCHEMA_PATH, apply_schema, list_tables


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply schema.sql to the attendance database.")
    parser.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA_PATH, help="schema file (default: database/schema.sql)")
    parser.add_argument("--settings", default=None, help="settings module, e.g. config.production (default: from APP_ENV)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if not args.schema.is_file():
        print(f"Schema file not found: {args.schema}", file=sys.stderr)
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(args.settings or get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    try:
        apply_schema(db_config, schema_path=args.schema)
        tables = list_tables(db_config)
    except TransientStoreError as e:
        print(f"Database unavailable: {e}", file=sys.stderr)
        return 1

    print(
        f"OK: Applied {args.schema.name} -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
