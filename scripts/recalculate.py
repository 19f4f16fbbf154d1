"""Run an attendance recalculation batch synchronously.

    python scripts/recalculate.py daily
    python scripts/recalculate.py weekly
    python scripts/recalculate.py range 2025-01-01 2025-01-31
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_portal.attendance_portal.common.logging_config import configure_logging
from src.attendance_portal.attendance_portal.container import build_container
from src.attendance_portal.attendance_portal.core.exceptions import ValidationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recalculate daily attendance summaries and streaks.")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("daily", help="yesterday + today + streak for every active student")
    sub.add_parser("weekly", help="trailing 7 days for every active student")
    range_parser = sub.add_parser("range", help="every day in an inclusive range, then the streak")
    range_parser.add_argument("start_date", help="YYYY-MM-DD")
    range_parser.add_argument("end_date", help="YYYY-MM-DD")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    batch = container.batch_service

    try:
        if args.command == "daily":
            report = batch.run_daily()
        elif args.command == "weekly":
            report = batch.run_weekly()
        else:
            report = batch.run_range(args.start_date, args.end_date)
    except ValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130

    print(json.dumps(report.as_dict(), indent=2))
    return 1 if report.error_count else 0


if __name__ == "__main__":
    raise SystemExit(main())
