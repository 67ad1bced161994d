"""
Periodic course status repair.

Refreshes schedule item flags against the clock and recalculates every
enrollment they touch. Schedule it every few minutes, e.g. from cron:

    */5 * * * * python -m careernav.scripts.status_sweep
    0 3 * * *   python -m careernav.scripts.status_sweep --full
"""

import argparse
import logging
import sys
from typing import List, Optional

from careernav.config import settings
from careernav.database import SessionLocal
from careernav.services.schedule_service import run_status_sweep
from careernav.utils.log_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh schedule flags and course statuses.")
    parser.add_argument(
        "--full",
        action="store_true",
        help="Also recalculate every enrollment, not just the ones touched.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(settings.LOG_LEVEL)

    db = SessionLocal()
    try:
        report = run_status_sweep(db, full=args.full)
    except Exception:
        logger.exception("Status sweep failed")
        return 1
    finally:
        db.close()

    print(
        f"Schedule items: {report.items_completed} completed, "
        f"{report.items_unlocked} unlocked, {report.items_locked} locked"
    )
    print(
        f"Enrollments: {report.recalculation.total} recalculated, "
        f"{report.recalculation.failed} failed"
    )
    return 1 if report.recalculation.failed else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
