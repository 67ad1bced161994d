"""
One-time backfill of the enrollment status store.

Recalculates every (student, mentor, skill) enrollment that has an active
session and prints how the stored statuses break down afterwards. Safe to
re-run; rows are upserted.
"""

import logging
import sys

from careernav.config import settings
from careernav.crud import enrollment as enrollment_crud
from careernav.database import SessionLocal
from careernav.services.course_status_service import recalculate_all
from careernav.utils.log_config import setup_logging

logger = logging.getLogger(__name__)


def backfill_enrollments() -> int:
    setup_logging(settings.LOG_LEVEL)

    db = SessionLocal()
    try:
        report = recalculate_all(db)
        breakdown = enrollment_crud.count_by_status(db)
    except Exception as exc:
        logger.exception("Enrollment backfill failed")
        print(f"Enrollment backfill failed: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Enrollments processed: {report.total}")
    print(f"  stored:          {report.persisted}")
    print(f"  payment pending: {report.payment_pending}")
    print(f"  failed:          {report.failed}")
    print("Status breakdown:")
    for status, count in sorted(breakdown.items()):
        print(f"  {status}: {count}")

    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(backfill_enrollments())
