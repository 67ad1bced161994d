# careernav/services/day_window.py
"""
Day-Window Splitter

Answers "what does today look like right now" for one enrollment: which of
today's schedule items are still running or upcoming, and which are done.
This is per-minute accurate and independent of the enrollment-level
status decided by the classifier.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, List, Optional, Tuple

from careernav.exceptions import MalformedScheduleItem
from careernav.models.enums import ScheduleStatus
from careernav.services.enrollment_grouping import EnrollmentGroup
from careernav.utils.business_time import (
    as_utc,
    business_day_start,
    civil_date,
    parse_wall_clock,
)

logger = logging.getLogger(__name__)

# Every schedule item lasts exactly this long.
SESSION_DURATION = timedelta(hours=1)


@dataclass
class DaySplit:
    ongoing_items: List[Any] = field(default_factory=list)
    completed_items: List[Any] = field(default_factory=list)


def item_start_time(item: Any) -> Tuple[int, int]:
    """Wall-clock start of an item; malformed values fall back to midnight."""
    try:
        return parse_wall_clock(getattr(item, "scheduled_time", None))
    except MalformedScheduleItem as exc:
        logger.warning(
            "Schedule item %s has malformed start time, using 00:00: %s",
            getattr(item, "id", None),
            exc,
        )
        return 0, 0


def item_window(item: Any) -> Optional[Tuple[datetime, datetime]]:
    """(start, end) instants of an item, or None when it has no date."""
    scheduled_date = getattr(item, "scheduled_date", None)
    if scheduled_date is None:
        logger.warning(
            "Schedule item %s has no scheduled date, skipping",
            getattr(item, "id", None),
        )
        return None
    hour, minute = item_start_time(item)
    start = business_day_start(scheduled_date) + timedelta(hours=hour, minutes=minute)
    return start, start + SESSION_DURATION


def is_item_completed(item: Any, now: datetime) -> bool:
    if item.status == ScheduleStatus.COMPLETED:
        return True
    window = item_window(item)
    if window is None:
        return False
    return as_utc(now) >= window[1]


def items_for_day(items: List[Any], now: datetime) -> List[Any]:
    today = civil_date(now)
    todays = []
    for item in items:
        if getattr(item, "scheduled_date", None) is None:
            logger.warning(
                "Schedule item %s has no scheduled date, leaving it out of the day view",
                getattr(item, "id", None),
            )
            continue
        if civil_date(item.scheduled_date) == today:
            todays.append(item)
    return todays


def split_today(group: EnrollmentGroup, now: datetime) -> DaySplit:
    """
    Partition the group's schedule items dated business-today.

    An item is completed once ``now`` reaches its end (start + one hour)
    or when its stored flag already says COMPLETED.
    """
    split = DaySplit()
    for item in items_for_day(group.schedule_items, now):
        if is_item_completed(item, now):
            split.completed_items.append(item)
        else:
            split.ongoing_items.append(item)
    return split
