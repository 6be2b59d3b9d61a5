"""
Notification gate: category switches and quiet hours.

A pure function of (preferences, category, now). It is evaluated fresh for
every notification and never cached, since `now` keeps moving.

Quiet-hours windows are inclusive at both ends. A window whose start is
after its end crosses midnight (e.g. 22:00-08:00).
"""

import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Union

from redditsync.errors import ValidationError
from redditsync.models.notification import (
    NotificationCategory,
    NotificationPreferences,
    QuietHours,
)
from redditsync.observability import get_logger, record_notification_decision

logger = get_logger(__name__)

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")

DELIVERED = "delivered"
CATEGORY_DISABLED = "category_disabled"
QUIET_HOURS = "quiet_hours"


@dataclass(frozen=True)
class GateDecision:
    deliver: bool
    reason: str


def parse_hhmm(value: str) -> int:
    """
    "HH:MM" to minutes since midnight.

    Raises:
        ValidationError: not HH:MM, or hour/minute out of range
    """
    match = _HHMM.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time {value!r}, out of range")
    return hours * 60 + minutes


def in_quiet_hours(quiet_hours: QuietHours, now: Union[datetime, time]) -> bool:
    """
    True when `now` falls inside an enabled quiet-hours window.

    Malformed start/end times disable quiet hours rather than failing.
    """
    if not quiet_hours.enabled:
        return False
    try:
        start = parse_hhmm(quiet_hours.start)
        end = parse_hhmm(quiet_hours.end)
    except ValidationError as e:
        logger.warning(f"Ignoring quiet hours: {e}")
        return False

    now_minutes = now.hour * 60 + now.minute
    if start <= end:
        return start <= now_minutes <= end
    return now_minutes >= start or now_minutes <= end


def evaluate(
    prefs: NotificationPreferences,
    category: NotificationCategory,
    now: Union[datetime, time],
) -> GateDecision:
    """Decide whether a notification of `category` may be delivered at `now`."""
    category = NotificationCategory(category)
    if not prefs.is_enabled(category):
        decision = GateDecision(False, CATEGORY_DISABLED)
    elif in_quiet_hours(prefs.quiet_hours, now):
        decision = GateDecision(False, QUIET_HOURS)
    else:
        decision = GateDecision(True, DELIVERED)

    record_notification_decision(category.value, decision.reason)
    return decision


def should_deliver(
    prefs: NotificationPreferences,
    category: NotificationCategory,
    now: Union[datetime, time],
) -> bool:
    return evaluate(prefs, category, now).deliver
