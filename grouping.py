"""Partition a most-recent-first log list into labelled day/week/month buckets."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Sequence, Union

from aggregation import PeriodSummary, summarize_period
from calendar_grid import start_of_week
from config import WEEK_START
from models import Log

# Built in so labels do not depend on the process locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class LogGroup:
    label: str
    logs: tuple
    summary: PeriodSummary


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _short_month(d: date) -> str:
    return MONTH_NAMES[d.month - 1][:3]


def day_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    label = f"{WEEKDAY_NAMES[day.weekday()]}, {MONTH_NAMES[day.month - 1]} {_ordinal(day.day)}"
    if day.year != today.year:
        label += f", {day.year}"
    return label


def week_label(day: date, week_start: int = WEEK_START) -> str:
    first = start_of_week(day, week_start)
    last = first + timedelta(days=6)
    return f"{_short_month(first)} {first.day} – {_short_month(last)} {last.day}, {last.year}"


def month_label(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"


def bucket_label(
    day: date,
    granularity: Granularity,
    today: date,
    week_start: int = WEEK_START,
) -> str:
    granularity = Granularity(granularity)
    if granularity == Granularity.DAY:
        return day_label(day, today)
    if granularity == Granularity.WEEK:
        return week_label(day, week_start)
    return month_label(day)


def group_logs(
    logs: Sequence[Log],
    granularity: Granularity,
    now: Union[date, datetime],
    week_start: int = WEEK_START,
) -> list[LogGroup]:
    """Group ``logs`` (most recent first) into buckets in first-seen order.

    ``now`` is only consulted for the Today/Yesterday day labels and for
    deciding whether a day label needs its year.
    """
    today = now.date() if isinstance(now, datetime) else now
    buckets: dict[str, list[Log]] = {}
    for log in logs:
        label = bucket_label(log.day, granularity, today, week_start)
        buckets.setdefault(label, []).append(log)
    return [
        LogGroup(label=label, logs=tuple(items), summary=summarize_period(items, label))
        for label, items in buckets.items()
    ]
