"""Read models for the dashboard, condition detail, day detail and history views."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from aggregation import SeverityBucket, mean_intensity, severity_bucket
from chronology import condition_timeline, logs_descending, sort_ascending
from config import (
    DASHBOARD_CRITICAL_THRESHOLD,
    DETAIL_SCALE,
    RECENT_LOG_COUNT,
    RECENT_WINDOW_DAYS,
    SPARKLINE_POINTS,
)
from grouping import Granularity, group_logs
from models import Condition, Log, SeverityScale, unknown_condition
from trends import DashboardStatus, DeltaResult, annotate_logs, classify_delta, dashboard_status

logger = logging.getLogger(__name__)


def condition_lookup(conditions: Iterable[Condition], logs: Iterable[Log]) -> dict[str, Condition]:
    """Map condition id to Condition, filling dangling log references with "Unknown"."""
    lookup = {c.id: c for c in conditions}
    for log in logs:
        if log.condition_id not in lookup:
            logger.warning("Log %s references unknown condition %s", log.id, log.condition_id)
            lookup[log.condition_id] = unknown_condition(log.condition_id)
    return lookup


@dataclass(frozen=True)
class ConditionSummary:
    condition: Condition
    total_logs: int
    current_intensity: Optional[int]
    current_level: SeverityBucket
    since_last: Optional[int]
    latest_change: Optional[DeltaResult]
    average_intensity: Optional[float]
    last_logged: Optional[date]
    last_medication: str
    status: DashboardStatus
    sparkline: tuple  # (timestamp, intensity), oldest first
    recent_logs: tuple  # most recent first


def condition_summary(
    condition: Condition,
    logs: Iterable[Log],
    *,
    critical_threshold: int = DASHBOARD_CRITICAL_THRESHOLD,
    level_scale: SeverityScale = DETAIL_SCALE,
    sparkline_points: int = SPARKLINE_POINTS,
    recent_count: int = RECENT_LOG_COUNT,
) -> ConditionSummary:
    timeline = condition_timeline(logs, condition.id)
    ordered = timeline.logs
    latest = timeline.latest
    change = classify_delta(latest, timeline.previous_of(latest)) if latest else None
    return ConditionSummary(
        condition=condition,
        total_logs=len(ordered),
        current_intensity=latest.intensity if latest else None,
        current_level=severity_bucket(latest.intensity if latest else None, level_scale),
        since_last=change.delta if change and not change.is_first_occurrence else None,
        latest_change=change,
        average_intensity=mean_intensity(ordered),
        last_logged=latest.day if latest else None,
        last_medication=latest.medication if latest else "",
        status=dashboard_status(ordered, critical_threshold),
        sparkline=tuple((l.timestamp, l.intensity) for l in ordered[-sparkline_points:]),
        recent_logs=tuple(reversed(ordered[-recent_count:])) if recent_count else (),
    )


@dataclass(frozen=True)
class Overview:
    active_conditions: int
    recent_entries: int
    recent_average: Optional[float]
    window_days: int


def overview(
    conditions: Iterable[Condition],
    logs: Iterable[Log],
    now: datetime,
    window_days: int = RECENT_WINDOW_DAYS,
) -> Overview:
    window = timedelta(days=window_days)
    recent = [l for l in logs if timedelta(0) <= now - l.timestamp < window]
    return Overview(
        active_conditions=sum(1 for c in conditions if not c.is_archived),
        recent_entries=len(recent),
        recent_average=mean_intensity(recent),
        window_days=window_days,
    )


@dataclass(frozen=True)
class LogEntry:
    """A log with its condition and its change against the previous log."""

    log: Log
    condition_label: str
    location: str
    previous_intensity: Optional[int]
    change: DeltaResult


def _entries(logs: Sequence[Log], annotated: dict, lookup: dict[str, Condition]) -> tuple:
    entries = []
    for log in logs:
        item = annotated[log.id]
        condition = lookup[log.condition_id]
        entries.append(LogEntry(
            log=log,
            condition_label=condition.label,
            location=condition.location,
            previous_intensity=item.previous.intensity if item.previous else None,
            change=item.change,
        ))
    return tuple(entries)


def day_detail(day: date, conditions: Iterable[Condition], logs: Iterable[Log]) -> tuple:
    """Entries logged on ``day``, oldest first."""
    logs = list(logs)
    lookup = condition_lookup(conditions, logs)
    on_day = [l for l in sort_ascending(logs) if l.day == day]
    return _entries(on_day, annotate_logs(logs), lookup)


@dataclass(frozen=True)
class HistoryGroup:
    label: str
    count: int
    mean_intensity: Optional[float]
    entries: tuple


def history(
    conditions: Iterable[Condition],
    logs: Iterable[Log],
    granularity: Granularity,
    now: datetime,
) -> list[HistoryGroup]:
    logs = list(logs)
    lookup = condition_lookup(conditions, logs)
    groups = group_logs(logs_descending(logs), granularity, now)
    annotated = annotate_logs(logs)
    return [
        HistoryGroup(
            label=g.label,
            count=g.summary.count,
            mean_intensity=g.summary.mean_intensity,
            entries=_entries(g.logs, annotated, lookup),
        )
        for g in groups
    ]
