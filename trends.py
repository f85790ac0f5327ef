"""Delta classification between consecutive logs, and dashboard filtering."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from chronology import index_timelines
from config import DASHBOARD_CRITICAL_THRESHOLD
from errors import OutOfRangeIntensity
from models import MAX_INTENSITY, MIN_INTENSITY, Condition, Log


class Trend(str, Enum):
    FIRST = "first"
    WORSENED = "worsened"
    IMPROVED = "improved"
    STABLE = "stable"


@dataclass(frozen=True)
class DeltaResult:
    delta: int
    trend: Trend
    is_first_occurrence: bool


def _check_intensity(value) -> int:
    # bool is an int subclass; it is never a valid intensity.
    if isinstance(value, bool) or not isinstance(value, int):
        raise OutOfRangeIntensity(value)
    if not MIN_INTENSITY <= value <= MAX_INTENSITY:
        raise OutOfRangeIntensity(value)
    return value


def classify_delta(log: Log, previous: Optional[Log]) -> DeltaResult:
    current = _check_intensity(log.intensity)
    if previous is None:
        return DeltaResult(delta=0, trend=Trend.FIRST, is_first_occurrence=True)
    delta = current - _check_intensity(previous.intensity)
    if delta > 0:
        trend = Trend.WORSENED
    elif delta < 0:
        trend = Trend.IMPROVED
    else:
        trend = Trend.STABLE
    return DeltaResult(delta=delta, trend=trend, is_first_occurrence=False)


@dataclass(frozen=True)
class AnnotatedLog:
    log: Log
    previous: Optional[Log]
    change: DeltaResult


def annotate_logs(logs: Iterable[Log]) -> dict[str, AnnotatedLog]:
    """Classify every log against its same-condition predecessor, keyed by log id."""
    annotated: dict[str, AnnotatedLog] = {}
    for timeline in index_timelines(logs).values():
        for log in timeline.logs:
            prev = timeline.previous_of(log)
            annotated[log.id] = AnnotatedLog(log=log, previous=prev, change=classify_delta(log, prev))
    return annotated


# ── Dashboard filter ──────────────────────────────────────────────────────────

class DashboardStatus(str, Enum):
    CRITICAL = "critical"
    IMPROVED = "improved"
    NONE = "none"


class FilterCategory(str, Enum):
    ALL = "all"
    CRITICAL = "critical"
    IMPROVED = "improved"


def is_critical(logs_ascending: Sequence[Log], threshold: int = DASHBOARD_CRITICAL_THRESHOLD) -> bool:
    return bool(logs_ascending) and logs_ascending[-1].intensity >= threshold


def is_improved(logs_ascending: Sequence[Log]) -> bool:
    if len(logs_ascending) < 2:
        return False
    return logs_ascending[-1].intensity < logs_ascending[-2].intensity


def dashboard_status(
    logs_ascending: Sequence[Log],
    critical_threshold: int = DASHBOARD_CRITICAL_THRESHOLD,
) -> DashboardStatus:
    """Single badge for a condition; Critical wins when both predicates hold."""
    if is_critical(logs_ascending, critical_threshold):
        return DashboardStatus.CRITICAL
    if is_improved(logs_ascending):
        return DashboardStatus.IMPROVED
    return DashboardStatus.NONE


def matches_filter(
    logs_ascending: Sequence[Log],
    category: FilterCategory,
    critical_threshold: int = DASHBOARD_CRITICAL_THRESHOLD,
) -> bool:
    if category == FilterCategory.ALL:
        return True
    if not logs_ascending:
        return False
    if category == FilterCategory.CRITICAL:
        return is_critical(logs_ascending, critical_threshold)
    return is_improved(logs_ascending)


def filter_conditions(
    conditions: Iterable[Condition],
    logs: Iterable[Log],
    category: FilterCategory = FilterCategory.ALL,
    critical_threshold: int = DASHBOARD_CRITICAL_THRESHOLD,
) -> list[Condition]:
    timelines = index_timelines(logs)
    selected = []
    for condition in conditions:
        timeline = timelines.get(condition.id)
        ordered = timeline.logs if timeline else ()
        if matches_filter(ordered, FilterCategory(category), critical_threshold):
            selected.append(condition)
    return selected
