"""Reduce the logs of one day, period or body region to a summary and a bucket."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from config import BODY_MAP_SCALE, DELTA_SCALE, HEATMAP_SCALE
from models import BodyRegion, Condition, DeltaScale, Log, SeverityScale
from trends import DeltaResult


class AggregationMode(str, Enum):
    SEVERITY = "severity"
    DELTA = "delta"


class SeverityBucket(str, Enum):
    EMPTY = "empty"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class DeltaBucket(str, Enum):
    NO_DATA = "no-data"
    NEW = "new"
    LARGE_IMPROVEMENT = "large-improvement"
    IMPROVED = "improved"
    STABLE = "stable"
    WORSENED = "worsened"
    LARGE_WORSENING = "large-worsening"


def severity_bucket(max_intensity: Optional[int], scale: SeverityScale = HEATMAP_SCALE) -> SeverityBucket:
    if not max_intensity:
        return SeverityBucket.EMPTY
    if max_intensity <= scale.low_max:
        return SeverityBucket.LOW
    if max_intensity <= scale.moderate_max:
        return SeverityBucket.MODERATE
    if scale.high_max is None or max_intensity <= scale.high_max:
        return SeverityBucket.HIGH
    return SeverityBucket.EXTREME


def delta_bucket(mean_delta: Optional[float], scale: DeltaScale = DELTA_SCALE) -> DeltaBucket:
    """Bucket for a day's mean delta. ``None`` means every log was a first occurrence."""
    if mean_delta is None:
        return DeltaBucket.NEW
    if mean_delta <= -scale.large_change:
        return DeltaBucket.LARGE_IMPROVEMENT
    if mean_delta <= -scale.change:
        return DeltaBucket.IMPROVED
    if mean_delta >= scale.large_change:
        return DeltaBucket.LARGE_WORSENING
    if mean_delta >= scale.change:
        return DeltaBucket.WORSENED
    return DeltaBucket.STABLE


@dataclass(frozen=True)
class DaySummary:
    count: int
    max_intensity: Optional[int]
    mean_delta: Optional[float]
    bucket: str


EMPTY_SEVERITY = DaySummary(count=0, max_intensity=None, mean_delta=None, bucket=SeverityBucket.EMPTY)
EMPTY_DELTA = DaySummary(count=0, max_intensity=None, mean_delta=None, bucket=DeltaBucket.NO_DATA)


def summarize_day(
    logs: Sequence[Log],
    mode: AggregationMode = AggregationMode.SEVERITY,
    *,
    changes: Optional[Mapping[str, DeltaResult]] = None,
    severity_scale: SeverityScale = HEATMAP_SCALE,
    delta_scale: DeltaScale = DELTA_SCALE,
) -> DaySummary:
    """Summarize the logs that fall on one day.

    In delta mode ``changes`` must hold a :class:`DeltaResult` for every log,
    computed against the full history of its condition. First occurrences
    carry no change and are left out of the mean.
    """
    mode = AggregationMode(mode)
    if not logs:
        return EMPTY_DELTA if mode == AggregationMode.DELTA else EMPTY_SEVERITY
    max_intensity = max(l.intensity for l in logs)
    if mode == AggregationMode.SEVERITY:
        return DaySummary(
            count=len(logs),
            max_intensity=max_intensity,
            mean_delta=None,
            bucket=severity_bucket(max_intensity, severity_scale),
        )
    if changes is None:
        raise ValueError("delta mode needs the per-log changes")
    deltas = [changes[l.id].delta for l in logs if not changes[l.id].is_first_occurrence]
    mean_delta = sum(deltas) / len(deltas) if deltas else None
    return DaySummary(
        count=len(logs),
        max_intensity=max_intensity,
        mean_delta=round(mean_delta, 2) if mean_delta is not None else None,
        bucket=delta_bucket(mean_delta, delta_scale),
    )


# ── Periods (week/month lists) ────────────────────────────────────────────────

@dataclass(frozen=True)
class PeriodSummary:
    label: str
    count: int
    mean_intensity: Optional[float]
    first_day: Optional[date]
    last_day: Optional[date]


def mean_intensity(logs: Sequence[Log]) -> Optional[float]:
    if not logs:
        return None
    return round(sum(l.intensity for l in logs) / len(logs), 1)


def summarize_period(logs: Sequence[Log], label: str) -> PeriodSummary:
    days = [l.day for l in logs]
    return PeriodSummary(
        label=label,
        count=len(logs),
        mean_intensity=mean_intensity(logs),
        first_day=min(days) if days else None,
        last_day=max(days) if days else None,
    )


# ── Body map ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RegionSummary:
    region: BodyRegion
    label: str
    max_intensity: Optional[int]
    bucket: SeverityBucket


def body_map(
    logs: Iterable[Log],
    conditions: Iterable[Condition],
    scale: SeverityScale = BODY_MAP_SCALE,
) -> list[RegionSummary]:
    """Max intensity per body region, one entry per region in enum order."""
    region_of = {c.id: c.region for c in conditions if c.region is not None}
    peak: dict[BodyRegion, int] = {}
    for log in logs:
        region = region_of.get(log.condition_id)
        if region is None:
            continue
        peak[region] = max(peak.get(region, 0), log.intensity)
    return [
        RegionSummary(
            region=region,
            label=region.label,
            max_intensity=peak.get(region),
            bucket=severity_bucket(peak.get(region), scale),
        )
        for region in BodyRegion
    ]
