"""Gap-free calendar grids (7×N day cells) with a per-cell summary.

Two shapes are supported: a rolling heatmap that ends with the week
containing the anchor day, and a single month padded out to whole weeks.
"""

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from aggregation import AggregationMode, DaySummary, summarize_day
from chronology import sort_ascending
from config import DELTA_SCALE, HEATMAP_LOOKBACK_DAYS, HEATMAP_SCALE, MONTH_CALENDAR_SCALE, WEEK_START
from models import DeltaScale, Log, SeverityScale
from trends import annotate_logs

DAYS_PER_WEEK = 7
ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class GridCell:
    day: Optional[date]  # None for padding
    logs: tuple
    summary: DaySummary

    @property
    def is_padding(self) -> bool:
        return self.day is None


@dataclass(frozen=True)
class CalendarGrid:
    start: date
    end: date  # exclusive
    mode: AggregationMode
    cells: tuple

    def __len__(self):
        return len(self.cells)

    def weeks(self) -> list[tuple]:
        """Cells as week columns, oldest first."""
        return [self.cells[i:i + DAYS_PER_WEEK] for i in range(0, len(self.cells), DAYS_PER_WEEK)]

    def cell_for(self, day: date) -> Optional[GridCell]:
        for cell in self.cells:
            if cell.day == day:
                return cell
        return None


def start_of_week(day: date, week_start: int = WEEK_START) -> date:
    return day - timedelta(days=(day.weekday() - week_start) % DAYS_PER_WEEK)


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def _build(
    start: date,
    end: date,
    logs: Iterable[Log],
    mode: AggregationMode,
    severity_scale: SeverityScale,
    delta_scale: DeltaScale,
    visible=None,
) -> CalendarGrid:
    mode = AggregationMode(mode)
    logs = list(logs)
    by_day: dict[date, list[Log]] = defaultdict(list)
    for log in sort_ascending(logs):
        by_day[log.day].append(log)
    changes = None
    if mode == AggregationMode.DELTA:
        changes = {log_id: item.change for log_id, item in annotate_logs(logs).items()}
    empty = summarize_day((), mode)

    cells = []
    day = start
    while day < end:
        if visible is not None and not visible(day):
            cells.append(GridCell(day=None, logs=(), summary=empty))
        else:
            day_logs = tuple(by_day.get(day, ()))
            summary = summarize_day(
                day_logs,
                mode,
                changes=changes,
                severity_scale=severity_scale,
                delta_scale=delta_scale,
            )
            cells.append(GridCell(day=day, logs=day_logs, summary=summary))
        day += ONE_DAY
    return CalendarGrid(start=start, end=end, mode=mode, cells=tuple(cells))


def rolling_grid(
    anchor: Union[date, datetime],
    logs: Iterable[Log],
    *,
    lookback_days: int = HEATMAP_LOOKBACK_DAYS,
    mode: AggregationMode = AggregationMode.SEVERITY,
    week_start: int = WEEK_START,
    severity_scale: SeverityScale = HEATMAP_SCALE,
    delta_scale: DeltaScale = DELTA_SCALE,
) -> CalendarGrid:
    """Grid from the week containing ``anchor - lookback_days`` through the anchor's week.

    Every cell is a real date; the anchor always sits inside the last full week.
    """
    if lookback_days < 0:
        raise ValueError(f"lookback_days must be >= 0, got {lookback_days}")
    anchor = _as_date(anchor)
    try:
        first = anchor - timedelta(days=lookback_days)
    except OverflowError:
        raise ValueError(f"lookback_days {lookback_days} is out of range") from None
    start, end = _week_span(first, anchor, week_start)
    return _build(start, end, logs, mode, severity_scale, delta_scale)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _week_span(first: date, last: date, week_start: int) -> tuple[date, date]:
    """Whole-week bounds around [first, last]; end is exclusive."""
    try:
        start = start_of_week(first, week_start)
        end = start_of_week(last, week_start) + timedelta(days=DAYS_PER_WEEK)
    except OverflowError:
        raise ValueError(f"Calendar range {first} to {last} is out of range") from None
    return start, end


def month_grid(
    year: int,
    month: int,
    logs: Iterable[Log],
    *,
    mode: AggregationMode = AggregationMode.SEVERITY,
    week_start: int = WEEK_START,
    severity_scale: SeverityScale = MONTH_CALENDAR_SCALE,
    delta_scale: DeltaScale = DELTA_SCALE,
) -> CalendarGrid:
    """One month padded to whole weeks; days outside the month are padding cells."""
    first, last = month_bounds(year, month)
    start, end = _week_span(first, last, week_start)
    return _build(
        start,
        end,
        logs,
        mode,
        severity_scale,
        delta_scale,
        visible=lambda day: first <= day <= last,
    )
