"""Read-only views: dashboard, calendar grids, day detail, history, body map."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from aggregation import AggregationMode, body_map
from calendar_grid import month_grid, rolling_grid
from config import HEATMAP_LOOKBACK_DAYS, MAX_LOOKBACK_DAYS, _now_local, _today_local
from grouping import Granularity
from routers.api_utils import _error, _grid_json, _parse_choice, _parse_day, _snapshot, _to_json
from summaries import condition_lookup, condition_summary, day_detail, history, overview
from trends import FilterCategory, filter_conditions

router = APIRouter()


@router.get("/api/dashboard")
def api_dashboard(filter: str = "all"):
    try:
        category = _parse_choice(FilterCategory, filter, "filter")
    except ValueError as exc:
        return _error(str(exc))
    conditions, logs = _snapshot()
    selected = filter_conditions(conditions, logs, category)
    cards = [condition_summary(c, logs) for c in selected]
    return JSONResponse({
        "filter": category.value,
        "overview": _to_json(overview(conditions, logs, _now_local())),
        "conditions": _to_json(cards),
    })


@router.get("/api/calendar/heatmap")
def api_calendar_heatmap(
    mode: str = "severity",
    condition_id: str = "",
    lookback_days: int = HEATMAP_LOOKBACK_DAYS,
):
    try:
        agg_mode = _parse_choice(AggregationMode, mode, "mode")
    except ValueError as exc:
        return _error(str(exc))
    if not 0 <= lookback_days <= MAX_LOOKBACK_DAYS:
        return _error(f"lookback_days must be between 0 and {MAX_LOOKBACK_DAYS}")
    _, logs = _snapshot()
    if condition_id:
        logs = [l for l in logs if l.condition_id == condition_id]
    grid = rolling_grid(_today_local(), logs, lookback_days=lookback_days, mode=agg_mode)
    return JSONResponse(_grid_json(grid))


@router.get("/api/calendar/month")
def api_calendar_month(year: int = 0, month: int = 0, mode: str = "severity"):
    today = _today_local()
    year = year or today.year
    month = month or today.month
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return _error("Invalid month")
    try:
        agg_mode = _parse_choice(AggregationMode, mode, "mode")
    except ValueError as exc:
        return _error(str(exc))
    _, logs = _snapshot()
    try:
        grid = month_grid(year, month, logs, mode=agg_mode)
    except ValueError:
        return _error("Invalid month")
    payload = _grid_json(grid)
    payload.update({"year": year, "month": month})
    return JSONResponse(payload)


@router.get("/api/calendar/day/{day}")
def api_calendar_day(day: str):
    try:
        when = _parse_day(day)
    except ValueError as exc:
        return _error(str(exc))
    conditions, logs = _snapshot()
    return JSONResponse({"date": when.isoformat(), "entries": _to_json(day_detail(when, conditions, logs))})


@router.get("/api/history")
def api_history(granularity: str = "day"):
    try:
        unit = _parse_choice(Granularity, granularity, "granularity")
    except ValueError as exc:
        return _error(str(exc))
    conditions, logs = _snapshot()
    groups = history(conditions, logs, unit, _now_local())
    return JSONResponse({"granularity": unit.value, "groups": _to_json(groups)})


@router.get("/api/body-map")
def api_body_map(day: str = ""):
    try:
        when = _parse_day(day) if day else _today_local()
    except ValueError as exc:
        return _error(str(exc))
    conditions, logs = _snapshot()
    lookup = condition_lookup(conditions, logs)
    regions = body_map([l for l in logs if l.day == when], lookup.values())
    return JSONResponse({"date": when.isoformat(), "regions": _to_json(regions)})
