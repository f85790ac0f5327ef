from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import store
from aggregation import AggregationMode
from calendar_grid import rolling_grid
from config import HEATMAP_LOOKBACK_DAYS, MAX_LOOKBACK_DAYS, _today_local
from errors import ConditionNotFound
from models import ConditionCreate, ConditionPatch
from routers.api_utils import _error, _grid_json, _to_json, _validation_message
from summaries import condition_summary

router = APIRouter()


@router.get("/api/conditions")
def api_conditions():
    return JSONResponse({"conditions": _to_json(store.list_conditions())})


@router.post("/api/conditions")
def api_conditions_create(payload: dict = Body(...)):
    try:
        data = ConditionCreate.model_validate(payload)
    except ValidationError as exc:
        return _error(_validation_message(exc))
    condition = store.create_condition(data)
    return JSONResponse({"ok": True, "condition": _to_json(condition)})


@router.get("/api/conditions/{condition_id}")
def api_condition_detail(condition_id: str, lookback_days: int = HEATMAP_LOOKBACK_DAYS):
    if not 0 <= lookback_days <= MAX_LOOKBACK_DAYS:
        return _error(f"lookback_days must be between 0 and {MAX_LOOKBACK_DAYS}")
    condition = store.get_condition(condition_id)
    if condition is None:
        return _error("Condition not found", 404)
    logs = [l for l in store.list_logs() if l.condition_id == condition_id]
    summary = condition_summary(condition, logs)
    progress = rolling_grid(
        _today_local(), logs, lookback_days=lookback_days, mode=AggregationMode.DELTA
    )
    return JSONResponse({"summary": _to_json(summary), "progress": _grid_json(progress)})


@router.post("/api/conditions/{condition_id}/edit")
def api_conditions_edit(condition_id: str, payload: dict = Body(...)):
    try:
        patch = ConditionPatch.model_validate(payload)
    except ValidationError as exc:
        return _error(_validation_message(exc))
    try:
        condition = store.update_condition(condition_id, patch)
    except ConditionNotFound as exc:
        return _error(str(exc), 404)
    return JSONResponse({"ok": True, "condition": _to_json(condition)})


@router.post("/api/conditions/{condition_id}/archive")
def api_conditions_archive(condition_id: str, payload: dict = Body(default={})):
    archived = payload.get("archived", True)
    if not isinstance(archived, bool):
        return _error("archived must be true or false")
    try:
        condition = store.set_condition_archived(condition_id, archived)
    except ConditionNotFound as exc:
        return _error(str(exc), 404)
    return JSONResponse({"ok": True, "condition": _to_json(condition)})
