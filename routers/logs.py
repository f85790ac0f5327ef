from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import store
from config import _now_local
from errors import UnknownConditionReference
from models import LogCreate
from routers.api_utils import _error, _to_json, _validation_message

router = APIRouter()


def _validate_log_payload(payload: dict):
    """Return (error message, LogCreate); the message is empty when valid."""
    try:
        data = LogCreate.model_validate(payload)
    except ValidationError as exc:
        return (_validation_message(exc), None)
    if data.timestamp is not None and data.timestamp > _now_local():
        return ("Date cannot be in the future", None)
    if data.new_condition is not None and data.new_condition.onset_date:
        if data.new_condition.onset_date > _now_local().date():
            return ("Onset date cannot be in the future", None)
    return ("", data)


@router.get("/api/logs")
def api_logs():
    return JSONResponse({"logs": _to_json(store.list_logs())})


@router.post("/api/logs")
def api_logs_create(payload: dict = Body(...)):
    error, data = _validate_log_payload(payload)
    if error:
        return _error(error)
    try:
        log = store.create_log(data)
    except UnknownConditionReference as exc:
        return _error(str(exc), 404)
    return JSONResponse({"ok": True, "log": _to_json(log)})
