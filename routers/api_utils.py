"""Helpers shared by the API router modules."""

from datetime import date

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import store
from calendar_grid import CalendarGrid, GridCell


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"ok": False, "error": message}, status_code=status_code)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "__root__")
    msg = first.get("msg", "Invalid request")
    # Model-level validators report "Value error, <message>".
    msg = msg.removeprefix("Value error, ")
    return f"{field}: {msg}" if field else msg


def _parse_choice(enum_cls, value: str, name: str):
    try:
        return enum_cls((value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValueError(f"Invalid {name}: {value!r}. Must be one of: {allowed}") from None


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError("Invalid date format") from None


def _snapshot():
    """One consistent read of both collections for a single request."""
    return store.list_conditions(), store.list_logs()


def _to_json(obj):
    return jsonable_encoder(obj)


def _cell_json(cell: GridCell) -> dict:
    return {
        "date": cell.day.isoformat() if cell.day else None,
        "is_padding": cell.is_padding,
        "count": cell.summary.count,
        "max_intensity": cell.summary.max_intensity,
        "mean_delta": cell.summary.mean_delta,
        "bucket": _to_json(cell.summary.bucket),
        "log_ids": [l.id for l in cell.logs],
    }


def _grid_json(grid: CalendarGrid) -> dict:
    return {
        "start": grid.start.isoformat(),
        "end": grid.end.isoformat(),
        "mode": grid.mode.value,
        "cell_count": len(grid),
        "weeks": [[_cell_json(c) for c in week] for week in grid.weeks()],
    }
