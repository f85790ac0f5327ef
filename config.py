import os
from contextvars import ContextVar
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from models import DeltaScale, SeverityScale

DB_PATH = os.environ.get("BODY_SIGNAL_DB", "").strip() or "body_signal.db"
EXPORT_FILENAME_PREFIX = "body-signal-backup"
TZ_OFFSET_COOKIE_NAME = "tz_offset"
STORAGE_TS_FORMAT = "%Y-%m-%d %H:%M:%S"

# Python weekday numbering: Monday=0 .. Sunday=6
WEEK_START = 6

HEATMAP_LOOKBACK_DAYS = 84  # 12 weeks back, 13 columns with the current week
MAX_LOOKBACK_DAYS = 366 * 5
RECENT_WINDOW_DAYS = 7
SPARKLINE_POINTS = 10
RECENT_LOG_COUNT = 5

# Per-view cut points. The views disagree with each other; each keeps its own.
HEATMAP_SCALE = SeverityScale(low_max=3, moderate_max=6, high_max=8)
MONTH_CALENDAR_SCALE = SeverityScale(low_max=4, moderate_max=7)
BODY_MAP_SCALE = SeverityScale(low_max=3, moderate_max=7)
DELTA_SCALE = DeltaScale(change=1, large_change=3)

DASHBOARD_CRITICAL_THRESHOLD = 7
DETAIL_HIGH_THRESHOLD = 8
DETAIL_SCALE = SeverityScale(low_max=4, moderate_max=DETAIL_HIGH_THRESHOLD - 1)

_client_now: ContextVar[Optional[datetime]] = ContextVar("_client_now", default=None)
_client_tz_offset_min: ContextVar[Optional[int]] = ContextVar("_client_tz_offset_min", default=None)


def _set_client_clock(tz_offset_cookie: str):
    """Set the per-request local clock from the JS getTimezoneOffset() cookie."""
    try:
        offset = int((tz_offset_cookie or "").strip())
    except ValueError:
        offset = None
    if offset is not None and -840 <= offset <= 840:
        _client_tz_offset_min.set(offset)
        _client_now.set(datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=offset))
        return
    _client_tz_offset_min.set(None)
    _client_now.set(datetime.now())


def _now_local() -> datetime:
    return _client_now.get() or datetime.now()


def _today_local() -> date:
    return _now_local().date()


def _to_utc_storage(dt_local: datetime) -> str:
    """Convert a request-local naive datetime to the UTC storage string."""
    if dt_local.tzinfo is not None:
        return dt_local.astimezone(timezone.utc).strftime(STORAGE_TS_FORMAT)
    offset = _client_tz_offset_min.get()
    if offset is not None:
        return (dt_local + timedelta(minutes=offset)).strftime(STORAGE_TS_FORMAT)
    # No client offset: the naive value is server-local time.
    return dt_local.astimezone().astimezone(timezone.utc).strftime(STORAGE_TS_FORMAT)


def _from_utc_storage(ts: str) -> datetime:
    """Convert a UTC storage string to a request-local naive datetime."""
    dt_utc = datetime.strptime(ts, STORAGE_TS_FORMAT)
    offset = _client_tz_offset_min.get()
    if offset is not None:
        return dt_utc - timedelta(minutes=offset)
    return dt_utc.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
