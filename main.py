import logging

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

import config
from config import TZ_OFFSET_COOKIE_NAME, _set_client_clock
from db import init_db
from routers import conditions, data, insights, logs

logger = logging.getLogger(__name__)

init_db()
logger.info("Using database %s", config.DB_PATH)

app = FastAPI(title="Body Signal")
app.include_router(conditions.router)
app.include_router(logs.router)
app.include_router(insights.router)
app.include_router(data.router)


@app.middleware("http")
async def client_clock_middleware(request: Request, call_next):
    # Every "today", day key and stored timestamp is relative to the client's clock.
    _set_client_clock(request.cookies.get(TZ_OFFSET_COOKIE_NAME, ""))
    return await call_next(request)


@app.get("/")
def root():
    return RedirectResponse(url="/api/dashboard", status_code=303)
