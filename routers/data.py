from fastapi import APIRouter
from fastapi.responses import JSONResponse

import store
from config import _now_local

router = APIRouter()


@router.get("/api/export")
def api_export():
    filename, document = store.export_document(_now_local())
    return JSONResponse(
        document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/reset")
def api_reset():
    store.reset()
    return JSONResponse({"ok": True})
