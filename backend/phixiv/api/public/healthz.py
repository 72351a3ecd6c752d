from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request) -> Any:
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    resp = JSONResponse(status_code=200, content={"ok": True, "request_id": rid})
    set_request_id_header(resp, rid)
    return resp
