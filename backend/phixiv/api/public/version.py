from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from phixiv.core.request_id import get_or_create_request_id, set_request_id_header, set_request_id_on_state

router = APIRouter()


def _env(key: str, default: str = "") -> str:
    return str(os.environ.get(key, default)).strip()


@router.get("/version")
async def version(request: Request) -> Any:
    rid = get_or_create_request_id(request)
    set_request_id_on_state(request, rid)

    resp = JSONResponse(
        status_code=200,
        content={
            "ok": True,
            "name": "phixiv",
            "version": _env("APP_VERSION", "dev"),
            "build_time": _env("APP_BUILD_TIME"),
            "git_commit": _env("APP_COMMIT"),
            "request_id": rid,
        },
    )
    set_request_id_header(resp, rid)
    return resp
