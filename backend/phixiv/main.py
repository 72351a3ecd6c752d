from __future__ import annotations

from fastapi import FastAPI, Request

from phixiv.api.metrics import router as metrics_router
from phixiv.api.public.artworks import router as artworks_router
from phixiv.api.public.healthz import router as healthz_router
from phixiv.api.public.image_proxy import router as image_proxy_router
from phixiv.api.public.info import router as info_router
from phixiv.api.public.oembed import router as oembed_router
from phixiv.api.public.statuses import router as statuses_router
from phixiv.api.public.version import router as version_router
from phixiv.core.config import load_settings
from phixiv.core.errors import ApiError, ErrorCode, json_error_response
from phixiv.core.hosts import rewrite_path_for_host
from phixiv.core.logging import configure_logging, get_logger, parse_log_level
from phixiv.core.request_id import RequestIdMiddleware

log = get_logger(__name__)


def create_app() -> FastAPI:
    settings = load_settings()
    configure_logging(parse_log_level(settings.log_level))

    app = FastAPI(title="phixiv", docs_url="/api/docs", redoc_url="/api/redoc")

    @app.exception_handler(ApiError)
    async def _api_error_handler(request: Request, exc: ApiError):  # type: ignore[no-redef]
        return json_error_response(
            code=exc.code,
            message=exc.message,
            status_code=exc.status_code,
            request=request,
            details=exc.details,
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[no-redef]
        log.exception("unhandled_exception path=%s", request.url.path)
        return json_error_response(
            code=ErrorCode.INTERNAL_ERROR,
            message="Internal server error",
            status_code=500,
            request=request,
            details={"error_type": type(exc).__name__},
        )

    @app.middleware("http")
    async def _host_dispatch_middleware(request: Request, call_next):  # type: ignore[no-redef]
        path = request.scope.get("path") or "/"
        rewritten = rewrite_path_for_host(request.headers.get("host") or "", path)
        if rewritten != path:
            request.scope["path"] = rewritten
            request.scope["raw_path"] = rewritten.encode("utf-8")
        return await call_next(request)

    app.add_middleware(RequestIdMiddleware)

    app.state.settings = settings
    app.state.httpx_transport = None

    app.include_router(healthz_router)
    app.include_router(version_router)
    app.include_router(metrics_router)
    app.include_router(info_router)
    app.include_router(statuses_router)
    app.include_router(oembed_router)
    app.include_router(image_proxy_router)
    # Catch-all; must stay last.
    app.include_router(artworks_router)

    log.info("app_created env=%s bot_filtering=%s", settings.app_env, settings.bot_filtering)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run("phixiv.main:app", host="0.0.0.0", port=settings.port)
