from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from incident_access.configs.settings import Settings, get_settings
from incident_access.errors import AppError, ForbiddenError
from incident_access.routers.access_router import router as access_router
from incident_access.routers.health_router import router as health_router
from incident_access.utils.response import failure
from fastapi.middleware.cors import CORSMiddleware
from incident_access.configs.logging_config import get_logger, setup_logging
import time

log = get_logger(__name__)


def _cors_origins(raw_origins) -> list[str]:
    # .env can provide a comma-separated string
    if isinstance(raw_origins, str):
        return [o.strip() for o in raw_origins.split(",") if o.strip()]
    if isinstance(raw_origins, (list, tuple, set)):
        return list(raw_origins)
    return []


def create_app() -> FastAPI:
    app = FastAPI(title="incident_access", version="0.1.0")
    settings: Settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        request_id = request.headers.get("x-request-id") or request.headers.get("x-correlation-id")

        log.info("request.start method=%s path=%s request_id=%s", method, path, request_id)
        response = None
        try:
            response = await call_next(request)
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "request.end method=%s path=%s status=%s request_id=%s elapsed_ms=%s",
                method,
                path,
                getattr(response, "status_code", "unknown"),
                request_id,
                elapsed_ms,
            )
        return response

    app.include_router(health_router)
    app.include_router(access_router)

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        log.info("request.error type=app_error status=%s message=%s", exc.http_status, exc.message)
        content = failure(exc.message)
        if isinstance(exc, ForbiddenError) and exc.required:
            content["required"] = list(exc.required)
        return JSONResponse(status_code=exc.http_status, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error: %s", str(exc))
        return JSONResponse(status_code=500, content=failure("internal server error"))

    @app.on_event("startup")
    async def startup() -> None:
        settings: Settings = get_settings()
        setup_logging(settings.LOG_LEVEL)
        app.state.settings = settings
        log.info(
            "startup.done service=%s environment=%s verify_signature=%s",
            settings.SERVICE_NAME,
            settings.ENVIRONMENT,
            settings.jwt_verify_signature,
        )

    return app


app = create_app()
