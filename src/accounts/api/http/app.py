"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.accounts.api.http.app_data import ApplicationDependencies
from src.accounts.api.http.routers.health import router as health_router
from src.accounts.api.http.routers.users import router as users_router
from src.accounts.api.utils.app_startup import configure_logging, resolve_signing_secret
from src.accounts.core.errors import AccountsError, FieldError, ValidationFailed
from src.accounts.core.services import (
    DbManageService,
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)
from src.accounts.runtime.context import get_config

# Load configuration
main_config = get_config()


# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title=main_config.app.name,
    lifespan=lifespan,
    docs_url=None if main_config.app.environment == "production" else "/docs",
    redoc_url=None if main_config.app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if main_config.app.environment == "production" and (
    "*" in main_config.app.cors.origins
):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=main_config.app.cors.origins,
    allow_credentials=main_config.app.cors.allow_credentials,
    allow_methods=main_config.app.cors.allow_methods,
    allow_headers=main_config.app.cors.allow_headers,
)


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "internal_error",
                    "detail": "Server error",
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id},
            )


# --- Error rendering ---
def _error_response(request: Request, exc: AccountsError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    content = exc.to_content()
    content["request_id"] = request_id
    headers = dict(exc.headers or {})
    if request_id:
        headers["X-Request-ID"] = request_id
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(AccountsError)
async def accounts_error_handler(request: Request, exc: AccountsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("{}: {}", exc.error, exc.detail)
    else:
        logger.info("Request rejected: {} ({})", exc.error, exc.detail)
    return _error_response(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        FieldError(
            field=".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
            message=err.get("msg", "Invalid value"),
            value=err.get("input"),
        )
        for err in exc.errors()
    ]
    return _error_response(request, ValidationFailed(errors))


# --- Router registration ---
app.include_router(health_router)
app.include_router(users_router, prefix="/api")


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    # Fail fast on a missing or placeholder secret in production
    secret = resolve_signing_secret(config)

    database_service = DbSessionService(config.database)
    DbManageService(database_service).create_all()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        jwt_generation_service=JwtGeneratorService(secret, config.jwt),
        jwt_verify_service=JwtVerificationService(secret, config.jwt),
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # We handle access logging in middleware
    )
