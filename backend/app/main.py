from contextlib import asynccontextmanager
from fastapi import FastAPI, Response, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging
import time
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from .config import get_settings
from .database import Base, engine, check_connection
from .errors import ArchiveError, Unauthorized
from .routes import (
    auth,
    test_items,
    studies,
    facility_docs,
    audit,
)

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOG = logging.getLogger(__name__)

if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, integrations=[FastApiIntegration()])

REQUEST_COUNT = Counter("request_count", "Total requests", ["method", "endpoint"])
REQUEST_LATENCY = Histogram(
    "request_latency_seconds", "Request latency", ["endpoint"]
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Bad config or an unreachable database stops startup; nothing else does.
    settings.validate()
    check_connection()
    Base.metadata.create_all(bind=engine)
    LOG.info("connected to %s, serving", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title="Archive Records API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
    expose_headers=["Content-Length"],
)

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, lambda r, e: Response("Too Many Requests", status_code=429))
if not settings.testing:
    app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(ArchiveError)
async def archive_error_handler(request: Request, exc: ArchiveError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code, headers=headers)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    LOG.error("unhandled storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": "Storage unavailable"}, status_code=503)


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    endpoint = request.url.path
    REQUEST_COUNT.labels(request.method, endpoint).inc()
    REQUEST_LATENCY.labels(endpoint).observe(time.time() - start)
    return response

@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
def health():
    try:
        check_connection()
    except SQLAlchemyError:
        LOG.warning("health check could not reach the database")
        return JSONResponse({"status": "degraded", "db": "unreachable"}, status_code=503)
    return {"status": "ok", "db": "connected"}


API_ROUTERS = (
    auth.router,
    test_items.router,
    studies.router,
    facility_docs.router,
    audit.router,
)

for router in API_ROUTERS:
    app.include_router(router)


PUBLIC_PATHS = {
    "/api/auth/signup",
    "/api/auth/login",
    "/api/auth/signin",
}


def api_routes():
    """Every endpoint mounted from ``API_ROUTERS``; their paths carry the prefix."""
    from fastapi.routing import APIRoute

    for router in API_ROUTERS:
        for route in router.routes:
            if isinstance(route, APIRoute):
                yield route


def _dependency_calls(dependant):
    for dep in dependant.dependencies:
        yield dep.call
        yield from _dependency_calls(dep)


def audit_routes():
    from .auth import get_current_user

    for route in api_routes():
        if route.path not in PUBLIC_PATHS:
            if get_current_user not in set(_dependency_calls(route.dependant)):
                raise RuntimeError(f"Route {route.path} missing authentication")


audit_routes()
