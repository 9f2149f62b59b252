from contextlib import asynccontextmanager
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import settings
from .errors import LectionaryLoadError, UnknownPlanError
from .lectionary_engine import LectionaryResolver
from .routers import calendar, health, psalter, readings


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    force=True,
)
logger = logging.getLogger("office.api")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request_id = uuid4().hex[:8]
        started_at = time.perf_counter()

        method = request.method
        path = request.url.path
        query = request.url.query
        full_path = f"{path}?{query}" if query else path

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started_at) * 1000
            logger.exception("API %s %s | status=500 | t=%.1fms | req_id=%s", method, full_path, elapsed_ms, request_id)
            raise

        elapsed_ms = (time.perf_counter() - started_at) * 1000
        logger.info(
            "API %s %s | status=%s | t=%.1fms | req_id=%s",
            method,
            full_path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


logging.getLogger("uvicorn.access").disabled = True
logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One resolver per process; it owns the lectionary table cache.
    app.state.resolver = LectionaryResolver()
    if settings.lectionary_base_url:
        logger.info("Lectionary tables from %s", settings.lectionary_base_url)
    else:
        logger.info("Lectionary tables from %s", settings.lectionary_data_dir)
    yield


app = FastAPI(title="Daily Office API", version="0.1.0", lifespan=lifespan)


@app.exception_handler(UnknownPlanError)
async def unknown_plan_handler(request: Request, exc: UnknownPlanError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(LectionaryLoadError)
async def lectionary_load_handler(request: Request, exc: LectionaryLoadError) -> JSONResponse:
    logger.error("Lectionary unavailable on %s %s | plan=%s", request.method, request.url.path, exc.plan_id)
    return JSONResponse(status_code=503, content={"detail": "Lectionary table unavailable"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_middleware(RequestLogMiddleware)

app.include_router(health.router)
app.include_router(calendar.router)
app.include_router(psalter.router)
app.include_router(readings.router)
