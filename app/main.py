from contextlib import asynccontextmanager
import asyncio
import logging
import sqlalchemy
from fastapi import FastAPI, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded

from app.core.database import database
from app.api import analyze, feedback, quota, upload
from app.middlewares.access_logger import AccessLoggingMiddleware
from app.middlewares.logging import setup_logging
from app.middlewares.security import (
    SecurityHeadersMiddleware,
    add_cors_middleware,
    add_rate_limit,
)
from app.utils.exception_handlers import (
    generic_exception_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
)
from app.utils.telemetry import setup_observability
from app.core.config import settings

logger = logging.getLogger(__name__)

is_ready = False


@asynccontextmanager
async def lifespan(app: FastAPI):
    global is_ready

    max_retries = 10
    delay_seconds = 3

    for attempt in range(max_retries):
        try:
            async with database.engine.connect() as conn:
                await conn.execute(sqlalchemy.text("SELECT 1"))
            logger.info("✅ Successfully connected to Postgres!")
            is_ready = True
            break
        except Exception as e:
            logger.warning(
                f"❌ Postgres not ready (attempt {attempt + 1}/{max_retries}) - {e}"
            )
            await asyncio.sleep(delay_seconds)
    else:
        raise RuntimeError("🚨 Could not connect to Postgres after retries!")

    if not settings.OPENAI_API_KEY:
        logger.warning("⚠️ OPENAI_API_KEY is not set; every model call will fail")

    yield

    is_ready = False
    await database.engine.dispose()


# ✅ SETUP LOGGING FIRST
setup_logging()


app = FastAPI(
    title="Feedback Insights API",
    description="Batch feedback ingestion with AI sentiment, topic and summary analysis",
    version="1.0.0",
    lifespan=lifespan,
    debug=(not settings.ENV == "production"),
)

if settings.ENV == "production":
    setup_observability(app, sqlalchemy_engine=database.sync_engine)


# ===============
# Middlewares
# ===============
add_cors_middleware(app)
add_rate_limit(app)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(AccessLoggingMiddleware)


# ===============
# Routers
# ===============
app.include_router(analyze.router)
app.include_router(upload.router)
app.include_router(feedback.router)
app.include_router(quota.router)


# ===============
# Health Checks
# ===============
@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/liveness", status_code=204)
def liveness():
    return Response(status_code=204)


@app.api_route("/readiness", methods=["GET", "HEAD"], status_code=200)
def readiness():
    return {"status": "ready"} if is_ready else Response(status_code=503)


# ===============
# Global Error Handlers
# ===============
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)
