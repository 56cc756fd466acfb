import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging

logger = logging.getLogger("access")

SILENT_PATHS = ["/", "/health", "/liveness", "/readiness"]


class AccessLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        x_forwarded_for = request.headers.get("x-forwarded-for")
        ip = (
            x_forwarded_for.split(",")[0].strip()
            if x_forwarded_for
            else (request.client.host if request.client else "-")
        )

        path = request.url.path
        method = request.method
        user_agent = request.headers.get("user-agent", "")
        user_id = request.headers.get("x-user-id")

        # Skip probes (no user-agent on health endpoints)
        if path in SILENT_PATHS and not user_agent:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)

        logger.info(
            f"🛰️ {method} {path} -> {response.status_code}",
            extra={
                "ip": ip,
                "path": path,
                "method": method,
                "user_agent": user_agent,
                "user_id": user_id,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
            },
        )
        return response
