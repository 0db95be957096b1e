import math

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from fastapi.responses import JSONResponse

from landmarks.core.exceptions import RateLimitError
from landmarks.models.dto import RateLimitErrorResponse, dump
from landmarks.services.rate_limiter import RateLimiter
from landmarks.utils.security import get_client_ip


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client fixed-window throttling for the upstream-backed routes.
    Rejected requests never reach the route handlers, so they never reach upstream.
    """
    def __init__(self, app, path_prefix: str = "/api/landmarks"):
        super().__init__(app)
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        limiter: RateLimiter = request.app.state.rate_limiter
        client_key = get_client_ip(request)
        try:
            entry = limiter.hit(client_key)
        except RateLimitError as e:
            body = RateLimitErrorResponse(error=e.error, message=e.message, retry_after=e.retry_after)
            return JSONResponse(
                status_code=e.status_code,
                content=dump(body),
                headers={"Retry-After": str(e.retry_after)},
            )

        # Snapshot before the handler runs; entry is shared with concurrent requests from this client
        quota_headers = {
            "X-RateLimit-Limit": str(limiter.max_requests),
            "X-RateLimit-Remaining": str(limiter.remaining(entry)),
            "X-RateLimit-Reset": str(math.ceil(entry.window_reset_at)),
        }
        response = await call_next(request)
        response.headers.update(quota_headers)
        return response
