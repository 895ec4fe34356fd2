"""Request size middleware for upload endpoints."""
from typing import Optional

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from src.config import settings
from src.logging_config import get_logger

logger = get_logger("middleware")


class UploadSizeMiddleware(BaseHTTPMiddleware):
    """Reject request bodies whose declared size exceeds the upload limit."""

    def __init__(self, app, max_bytes: Optional[int] = None):
        super().__init__(app)
        self.max_bytes = max_bytes if max_bytes is not None else settings.max_upload_bytes

    async def dispatch(self, request: StarletteRequest, call_next):
        if request.method in ("POST", "PUT", "PATCH"):
            content_length = request.headers.get("content-length")
            if content_length:
                try:
                    size = int(content_length)
                except ValueError:
                    return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length header"})

                if size > self.max_bytes:
                    logger.warning("Rejected %s %s: %d bytes", request.method, request.url.path, size)
                    return JSONResponse(
                        status_code=413,
                        content={
                            "detail": f"Request body too large. Got {size} bytes, maximum allowed is {self.max_bytes}."
                        }
                    )

        return await call_next(request)
