import time
import logging
from urllib.parse import urlencode
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

WEBHOOK_PREFIXES = ("/click/", "/api/click/")

# Never written to the log, wherever they appear
REDACTED_PARAMS = {"sign_string"}

def is_webhook(path: str) -> bool:
    return path.startswith(WEBHOOK_PREFIXES)

def redacted_query(request: Request) -> str:
    params = [
        (key, "***" if key in REDACTED_PARAMS else value)
        for key, value in request.query_params.multi_items()
    ]
    return urlencode(params)

class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and response.

    Webhook calls are tagged ``[WEBHOOK]`` with their content type and
    length. Request bodies are never read here, so the signed form fields
    Click posts stay out of the access log.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path
        query = redacted_query(request)
        target = f"{path}?{query}" if query else path

        if is_webhook(path):
            logger.info(
                f"Request: {request.method} {target} from {client_ip} [WEBHOOK] "
                f"content_type={request.headers.get('content-type', 'unknown')} "
                f"length={request.headers.get('content-length', '0')}"
            )
        else:
            logger.info(f"Request: {request.method} {target} from {client_ip}")

        response = await call_next(request)

        process_time = time.time() - start_time
        tag = " [WEBHOOK]" if is_webhook(path) else ""
        logger.info(
            f"Response: {request.method} {path} "
            f"status={response.status_code} time={process_time:.4f}s{tag}"
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response

class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging errors"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Error processing {request.method} {request.url.path}: {str(e)}",
                exc_info=True
            )
            # Re-raise the exception to be handled by FastAPI
            raise
