from .access_log import AccessLogMiddleware
from .errors import CatchAllExceptionMiddleware, envelope_response, register_error_handlers
from .request_size_limit import MULTIPART_OVERHEAD, RequestSizeLimitMiddleware
from .security_headers import SecurityHeadersMiddleware
from .timeout import BodyReadTimeoutMiddleware, HandlerTimeoutMiddleware

__all__ = [
    "AccessLogMiddleware",
    "BodyReadTimeoutMiddleware",
    "CatchAllExceptionMiddleware",
    "HandlerTimeoutMiddleware",
    "MULTIPART_OVERHEAD",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
    "envelope_response",
    "register_error_handlers",
]
