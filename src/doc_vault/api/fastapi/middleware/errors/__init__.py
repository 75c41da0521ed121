from .catchall import CatchAllExceptionMiddleware
from .handlers import envelope_response, register_error_handlers

__all__ = ["CatchAllExceptionMiddleware", "envelope_response", "register_error_handlers"]
