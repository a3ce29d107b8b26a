from shared.middleware.request_id import (
    RequestIdLogFilter,
    get_request_id,
    request_id_middleware,
)
from shared.middleware.error_handler import error_envelope_middleware

__all__ = [
    "RequestIdLogFilter",
    "get_request_id",
    "request_id_middleware",
    "error_envelope_middleware",
]
