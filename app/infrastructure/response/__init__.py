"""Response body helpers"""

from .response_formatter import (
    product_response,
    validation_error_response,
    error_response,
    not_found_response,
)

__all__ = [
    "product_response",
    "validation_error_response",
    "error_response",
    "not_found_response",
]
