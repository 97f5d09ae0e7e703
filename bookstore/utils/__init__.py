"""
Shared helpers for request handling.
"""

from bookstore.utils.files import encode_base64, upload_to_base64
from bookstore.utils.validation import translate_validation_errors, validate_password

__all__ = [
    "encode_base64",
    "upload_to_base64",
    "translate_validation_errors",
    "validate_password",
]
