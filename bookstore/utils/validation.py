"""
Validation helpers.

- Password policy
- Translation of pydantic error lists into a flat field -> message map
"""

import re
from typing import Any, Iterable

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile(r"[^A-Za-z0-9]")
_WHITESPACE = re.compile(r"\s")

# Location prefixes FastAPI puts in front of the field name.
_LOCATION_PARTS = {"body", "query", "path", "header", "cookie", "form"}


def validate_password(password: str) -> str:
    """
    Enforce the password policy.

    Rules:
    - at least 8 characters
    - upper case, lower case, digit and symbol present
    - no whitespace

    Raises:
        ValueError: Describing the first rule that failed.
    """
    if len(password) < 8:
        raise ValueError("password must be at least 8 characters long")
    if not _UPPER.search(password):
        raise ValueError("password must contain at least one uppercase letter")
    if not _LOWER.search(password):
        raise ValueError("password must contain at least one lowercase letter")
    if not _DIGIT.search(password):
        raise ValueError("password must contain at least one number")
    if _WHITESPACE.search(password):
        raise ValueError("password must not contain spaces")
    if not _SYMBOL.search(password):
        raise ValueError("password must contain at least one symbol")
    return password


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc if part not in _LOCATION_PARTS]
    if not parts:
        return "body"
    # Nested list items read as items.0.quantity
    return ".".join(parts)


def translate_validation_errors(errors: Iterable[dict]) -> dict[str, str]:
    """
    Convert pydantic/FastAPI validation errors into {field: message}.

    Only the first error per field is kept.
    """
    translated: dict[str, str] = {}

    for error in errors:
        field = _field_name(error.get("loc", ()))
        if field in translated:
            continue

        name = field.rsplit(".", 1)[-1]
        error_type = error.get("type", "")
        ctx = error.get("ctx") or {}

        if error_type == "missing":
            message = f"{name} is required"
        elif error_type == "string_too_short":
            message = f"{name} must be at least {ctx.get('min_length')} characters"
        elif error_type == "string_too_long":
            message = f"{name} must be at most {ctx.get('max_length')} characters"
        elif error_type == "too_short":
            message = f"{name} must contain at least {ctx.get('min_length')} item(s)"
        elif error_type in ("greater_than", "greater_than_equal"):
            bound = ctx.get("gt", ctx.get("ge"))
            op = "greater than" if error_type == "greater_than" else "at least"
            message = f"{name} must be {op} {bound}"
        elif error_type in ("less_than", "less_than_equal"):
            bound = ctx.get("lt", ctx.get("le"))
            op = "less than" if error_type == "less_than" else "at most"
            message = f"{name} must be {op} {bound}"
        elif error_type == "value_error" and name == "email":
            message = "invalid email format"
        elif error_type == "value_error":
            message = str(error.get("msg", "")).removeprefix("Value error, ")
        else:
            message = f"invalid value for {name}"

        translated[field] = message

    return translated
