"""
Unit tests for input helpers.
"""

import base64

import pytest

from bookstore.utils import encode_base64, translate_validation_errors, validate_password


class TestPasswordPolicy:
    """Tests for the password rules."""

    def test_strong_password_passes(self):
        assert validate_password("Secret123!") == "Secret123!"

    @pytest.mark.parametrize(
        "password, fragment",
        [
            ("Se1!", "at least 8"),
            ("secret123!", "uppercase"),
            ("SECRET123!", "lowercase"),
            ("SecretPass!", "number"),
            ("Secret 123!", "spaces"),
            ("Secret1234", "symbol"),
        ],
    )
    def test_weak_password_rejected(self, password, fragment):
        with pytest.raises(ValueError, match=fragment):
            validate_password(password)


class TestTranslateValidationErrors:
    """Tests for the field -> message map."""

    def test_missing_field(self):
        errors = [{"type": "missing", "loc": ("body", "name"), "msg": "Field required"}]

        assert translate_validation_errors(errors) == {"name": "name is required"}

    def test_nested_location_is_dotted(self):
        errors = [
            {
                "type": "less_than_equal",
                "loc": ("body", "items", 0, "quantity"),
                "msg": "Input should be less than or equal to 5",
                "ctx": {"le": 5},
            }
        ]

        assert translate_validation_errors(errors) == {"items.0.quantity": "quantity must be at most 5"}

    def test_value_error_prefix_removed(self):
        errors = [
            {
                "type": "value_error",
                "loc": ("body", "password"),
                "msg": "Value error, password must contain at least one symbol",
            }
        ]

        assert translate_validation_errors(errors) == {"password": "password must contain at least one symbol"}

    def test_email_error(self):
        errors = [{"type": "value_error", "loc": ("body", "email"), "msg": "value is not a valid email address"}]

        assert translate_validation_errors(errors) == {"email": "invalid email format"}

    def test_first_error_per_field_wins(self):
        errors = [
            {"type": "missing", "loc": ("body", "title"), "msg": "Field required"},
            {"type": "string_type", "loc": ("body", "title"), "msg": "Input should be a valid string"},
        ]

        assert translate_validation_errors(errors) == {"title": "title is required"}


class TestFileEncoding:
    def test_encode_base64(self):
        assert base64.b64decode(encode_base64(b"\x89PNG")) == b"\x89PNG"
