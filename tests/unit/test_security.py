"""
Unit tests for password hashing, tokens and login.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from bookstore.exceptions import ConflictError, UnauthorizedError, ValidationError
from bookstore.security import (
    ALGORITHM,
    TokenService,
    get_password_hash,
    verify_password,
)
from bookstore.services import UserService
from bookstore.storage import UserRepository


class StaleUserRepository(UserRepository):
    """Email lookup that always misses, as when a concurrent insert has not committed yet."""

    async def find_by_email(self, session, email):
        return None


class TestPasswordHashing:
    """Tests for bcrypt hashing."""

    def test_hash_verifies(self):
        hashed = get_password_hash("Secret123!")

        assert hashed != "Secret123!"
        assert verify_password("Secret123!", hashed)
        assert not verify_password("Secret123?", hashed)


class TestTokenService:
    """Tests for signed access tokens."""

    def test_round_trip(self, token_service):
        token, expires_at = token_service.create_token(7)

        claims = token_service.verify_token(token)

        assert claims.user_id == 7
        assert claims.issuer == token_service.issuer
        assert abs((claims.expires_at - expires_at).total_seconds()) < 1

    def test_wrong_secret_rejected(self, token_service):
        token, _ = token_service.create_token(7)
        other = TokenService(secret_key="another-secret", issuer=token_service.issuer)

        with pytest.raises(UnauthorizedError):
            other.verify_token(token)

    def test_wrong_issuer_rejected(self, token_service):
        token, _ = token_service.create_token(7)
        other = TokenService(secret_key=token_service.secret_key, issuer="someone-else")

        with pytest.raises(UnauthorizedError):
            other.verify_token(token)

    def test_expired_token_rejected(self, token_service):
        past = datetime.now(timezone.utc) - timedelta(minutes=10)
        token = jwt.encode(
            {
                "user_id": 7,
                "sub": "7",
                "iss": token_service.issuer,
                "iat": past - timedelta(minutes=5),
                "exp": past,
            },
            token_service.secret_key,
            algorithm=ALGORITHM,
        )

        with pytest.raises(UnauthorizedError) as exc_info:
            token_service.verify_token(token)

        assert exc_info.value.message == "token has expired"

    def test_garbage_rejected(self, token_service):
        with pytest.raises(UnauthorizedError):
            token_service.verify_token("not-a-token")


@pytest.mark.asyncio
class TestUserService:
    """Tests for registration and login."""

    async def test_login_returns_token_for_user(self, user_service, token_service, customer):
        result = await user_service.login("alice@example.com", "Secret123!")

        assert result.user.id == customer.id
        assert token_service.verify_token(result.token).user_id == customer.id

    async def test_password_is_not_stored_in_plain_text(self, customer):
        assert customer.password_hash != "Secret123!"

    async def test_duplicate_email_conflicts(self, user_service, customer):
        with pytest.raises(ConflictError) as exc_info:
            await user_service.register("Alice Again", "alice@example.com", "Secret123!")

        assert "email" in exc_info.value.errors

    async def test_unique_index_conflict_maps_to_409(self, database, token_service, customer):
        service = UserService(database, StaleUserRepository(), token_service)

        with pytest.raises(ConflictError) as exc_info:
            await service.register("Alice Again", "alice@example.com", "Secret123!")

        assert exc_info.value.status_code == 409
        assert exc_info.value.errors == {"email": "email already registered"}

    async def test_wrong_password(self, user_service, customer):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.login("alice@example.com", "Wrong123!")

        assert set(exc_info.value.errors) == {"email", "password"}

    async def test_unknown_email_looks_like_wrong_password(self, user_service):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.login("nobody@example.com", "Secret123!")

        assert exc_info.value.errors["email"] == "invalid email or password"
