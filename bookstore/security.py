"""
Password hashing and signed access tokens.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from bookstore.exceptions import UnauthorizedError


ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass
class TokenClaims:
    """Verified contents of an access token."""

    user_id: int
    issuer: str
    expires_at: datetime


class TokenService:
    """
    Issues and verifies HS256 JWTs carrying the user id.

    Usage:
        tokens = TokenService(secret_key="s3cret", issuer="bookstore-api", expire_minutes=60)
        token, expires_at = tokens.create_token(user_id=7)
        claims = tokens.verify_token(token)
    """

    def __init__(self, secret_key: str, issuer: str, expire_minutes: int = 60):
        self.secret_key = secret_key
        self.issuer = issuer
        self.expire_delta = timedelta(minutes=expire_minutes)

    def create_token(self, user_id: int) -> tuple[str, datetime]:
        """Sign a token for `user_id`; returns the token and its expiry."""
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + self.expire_delta
        claims = {
            "user_id": user_id,
            "sub": str(user_id),
            "iss": self.issuer,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)
        return token, expires_at

    def verify_token(self, token: str) -> TokenClaims:
        """
        Validate signature, issuer and expiry.

        Raises:
            UnauthorizedError: If the token cannot be trusted.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
            )
        except ExpiredSignatureError:
            raise UnauthorizedError("token has expired")
        except JWTError:
            raise UnauthorizedError("invalid or expired token")

        user_id = payload.get("user_id")
        if not isinstance(user_id, int):
            raise UnauthorizedError("invalid or expired token")

        return TokenClaims(
            user_id=user_id,
            issuer=payload["iss"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
