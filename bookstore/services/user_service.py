"""
Account registration and login.
"""

from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bookstore.exceptions import ConflictError, InfrastructureError, ValidationError
from bookstore.security import TokenService, get_password_hash, verify_password
from bookstore.storage import Database, User, UserRepository


@dataclass
class AuthResult:
    """Successful login: signed token, its expiry and the user."""

    token: str
    expires_at: datetime
    user: User


class UserService:
    """Registers users and exchanges credentials for access tokens."""

    def __init__(
        self,
        database: Database,
        user_repository: UserRepository,
        token_service: TokenService,
    ):
        self.database = database
        self.users = user_repository
        self.tokens = token_service

    async def register(self, name: str, email: str, password: str) -> User:
        """
        Create a user with a hashed password.

        Raises:
            ConflictError: If the email is already registered.
        """
        try:
            async with self.database.transaction() as session:
                if await self.users.find_by_email(session, email) is not None:
                    raise ConflictError("email", "email already registered")

                user = User(
                    name=name,
                    email=email,
                    password_hash=get_password_hash(password),
                )
                await self.users.create(session, user)
        except IntegrityError as e:
            # The unique index catches a concurrent registration
            logger.warning("Email registered concurrently")
            raise ConflictError("email", "email already registered") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to register user: {e}")
            raise InfrastructureError("failed to register user") from e

        logger.info(f"Registered user {user.id}")
        return user

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Verify credentials and issue a token.

        Raises:
            ValidationError: On unknown email or wrong password. Both cases
                produce the same message.
        """
        try:
            async with self.database.session() as session:
                user = await self.users.find_by_email(session, email)
        except SQLAlchemyError as e:
            logger.error(f"Failed to find user: {e}")
            raise InfrastructureError() from e

        if user is None or not verify_password(password, user.password_hash):
            raise ValidationError(
                errors={
                    "email": "invalid email or password",
                    "password": "invalid email or password",
                },
            )

        token, expires_at = self.tokens.create_token(user.id)
        return AuthResult(token=token, expires_at=expires_at, user=user)
