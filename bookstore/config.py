"""
Application configuration.

Settings are read once from the environment (and `.env`) at startup and
handed to the components that need them.
"""

import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import URL


DEFAULT_SQLITE_URL = "sqlite+aiosqlite:///./bookstore.db"


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: Optional[str] = None
    db_host: Optional[str] = None
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "bookstore"
    database_echo: bool = False

    # Web server
    web_host: str = "0.0.0.0"
    web_port: int = 8000

    # Tokens
    jwt_secret_key: str = "change-me-in-production"
    jwt_issuer: str = "bookstore-api"
    jwt_expire_minutes: int = 60

    # Order expiration
    order_expiry_minutes: int = 15
    order_sweep_interval_seconds: float = 120.0
    order_sweeper_enabled: bool = True

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            db_host=os.getenv("DB_HOST"),
            db_port=int(os.getenv("DB_PORT", cls.db_port)),
            db_user=os.getenv("DB_USER", cls.db_user),
            db_password=os.getenv("DB_PASS", cls.db_password),
            db_name=os.getenv("DB_NAME", cls.db_name),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            web_host=os.getenv("WEB_HOST", cls.web_host),
            web_port=int(os.getenv("WEB_PORT", cls.web_port)),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", cls.jwt_secret_key),
            jwt_issuer=os.getenv("JWT_ISSUER", cls.jwt_issuer),
            jwt_expire_minutes=int(os.getenv("JWT_EXPIRE_DURATION", cls.jwt_expire_minutes)),
            order_expiry_minutes=int(os.getenv("ORDER_EXPIRY_MINUTES", cls.order_expiry_minutes)),
            order_sweep_interval_seconds=float(
                os.getenv("ORDER_SWEEP_INTERVAL_SECONDS", cls.order_sweep_interval_seconds)
            ),
            order_sweeper_enabled=os.getenv("ORDER_SWEEPER_ENABLED", "true").lower() == "true",
            environment=os.getenv("BOOKSTORE_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )

    @property
    def sqlalchemy_url(self) -> str:
        """
        Resolve the database URL.

        An explicit DATABASE_URL wins; otherwise DB_HOST selects MySQL,
        and with neither set a local SQLite file is used.
        """
        if self.database_url:
            return self.database_url

        if self.db_host:
            return URL.create(
                "mysql+aiomysql",
                username=self.db_user,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
                query={"charset": "utf8mb4"},
            ).render_as_string(hide_password=False)

        return DEFAULT_SQLITE_URL
