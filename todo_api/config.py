import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError


DEFAULT_LISTEN_ADDRESS = "0.0.0.0:8080"
DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost:5432/todo"


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used"""


class Settings(BaseModel):
    """Service configuration: where to listen and which database to use"""

    listen_address: str = DEFAULT_LISTEN_ADDRESS
    database_url: str = DEFAULT_DATABASE_URL
    database_user: Optional[str] = None
    database_password: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment (and a .env file, if any)"""
        load_dotenv()
        return cls(
            listen_address=os.getenv("LISTEN_ADDRESS") or DEFAULT_LISTEN_ADDRESS,
            database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
            database_user=os.getenv("DATABASE_USER") or None,
            database_password=os.getenv("DATABASE_PASSWORD") or None,
        )

    @property
    def host(self) -> str:
        host, _, _ = self.listen_address.rpartition(":")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        _, _, port = self.listen_address.rpartition(":")
        try:
            value = int(port)
        except ValueError:
            raise ConfigError(f"Invalid listen_address: {self.listen_address!r}")
        if not 0 < value < 65536:
            raise ConfigError(f"Port out of range in listen_address: {self.listen_address!r}")
        return value

    def sqlalchemy_url(self) -> URL:
        """Database URL with the async driver and the configured credentials"""
        raw = self.database_url
        # Hosted Postgres hands out plain postgres:// URLs
        if raw.startswith("postgres://"):
            raw = raw.replace("postgres://", "postgresql+asyncpg://", 1)
        elif raw.startswith("postgresql://"):
            raw = raw.replace("postgresql://", "postgresql+asyncpg://", 1)

        try:
            url = make_url(raw)
        except ArgumentError as e:
            raise ConfigError(f"Invalid database_url: {e}") from e

        if self.database_user:
            url = url.set(username=self.database_user)
        if self.database_password:
            url = url.set(password=self.database_password)
        return url
