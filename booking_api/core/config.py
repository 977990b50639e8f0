# booking_api/core/config.py
import logging
from typing import Annotated, Literal, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Alembic and helper scripts read DB_* straight from the environment.
load_dotenv()

logger = logging.getLogger(__name__)

_DEV_SECRET_KEY = "dev-secret-key-not-for-production"


class Settings(BaseSettings):
    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    # Tokens
    secret_key: SecretStr = Field(
        default=SecretStr(_DEV_SECRET_KEY),
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # Database
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: SecretStr = SecretStr("")
    db_name: str = "booking_system"
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: int = 2  # seconds to wait for a pooled connection
    db_pool_recycle: int = 30
    db_echo: bool = False

    # HTTP
    api_prefix: str = ""
    cors_allowed_origins: Annotated[list[str], NoDecode] = ["*"]
    static_dir: Optional[str] = "public"

    # Errors
    expose_error_details: Optional[bool] = None

    # "Today" for the past-booking rule; server local date when unset
    business_timezone: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip().startswith("["):
            return [token.strip() for token in value.split(",") if token.strip()]
        return value

    @field_validator("api_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @model_validator(mode="after")
    def _require_secret_in_production(self) -> "Settings":
        if self.is_production and self.secret_key.get_secret_value() == _DEV_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def show_error_details(self) -> bool:
        if self.expose_error_details is not None:
            return self.expose_error_details
        return not self.is_production

    def get_database_url(self) -> str:
        """Return DATABASE_URL, or build a PostgreSQL URL from the DB_* parts."""
        if self.database_url:
            return self.database_url
        password = quote_plus(self.db_password.get_secret_value())
        credentials = f"{self.db_user}:{password}" if password else self.db_user
        return (
            f"postgresql+psycopg2://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
        )


settings = Settings()
