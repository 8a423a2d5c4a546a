# app/config/settings.py
import logging
import secrets
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Entornos donde se permite arrancar sin SECRET_KEY
_RELAXED_ENVIRONMENTS = {"development", "test"}


class Settings(BaseSettings):
    # App Info
    app_name: str = "RedCap Courier API"
    version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./redcap.db"

    # Security
    secret_key: Optional[str] = None
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 10080
    password_hash_rounds: int = 12

    # Password reset
    reset_token_expire_minutes: int = 60
    expose_reset_token: Optional[bool] = None

    # Bookings
    tracking_code_max_attempts: int = 5

    # Server
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @model_validator(mode="after")
    def check_security(self):
        if not 4 <= self.password_hash_rounds <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")

        if not self.secret_key:
            if self.environment not in _RELAXED_ENVIRONMENTS:
                raise ValueError(
                    f"SECRET_KEY must be set when ENVIRONMENT={self.environment}"
                )
            # Solo desarrollo: secreto efímero, los tokens no sobreviven reinicios
            self.secret_key = secrets.token_urlsafe(48)
            logger.warning("SECRET_KEY not set, using an ephemeral development secret")

        if self.expose_reset_token is None:
            self.expose_reset_token = not self.is_production
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def database_url_with_ssl(self) -> str:
        """Agregar SSL para conexiones de producción"""
        if self.database_url and "render" in self.database_url:
            if "sslmode=" not in self.database_url:
                return f"{self.database_url}?sslmode=require"
        return self.database_url

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'


settings = Settings()
