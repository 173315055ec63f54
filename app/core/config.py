"""
Configuration settings for the Ship Shape price-list API.
"""

from pathlib import Path
from typing import List, Set

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "Ship Shape API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    RELOAD: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Database
    DATABASE_URL: str = "sqlite:///./data/app.db"
    AUTO_CREATE_TABLES: bool = True

    # Files
    DATA_DIR: str = "./data"
    TIMEZONE: str = "Australia/Sydney"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # CORS - comma-separated
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    CORS_ALLOW_CREDENTIALS: bool = True

    # Sessions
    SESSION_COOKIE_NAME: str = "sid"
    SESSION_MAX_AGE_SECONDS: int = 7 * 24 * 60 * 60
    SESSION_COOKIE_SECURE: bool = False
    SESSION_BACKEND: str = "memory"

    # Auth
    BCRYPT_ROUNDS: int = 10
    ADMIN_EMAILS: str = ""
    DISABLE_PASSWORDS: bool = False

    # Named-business discount shown on the public price list
    NAMED_BUSINESS_NAME: str = "MGIS"
    NAMED_BUSINESS_DISCOUNT: float = 0.15

    @property
    def app_name(self) -> str:
        return self.APP_NAME

    @property
    def app_version(self) -> str:
        return self.APP_VERSION

    @property
    def debug(self) -> bool:
        return self.DEBUG

    @property
    def host(self) -> str:
        return self.HOST

    @property
    def port(self) -> int:
        return self.PORT

    @property
    def reload(self) -> bool:
        return self.RELOAD

    @property
    def log_format(self) -> str:
        return self.LOG_FORMAT

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def cors_allow_credentials(self) -> bool:
        return self.CORS_ALLOW_CREDENTIALS

    @property
    def admin_emails(self) -> Set[str]:
        """Lowercased admin allowlist; accepts commas or whitespace as separators"""
        raw = self.ADMIN_EMAILS.replace(",", " ")
        return {e.strip().lower() for e in raw.split() if e.strip()}

    @property
    def passwords_disabled(self) -> bool:
        """Password bypass is never honoured in production"""
        return self.DISABLE_PASSWORDS and self.ENVIRONMENT.lower() != "production"

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR)


settings = Settings()


def get_data_dir() -> Path:
    """Dependency returning the data directory for rule files and snapshots"""
    return settings.data_path
