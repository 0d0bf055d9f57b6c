from pydantic_settings import BaseSettings
from typing import List, Union, Optional
from pydantic import field_validator


class Settings(BaseSettings):
    # Database
    POSTGRES_USER: str = "directory"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "campus_directory"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # e.g. sqlite:///./directory.db

    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL from components."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Application
    SECRET_KEY: str = "change-me"
    DEBUG: bool = False
    DEV_MODE: bool = False
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            # Split by comma or keep as single item
            return [origin.strip() for origin in v.split(",")]
        return v

    # Admin credentials (single admin account)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""

    # Rate limiting
    RATE_LIMIT_DEFAULT: str = "100/minute"

    # Directory
    DEFAULT_CATEGORY_COLOR: str = "blue"
    BREADCRUMB_MAX_DEPTH: int = 8  # Traversal cap before reporting an inconsistency

    # Public intake (slowapi limit strings)
    SUBMISSION_RATE_LIMIT: str = "5/15 minutes"
    FEEDBACK_RATE_LIMIT: str = "5/hour"

    # Fetch client
    DIRECTORY_API_URL: str = "http://localhost:8000"
    DIRECTORY_FETCH_TIMEOUT: float = 30.0

    # Cookie Security
    COOKIE_SECURE: bool = True  # Set to False for local development without HTTPS
    ENABLE_HSTS: bool = True
    HSTS_MAX_AGE: int = 31536000  # 1 year in seconds
    HSTS_INCLUDE_SUBDOMAINS: bool = True

    @property
    def is_production(self) -> bool:
        """Detect if running in production environment."""
        return self.COOKIE_SECURE and not self.DEBUG and not self.DEV_MODE

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
