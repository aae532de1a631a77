"""Pydantic Settings for the profile API."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # PostgreSQL (POSTGRES_URL wins over DATABASE_URL)
    postgres_url: str = ""
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout: float = Field(default=60.0, description="Seconds to establish a connection")
    db_command_timeout: float = Field(default=30.0, description="Seconds per statement")

    # Web
    web_host: str = "0.0.0.0"
    web_port: int = 5000
    expose_error_details: bool = Field(
        default=True, description="Include str(exc) in 500 response bodies"
    )

    # Operational
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def database_dsn(self) -> str | None:
        """First non-empty connection string, or None."""
        for candidate in (self.postgres_url, self.database_url):
            if candidate and candidate.strip():
                return candidate.strip()
        return None


settings = Settings()
