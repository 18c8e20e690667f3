"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    # Deployment stage: development | dev | prod
    # development echoes SQL and syncs the schema on connect
    environment: str = "development"

    # Relational store
    # A full SQLAlchemy URL wins over the discrete DB_* fields
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "content"
    db_pool_size: int = 5
    db_max_overflow: int = 15
    db_pool_timeout: float = 10.0  # seconds to wait for a pooled connection
    db_pool_recycle: int = 30  # seconds before an idle connection is recycled

    # Routing
    route_prefix: str = "/content"

    # Media storage
    media_bucket: str = "content-media"
    media_public_base_url: str = ""  # Empty = https://<bucket>.s3.<region>.amazonaws.com
    media_max_bytes: int = 5 * 1024 * 1024
    aws_region: str = "us-east-1"

    # Admin console
    admin_api_base_url: str = "http://localhost:8000/content"
    admin_request_timeout: float = 30.0
    notification_ttl_seconds: float = 4.0

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def sqlalchemy_url(self) -> str:
        """Connection URL for the async engine."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def db_ssl(self) -> bool:
        """Deployed stages reach the database over TLS."""
        return self.environment in ("dev", "prod")

    @property
    def media_base_url(self) -> str:
        if self.media_public_base_url:
            return self.media_public_base_url.rstrip("/")
        return f"https://{self.media_bucket}.s3.{self.aws_region}.amazonaws.com"


@lru_cache
def get_settings() -> Settings:
    return Settings()
