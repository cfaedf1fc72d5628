# files_manager/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    port: int = 5000
    log_level: str = "INFO"

    # metadata database
    db_driver: str = "sqlite"
    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "files_manager"
    db_user: str = ""
    db_password: str = ""
    database_url: str | None = None

    # session cache
    redis_host: str = "localhost"
    redis_port: int = 6379
    session_ttl: int = 60 * 60 * 24

    # content storage
    storage_backend: Literal["local", "s3"] = "local"
    folder_path: str = "/tmp/files_manager"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_region: str | None = None
    aws_s3_bucket_name: str | None = None

    celery_broker_url: str | None = None

    # "sha1" keeps hashes readable by existing deployments
    password_scheme: Literal["sha1", "werkzeug"] = "sha1"

    # Tell pydantic-settings to load from .env at project root
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any extra stuff in .env
    )

    @property
    def database_url_resolved(self) -> str:
        if self.database_url:
            return self.database_url
        if self.db_driver == "sqlite":
            return f"sqlite:///./{self.db_database}.db"
        credentials = self.db_user
        if self.db_password:
            credentials = f"{credentials}:{self.db_password}"
        if credentials:
            credentials = f"{credentials}@"
        return f"{self.db_driver}://{credentials}{self.db_host}:{self.db_port}/{self.db_database}"

    @property
    def broker_url(self) -> str:
        return self.celery_broker_url or f"redis://{self.redis_host}:{self.redis_port}/1"


@lru_cache
def get_settings() -> Settings:
    return Settings()
