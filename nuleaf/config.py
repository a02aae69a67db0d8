"""Service configuration from NULEAF_* environment variables or a .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from nuleaf.pagination import DEFAULT_LIMIT, MAX_LIMIT
from nuleaf.repository import RepositoryConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NULEAF_", env_file=".env", env_file_encoding="utf-8"
    )

    project_name: str = "Nuleaf Source API"
    database_url: str = "postgresql://localhost/nuleaf_source"
    pool_min_size: int = 1
    pool_max_size: int = 10
    db_schema: str | None = None
    # Apply the table DDL on startup
    create_schema: bool = True

    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    strict_sort: bool = False

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    def repository_config(self) -> RepositoryConfig:
        return RepositoryConfig(
            db_schema=self.db_schema,
            default_limit=self.default_limit,
            max_limit=self.max_limit,
            strict_sort=self.strict_sort,
        )
