"""Application settings via Pydantic Settings."""

from functools import lru_cache
from urllib.parse import quote

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = "biz"
    app_version: str = "0.1.0"
    debug: bool = False
    backends_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("BACKENDS_ENABLED"),
        description="Open Redis and MySQL handles at startup.",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Redis (defaults match docker-compose service names)
    redis_host: str = Field(default="redis", validation_alias=AliasChoices("REDIS_HOST"))
    redis_port: int = Field(default=6379, validation_alias=AliasChoices("REDIS_PORT"))
    redis_password: str = Field(default="", validation_alias=AliasChoices("REDIS_PASSWORD"))
    redis_db: int = Field(default=0, validation_alias=AliasChoices("REDIS_DB"), ge=0)

    # Database (MySQL)
    db_host: str = Field(default="db", validation_alias=AliasChoices("DB_HOST"))
    db_port: int = Field(default=3306, validation_alias=AliasChoices("DB_PORT"))
    db_user: str = Field(default="admin", validation_alias=AliasChoices("DB_USER"))
    db_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DB_PASSWORD"),
        description="No fallback; a missing password is logged at startup.",
    )
    db_name: str = Field(default="mydb", validation_alias=AliasChoices("DB_NAME"))

    # Timeouts (seconds)
    connect_timeout: float = Field(default=5.0, gt=0)
    ping_timeout: float = Field(default=2.0, gt=0)
    operation_timeout: float = Field(default=5.0, gt=0)

    @property
    def redis_url(self) -> str:
        """Redis URL assembled from host, port, password and db."""
        auth = f":{quote(self.redis_password, safe='')}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def database_url(self) -> URL:
        """Async MySQL URL (aiomysql driver).

        Built with URL.create so credentials containing '@' or ':' are escaped.
        """
        return URL.create(
            "mysql+aiomysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"charset": "utf8mb4"},
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
