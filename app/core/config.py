# app/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "local"

    SERVICE_NAME: str | None = None

    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    POSTGRES_HOST: str
    POSTGRES_PORT: int

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-small"
    OPENAI_TEMPERATURE: float = 0.3

    # Batch pipeline
    MAX_ITEMS_PER_BATCH: int = 200
    EMBEDDING_CONCURRENCY: int = 5
    ANALYSIS_CONCURRENCY: int = 3

    MAX_SIZE_FILE_UPLOAD: int | None = None  # MB

    FRONTEND_ORIGIN: str | None = None
    RATE_LIMIT_ENABLED: bool = True

    DISABLE_AUTH: bool = False
    TEST_USER_ID: str = "test_user"

    BETTERSTACK_API_KEY: str | None = None  # PRODUCTION MODE ONLY
    BETTERSTACK_HOST: str | None = None  # PRODUCTION MODE ONLY

    OTEL_SERVICE_NAME: str | None = None
    OTEL_SERVICE_VERSION: str | None = None
    OTEL_SAMPLE_RATIO: str | None = None
    OTEL_ENABLE_METRICS: str | None = None

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
    )

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
