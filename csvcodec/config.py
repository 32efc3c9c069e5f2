from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import LineBreakName, Unification


class Settings(BaseSettings):
    """
    Service configuration, read from CSVCODEC_* environment variables or `.env`.

    The codec functions never consult these; only the HTTP service does.
    """

    model_config = SettingsConfigDict(
        env_prefix="CSVCODEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "csv-codec"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Uploads larger than this are rejected with 413
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    DEFAULT_LINE_BREAK: LineBreakName = "crlf"
    DEFAULT_UNIFICATION: Unification = "error"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
