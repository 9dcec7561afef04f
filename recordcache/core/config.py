"""Package configuration (settings and environment).

Single source of truth for configuration. Uses pydantic-settings with .env
support. Settings are read lazily through get_settings() so importing the
package never triggers validation.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from recordcache.core.constants import DEFAULT_ID_FIELD, DEFAULT_MAX_RECORDS


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    database_url may stay empty for pure in-memory use (stub stores);
    get_db() raises SqlNotConfiguredException until it is set.
    """

    # App
    app_name: str = "recordcache"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = ""
    database_echo: bool = False
    # Optional pool overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Record cache
    record_cache_enabled: bool = True
    record_cache_default_id_field: str = DEFAULT_ID_FIELD
    record_cache_max_records: int = DEFAULT_MAX_RECORDS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_record_cache(self) -> "Settings":
        """Reject a blank default id field and a non-positive record threshold."""
        if not self.record_cache_default_id_field.strip():
            raise ValueError(
                "RECORD_CACHE_DEFAULT_ID_FIELD must name a model attribute (e.g. 'id')."
            )
        if self.record_cache_max_records <= 0:
            raise ValueError(
                f"RECORD_CACHE_MAX_RECORDS must be positive, got: {self.record_cache_max_records}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() after overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
