from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Lectionary tables produced by the offline data-preparation step.
    # - lectionary_base_url unset: read JSON files from lectionary_data_dir
    # - lectionary_base_url set: fetch "{base_url}/{file}" over HTTP
    lectionary_data_dir: str = "data/lectionary"
    lectionary_base_url: str | None = None
    lectionary_timeout_seconds: float = 10.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
