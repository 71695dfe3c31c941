from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECIPES_", env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./demo.db"
    echo_sql: bool = False
    base_url: str = "http://localhost:3000"
    log_level: str = "INFO"
    # When off, ingredients/tags sent on recipe creation are only echoed back
    persist_recipe_associations: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
