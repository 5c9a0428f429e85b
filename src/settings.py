# src/settings.py

from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.models import HitDecodePolicy


class Settings(BaseSettings):
    """
    Process configuration, read from COMMENT_SEARCH_* environment
    variables or a local .env file.
    """
    model_config = SettingsConfigDict(
        env_prefix="COMMENT_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    store_backend: Literal["elasticsearch", "chroma"] = "elasticsearch"

    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_request_timeout: float = 10.0
    refresh_on_write: bool = False

    chroma_persist_directory: str = "./data/chroma_db"

    index_name: str = "comment"
    hit_decode_policy: HitDecodePolicy = HitDecodePolicy.FAIL_FAST

    host: str = "0.0.0.0"
    port: int = 8082
    templates_directory: str = "templates"
    cors_allow_origins: List[str] = []


@lru_cache
def get_settings() -> Settings:
    return Settings()
