# tests/test_settings.py

import os

import pytest
from pydantic import ValidationError

from src.domain.models import HitDecodePolicy
from src.infrastructure.chroma_store import ChromaDocumentStore
from src.infrastructure.elasticsearch_store import ElasticsearchDocumentStore
from src.infrastructure.store_factory import build_document_store
from src.settings import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test away from any developer .env file and variables."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("COMMENT_SEARCH_"):
            monkeypatch.delenv(key)


def test_defaults():
    settings = Settings()

    assert settings.store_backend == "elasticsearch"
    assert settings.elasticsearch_url == "http://localhost:9200"
    assert settings.index_name == "comment"
    assert settings.port == 8082
    assert settings.hit_decode_policy is HitDecodePolicy.FAIL_FAST
    assert settings.cors_allow_origins == []


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("COMMENT_SEARCH_INDEX_NAME", "feedback")
    monkeypatch.setenv("COMMENT_SEARCH_PORT", "9000")
    monkeypatch.setenv("COMMENT_SEARCH_HIT_DECODE_POLICY", "skip")

    settings = Settings()

    assert settings.index_name == "feedback"
    assert settings.port == 9000
    assert settings.hit_decode_policy is HitDecodePolicy.SKIP


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("COMMENT_SEARCH_STORE_BACKEND=chroma\n")

    assert Settings().store_backend == "chroma"


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("COMMENT_SEARCH_STORE_BACKEND", "solr")

    with pytest.raises(ValidationError):
        Settings()


def test_factory_builds_elasticsearch_store():
    store = build_document_store(Settings(elasticsearch_url="http://es.internal:9200"))

    assert isinstance(store, ElasticsearchDocumentStore)


def test_factory_builds_chroma_store(tmp_path):
    settings = Settings(
        store_backend="chroma",
        chroma_persist_directory=str(tmp_path / "chroma"),
    )

    assert isinstance(build_document_store(settings), ChromaDocumentStore)
