# tests/test_comment_service.py

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.application.comment_service import CommentService, utc_now
from src.domain.errors import DocumentStoreError, HitDecodeError
from src.domain.models import Comment, HitDecodePolicy


NOW = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)


def _fixed_clock() -> datetime:
    return NOW


def _make_mock_store(hits=None):
    store = MagicMock()
    store.search.return_value = hits or []
    return store


def _source(name: str, content: str) -> dict:
    return Comment(name, content, NOW).to_source()


# ── Ingestion ─────────────────────────────────────────────────────────────────

def test_add_comment_indexes_document_with_server_timestamp():
    store = _make_mock_store()
    service = CommentService(store, "comment", clock=_fixed_clock)

    comment = service.add_comment("alice", "hello world")

    assert comment == Comment("alice", "hello world", NOW)
    store.index_document.assert_called_once_with(
        "comment",
        {"name": "alice", "content": "hello world", "created_at": NOW.isoformat()},
    )


def test_add_comment_accepts_empty_fields():
    store = _make_mock_store()
    service = CommentService(store, "comment", clock=_fixed_clock)

    comment = service.add_comment("", "")

    assert comment.name == "" and comment.content == ""
    store.index_document.assert_called_once()


def test_add_comment_propagates_store_failure():
    store = _make_mock_store()
    store.index_document.side_effect = DocumentStoreError("timeout")
    service = CommentService(store, "comment")

    with pytest.raises(DocumentStoreError, match="timeout"):
        service.add_comment("alice", "hello")
    store.index_document.assert_called_once()


def test_default_clock_is_timezone_aware():
    assert utc_now().tzinfo is not None


# ── Search ────────────────────────────────────────────────────────────────────

def test_search_queries_all_comment_fields():
    store = _make_mock_store()
    service = CommentService(store, "comment")

    service.search("hello")

    store.search.assert_called_once_with(
        index_name="comment",
        query_text="hello",
        fields=("name", "content", "created_at"),
    )


def test_search_passes_empty_query_through():
    store = _make_mock_store()
    service = CommentService(store, "comment")

    assert service.search("") == []
    assert store.search.call_args.kwargs["query_text"] == ""


def test_search_keeps_store_ranking():
    hits = [_source("carol", "third"), _source("alice", "first"), _source("bob", "second")]
    service = CommentService(_make_mock_store(hits), "comment")

    names = [c.name for c in service.search("anything")]

    assert names == ["carol", "alice", "bob"]


def test_search_fail_fast_discards_all_results_on_bad_hit():
    hits = [_source("alice", "hello"), {"name": "broken"}, _source("bob", "hello")]
    service = CommentService(_make_mock_store(hits), "comment")

    with pytest.raises(HitDecodeError, match="missing field"):
        service.search("hello")


def test_search_skip_policy_drops_only_bad_hits(capsys):
    hits = [_source("alice", "hello"), {"name": "broken"}, _source("bob", "hello")]
    service = CommentService(
        _make_mock_store(hits), "comment", hit_policy=HitDecodePolicy.SKIP,
    )

    comments = service.search("hello")

    assert [c.name for c in comments] == ["alice", "bob"]
    assert "Skipping malformed hit #1" in capsys.readouterr().out


def test_search_propagates_store_failure():
    store = _make_mock_store()
    store.search.side_effect = DocumentStoreError("index_not_found_exception")
    service = CommentService(store, "comment")

    with pytest.raises(DocumentStoreError):
        service.search("hello")
