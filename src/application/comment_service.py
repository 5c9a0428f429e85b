# src/application/comment_service.py

from datetime import datetime, timezone
from typing import Callable, List

from src.domain.errors import HitDecodeError
from src.domain.interfaces import DocumentStorePort
from src.domain.models import COMMENT_FIELDS, Comment, HitDecodePolicy


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CommentService:
    """
    Core use cases: ingest a comment, search comments.

    The service holds no comment state of its own. Every call is a single
    round-trip to the document store; nothing is retried or cached.
    Whether the index exists is decided once at startup by
    bootstrap.ensure_index(), not here.
    """

    def __init__(
        self,
        store: DocumentStorePort,
        index_name: str,
        clock: Callable[[], datetime] = utc_now,
        hit_policy: HitDecodePolicy = HitDecodePolicy.FAIL_FAST,
    ):
        self._store = store
        self._index_name = index_name
        self._clock = clock
        self._hit_policy = hit_policy

    @property
    def index_name(self) -> str:
        return self._index_name

    def add_comment(self, name: str, content: str) -> Comment:
        """Stamp a new comment with the server time and index it."""
        comment = Comment(name=name, content=content, created_at=self._clock())
        self._store.index_document(self._index_name, comment.to_source())
        return comment

    def search(self, query: str) -> List[Comment]:
        # Empty queries go to the store untouched, its match semantics apply
        sources = self._store.search(
            index_name=self._index_name,
            query_text=query,
            fields=COMMENT_FIELDS,
        )

        comments: List[Comment] = []
        for position, source in enumerate(sources):
            try:
                comments.append(Comment.from_source(source))
            except HitDecodeError as error:
                if self._hit_policy is HitDecodePolicy.FAIL_FAST:
                    raise
                print(f"[CommentService] ⚠ Skipping malformed hit #{position}: {error}")

        return comments
