# src/infrastructure/chroma_store.py

import json
import re
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import chromadb
import numpy as np
from chromadb.config import Settings
from rank_bm25 import BM25Plus

from src.domain.errors import DocumentStoreError
from src.domain.interfaces import DocumentStorePort


# ── Constants ─────────────────────────────────────────────────────────────────

# Same default result window as an Elasticsearch search without "size".
DEFAULT_RESULT_WINDOW = 10

# Documents are only ever read back by id, never by vector similarity,
# but ChromaDB still requires one embedding per record.
PLACEHOLDER_EMBEDDING = [1.0]

TOKEN_PATTERN = re.compile(r"\w+")


@dataclass
class _KeywordIndex:
    """In-memory BM25 view over one collection, one scorer per field."""
    sources: List[object]
    scorers: Dict[str, BM25Plus] = field(default_factory=dict)
    token_sets: List[Set[str]] = field(default_factory=list)


class ChromaDocumentStore(DocumentStorePort):
    """
    Embedded document store for running without an Elasticsearch cluster.

    ┌────────────────────────────────────────────────────┐
    │  ChromaDB (disk)  →  one collection per index      │
    │  BM25+ (memory)   →  per-field keyword relevance   │
    └────────────────────────────────────────────────────┘

    Each comment is persisted as a JSON document. Search approximates a
    multi_match "best_fields" query:
        1. Only documents sharing at least one token with the query match
        2. Each field is scored with BM25+ over that field's corpus
        3. A document's score is its best field score
        4. The top DEFAULT_RESULT_WINDOW documents are returned

    The BM25 view is rebuilt lazily from disk after every write, so a fresh
    process searches persisted comments without re-indexing.
    """

    def __init__(self, persist_directory: str):
        self._persist_directory = persist_directory
        self._keyword_indexes: Dict[tuple, _KeywordIndex] = {}
        self._lock = threading.Lock()

        path = Path(persist_directory)
        if path.exists() and not path.is_dir():
            raise DocumentStoreError(
                f"Failed to initialize ChromaDB: path '{persist_directory}' is a file."
            )
        path.mkdir(parents=True, exist_ok=True)

        try:
            self._client = chromadb.PersistentClient(
                path=persist_directory,
                settings=Settings(anonymized_telemetry=False),
            )
        except Exception as error:
            raise DocumentStoreError(
                f"Failed to initialize ChromaDB at '{persist_directory}'.\n"
                f"The database may be locked by another process or corrupted.\n"
                f"Original error: {error}"
            ) from error

        print(f"[ChromaStore] Connected to '{persist_directory}'.")

    # ─── DocumentStorePort ───────────────────────────────────────────────────

    def index_exists(self, index_name: str) -> bool:
        try:
            collections = self._client.list_collections()
        except Exception as error:
            raise DocumentStoreError(str(error)) from error
        # Newer chromadb releases list names, older ones Collection objects
        names = {c if isinstance(c, str) else c.name for c in collections}
        return index_name in names

    def create_index(self, index_name: str) -> bool:
        try:
            self._client.create_collection(name=index_name)
        except Exception as error:
            raise DocumentStoreError(str(error)) from error
        return True

    def index_document(self, index_name: str, document: dict) -> None:
        try:
            # Writing to a missing index creates it, as Elasticsearch does
            collection = self._client.get_or_create_collection(name=index_name)
            collection.add(
                ids        = [uuid.uuid4().hex],
                documents  = [json.dumps(document)],
                embeddings = [PLACEHOLDER_EMBEDDING],
            )
        except Exception as error:
            raise DocumentStoreError(str(error)) from error

        with self._lock:
            for key in [k for k in self._keyword_indexes if k[0] == index_name]:
                del self._keyword_indexes[key]

    def search(
        self,
        index_name: str,
        query_text: str,
        fields: Sequence[str],
    ) -> List[dict]:
        query_tokens = self._tokenize(query_text)
        if not query_tokens:
            return []

        keyword_index = self._keyword_index(index_name, fields)
        if not keyword_index.sources:
            return []

        query_set = set(query_tokens)
        matches = np.array(
            [bool(tokens & query_set) for tokens in keyword_index.token_sets]
        )
        if not matches.any():
            return []

        if keyword_index.scorers:
            per_field = np.stack([
                scorer.get_scores(query_tokens)
                for scorer in keyword_index.scorers.values()
            ])
            scores = per_field.max(axis=0)
        else:
            scores = np.zeros(len(keyword_index.sources))

        ranked = [
            int(i) for i in np.argsort(-scores, kind="stable") if matches[i]
        ]
        return [keyword_index.sources[i] for i in ranked[:DEFAULT_RESULT_WINDOW]]

    # ─── Private: BM25 ───────────────────────────────────────────────────────

    @staticmethod
    def _tokenize(text) -> List[str]:
        """Lowercased word tokens; non-string values are tokenized as text."""
        if text is None:
            return []
        return TOKEN_PATTERN.findall(str(text).lower())

    def _keyword_index(self, index_name: str, fields: Sequence[str]) -> _KeywordIndex:
        with self._lock:
            key = (index_name, tuple(fields))
            cached = self._keyword_indexes.get(key)
            if cached is not None:
                return cached
            built = self._build_keyword_index(index_name, fields)
            self._keyword_indexes[key] = built
            return built

    def _build_keyword_index(self, index_name: str, fields: Sequence[str]) -> _KeywordIndex:
        """Reconstruct the BM25 view from the documents persisted on disk."""
        try:
            collection = self._client.get_collection(name=index_name)
            results = collection.get(include=["documents"])
        except Exception as error:
            raise DocumentStoreError(str(error)) from error

        sources = [self._parse_document(raw) for raw in results["documents"] or []]
        keyword_index = _KeywordIndex(sources=sources)
        if not sources:
            return keyword_index

        field_tokens: Dict[str, List[List[str]]] = {}
        for name in fields:
            field_tokens[name] = [
                self._tokenize(source.get(name)) if isinstance(source, dict) else []
                for source in sources
            ]

        keyword_index.token_sets = [
            set().union(*(field_tokens[name][i] for name in fields))
            for i in range(len(sources))
        ]
        for name, corpus in field_tokens.items():
            # BM25 divides by the average field length: skip all-empty fields
            if any(corpus):
                keyword_index.scorers[name] = BM25Plus(corpus)

        print(
            f"[ChromaStore] BM25 index built over {len(sources)} documents "
            f"in '{index_name}'."
        )
        return keyword_index

    @staticmethod
    def _parse_document(raw: Optional[str]):
        """Stored JSON back to a dict; unreadable records come back as-is."""
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw
