# src/infrastructure/elasticsearch_store.py

from typing import List, Optional, Sequence

from elasticsearch import ApiError, Elasticsearch, TransportError

from src.domain.errors import DocumentStoreError
from src.domain.interfaces import DocumentStorePort


DEFAULT_REQUEST_TIMEOUT = 10.0


class ElasticsearchDocumentStore(DocumentStorePort):
    """
    Document store backed by an Elasticsearch cluster.

    One client instance is shared by every request handler; the
    elasticsearch-py client is thread-safe and pools its connections.

    Search uses a multi_match query (best_fields) so the cluster's own
    relevance ranking decides the order of the returned hits.
    """

    def __init__(
        self,
        url: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        refresh_on_write: bool = False,
        client: Optional[Elasticsearch] = None,
    ):
        """
        Args:
            url:              Cluster endpoint, e.g. http://localhost:9200.
            request_timeout:  Seconds before a single store call is abandoned.
            refresh_on_write: Wait for the indexed comment to become
                              searchable before returning.
            client:           Pre-built client; mainly for tests.
        """
        self._url = url
        self._refresh_on_write = refresh_on_write

        try:
            self._client = client if client is not None else Elasticsearch(
                url,
                request_timeout=request_timeout,
            )
        except ValueError as error:
            raise DocumentStoreError(
                f"Invalid Elasticsearch URL '{url}': {error}"
            ) from error

        print(f"[ElasticStore] Client configured for '{url}'.")

    # ─── DocumentStorePort ───────────────────────────────────────────────────

    def index_exists(self, index_name: str) -> bool:
        try:
            return bool(self._client.indices.exists(index=index_name))
        except (ApiError, TransportError) as error:
            raise DocumentStoreError(str(error)) from error

    def create_index(self, index_name: str) -> bool:
        try:
            response = self._client.indices.create(index=index_name)
        except (ApiError, TransportError) as error:
            raise DocumentStoreError(str(error)) from error
        return bool(response.get("acknowledged", False))

    def index_document(self, index_name: str, document: dict) -> None:
        options = {"refresh": "wait_for"} if self._refresh_on_write else {}
        try:
            self._client.index(index=index_name, document=document, **options)
        except (ApiError, TransportError) as error:
            raise DocumentStoreError(str(error)) from error

    def search(
        self,
        index_name: str,
        query_text: str,
        fields: Sequence[str],
    ) -> List[dict]:
        try:
            response = self._client.search(
                index=index_name,
                query=self.build_multi_match(query_text, fields),
            )
        except (ApiError, TransportError) as error:
            raise DocumentStoreError(str(error)) from error

        # A hit without _source is handed back as None; decoding rejects it
        return [hit.get("_source") for hit in response["hits"]["hits"]]

    # ─── Query building ──────────────────────────────────────────────────────

    @staticmethod
    def build_multi_match(query_text: str, fields: Sequence[str]) -> dict:
        """
        lenient=True: free text against the created_at date field would
        otherwise fail the whole query with a parse error.
        """
        return {
            "multi_match": {
                "query":   query_text,
                "fields":  list(fields),
                "lenient": True,
            }
        }
