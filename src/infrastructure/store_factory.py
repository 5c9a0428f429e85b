# src/infrastructure/store_factory.py

from src.domain.interfaces import DocumentStorePort
from src.settings import Settings


def build_document_store(settings: Settings) -> DocumentStorePort:
    """Instantiate the adapter selected by settings.store_backend."""
    if settings.store_backend == "chroma":
        from src.infrastructure.chroma_store import ChromaDocumentStore

        return ChromaDocumentStore(persist_directory=settings.chroma_persist_directory)

    from src.infrastructure.elasticsearch_store import ElasticsearchDocumentStore

    return ElasticsearchDocumentStore(
        url=settings.elasticsearch_url,
        request_timeout=settings.elasticsearch_request_timeout,
        refresh_on_write=settings.refresh_on_write,
    )
