# src/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import List, Sequence


class DocumentStorePort(ABC):
    """
    Port for any full-text document store.
    Adapters raise DocumentStoreError for every failure of the backing store.
    """

    @abstractmethod
    def index_exists(self, index_name: str) -> bool: ...

    @abstractmethod
    def create_index(self, index_name: str) -> bool:
        """
        Create the index with default settings.
        Returns whether the store acknowledged the creation.
        """
        ...

    @abstractmethod
    def index_document(self, index_name: str, document: dict) -> None: ...

    @abstractmethod
    def search(
        self,
        index_name: str,
        query_text: str,
        fields: Sequence[str],
    ) -> List[dict]:
        """
        Match query_text against every field in `fields`.
        Returns the raw source of each hit, best match first.
        """
        ...
