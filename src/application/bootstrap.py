# src/application/bootstrap.py

from src.domain.errors import BootstrapError, DocumentStoreError
from src.domain.interfaces import DocumentStorePort


def ensure_index(store: DocumentStorePort, index_name: str) -> bool:
    """
    Make sure `index_name` exists in the store, creating it when absent.

    Returns True if the index was created by this call, False if it
    already existed. Every failure is raised as BootstrapError; callers
    treat it as fatal and there is no retry.
    """
    try:
        exists = store.index_exists(index_name)
    except DocumentStoreError as error:
        raise BootstrapError(
            f"Error checking if index '{index_name}' exists: {error}"
        ) from error

    if exists:
        print(f"[Bootstrap] Index '{index_name}' already exists. ✓")
        return False

    print(f"[Bootstrap] Index '{index_name}' not found — creating it...")
    try:
        acknowledged = store.create_index(index_name)
    except DocumentStoreError as error:
        raise BootstrapError(
            f"Error creating index '{index_name}': {error}"
        ) from error

    if not acknowledged:
        raise BootstrapError(f"Index '{index_name}' creation not acknowledged")

    print(f"[Bootstrap] ✓ Index '{index_name}' created.")
    return True
