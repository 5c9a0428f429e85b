# main.py

import sys

import uvicorn
from pydantic import ValidationError
from pydantic_settings import SettingsError

from api import create_app
from src.application.bootstrap import ensure_index
from src.application.comment_service import CommentService
from src.domain.errors import BootstrapError, DocumentStoreError
from src.infrastructure.store_factory import build_document_store
from src.interface.cli import (
    display_bootstrap_status,
    display_configuration,
    display_error,
    display_serving,
    display_welcome_banner,
)
from src.settings import get_settings


def main() -> None:
    display_welcome_banner()

    # ── 1. Configuration ─────────────────────────────────────────────────────
    try:
        settings = get_settings()
    except (ValidationError, SettingsError) as error:
        display_error(f"Invalid configuration:\n{error}")
        sys.exit(1)

    store_location = (
        settings.chroma_persist_directory
        if settings.store_backend == "chroma"
        else settings.elasticsearch_url
    )
    display_configuration(settings.store_backend, store_location, settings.index_name)

    # ── 2. Document store + index bootstrap ──────────────────────────────────
    try:
        store = build_document_store(settings)
        created = ensure_index(store, settings.index_name)
    except (DocumentStoreError, BootstrapError) as error:
        display_error(str(error))
        sys.exit(1)

    display_bootstrap_status(settings.index_name, created)

    # ── 3. HTTP app ──────────────────────────────────────────────────────────
    comment_service = CommentService(
        store=store,
        index_name=settings.index_name,
        hit_policy=settings.hit_decode_policy,
    )

    try:
        app = create_app(
            comment_service,
            templates_directory=settings.templates_directory,
            backend_name=settings.store_backend,
            cors_allow_origins=settings.cors_allow_origins,
        )
    except RuntimeError as error:
        display_error(str(error))
        sys.exit(1)

    display_serving(settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
