from datetime import datetime
from pathlib import Path
from typing import List, Sequence

from fastapi import FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateNotFound
from pydantic import BaseModel

from src.application.comment_service import CommentService
from src.domain.errors import DocumentStoreError, HitDecodeError
from src.domain.models import Comment

LANDING_TEMPLATE = "index.html"

# What the failed request was doing, keyed by path
STORE_ERROR_ACTIONS = {
    "/comment": "Error indexing comment",
    "/search":  "Error searching comments",
}


# ── API Models ───────────────────────────────────────────────────────────────
class CommentSchema(BaseModel):
    name: str
    content: str
    created_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentSchema":
        return cls(
            name=comment.name,
            content=comment.content,
            created_at=comment.created_at,
        )

class CommentAddedResponse(BaseModel):
    result: str = "Comment added"

class SearchResponse(BaseModel):
    comments: List[CommentSchema]

class ErrorResponse(BaseModel):
    error: str

class StatusResponse(BaseModel):
    status: str
    index: str
    backend: str


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=message).model_dump(),
    )


# ── App Factory ──────────────────────────────────────────────────────────────
def create_app(
    comment_service: CommentService,
    templates_directory: str = "templates",
    backend_name: str = "elasticsearch",
    cors_allow_origins: Sequence[str] = (),
) -> FastAPI:
    """
    Build the HTTP app around an already-bootstrapped CommentService.

    The landing template is loaded here so a missing file fails at
    startup rather than on the first request.
    """
    templates = Jinja2Templates(directory=templates_directory)
    try:
        templates.get_template(LANDING_TEMPLATE)
    except TemplateNotFound as error:
        raise RuntimeError(
            f"Landing page template '{LANDING_TEMPLATE}' not found in "
            f"'{Path(templates_directory).resolve()}'"
        ) from error

    app = FastAPI(
        title="Comment Search API",
        description="Post short comments and search them with full-text queries.",
        version="1.0.0",
    )

    # ── CORS Middleware ──────────────────────────────────────────────────────
    if cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_allow_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # ── Error Handlers ───────────────────────────────────────────────────────
    @app.exception_handler(DocumentStoreError)
    async def store_error_handler(request: Request, exc: DocumentStoreError):
        action = STORE_ERROR_ACTIONS.get(request.url.path, "Document store error")
        return _error_response(f"{action}: {exc}")

    @app.exception_handler(HitDecodeError)
    async def hit_decode_error_handler(request: Request, exc: HitDecodeError):
        return _error_response(f"Error decoding search result: {exc}")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        return _error_response(f"Internal server error: {exc}")

    # ── Endpoints ────────────────────────────────────────────────────────────
    @app.get("/", response_class=HTMLResponse)
    def landing_page(request: Request):
        return templates.TemplateResponse(request, LANDING_TEMPLATE)

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        """Liveness of the HTTP process; does not touch the document store."""
        return StatusResponse(
            status="ok",
            index=comment_service.index_name,
            backend=backend_name,
        )

    @app.post(
        "/comment",
        status_code=201,
        response_model=CommentAddedResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def add_comment(name: str = Form(""), content: str = Form("")):
        comment_service.add_comment(name=name, content=content)
        return CommentAddedResponse()

    @app.get(
        "/search",
        response_model=SearchResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def search(query: str = ""):
        comments = comment_service.search(query)
        return SearchResponse(
            comments=[CommentSchema.from_domain(c) for c in comments]
        )

    return app
