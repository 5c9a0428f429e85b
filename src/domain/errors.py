# src/domain/errors.py


class CommentSearchError(Exception):
    """Base class for every error raised by this service."""


class DocumentStoreError(CommentSearchError, RuntimeError):
    """
    Raised by a document-store adapter when the backing store rejects
    or fails a call (connection refused, timeout, bad request...).
    The message carries the store's own error text unmodified.
    """


class BootstrapError(CommentSearchError, RuntimeError):
    """Index could not be verified or created at startup. Always fatal."""


class HitDecodeError(CommentSearchError, ValueError):
    """A search hit does not have the shape of a stored comment."""
