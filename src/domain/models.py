# src/domain/models.py

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import TypeAdapter, ValidationError

from src.domain.errors import HitDecodeError


COMMENT_FIELDS = ("name", "content", "created_at")

_TIMESTAMP = TypeAdapter(datetime)

# Nanosecond writers (Go, Elasticsearch date_nanos) emit up to 9 fraction digits
_EXTRA_FRACTION_DIGITS = re.compile(r"(\.\d{6})\d+")


class HitDecodePolicy(str, Enum):
    """
    What CommentService.search() does with a hit it cannot decode:
    - FAIL_FAST → abort the whole search (no comments are returned)
    - SKIP      → drop the hit with a warning, keep the valid ones
    """
    FAIL_FAST = "fail_fast"
    SKIP      = "skip"


@dataclass(frozen=True)
class Comment:
    """
    A single user comment as stored in the document store.
    created_at is always stamped by the server, never taken from the caller.
    """
    name: str
    content: str
    created_at: datetime

    def to_source(self) -> dict:
        """Serialize to the document body sent to the store."""
        return {
            "name": self.name,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_source(cls, source) -> "Comment":
        """
        Rebuild a Comment from a raw hit source.
        Raises HitDecodeError on any missing key or wrongly typed value.
        """
        if not isinstance(source, dict):
            raise HitDecodeError(
                f"expected a JSON object, got {type(source).__name__}"
            )

        missing = [key for key in COMMENT_FIELDS if key not in source]
        if missing:
            raise HitDecodeError(f"missing field(s): {', '.join(missing)}")

        for key in ("name", "content"):
            if not isinstance(source[key], str):
                raise HitDecodeError(
                    f"field '{key}' must be a string, "
                    f"got {type(source[key]).__name__}"
                )

        raw_created_at = source["created_at"]
        if not isinstance(raw_created_at, str):
            raise HitDecodeError(
                f"field 'created_at' must be a timestamp string, "
                f"got {type(raw_created_at).__name__}"
            )
        try:
            created_at = _TIMESTAMP.validate_python(
                _EXTRA_FRACTION_DIGITS.sub(r"\1", raw_created_at)
            )
        except ValidationError as error:
            raise HitDecodeError(
                f"field 'created_at' is not a valid timestamp: {raw_created_at!r}"
            ) from error

        return cls(
            name=source["name"],
            content=source["content"],
            created_at=created_at,
        )
