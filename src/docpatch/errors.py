"""
Error taxonomy for patch runs.

Every failure is a ``PatchError`` tagged with a ``PatchErrorKind``, the
offending path and, once the driver has seen it, the index of the operation
that raised it. Callers can either catch a specific subclass or match on
``error.kind``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class PatchErrorKind(str, Enum):
    INVALID_PATH = "invalid_path"
    PATH_RESOLUTION = "path_resolution"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    KEY_NOT_FOUND = "key_not_found"
    MISSING_VALUE = "missing_value"
    UNSUPPORTED_TARGET = "unsupported_target"
    UNKNOWN_OPERATION = "unknown_operation"
    DOCUMENT_FORMAT = "document_format"


class PatchError(Exception):
    """Base class of every error raised while applying a patch."""

    kind: PatchErrorKind = PatchErrorKind.INVALID_PATH

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        op_index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.op_index = op_index

    def __str__(self) -> str:
        prefix = f"operation {self.op_index}: " if self.op_index is not None else ""
        return f"{prefix}{self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a plain dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path,
            "op_index": self.op_index,
        }


class InvalidPathError(PatchError):
    kind = PatchErrorKind.INVALID_PATH


class PathResolutionError(PatchError):
    kind = PatchErrorKind.PATH_RESOLUTION


class IndexOutOfRangeError(PatchError):
    kind = PatchErrorKind.INDEX_OUT_OF_RANGE


class KeyNotFoundError(PatchError):
    kind = PatchErrorKind.KEY_NOT_FOUND


class MissingValueError(PatchError):
    kind = PatchErrorKind.MISSING_VALUE


class UnsupportedTargetError(PatchError):
    kind = PatchErrorKind.UNSUPPORTED_TARGET


class UnknownOperationError(PatchError):
    kind = PatchErrorKind.UNKNOWN_OPERATION


class DocumentFormatError(PatchError):
    """Raised by the io helpers when a document or patch cannot be parsed."""

    kind = PatchErrorKind.DOCUMENT_FORMAT
