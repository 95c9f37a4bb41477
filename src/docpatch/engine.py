from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from docpatch.operations import PatchOperation


class PatchEngine(ABC):
    """Resolve paths and apply operations against one kind of document tree.

    The driver only talks to this interface, so the same fail-fast loop
    serves JSON and XML documents.
    """

    name: str = "engine"

    @abstractmethod
    def parse_operation(self, raw: Any) -> PatchOperation:
        """Turn a raw operation (dict, element, ...) into a PatchOperation."""

    @abstractmethod
    def resolve(self, document: Any, path: str) -> Any:
        """Locate the mutation target for ``path``."""

    @abstractmethod
    def apply(self, document: Any, operation: PatchOperation) -> Any:
        """Apply one operation in place and return the document."""
