from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class _Missing:
    """Marker for an operation that carries no ``value``."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class OperationKind(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"


@dataclass
class PatchOperation:
    """One add/remove/replace instruction.

    ``value`` is a JSON fragment for the JSON engine. For the XML engine it is
    the replacement text (Replace) or the list of elements to append (Add).
    ``None`` is a legitimate JSON value, so absence is marked with ``MISSING``.
    """

    kind: OperationKind
    path: str
    value: Any = field(default=MISSING)

    @property
    def has_value(self) -> bool:
        return self.value is not MISSING
