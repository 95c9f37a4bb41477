from __future__ import annotations

import copy
import logging
from typing import Any

from docpatch.engine import PatchEngine
from docpatch.errors import (
    IndexOutOfRangeError,
    InvalidPathError,
    KeyNotFoundError,
    MissingValueError,
    UnknownOperationError,
    UnsupportedTargetError,
)
from docpatch.json_pointer import (
    APPEND_TOKEN,
    describe_type,
    parse_json_pointer,
    parse_signed_index,
    resolve_parent,
)
from docpatch.operations import OperationKind, PatchOperation

logger = logging.getLogger(__name__)


class JsonEngine(PatchEngine):
    """Add/remove/replace on dict and list containers addressed by JSON Pointer."""

    name = "json"

    def parse_operation(self, raw: Any) -> PatchOperation:
        if isinstance(raw, PatchOperation):
            return raw
        if not isinstance(raw, dict):
            raise UnknownOperationError(
                f"invalid operation (not an object): {raw!r}"
            )

        # Field names are matched case-insensitively ("Op", "PATH", ...).
        fields = {str(k).lower(): v for k, v in raw.items()}

        op_name = fields.get("op")
        if not isinstance(op_name, str):
            raise UnknownOperationError("invalid operation (missing op)")
        try:
            kind = OperationKind(op_name.lower())
        except ValueError:
            raise UnknownOperationError(
                f"Unsupported operation: {op_name}"
            ) from None

        path = fields.get("path")
        if not isinstance(path, str):
            raise InvalidPathError("invalid operation (missing path)")

        if "value" in fields:
            return PatchOperation(kind, path, fields["value"])
        return PatchOperation(kind, path)

    def resolve(self, document: Any, path: str) -> tuple[Any, str]:
        tokens = parse_json_pointer(path)
        return resolve_parent(document, tokens, path)

    def apply(self, document: Any, operation: PatchOperation) -> Any:
        parent, token = self.resolve(document, operation.path)

        if operation.kind is OperationKind.ADD:
            self.add(parent, token, operation)
        elif operation.kind is OperationKind.REPLACE:
            self.replace(parent, token, operation)
        elif operation.kind is OperationKind.REMOVE:
            self.remove(parent, token, operation)
        else:
            raise UnknownOperationError(
                f"Unsupported operation: {operation.kind}", operation.path
            )

        logger.debug("json %s %s", operation.kind.value, operation.path)
        return document

    @staticmethod
    def _require_value(operation: PatchOperation) -> Any:
        if not operation.has_value:
            raise MissingValueError(
                f'operation "{operation.kind.value}" requires field "value"',
                operation.path,
            )
        return copy.deepcopy(operation.value)

    @staticmethod
    def _array_index(parent: list, token: str, operation: PatchOperation) -> int:
        if token == APPEND_TOKEN:
            raise IndexOutOfRangeError(
                f"{operation.kind.value} failed: '-' does not address an "
                f"existing element (path {operation.path})",
                operation.path,
            )
        idx = parse_signed_index(token)
        if idx is None:
            raise InvalidPathError(
                f"Invalid array token: {token}", operation.path
            )
        if idx < 0 or idx >= len(parent):
            raise IndexOutOfRangeError(
                f"Invalid index for {operation.kind.value}: {idx} "
                f"(array has {len(parent)} items)",
                operation.path,
            )
        return idx

    def add(self, parent: Any, token: str, operation: PatchOperation) -> None:
        value = self._require_value(operation)

        if isinstance(parent, dict):
            parent[token] = value
        elif isinstance(parent, list):
            if token == APPEND_TOKEN:
                parent.append(value)
                return
            idx = parse_signed_index(token)
            if idx is None:
                raise InvalidPathError(
                    f"Invalid array token: {token}", operation.path
                )
            if idx < 0 or idx > len(parent):
                raise IndexOutOfRangeError(
                    f"Invalid index for add: {idx} "
                    f"(valid indices: 0..{len(parent)}, or '-' to append)",
                    operation.path,
                )
            parent.insert(idx, value)
        else:
            raise UnsupportedTargetError(
                "Add operation can only be applied to objects or arrays "
                f"(parent is a {describe_type(parent)})",
                operation.path,
            )

    def replace(self, parent: Any, token: str, operation: PatchOperation) -> None:
        value = self._require_value(operation)

        if isinstance(parent, dict):
            if token not in parent:
                raise KeyNotFoundError(
                    f"Property '{token}' does not exist for replace.",
                    operation.path,
                )
            parent[token] = value
        elif isinstance(parent, list):
            parent[self._array_index(parent, token, operation)] = value
        else:
            raise UnsupportedTargetError(
                "Replace operation can only be applied to objects or arrays "
                f"(parent is a {describe_type(parent)})",
                operation.path,
            )

    def remove(self, parent: Any, token: str, operation: PatchOperation) -> None:
        if isinstance(parent, dict):
            if token not in parent:
                raise KeyNotFoundError(
                    f"Property '{token}' does not exist for remove.",
                    operation.path,
                )
            del parent[token]
        elif isinstance(parent, list):
            parent.pop(self._array_index(parent, token, operation))
        else:
            raise UnsupportedTargetError(
                "Remove operation can only be applied to objects or arrays "
                f"(parent is a {describe_type(parent)})",
                operation.path,
            )
