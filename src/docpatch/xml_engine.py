"""
XML patch engine.

A patch document looks like::

    <Patch>
      <Replace path="/Root/User/Name" value="Jane"/>
      <Remove path="/Root/User/Legacy"/>
      <Add path="/Root/User">
        <Email>jane@example.com</Email>
      </Add>
    </Patch>

Each child of the patch root is one operation. Targets are located with
XPath; when nothing matches, the operation is skipped.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Optional, Union

from lxml import etree

from docpatch.engine import PatchEngine
from docpatch.errors import (
    InvalidPathError,
    MissingValueError,
    UnknownOperationError,
    UnsupportedTargetError,
)
from docpatch.operations import OperationKind, PatchOperation

logger = logging.getLogger(__name__)

_ELEMENT_KINDS = {
    "Add": OperationKind.ADD,
    "Remove": OperationKind.REMOVE,
    "Replace": OperationKind.REPLACE,
}

PatchSource = Union[etree._ElementTree, etree._Element, Iterable[Any]]


def _is_element(node: Any) -> bool:
    # Comments and processing instructions are elements with a non-string tag.
    return etree.iselement(node) and isinstance(node.tag, str)


def patch_elements(patch: PatchSource) -> list[Any]:
    """Return the operation elements of a patch tree, root element or list."""
    if isinstance(patch, etree._ElementTree):
        patch = patch.getroot()
    if etree.iselement(patch):
        return [child for child in patch if _is_element(child)]
    return [op for op in patch if not etree.iselement(op) or _is_element(op)]


class XmlEngine(PatchEngine):
    """Replace text, remove subtrees and append children on an lxml tree."""

    name = "xml"

    def __init__(self, namespaces: Optional[dict[str, str]] = None) -> None:
        self.namespaces = namespaces

    def parse_operation(self, raw: Any) -> PatchOperation:
        if isinstance(raw, PatchOperation):
            return raw
        if not _is_element(raw):
            raise UnknownOperationError(
                f"Unknown XML patch element: {raw!r}"
            )

        name = etree.QName(raw).localname
        kind = _ELEMENT_KINDS.get(name)
        if kind is None:
            raise UnknownOperationError(f"Unknown XML patch element: {name}")

        path = raw.get("path")
        if path is None or not path.strip():
            raise InvalidPathError(f"Missing 'path' attribute on <{name}>.", path)

        if kind is OperationKind.REPLACE:
            value = raw.get("value")
            if value is None:
                raise MissingValueError(
                    "Replace requires 'value' attribute.", path
                )
            return PatchOperation(kind, path, value)

        if kind is OperationKind.ADD:
            return PatchOperation(kind, path, [c for c in raw if _is_element(c)])

        return PatchOperation(kind, path)

    def resolve(self, document: Any, path: str) -> Optional[Any]:
        """
        Evaluate ``path`` and return the first matching element.

        lxml returns node-sets in document order, so the first element of the
        result is the first match in the document. Returns None when nothing
        matches.
        """
        if not path or not path.strip():
            raise InvalidPathError("Path cannot be empty.", path)
        try:
            result = document.xpath(path, namespaces=self.namespaces)
        except etree.XPathError as e:
            raise InvalidPathError(f"Invalid XPath '{path}': {e}", path) from e

        if not isinstance(result, list):
            raise InvalidPathError(
                f"XPath '{path}' does not select elements "
                f"(evaluates to {type(result).__name__})",
                path,
            )
        for node in result:
            if _is_element(node):
                return node
        return None

    def apply(self, document: Any, operation: PatchOperation) -> Any:
        target = self.resolve(document, operation.path)
        if target is None:
            logger.debug(
                "xml %s %s: no matching element, skipped",
                operation.kind.value,
                operation.path,
            )
            return document

        if operation.kind is OperationKind.REPLACE:
            self.replace(target, operation)
        elif operation.kind is OperationKind.REMOVE:
            self.remove(target, operation)
        elif operation.kind is OperationKind.ADD:
            self.add(target, operation)
        else:
            raise UnknownOperationError(
                f"Unsupported operation: {operation.kind}", operation.path
            )

        logger.debug("xml %s %s", operation.kind.value, operation.path)
        return document

    def replace(self, target: Any, operation: PatchOperation) -> None:
        if not operation.has_value or operation.value is None:
            raise MissingValueError(
                "Replace requires 'value' attribute.", operation.path
            )
        for child in list(target):
            target.remove(child)
        target.text = str(operation.value)

    def remove(self, target: Any, operation: PatchOperation) -> None:
        parent = target.getparent()
        if parent is None:
            raise UnsupportedTargetError(
                "Cannot remove the document root element.", operation.path
            )

        # lxml drops the tail text along with the element.
        if target.tail:
            previous = target.getprevious()
            if previous is not None:
                previous.tail = (previous.tail or "") + target.tail
            else:
                parent.text = (parent.text or "") + target.tail
        parent.remove(target)

    def add(self, target: Any, operation: PatchOperation) -> None:
        if not operation.has_value:
            raise MissingValueError(
                "Add requires child elements to insert.", operation.path
            )
        children = operation.value
        # A lone element or scalar is one payload item, not a sequence.
        if (
            etree.iselement(children)
            or isinstance(children, (str, bytes))
            or not isinstance(children, Iterable)
        ):
            children = [children]
        children = list(children)
        for child in children:
            if not _is_element(child):
                raise UnsupportedTargetError(
                    f"Add can only insert elements, got {type(child).__name__}",
                    operation.path,
                )

        for child in children:
            clone = copy.deepcopy(child)
            clone.tail = None
            target.append(clone)
