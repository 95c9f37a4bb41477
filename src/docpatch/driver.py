from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from docpatch.engine import PatchEngine
from docpatch.errors import PatchError
from docpatch.json_engine import JsonEngine
from docpatch.xml_engine import PatchSource, XmlEngine, patch_elements

logger = logging.getLogger(__name__)


@dataclass
class PatchResult:
    """Outcome of a patch run that did not raise.

    When ``ok`` is False the document holds every operation before
    ``error.op_index`` and must not be treated as a finished result.
    """

    ok: bool
    document: Any
    applied: int = 0
    error: Optional[PatchError] = None

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary with the run report."""
        return {
            "ok": self.ok,
            "applied": self.applied,
            "error": self.error.to_dict() if self.error is not None else None,
        }


class PatchDriver:
    """Apply an ordered list of operations, stopping at the first failure.

    There is no rollback: operations applied before the failing one stay
    applied.
    """

    def __init__(self, engine: PatchEngine) -> None:
        self.engine = engine

    def run(self, document: Any, operations: Iterable[Any]) -> Any:
        applied = 0
        for index, raw in enumerate(operations):
            try:
                operation = self.engine.parse_operation(raw)
                document = self.engine.apply(document, operation)
            except PatchError as e:
                e.op_index = index
                logger.warning(
                    "%s patch aborted at operation %d (%s): %s",
                    self.engine.name,
                    index,
                    e.kind.value,
                    e.message,
                )
                raise
            applied += 1

        logger.info("%s patch applied %d operation(s)", self.engine.name, applied)
        return document

    def try_run(self, document: Any, operations: Iterable[Any]) -> PatchResult:
        """Same as ``run`` but reports failure in the result instead of raising."""
        operations = list(operations)
        try:
            document = self.run(document, operations)
        except PatchError as e:
            return PatchResult(
                ok=False, document=document, applied=e.op_index or 0, error=e
            )
        return PatchResult(ok=True, document=document, applied=len(operations))


def apply_json_patch(document: Any, operations: Iterable[Any]) -> Any:
    """
    Apply JSON patch operations to ``document`` in place.

    Args:
        document: Parsed JSON document (dict or list at the root).
        operations: Operation dicts ({"op", "path", "value"}) or
            PatchOperation instances.

    Returns:
        The same, mutated document.

    Raises:
        PatchError: the first failure; earlier operations stay applied.
    """
    return PatchDriver(JsonEngine()).run(document, operations)


def apply_xml_patch(
    document: Any,
    operations: PatchSource,
    namespaces: Optional[dict[str, str]] = None,
) -> Any:
    """
    Apply an XML patch to ``document`` in place.

    Args:
        document: lxml element tree or root element.
        operations: The patch tree, its root element, or a list of operation
            elements / PatchOperation instances.
        namespaces: Prefix mapping for the XPath expressions.

    Returns:
        The same, mutated document.
    """
    return PatchDriver(XmlEngine(namespaces)).run(document, patch_elements(operations))
