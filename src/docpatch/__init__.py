"""
docpatch
========

Apply add/remove/replace patches to in-memory JSON and XML documents.

    >>> from docpatch import apply_json_patch
    >>> apply_json_patch({"a": [1, 2, 3]}, [{"op": "add", "path": "/a/-", "value": 4}])
    {'a': [1, 2, 3, 4]}

JSON targets are addressed with JSON Pointer, XML targets with XPath. A run
stops at the first failing operation and does not roll back the ones already
applied.
"""

from docpatch.driver import PatchDriver, PatchResult, apply_json_patch, apply_xml_patch
from docpatch.engine import PatchEngine
from docpatch.errors import (
    DocumentFormatError,
    IndexOutOfRangeError,
    InvalidPathError,
    KeyNotFoundError,
    MissingValueError,
    PatchError,
    PatchErrorKind,
    PathResolutionError,
    UnknownOperationError,
    UnsupportedTargetError,
)
from docpatch.json_engine import JsonEngine
from docpatch.json_pointer import build_json_pointer, get_value, parse_json_pointer
from docpatch.operations import MISSING, OperationKind, PatchOperation
from docpatch.xml_engine import XmlEngine

__version__ = "0.1.0"
__all__ = [
    "PatchDriver", "PatchResult", "apply_json_patch", "apply_xml_patch",
    "PatchEngine", "JsonEngine", "XmlEngine",
    "PatchOperation", "OperationKind", "MISSING",
    "parse_json_pointer", "build_json_pointer", "get_value",
    "PatchError", "PatchErrorKind", "InvalidPathError", "PathResolutionError",
    "IndexOutOfRangeError", "KeyNotFoundError", "MissingValueError",
    "UnsupportedTargetError", "UnknownOperationError", "DocumentFormatError",
]
