"""
Loading and saving documents and patches.

These helpers sit outside the patch engine: they turn bytes into the trees
and operation lists the driver works on, and trees back into bytes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from lxml import etree

from docpatch.driver import PatchDriver, PatchResult
from docpatch.errors import DocumentFormatError
from docpatch.json_engine import JsonEngine
from docpatch.settings import get_settings
from docpatch.xml_engine import XmlEngine, patch_elements

logger = logging.getLogger(__name__)

Data = Union[bytes, str]
PathLike = Union[str, Path]


# ======================================================================
# JSON
# ======================================================================
def parse_json_document(data: Data) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentFormatError(f"Failed to parse JSON document: {e}") from e


def parse_json_operations(data: Data) -> list[Any]:
    """Parse a JSON patch file; its top level must be an array of operations."""
    try:
        ops = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentFormatError(f"Failed to parse JSON patch: {e}") from e
    if ops is None:
        return []
    if not isinstance(ops, list):
        raise DocumentFormatError(
            "JSON patch must be an array of operations, "
            f"got {type(ops).__name__}"
        )
    return ops


def serialize_json_document(
    document: Any, indent: Optional[int] = None, encoding: Optional[str] = None
) -> bytes:
    settings = get_settings()
    if indent is None:
        indent = settings.JSON_INDENT
    return json.dumps(document, indent=indent or None, ensure_ascii=False).encode(
        encoding or settings.ENCODING
    )


# ======================================================================
# XML
# ======================================================================
def _xml_parser() -> etree.XMLParser:
    # Blank text is dropped so the output can be re-indented.
    return etree.XMLParser(remove_blank_text=True)


def _parse_xml(data: Data, what: str) -> Any:
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return etree.ElementTree(etree.fromstring(data, _xml_parser()))
    except etree.XMLSyntaxError as e:
        raise DocumentFormatError(f"Failed to parse XML {what}: {e}") from e


def parse_xml_document(data: Data) -> Any:
    return _parse_xml(data, "document")


def parse_xml_operations(data: Data) -> list[Any]:
    """Return the operation elements found under the patch root."""
    return patch_elements(_parse_xml(data, "patch"))


def serialize_xml_document(
    document: Any,
    pretty_print: Optional[bool] = None,
    encoding: Optional[str] = None,
) -> bytes:
    settings = get_settings()
    if pretty_print is None:
        pretty_print = settings.XML_PRETTY_PRINT
    return etree.tostring(
        document,
        xml_declaration=True,
        encoding=encoding or settings.ENCODING,
        pretty_print=pretty_print,
    )


# ======================================================================
# File helpers
# ======================================================================
def patch_json_file(
    input_path: PathLike, patch_path: PathLike, output_path: PathLike
) -> PatchResult:
    """
    Patch a JSON file and write the result.

    The output file is only written when every operation succeeded.
    """
    document = parse_json_document(Path(input_path).read_bytes())
    operations = parse_json_operations(Path(patch_path).read_bytes())

    result = PatchDriver(JsonEngine()).try_run(document, operations)
    if result.ok:
        Path(output_path).write_bytes(serialize_json_document(result.document))
        logger.info("JSON patch written to %s", output_path)
    return result


def patch_xml_file(
    input_path: PathLike,
    patch_path: PathLike,
    output_path: PathLike,
    namespaces: Optional[dict[str, str]] = None,
) -> PatchResult:
    """
    Patch an XML file and write the result.

    The output file is only written when every operation succeeded.
    """
    document = parse_xml_document(Path(input_path).read_bytes())
    operations = parse_xml_operations(Path(patch_path).read_bytes())

    result = PatchDriver(XmlEngine(namespaces)).try_run(document, operations)
    if result.ok:
        Path(output_path).write_bytes(serialize_xml_document(result.document))
        logger.info("XML patch written to %s", output_path)
    return result
