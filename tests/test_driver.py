"""Tests for docpatch/driver.py: PatchDriver, PatchResult and entry points."""

from __future__ import annotations

import logging

import pytest
from lxml import etree

from docpatch import (
    IndexOutOfRangeError,
    JsonEngine,
    KeyNotFoundError,
    PatchDriver,
    PatchError,
    PatchErrorKind,
    UnknownOperationError,
    XmlEngine,
    apply_json_patch,
    apply_xml_patch,
)


# ======================================================================
# apply_json_patch
# ======================================================================
class TestApplyJsonPatch:

    def test_returns_same_document(self):
        doc = {"a": {"b": 1}}
        result = apply_json_patch(doc, [{"op": "add", "path": "/a/c", "value": 2}])
        assert result is doc
        assert result == {"a": {"b": 1, "c": 2}}

    def test_operations_applied_in_order(self):
        doc = {}
        apply_json_patch(doc, [
            {"op": "add", "path": "/tags", "value": []},
            {"op": "add", "path": "/tags/-", "value": "first"},
            {"op": "add", "path": "/tags/0", "value": "zero"},
            {"op": "replace", "path": "/tags/1", "value": "one"},
        ])
        assert doc == {"tags": ["zero", "one"]}

    def test_empty_operation_list(self, populated_doc):
        assert apply_json_patch(populated_doc, []) is populated_doc

    def test_fail_fast_without_rollback(self):
        doc = {"a": {"b": 1}}
        with pytest.raises(KeyNotFoundError) as exc:
            apply_json_patch(doc, [
                {"op": "add", "path": "/a/c", "value": 2},
                {"op": "replace", "path": "/a/z", "value": 5},
                {"op": "add", "path": "/a/d", "value": 3},
            ])
        assert exc.value.op_index == 1
        assert exc.value.path == "/a/z"
        # first operation stays applied, third never ran
        assert doc == {"a": {"b": 1, "c": 2}}

    def test_unknown_operation_aborts(self):
        doc = {}
        with pytest.raises(UnknownOperationError) as exc:
            apply_json_patch(doc, [{"op": "copy", "from": "/a", "path": "/b"}])
        assert exc.value.op_index == 0
        assert exc.value.kind is PatchErrorKind.UNKNOWN_OPERATION

    def test_errors_share_base_class(self):
        with pytest.raises(PatchError):
            apply_json_patch({"a": []}, [{"op": "add", "path": "/a/3", "value": 1}])

    def test_error_str_includes_index(self):
        with pytest.raises(IndexOutOfRangeError) as exc:
            apply_json_patch({"a": []}, [
                {"op": "add", "path": "/a/-", "value": 1},
                {"op": "remove", "path": "/a/5"},
            ])
        assert str(exc.value).startswith("operation 1: ")


# ======================================================================
# apply_xml_patch
# ======================================================================
class TestApplyXmlPatch:

    def test_accepts_patch_root(self, user_xml, xml_patch):
        patch = xml_patch(
            '<Replace path="/Root/User[1]/Name" value="Jane"/>'
            '<Remove path="/Root/User[2]/Age"/>'
            '<Add path="/Root/User[2]"><Email>m@x.org</Email></Add>'
        )
        result = apply_xml_patch(user_xml, patch)
        assert result is user_xml
        root = user_xml.getroot()
        assert root[0].find("Name").text == "Jane"
        assert [c.tag for c in root[1]] == ["Name", "Email"]

    def test_accepts_patch_tree(self, user_xml, xml_patch):
        tree = etree.ElementTree(xml_patch('<Remove path="/Root/User[1]"/>'))
        apply_xml_patch(user_xml, tree)
        assert len(user_xml.getroot()) == 1

    def test_accepts_element_list(self, user_xml, xml_patch):
        ops = list(xml_patch('<Remove path="/Root/User[1]"/>'))
        apply_xml_patch(user_xml, ops)
        assert len(user_xml.getroot()) == 1

    def test_namespaces(self, xml_patch):
        doc = etree.fromstring('<r:Root xmlns:r="urn:r"><r:X>1</r:X></r:Root>')
        apply_xml_patch(
            doc,
            xml_patch('<Replace path="/r:Root/r:X" value="2"/>'),
            namespaces={"r": "urn:r"},
        )
        assert doc[0].text == "2"

    def test_unknown_element_aborts_after_earlier_ops(self, user_xml, xml_patch):
        patch = xml_patch(
            '<Remove path="/Root/User[1]"/>'
            '<Rename path="/Root/User" to="Person"/>'
            '<Remove path="/Root/User[1]"/>'
        )
        with pytest.raises(UnknownOperationError) as exc:
            apply_xml_patch(user_xml, patch)
        assert exc.value.op_index == 1
        assert len(user_xml.getroot()) == 1

    def test_no_match_ops_leave_document_unchanged(self, user_xml, xml_patch):
        before = etree.tostring(user_xml)
        apply_xml_patch(user_xml, xml_patch(
            '<Replace path="/Root/Nope" value="x"/>'
            '<Remove path="/Root/Nope"/>'
            '<Add path="/Root/Nope"><A/></Add>'
        ))
        assert etree.tostring(user_xml) == before


# ======================================================================
# PatchDriver
# ======================================================================
class TestPatchDriver:

    def test_try_run_success(self):
        doc = {"a": [1, 2, 3]}
        result = PatchDriver(JsonEngine()).try_run(doc, [
            {"op": "add", "path": "/a/-", "value": 4},
            {"op": "remove", "path": "/a/0"},
        ])
        assert result.ok is True
        assert result.applied == 2
        assert result.error is None
        assert result.document == {"a": [2, 3, 4]}
        assert result.to_dict() == {"ok": True, "applied": 2, "error": None}

    def test_try_run_failure(self):
        doc = {"a": [1, 2, 3]}
        result = PatchDriver(JsonEngine()).try_run(doc, [
            {"op": "add", "path": "/a/-", "value": 4},
            {"op": "add", "path": "/a/9", "value": 5},
        ])
        assert result.ok is False
        assert result.applied == 1
        assert result.document == {"a": [1, 2, 3, 4]}
        assert isinstance(result.error, IndexOutOfRangeError)
        report = result.to_dict()
        assert report["ok"] is False
        assert report["error"]["kind"] == "index_out_of_range"
        assert report["error"]["op_index"] == 1
        assert report["error"]["path"] == "/a/9"

    def test_try_run_accepts_generator(self):
        ops = ({"op": "add", "path": f"/k{i}", "value": i} for i in range(3))
        result = PatchDriver(JsonEngine()).try_run({}, ops)
        assert result.ok is True
        assert result.applied == 3

    def test_xml_engine(self, user_xml, xml_patch):
        ops = list(xml_patch('<Remove path="/Root/User[2]"/>'))
        result = PatchDriver(XmlEngine()).try_run(user_xml, ops)
        assert result.ok is True
        assert len(user_xml.getroot()) == 1

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="docpatch.driver"):
            PatchDriver(JsonEngine()).try_run({}, [{"op": "remove", "path": "/x"}])
        assert "aborted at operation 0" in caplog.text
        assert "key_not_found" in caplog.text
