"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest
from lxml import etree

from docpatch.settings import reset_settings_cache


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch, tmp_path):
    """Run each test from an empty directory with uncached settings."""
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def populated_doc():
    """A pre-populated document for testing patches."""
    return {
        "metadata": {"title": "Test", "author": "Bot"},
        "sections": [
            {
                "section_name": "Overview",
                "fields": [
                    {"label": "Revenue", "value": 1000},
                    {"label": "Profit", "value": 200},
                ],
            }
        ],
        "tags": ["a", "b", "c"],
    }


@pytest.fixture
def user_xml():
    """A small user document as an lxml tree."""
    return etree.ElementTree(etree.fromstring(
        "<Root>"
        "<User id=\"1\"><Name>John</Name><Age>30</Age></User>"
        "<User id=\"2\"><Name>Mary</Name><Age>25</Age></User>"
        "</Root>"
    ))


@pytest.fixture
def xml_patch():
    """Build a patch root element wrapping the given operation markup."""

    def _build(body: str):
        return etree.fromstring(f"<Patch>{body}</Patch>")

    return _build
