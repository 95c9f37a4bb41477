"""Tests for docpatch/settings.py."""

from __future__ import annotations

from docpatch.settings import get_settings, reset_settings_cache


class TestSettings:

    def test_defaults(self):
        s = get_settings()
        assert s.JSON_INPUT_PATH == "user_full.json"
        assert s.XML_OUTPUT_PATH == "user_full_patched.xml"
        assert s.JSON_INDENT == 2
        assert s.XML_PRETTY_PRINT is True
        assert s.LOG_LEVEL == "WARNING"

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("XML_PRETTY_PRINT", "false")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        reset_settings_cache()
        s = get_settings()
        assert s.XML_PRETTY_PRINT is False
        assert s.LOG_LEVEL == "DEBUG"

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("JSON_PATCH_PATH=custom_patch.json\n", encoding="utf-8")
        reset_settings_cache()
        assert get_settings().JSON_PATCH_PATH == "custom_patch.json"
