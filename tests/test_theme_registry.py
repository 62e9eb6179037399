"""Tests for question theme installation and diagnostics."""

import json
import os

import pytest

from config.settings import THEME_SOURCE_DIR
from services.theme_registry import QuestionThemeRegistry


@pytest.fixture
def registry(tmp_path):
    return QuestionThemeRegistry(
        registry_path=str(tmp_path / "data" / "themes.json"),
        source_dir=THEME_SOURCE_DIR,
        user_theme_root="upload/themes/question",
        root_dir=str(tmp_path),
    )


class TestInstall:
    def test_not_registered_initially(self, registry):
        assert registry.find() is None
        assert not registry.is_registered()

    def test_install_copies_and_registers(self, registry, tmp_path):
        record = registry.install()
        dest = tmp_path / "upload" / "themes" / "question" / "AIInterview"
        assert (dest / "config.xml").is_file()
        assert record["xml_path"] == str(dest)
        assert record["extends"] == ""
        assert record["question_type"] == "T"
        assert json.loads(record["settings"])["class"] == "ai-interview"
        assert registry.is_registered()

    def test_reinstall_replaces_record(self, registry):
        registry.install()
        registry.install()
        names = [r["name"] for r in registry.all_visible()]
        assert names == ["AIInterview"]

    def test_reinstall_report(self, registry):
        report = registry.reinstall_report()
        assert report["success"] is True
        assert report["registered"] is True
        assert report["xml_ok"] is True
        assert report["extends"] == ""

    def test_broken_install_detected(self, registry):
        record = registry.install()
        os.remove(os.path.join(record["xml_path"], "config.xml"))
        assert not registry.is_registered()

    def test_uninstall_keeps_files(self, registry):
        record = registry.install()
        assert registry.uninstall() is True
        assert registry.find() is None
        assert os.path.isdir(record["xml_path"])
        assert registry.uninstall() is False


class TestDiagnostics:
    def test_before_install(self, registry, tmp_path):
        info = registry.diagnostics()
        assert info["userquestionthemerootdir"] == "upload/themes/question"
        assert info["resolved_uploadDir"] == os.path.join(str(tmp_path), "upload/themes/question")
        assert info["destDir_exists"] is False
        assert info["db_record"] is None
        assert info["all_visible_themes"] == []

    def test_after_install(self, registry):
        registry.install()
        info = registry.diagnostics()
        assert info["config_xml_exists"] is True
        assert info["db_record"]["xml_exists"] is True
        assert info["all_visible_themes"][0]["name"] == "AIInterview"


class TestCorruptRegistry:
    @pytest.mark.parametrize("content", ["{not json", '["junk", 3]', '{"name": "AIInterview"}'])
    def test_treated_as_empty(self, registry, content):
        os.makedirs(os.path.dirname(registry.registry_path), exist_ok=True)
        with open(registry.registry_path, "w", encoding="utf-8") as f:
            f.write(content)
        assert registry.find() is None
        assert registry.diagnostics()["all_visible_themes"] == []

    def test_install_overwrites_corrupt_file(self, registry):
        os.makedirs(os.path.dirname(registry.registry_path), exist_ok=True)
        with open(registry.registry_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        registry.install()
        assert registry.is_registered()
