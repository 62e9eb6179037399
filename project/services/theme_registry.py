"""Question theme registration.

Installing copies the bundled theme directory into the user question-theme
root and writes a registration record with an empty ``extends`` so the theme
shows up as its own entry in the question type selector.
"""
import json
import logging
import os
import shutil
from datetime import datetime

logger = logging.getLogger(__name__)

CONFIG_XML = "config.xml"


class QuestionThemeRegistry:
    def __init__(self, registry_path: str, source_dir: str, user_theme_root: str,
                 root_dir: str = None, theme_name: str = "AIInterview"):
        self.registry_path = registry_path
        self.source_dir = source_dir
        self.user_theme_root = user_theme_root
        self.root_dir = root_dir or os.getcwd()
        self.theme_name = theme_name

    # -- storage -------------------------------------------------------

    def _load(self) -> list:
        if not os.path.isfile(self.registry_path):
            return []
        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            logger.error("[THEME] unreadable theme registry %s: %s", self.registry_path, e)
            return []
        return [r for r in data if isinstance(r, dict)] if isinstance(data, list) else []

    def _save(self, records: list):
        os.makedirs(os.path.dirname(os.path.abspath(self.registry_path)), exist_ok=True)
        with open(self.registry_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)

    def find(self, name: str = None):
        name = name or self.theme_name
        for rec in self._load():
            if rec.get("name") == name:
                return rec
        return None

    def all_visible(self) -> list:
        return [r for r in self._load() if r.get("visible") == "Y"]

    # -- paths ---------------------------------------------------------

    def resolved_upload_dir(self) -> str:
        """The user theme root, made absolute against the root dir when relative."""
        if os.path.isabs(self.user_theme_root):
            return self.user_theme_root
        return os.path.join(self.root_dir, self.user_theme_root)

    def destination_dir(self) -> str:
        return os.path.join(self.resolved_upload_dir().rstrip("/\\"), self.theme_name)

    @staticmethod
    def _xml_exists(xml_path) -> bool:
        return bool(xml_path) and os.path.isfile(os.path.join(xml_path, CONFIG_XML))

    def is_registered(self) -> bool:
        rec = self.find()
        return rec is not None and self._xml_exists(rec.get("xml_path"))

    # -- lifecycle -----------------------------------------------------

    def install(self) -> dict:
        dest_dir = self.destination_dir()
        shutil.copytree(self.source_dir, dest_dir, dirs_exist_ok=True)

        if not self._xml_exists(dest_dir):
            logger.error("[THEME] %s not found at %s after copy; theme will not appear in the selector",
                         CONFIG_XML, dest_dir)

        # Always re-register so a moved install gets the right path
        records = [r for r in self._load() if r.get("name") != self.theme_name]
        now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        record = {
            "name": self.theme_name,
            "visible": "Y",
            "xml_path": dest_dir,
            "image_path": "",
            "title": "AI Interview",
            "creation_date": now,
            "author": "AI Interview Plugin",
            "license": "GPL v2",
            "version": "1.0.0",
            "api_version": "1",
            "description": "An AI-powered conversational interview question type.",
            "last_update": now,
            "owner_id": 1,
            "theme_type": "question_theme",
            "question_type": "T",
            "core_theme": 0,
            "extends": "",
            "group": "Text questions",
            "settings": json.dumps({
                "subquestions": 0,
                "other": False,
                "answerscales": 0,
                "hasdefaultvalues": 0,
                "assessable": 0,
                "class": "ai-interview",
            }),
        }
        records.append(record)
        self._save(records)
        logger.info("[THEME] registered %s at %s", self.theme_name, dest_dir)
        return record

    def uninstall(self) -> bool:
        """Drop the registration; copied files stay so existing surveys keep working."""
        records = self._load()
        kept = [r for r in records if r.get("name") != self.theme_name]
        if len(kept) == len(records):
            return False
        self._save(kept)
        logger.info("[THEME] unregistered %s", self.theme_name)
        return True

    def reinstall_report(self) -> dict:
        self.install()
        rec = self.find()
        xml_ok = rec is not None and self._xml_exists(rec.get("xml_path"))
        return {
            "success": True,
            "registered": rec is not None,
            "xml_ok": xml_ok,
            "xml_path": rec.get("xml_path") if rec else None,
            "extends": rec.get("extends") if rec else None,
            "message": (
                "Theme reinstalled successfully. Refresh the question type selector."
                if xml_ok else
                "Theme registered but config.xml not found at xml_path. Check file permissions."
            ),
        }

    def diagnostics(self) -> dict:
        dest_dir = self.destination_dir()
        rec = self.find()
        return {
            "userquestionthemerootdir": self.user_theme_root,
            "resolved_uploadDir": self.resolved_upload_dir(),
            "expected_destDir": dest_dir,
            "destDir_exists": os.path.isdir(dest_dir),
            "config_xml_exists": self._xml_exists(dest_dir),
            "db_record": dict(rec, xml_exists=self._xml_exists(rec.get("xml_path"))) if rec else None,
            "all_visible_themes": [
                {
                    "name": t.get("name"),
                    "question_type": t.get("question_type"),
                    "extends": t.get("extends"),
                    "xml_path": t.get("xml_path"),
                    "xml_exists": self._xml_exists(t.get("xml_path")),
                }
                for t in self.all_visible()
            ],
        }


def registry_from_config(cfg) -> QuestionThemeRegistry:
    return QuestionThemeRegistry(
        registry_path=cfg["THEME_REGISTRY_PATH"],
        source_dir=cfg["THEME_SOURCE_DIR"],
        user_theme_root=cfg["USER_THEME_ROOT"],
        root_dir=cfg.get("ROOT_DIR"),
        theme_name=cfg.get("THEME_NAME", "AIInterview"),
    )
