"""Survey catalog: surveys and their questions, loaded from a JSON file."""
import json
import logging
import os

from models.question import QuestionSettings
from config.settings import THEME_NAME

logger = logging.getLogger(__name__)


class Question:
    def __init__(self, sid: int, gid: int, qid: int, title: str = "", text: str = "",
                 theme: str = "", attributes: dict = None):
        self.sid = int(sid)
        self.gid = int(gid)
        self.qid = int(qid)
        self.title = title
        self.text = text
        self.theme = theme
        self.attributes = attributes or {}

    @property
    def sgqa(self) -> str:
        """Host field name of the answer: survey X group X question."""
        return f"{self.sid}X{self.gid}X{self.qid}"

    @property
    def is_ai_interview(self) -> bool:
        return self.theme == THEME_NAME

    def settings(self) -> QuestionSettings:
        return QuestionSettings.from_attributes(self.attributes)


class Survey:
    def __init__(self, sid: int, title: str = "", language: str = "en", questions=None):
        self.sid = int(sid)
        self.title = title
        self.language = language or "en"
        self.questions = {q.qid: q for q in (questions or [])}

    def question(self, qid: int):
        return self.questions.get(int(qid))


class SurveyCatalog:
    """Read-only view of the surveys the host serves."""

    def __init__(self, surveys=None):
        self.surveys = {s.sid: s for s in (surveys or [])}

    def get(self, sid: int):
        return self.surveys.get(int(sid))

    @classmethod
    def from_dict(cls, data: dict) -> "SurveyCatalog":
        surveys = []
        for s in data.get("surveys", []):
            sid = int(s["sid"])
            questions = [
                Question(
                    sid=sid,
                    gid=q.get("gid", 1),
                    qid=q["qid"],
                    title=q.get("title", ""),
                    text=q.get("text", ""),
                    theme=q.get("theme", ""),
                    attributes=q.get("attributes") or {},
                )
                for q in s.get("questions", [])
            ]
            surveys.append(Survey(sid, s.get("title", ""), s.get("language", "en"), questions))
        return cls(surveys)

    @classmethod
    def load(cls, path: str) -> "SurveyCatalog":
        if not path or not os.path.isfile(path):
            logger.warning("[SURVEYS] catalog not found at %s; serving no surveys", path)
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
