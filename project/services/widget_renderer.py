"""Server-side rendering of the AI Interview chat widget."""
import logging
import re

from flask import render_template
from markupsafe import Markup

from models.interview_state import InterviewWidget
from models.question import QuestionSettings
from services.errors import WidgetInjectionError
from services.transcript import CONCLUDED_MARKER, SKIPPED_PLACEHOLDER

logger = logging.getLogger(__name__)

WIDGET_TEMPLATE = "ai_interview_widget.html"
LONG_TEXT_TEMPLATE = "long_free_text.html"


def textarea_pattern(sgqa: str):
    """Matches the host's answer textarea for one question, whatever its other attributes."""
    name = re.escape(sgqa)
    return re.compile(
        r"<textarea\b[^>]*\bname\s*=\s*([\"'])" + name + r"\1[^>]*>.*?</textarea\s*>",
        re.IGNORECASE | re.DOTALL,
    )


def render_widget(question, settings: QuestionSettings, ajax_url: str, language: str, answer: str = "") -> str:
    """Render the widget for one page view.

    A stored transcript comes back as pre-rendered bubbles with the widget
    closed; otherwise the answer field starts out holding the in-progress
    placeholder.
    """
    widget = InterviewWidget(settings, question.sid, question.sgqa, language, existing_answer=answer)
    return render_template(
        WIDGET_TEMPLATE,
        widget=widget,
        ajax_url=ajax_url,
        mandatory="1" if settings.mandatory else "0",
        prompt=settings.prompt,
        max_tokens=settings.max_tokens,
        skipped_placeholder=SKIPPED_PLACEHOLDER,
        concluded_marker=CONCLUDED_MARKER,
    )


def inject_widget(html: str, sgqa: str, widget_html: str) -> str:
    """Replace the question's textarea with the widget; exactly one substitution."""
    new_html, count = textarea_pattern(sgqa).subn(lambda _m: widget_html, html, count=1)
    if count == 0:
        logger.error("[WIDGET] no answer textarea for %s in rendered question", sgqa)
        raise WidgetInjectionError(f"Answer field for {sgqa} not found in question markup")
    return new_html


def render_question(question, ajax_url: str, language: str, answer: str = "") -> Markup:
    """Render a long-free-text question, swapping in the widget for AI Interview questions."""
    html = render_template(LONG_TEXT_TEMPLATE, question=question, answer=answer or "")
    if not question.is_ai_interview:
        return Markup(html)
    widget_html = render_widget(question, question.settings(), ajax_url, language, answer)
    return Markup(inject_widget(html, question.sgqa, widget_html))
