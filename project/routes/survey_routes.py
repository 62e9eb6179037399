"""Survey host routes: respondent session, question pages and answer storage."""
import logging
from flask import Blueprint, current_app, request, jsonify, render_template, url_for

from services.errors import ChatProxyError
from services.host_session import (
    has_survey_session,
    is_admin,
    start_survey_session,
    store_answer,
    stored_answer,
    survey_language,
)
from services.widget_renderer import render_question

logger = logging.getLogger(__name__)

survey_bp = Blueprint('survey', __name__)


def _catalog():
    return current_app.extensions["survey_catalog"]


def _lookup(sid, qid=None):
    survey = _catalog().get(sid)
    if survey is None:
        return None, None, (jsonify({"error": "Survey not found"}), 404)
    if qid is None:
        return survey, None, None
    question = survey.question(qid)
    if question is None:
        return survey, None, (jsonify({"error": "Question not found"}), 404)
    return survey, question, None


@survey_bp.route('/survey/<int:sid>/start', methods=['POST'])
def start(sid):
    """Open a respondent session for the survey."""
    survey, _, err = _lookup(sid)
    if err:
        return err
    data = request.get_json(silent=True) or {}
    language = str(data.get("language") or survey.language)
    start_survey_session(sid, language)
    logger.info("[SURVEY] session started survey=%s lang=%s", sid, language)
    return jsonify({"ok": True, "surveyId": sid, "language": language}), 200


@survey_bp.route('/survey/<int:sid>/question/<int:qid>', methods=['GET'])
def question_page(sid, qid):
    survey, question, err = _lookup(sid, qid)
    if err:
        return err
    if not (has_survey_session(sid) or is_admin()):
        return jsonify({"error": "No active survey session. Please start the survey first."}), 403

    language = survey_language(sid, survey.language)
    try:
        question_html = render_question(
            question,
            ajax_url=url_for('chat.chat'),
            language=language,
            answer=stored_answer(sid, question.sgqa),
        )
    except ChatProxyError as e:
        return jsonify({"error": str(e)}), e.status_code
    return render_template(
        "question_page.html",
        survey=survey,
        question=question,
        question_html=question_html,
        language=language,
    )


@survey_bp.route('/survey/<int:sid>/question/<int:qid>/answer', methods=['GET', 'POST'])
def save_answer(sid, qid):
    """Store the answer under the question's SGQA field name."""
    _, question, err = _lookup(sid, qid)
    if err:
        return err
    if not has_survey_session(sid):
        return jsonify({"error": "No active survey session. Please start the survey first."}), 403

    if request.method == 'GET':
        return jsonify({"sgqa": question.sgqa, "answer": stored_answer(sid, question.sgqa)}), 200

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        answer = data.get("answer", "")
    else:
        answer = request.form.get(question.sgqa, "")
    if not isinstance(answer, str):
        return jsonify({"error": "answer must be a string"}), 400
    store_answer(sid, question.sgqa, answer)
    logger.info("[SURVEY] answer stored %s chars=%d", question.sgqa, len(answer))
    return jsonify({"ok": True, "sgqa": question.sgqa}), 200
