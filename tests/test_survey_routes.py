"""Tests for the survey host: sessions, question pages and answers."""

from services.transcript import CONCLUDED_MARKER

SURVEY_ID = 123456
AI_SGQA = "123456X1X10"


class TestSession:
    def test_start_uses_survey_language_by_default(self, client):
        data = client.post(f"/survey/{SURVEY_ID}/start").get_json()
        assert data["language"] == "de"

    def test_unknown_survey(self, client):
        assert client.post("/survey/1/start").status_code == 404


class TestQuestionPage:
    def test_requires_session(self, client):
        assert client.get(f"/survey/{SURVEY_ID}/question/10").status_code == 403

    def test_admin_preview(self, client):
        resp = client.get(f"/survey/{SURVEY_ID}/question/10", headers={"X-Admin-Token": "admin-secret"})
        assert resp.status_code == 200

    def test_renders_widget(self, survey_client):
        resp = survey_client.get(f"/survey/{SURVEY_ID}/question/10")
        assert resp.status_code == 200
        html = resp.get_data(as_text=True)
        assert 'class="ai-interview-widget"' in html
        assert f'data-sgqa="{AI_SGQA}"' in html
        assert 'data-ajax-url="/api/chat"' in html
        assert 'data-language="fr"' in html
        assert 'data-mandatory="1"' in html
        assert 'data-max-tokens="1000"' in html
        assert "&lt;b&gt;remote work&lt;/b&gt;" in html
        assert "/static/ai-interview.js" in html

    def test_plain_question(self, survey_client):
        html = survey_client.get(f"/survey/{SURVEY_ID}/question/11").get_data(as_text=True)
        assert "ai-interview-widget" not in html
        assert 'name="123456X1X11"' in html

    def test_unknown_question(self, survey_client):
        assert survey_client.get(f"/survey/{SURVEY_ID}/question/99").status_code == 404


class TestAnswers:
    TRANSCRIPT = "Interviewer: Hi!\nUser: Hello.\n\n" + CONCLUDED_MARKER

    def test_form_post_stores_under_sgqa(self, survey_client):
        resp = survey_client.post(f"/survey/{SURVEY_ID}/question/10/answer", data={AI_SGQA: self.TRANSCRIPT})
        assert resp.status_code == 200
        data = survey_client.get(f"/survey/{SURVEY_ID}/question/10/answer").get_json()
        assert data == {"sgqa": AI_SGQA, "answer": self.TRANSCRIPT}

    def test_stored_transcript_rendered_for_back_navigation(self, survey_client):
        survey_client.post(f"/survey/{SURVEY_ID}/question/10/answer", json={"answer": self.TRANSCRIPT})
        html = survey_client.get(f"/survey/{SURVEY_ID}/question/10").get_data(as_text=True)
        assert "Interviewer: Hi!\nUser: Hello." in html

    def test_requires_session(self, client):
        resp = client.post(f"/survey/{SURVEY_ID}/question/10/answer", json={"answer": "x"})
        assert resp.status_code == 403

    def test_rejects_non_text_answer(self, survey_client):
        resp = survey_client.post(f"/survey/{SURVEY_ID}/question/10/answer", json={"answer": ["x"]})
        assert resp.status_code == 400

    def test_answers_are_per_respondent(self, app, survey_client):
        survey_client.post(f"/survey/{SURVEY_ID}/question/10/answer", json={"answer": self.TRANSCRIPT})
        other = app.test_client()
        other.post(f"/survey/{SURVEY_ID}/start")
        data = other.get(f"/survey/{SURVEY_ID}/question/10/answer").get_json()
        assert data["answer"] == ""
