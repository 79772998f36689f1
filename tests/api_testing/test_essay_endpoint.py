import asyncio
import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch
from essaycheck.core.exceptions import SubmissionInProgressError, TransportError
from essaycheck.main import app

client = TestClient(app)

pytestmark = pytest.mark.api


@pytest.fixture
def session(fresh_session, mock_analysis_client):
    """Fresh global session whose controller talks to a mocked service"""
    fresh_session.controller.analysis_client = mock_analysis_client
    return fresh_session


def fill_form(prompt="P1", essay_text="short essay", word_limit=100):
    return client.put("/api/v1/essay/form", json={
        "prompt": prompt,
        "essay_text": essay_text,
        "word_limit": word_limit,
    })


class TestEssayForm:

    def test_initial_session_view(self, session):
        response = client.get("/api/v1/essay/")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == {"status": "idle", "failure_kind": None, "reason": None}
        assert data["form"]["submit_enabled"] is True
        assert data["form"]["submit_label"] == "Refresh Suggestions"
        assert data["report"] is None

    def test_update_form_reports_word_count(self, session):
        response = fill_form(essay_text="one two three")

        assert response.status_code == 200
        data = response.json()
        assert data["prompt"] == "P1"
        assert data["word_count"] == 3
        assert data["word_limit"] == 100

    def test_partial_update_keeps_other_fields(self, session):
        fill_form()
        response = client.put("/api/v1/essay/form", json={"essay_text": "a b"})

        data = response.json()
        assert data["prompt"] == "P1"
        assert data["word_limit"] == 100
        assert data["word_count"] == 2

    def test_negative_word_limit_rejected(self, session):
        response = client.put("/api/v1/essay/form", json={"word_limit": -3})
        assert response.status_code == 422


class TestEssaySubmit:

    def test_over_limit_returns_400_without_calling_service(self, session, mock_analysis_client):
        fill_form("Describe your hometown", "one two three four five six", 5)

        response = client.post("/api/v1/essay/submit")

        assert response.status_code == 400
        assert response.json()["detail"] == "The essay exceeds the word count limit of 5 words."
        mock_analysis_client.analyze.assert_not_called()

        view = client.get("/api/v1/essay/").json()
        assert view["form"]["notice"] == "The essay exceeds the word count limit of 5 words."
        assert view["state"]["status"] == "idle"
        assert client.get("/api/v1/essay/prompts").json() == {"prompts": [], "count": 0}

        client.post("/api/v1/essay/notice/acknowledge")
        assert client.get("/api/v1/essay/").json()["form"]["notice"] is None

    def test_successful_submit_renders_report(self, session):
        fill_form()

        response = client.post("/api/v1/essay/submit")

        assert response.status_code == 200
        assert response.json() == {
            "status": "succeeded",
            "failure_kind": None,
            "message": None,
            "report_version": 1,
        }

        report = client.get("/api/v1/essay/").json()["report"]
        assert report["content_feedback"] == "Good job"
        assert [s["header"] for s in report["sections"]] == [
            "No Spelling Errors",
            "1 Grammar Errors",
            "No Punctuation Errors",
            "1 Improvement Suggestions",
        ]
        assert all(s["expanded"] is False for s in report["sections"])
        assert client.get("/api/v1/essay/prompts").json() == {"prompts": ["P1"], "count": 1}

    def test_resubmitting_same_prompt_keeps_history(self, session):
        fill_form()
        client.post("/api/v1/essay/submit")
        client.post("/api/v1/essay/submit")

        assert client.get("/api/v1/essay/prompts").json()["prompts"] == ["P1"]

    def test_transport_failure_keeps_prior_report(self, session, mock_analysis_client):
        fill_form()
        client.post("/api/v1/essay/submit")

        mock_analysis_client.analyze.side_effect = TransportError("Could not reach analysis service")
        response = client.post("/api/v1/essay/submit")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "failed"
        assert data["failure_kind"] == "transport"
        assert data["report_version"] == 1
        assert client.get("/api/v1/essay/").json()["report"]["version"] == 1

    def test_submit_while_in_flight_returns_409(self, session):
        with patch.object(session.controller, "submit", AsyncMock(side_effect=SubmissionInProgressError())):
            response = client.post("/api/v1/essay/submit")

        assert response.status_code == 409


class TestReportSectionToggle:

    def test_toggle_without_report_returns_404(self, session):
        response = client.post("/api/v1/essay/report/sections/0/toggle")
        assert response.status_code == 404

    def test_toggle_expands_only_that_section(self, session):
        fill_form()
        client.post("/api/v1/essay/submit")

        response = client.post("/api/v1/essay/report/sections/1/toggle")

        assert response.status_code == 200
        assert response.json()["items"] == ["subject-verb agreement (position: 3)"]
        sections = client.get("/api/v1/essay/").json()["report"]["sections"]
        assert [s["expanded"] for s in sections] == [False, True, False, False]

    def test_new_report_collapses_sections(self, session):
        fill_form()
        client.post("/api/v1/essay/submit")
        client.post("/api/v1/essay/report/sections/0/toggle")

        client.post("/api/v1/essay/submit")

        report = client.get("/api/v1/essay/").json()["report"]
        assert report["version"] == 2
        assert all(s["expanded"] is False for s in report["sections"])

    def test_toggle_out_of_range_returns_404(self, session):
        fill_form()
        client.post("/api/v1/essay/submit")

        response = client.post("/api/v1/essay/report/sections/4/toggle")
        assert response.status_code == 404


class TestInFlightSubmission:

    @pytest.mark.asyncio
    async def test_concurrent_submit_returns_409(self, session, mock_analysis_client, p1_analysis):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_analyze(prompt, essay):
            started.set()
            await release.wait()
            return {"analysis": p1_analysis}

        mock_analysis_client.analyze = AsyncMock(side_effect=slow_analyze)
        fill_form()

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as async_client:
            first = asyncio.create_task(async_client.post("/api/v1/essay/submit"))
            await started.wait()

            view = (await async_client.get("/api/v1/essay/")).json()
            assert view["state"]["status"] == "in_flight"
            assert view["form"]["submit_enabled"] is False
            assert view["form"]["submit_label"] == "Analyzing..."

            second = await async_client.post("/api/v1/essay/submit")
            assert second.status_code == 409

            release.set()
            first_response = await first

        assert first_response.status_code == 200
        assert first_response.json()["status"] == "succeeded"
        assert mock_analysis_client.analyze.await_count == 1
