"""
Shared pytest configuration for essaycheck tests.
"""

import json
import pytest
from unittest.mock import AsyncMock, Mock
from typing import Dict, Any

from essaycheck.core.session_store import session_store
from essaycheck.services.analysis_client_service import AnalysisClient
from essaycheck.services.prompt_history_service import PromptHistory
from essaycheck.services.submission_service import SubmissionController

P1_ANALYSIS = (
    '{"content_feedback":"Good job","spelling_errors":[],'
    '"grammar_errors":[{"error":"subject-verb agreement","position":3}],'
    '"punctuation_errors":[],"improvement_suggestions":["Add more detail"]}'
)

@pytest.fixture
def p1_analysis() -> str:
    """Serialized report for the 'P1' scenario"""
    return P1_ANALYSIS

@pytest.fixture
def full_analysis() -> Dict[str, Any]:
    """Report dict exercising every optional finding field"""
    return {
        "content_feedback": "Clear structure, thin evidence.",
        "spelling_errors": [
            {"error": "recieve", "correction": "receive", "position": 12},
        ],
        "grammar_errors": [
            {"error": "they was", "correction": "they were", "suggestion": "Match verb to plural subject"},
        ],
        "punctuation_errors": [
            {"error": "missing comma after introductory clause", "suggestion": "Add a comma after 'However'"},
            {"error": "double period"},
        ],
        "improvement_suggestions": ["Cite a source", "Shorten the conclusion"],
    }

@pytest.fixture
def mock_analysis_client():
    """AnalysisClient whose analyze() resolves to the 'P1' payload"""
    client = Mock(spec=AnalysisClient)
    client.analyze = AsyncMock(return_value={"analysis": P1_ANALYSIS})
    return client

@pytest.fixture
def controller(mock_analysis_client) -> SubmissionController:
    """Controller with a mocked remote service and a fresh history"""
    return SubmissionController(analysis_client=mock_analysis_client, prompt_history=PromptHistory())

@pytest.fixture
def recorded_states(controller):
    """Statuses entered by the controller, in order"""
    states = []
    controller.add_listener(lambda state: states.append(state.status.value))
    return states

@pytest.fixture
def payload_for():
    """Wrap a report dict into a service response body"""
    def _payload(report: Dict[str, Any]) -> Dict[str, Any]:
        return {"analysis": json.dumps(report)}
    return _payload

@pytest.fixture
def fresh_session():
    """Reset the global session before and after a test"""
    session_store.reset()
    yield session_store
    session_store.reset()

# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "api: mark test as API test"
    )
