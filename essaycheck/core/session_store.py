"""
Process-wide holder for the essay session's controller
"""
import logging

from essaycheck.services.submission_service import SubmissionController

logger = logging.getLogger(__name__)


class SessionStore:
    """Keeps one SubmissionController for the running session"""

    def __init__(self):
        self._controller = SubmissionController()

    @property
    def controller(self) -> SubmissionController:
        return self._controller

    def reset(self) -> None:
        """Start a fresh session: empty form, no report, no prompt history"""
        self._controller = SubmissionController()
        logger.info("Reset essay session")

# Global instance
session_store = SessionStore()
