"""
Submission state machine for the essay form.

idle -> validating -> failed(validation) -> idle
                   -> in_flight -> succeeded -> idle
                                -> failed(transport | parse) -> idle
"""
from typing import Callable, List, Optional
import asyncio
import logging

from essaycheck.core.exceptions import (
    EssaySubmissionError,
    ReportParseError,
    SubmissionInProgressError,
    TransportError,
    WordLimitExceededError,
)
from essaycheck.models.report_model import AnalysisReport, parse_analysis_payload
from essaycheck.models.submission_model import (
    EssayRequest,
    FailureKind,
    FormView,
    SubmissionState,
    SubmissionStatus,
)
from essaycheck.services.analysis_client_service import AnalysisClient
from essaycheck.services.prompt_history_service import PromptHistory
from essaycheck.services.report_view_service import ReportView
from essaycheck.utils.text_processing import count_words

logger = logging.getLogger(__name__)

SUBMIT_LABEL = "Refresh Suggestions"
IN_PROGRESS_LABEL = "Analyzing..."

StateListener = Callable[[SubmissionState], None]


class SubmissionController:
    """Owns the essay form, the current report and the prompt history"""

    def __init__(self, analysis_client: Optional[AnalysisClient] = None, prompt_history: Optional[PromptHistory] = None):
        self.analysis_client = analysis_client or AnalysisClient()
        self.prompt_history = prompt_history if prompt_history is not None else PromptHistory()

        self.prompt = ""
        self.essay_text = ""
        self.word_limit: Optional[int] = None

        self.report: Optional[AnalysisReport] = None
        self.report_version = 0
        self.notice: Optional[str] = None

        self._state = SubmissionState()
        self._report_view: Optional[ReportView] = None
        self._listeners: List[StateListener] = []

    # ==================== FORM ====================

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def set_essay_text(self, essay_text: str) -> None:
        self.essay_text = essay_text

    def set_word_limit(self, word_limit: Optional[int]) -> None:
        if word_limit is not None and (isinstance(word_limit, bool) or not isinstance(word_limit, int) or word_limit < 0):
            raise ValueError(f"Word limit must be a non-negative integer, got {word_limit!r}")
        self.word_limit = word_limit

    @property
    def word_count(self) -> int:
        return count_words(self.essay_text)

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def submit_enabled(self) -> bool:
        return self._state.status != SubmissionStatus.IN_FLIGHT

    @property
    def submit_label(self) -> str:
        return IN_PROGRESS_LABEL if self._state.status == SubmissionStatus.IN_FLIGHT else SUBMIT_LABEL

    @property
    def prompt_suggestions(self) -> List[str]:
        return self.prompt_history.list()

    def form_view(self) -> FormView:
        return FormView(
            prompt=self.prompt,
            essay_text=self.essay_text,
            word_limit=self.word_limit,
            word_count=self.word_count,
            submit_enabled=self.submit_enabled,
            submit_label=self.submit_label,
            prompt_suggestions=self.prompt_suggestions,
            notice=self.notice,
        )

    def acknowledge_notice(self) -> None:
        self.notice = None

    # ==================== REPORT ====================

    @property
    def report_view(self) -> Optional[ReportView]:
        """View for the current report, rebuilt whenever the report version changes"""
        if self.report is None:
            return None
        if self._report_view is None or self._report_view.version != self.report_version:
            self._report_view = ReportView(self.report, self.report_version)
        return self._report_view

    # ==================== STATE MACHINE ====================

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with every state entered"""
        self._listeners.append(listener)

    def _transition(self, status: SubmissionStatus, **details) -> SubmissionState:
        self._state = SubmissionState(status=status, **details)
        logger.info(f"Submission state -> {status.value}")
        for listener in self._listeners:
            try:
                listener(self._state)
            except Exception:
                logger.exception(f"State listener failed on {status.value}")
        return self._state

    def _fail(self, error: EssaySubmissionError) -> SubmissionState:
        failed = self._transition(
            SubmissionStatus.FAILED,
            failure_kind=FailureKind(error.failure_kind),
            reason=error.message,
        )
        self._transition(SubmissionStatus.IDLE)
        return failed

    async def submit(self) -> SubmissionState:
        """
        Validate the form and, if it passes, request one analysis.

        Returns:
            The terminal state of this attempt (succeeded or failed); the
            controller itself is back to idle when this returns.

        Raises:
            SubmissionInProgressError: if another submission is in flight
        """
        if self._state.status == SubmissionStatus.IN_FLIGHT:
            logger.warning("Rejected submission while another one is in flight")
            raise SubmissionInProgressError()

        self.notice = None
        self._transition(SubmissionStatus.VALIDATING)

        request = EssayRequest(prompt=self.prompt, essay_text=self.essay_text, word_limit=self.word_limit)
        try:
            request.check_word_limit()
        except WordLimitExceededError as e:
            logger.info(f"Blocked submission: {e.word_count} words exceeds limit of {e.word_limit}")
            self.notice = e.message
            return self._fail(e)

        self._transition(SubmissionStatus.IN_FLIGHT)
        try:
            payload = await self.analysis_client.analyze(request.prompt, request.essay_text)
            report = parse_analysis_payload(payload)
        except (TransportError, ReportParseError) as e:
            logger.error(f"Error analyzing text ({e.failure_kind}): {e.message}")
            return self._fail(e)
        except asyncio.CancelledError:
            logger.warning("Submission cancelled while in flight")
            self._transition(SubmissionStatus.IDLE)
            raise
        except Exception:
            logger.exception("Unexpected error during analysis")
            self._transition(SubmissionStatus.IDLE)
            raise

        self.report = report
        self.report_version += 1
        self.prompt_history.append(request.prompt)

        succeeded = self._transition(SubmissionStatus.SUCCEEDED, report=report)
        self._transition(SubmissionStatus.IDLE)
        return succeeded
