from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from essaycheck.core.exceptions import WordLimitExceededError
from essaycheck.models.report_model import AnalysisReport
from essaycheck.utils.text_processing import count_words


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(str, Enum):
    VALIDATION = "validation"
    TRANSPORT = "transport"
    PARSE = "parse"


class EssayRequest(BaseModel):
    """One submission attempt"""
    prompt: str
    essay_text: str
    word_limit: Optional[int] = Field(default=None, ge=0)

    @property
    def word_count(self) -> int:
        return count_words(self.essay_text)

    def check_word_limit(self) -> None:
        """Raise WordLimitExceededError when a set limit is exceeded"""
        if self.word_limit is None:
            return
        word_count = self.word_count
        if word_count > self.word_limit:
            raise WordLimitExceededError(word_count, self.word_limit)


class SubmissionState(BaseModel):
    """Current position of the submission state machine"""
    model_config = ConfigDict(frozen=True)

    status: SubmissionStatus = SubmissionStatus.IDLE
    failure_kind: Optional[FailureKind] = None
    reason: Optional[str] = None
    report: Optional[AnalysisReport] = None


class FormUpdateRequest(BaseModel):
    """Partial update of the essay form; omitted fields are left unchanged"""
    prompt: Optional[str] = None
    essay_text: Optional[str] = None
    word_limit: Optional[int] = Field(default=None, ge=0)


class FormView(BaseModel):
    prompt: str
    essay_text: str
    word_limit: Optional[int] = None
    word_count: int
    submit_enabled: bool
    submit_label: str
    prompt_suggestions: List[str]
    notice: Optional[str] = None


class SubmitResponse(BaseModel):
    """Response model for a submission attempt"""
    status: SubmissionStatus
    failure_kind: Optional[FailureKind] = None
    message: Optional[str] = None
    report_version: int
