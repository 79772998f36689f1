"""
Error taxonomy for a single essay submission attempt.

Every failure is terminal for the attempt it belongs to; the controller
always returns to idle afterwards.
"""
from typing import Optional


class EssaySubmissionError(Exception):
    """Base class for submission failures"""

    failure_kind: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class WordLimitExceededError(EssaySubmissionError):
    """The essay has more words than the configured limit"""

    failure_kind = "validation"

    def __init__(self, word_count: int, word_limit: int):
        super().__init__(f"The essay exceeds the word count limit of {word_limit} words.")
        self.word_count = word_count
        self.word_limit = word_limit


class TransportError(EssaySubmissionError):
    """The request could not be sent or no usable response came back"""

    failure_kind = "transport"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReportParseError(EssaySubmissionError):
    """The response payload is not a valid analysis report"""

    failure_kind = "parse"


class SubmissionInProgressError(EssaySubmissionError):
    """A submission is already in flight for this controller"""

    def __init__(self):
        super().__init__("An essay is already being analyzed")
