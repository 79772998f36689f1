from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import List, Dict, Any, Optional
import json
import logging

from essaycheck.core.exceptions import ReportParseError
from essaycheck.utils.text_processing import strip_code_fences

logger = logging.getLogger(__name__)


class Finding(BaseModel):
    """One flagged issue; only the error text is required"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    error_text: str = Field(alias="error")
    correction: Optional[str] = None
    suggestion: Optional[str] = None
    position: Optional[int] = None

    @field_validator("correction", "suggestion", mode="before")
    @classmethod
    def _blank_non_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("position", mode="before")
    @classmethod
    def _blank_non_integer(cls, value: Any) -> Optional[int]:
        # Malformed positions are dropped rather than failing the whole report
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return int(value.strip())
        return None


class AnalysisReport(BaseModel):
    """Structured critique returned for one essay submission"""
    model_config = ConfigDict(frozen=True)

    content_feedback: str = ""
    spelling_errors: List[Finding]
    grammar_errors: List[Finding]
    punctuation_errors: List[Finding]
    improvement_suggestions: List[str]

    def to_wire(self) -> Dict[str, Any]:
        """Serialize back to the service's field names, dropping absent optionals"""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_analysis_report(analysis: Any) -> AnalysisReport:
    """
    Parse the serialized report carried in a response's ``analysis`` field.

    Args:
        analysis: String holding the JSON report, optionally wrapped in
            markdown code fences

    Returns:
        AnalysisReport

    Raises:
        ReportParseError: if the value is not a string, not JSON, or does not
            match the report shape
    """
    if not isinstance(analysis, str):
        raise ReportParseError(
            f"Expected 'analysis' to be a JSON string, got {type(analysis).__name__}"
        )

    try:
        data = json.loads(strip_code_fences(analysis))
    except json.JSONDecodeError as e:
        raise ReportParseError(f"Failed to parse analysis JSON: {e}") from e

    if not isinstance(data, dict):
        raise ReportParseError(f"Expected analysis object, got {type(data).__name__}")

    try:
        return AnalysisReport.model_validate(data)
    except ValidationError as e:
        raise ReportParseError(f"Analysis does not match report shape: {e.error_count()} error(s)") from e


def parse_analysis_payload(payload: Any) -> AnalysisReport:
    """Extract and parse the ``analysis`` field of a service response body"""
    if not isinstance(payload, dict) or "analysis" not in payload:
        raise ReportParseError("Response payload has no 'analysis' field")

    report = parse_analysis_report(payload["analysis"])
    logger.info(
        f"Parsed report: {len(report.spelling_errors)} spelling, "
        f"{len(report.grammar_errors)} grammar, "
        f"{len(report.punctuation_errors)} punctuation, "
        f"{len(report.improvement_suggestions)} suggestions"
    )
    return report
