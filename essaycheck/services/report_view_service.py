"""
Collapsible rendering model for an analysis report.

A report is shown as a content-feedback paragraph followed by four
independently expandable sections. Expansion state lives on each
ReportSection instance and nowhere else.
"""
from typing import List, Dict, Any, Optional, Sequence
import logging

from essaycheck.models.report_model import AnalysisReport, Finding

logger = logging.getLogger(__name__)

REPORT_HEADING = "Analysis Results"
CONTENT_FEEDBACK_HEADING = "Content Feedback:"


def format_finding(finding: Finding) -> str:
    """Render one finding as a single line, appending every optional field present"""
    line = finding.error_text
    if finding.correction:
        line += f' — Correction: "{finding.correction}"'
    if finding.suggestion:
        line += f" — Suggestion: {finding.suggestion}"
    if finding.position is not None:
        line += f" (position: {finding.position})"
    return line


class ReportSection:
    """One category of findings behind a toggle header"""

    def __init__(self, title: str, count: int, findings: Sequence[Finding], icon: str):
        self.title = title
        self.count = count
        self.findings = list(findings)
        self.icon = icon
        self.expanded = False

    @property
    def header(self) -> str:
        return f"{self.count if self.count > 0 else 'No'} {self.title}"

    def toggle(self) -> bool:
        self.expanded = not self.expanded
        return self.expanded

    def render_items(self) -> List[str]:
        if not self.expanded:
            return []
        if self.count == 0:
            return [f"No {self.title.lower()} found."]
        return [format_finding(finding) for finding in self.findings]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "header": self.header,
            "count": self.count,
            "icon": self.icon,
            "expanded": self.expanded,
            "items": self.render_items(),
        }


class ReportAssembler:
    """Builds the four category sections of a report, in fixed order"""

    SPELLING = ("Spelling Errors", "spelling-icon")
    GRAMMAR = ("Grammar Errors", "grammar-icon")
    PUNCTUATION = ("Punctuation Errors", "punctuation-icon")
    SUGGESTIONS = ("Improvement Suggestions", "suggestion-icon")

    @classmethod
    def assemble(cls, report: Optional[AnalysisReport]) -> List[ReportSection]:
        if report is None:
            return []

        suggestions = [Finding(error_text=text) for text in report.improvement_suggestions]
        categories = [
            (cls.SPELLING, report.spelling_errors),
            (cls.GRAMMAR, report.grammar_errors),
            (cls.PUNCTUATION, report.punctuation_errors),
            (cls.SUGGESTIONS, suggestions),
        ]
        return [
            ReportSection(title, len(findings), findings, icon)
            for (title, icon), findings in categories
        ]


class ReportView:
    """
    The rendered report for one report version.

    A fresh instance is built for every new version so that each section
    starts collapsed again.
    """

    def __init__(self, report: AnalysisReport, version: int):
        self.report = report
        self.version = version
        self.content_feedback = report.content_feedback
        self.sections = ReportAssembler.assemble(report)
        logger.info(f"Built report view version {version}")

    def section(self, index: int) -> ReportSection:
        if index < 0 or index >= len(self.sections):
            raise IndexError(f"No report section at index {index}")
        return self.sections[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "heading": REPORT_HEADING,
            "content_feedback_heading": CONTENT_FEEDBACK_HEADING,
            "content_feedback": self.content_feedback,
            "sections": [section.to_dict() for section in self.sections],
        }
