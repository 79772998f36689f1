from fastapi import APIRouter, HTTPException
from typing import Dict, Any
from essaycheck.core.exceptions import SubmissionInProgressError
from essaycheck.core.session_store import session_store
from essaycheck.models.schemas import PromptListResponse
from essaycheck.models.submission_model import (
    FailureKind,
    FormUpdateRequest,
    FormView,
    SubmissionStatus,
    SubmitResponse,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/")
async def get_session_view() -> Dict[str, Any]:
    """Form, submission state and rendered report of the current session"""
    controller = session_store.controller
    report_view = controller.report_view

    return {
        "state": {
            "status": controller.state.status.value,
            "failure_kind": controller.state.failure_kind.value if controller.state.failure_kind else None,
            "reason": controller.state.reason,
        },
        "form": controller.form_view().model_dump(),
        "report": report_view.to_dict() if report_view else None,
    }

@router.put("/form", response_model=FormView)
async def update_form(request: FormUpdateRequest):
    """Update any subset of prompt, essay text and word limit"""
    controller = session_store.controller
    fields = request.model_fields_set

    if "prompt" in fields:
        controller.set_prompt(request.prompt or "")
    if "essay_text" in fields:
        controller.set_essay_text(request.essay_text or "")
    if "word_limit" in fields:
        controller.set_word_limit(request.word_limit)

    return controller.form_view()

@router.post("/submit", response_model=SubmitResponse)
async def submit_essay():
    """
    Submit the current form for analysis

    Returns:
        SubmitResponse with the outcome of this attempt. Transport and parse
        failures come back as status "failed" with the previous report intact.
    """
    controller = session_store.controller

    try:
        result = await controller.submit()
    except SubmissionInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)

    if result.status == SubmissionStatus.FAILED and result.failure_kind == FailureKind.VALIDATION:
        raise HTTPException(status_code=400, detail=result.reason)

    if result.status == SubmissionStatus.FAILED:
        logger.info(f"Submission failed ({result.failure_kind.value}); keeping report version {controller.report_version}")

    return SubmitResponse(
        status=result.status,
        failure_kind=result.failure_kind,
        message=result.reason,
        report_version=controller.report_version,
    )

@router.post("/notice/acknowledge")
async def acknowledge_notice() -> Dict[str, str]:
    """Dismiss the blocking notice shown after a rejected submission"""
    session_store.controller.acknowledge_notice()
    return {"message": "Notice acknowledged"}

@router.post("/report/sections/{index}/toggle")
async def toggle_report_section(index: int) -> Dict[str, Any]:
    """Expand or collapse one section of the current report"""
    report_view = session_store.controller.report_view

    if report_view is None:
        raise HTTPException(status_code=404, detail="No report available")

    try:
        section = report_view.section(index)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"No report section at index {index}")

    section.toggle()
    return section.to_dict()

@router.get("/prompts", response_model=PromptListResponse)
async def list_prompts():
    """Prompts used in this session, oldest first"""
    prompts = session_store.controller.prompt_suggestions

    return {
        "prompts": prompts,
        "count": len(prompts)
    }
