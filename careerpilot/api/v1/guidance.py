import json

from fastapi import APIRouter, Depends, Request

from careerpilot.ai.errors import ValidationError
from careerpilot.ai.types import GenerationRequest
from careerpilot.api.deps import get_engine
from careerpilot.core.rate_limit import rate_limit
from careerpilot.schemas import (
    CareerAnalysisRequest,
    CareerPathSet,
    CompanyRoadmap,
    CompanyRoadmapRequest,
    FailureAnalysisRequest,
    FailureAnalysisResponse,
    InterviewPrepResponse,
    InterviewQuestionsRequest,
    ResumeAnalysisRequest,
    ResumeReview,
    WorkdaySimulation,
    WorkdaySimulationRequest,
)
from careerpilot.schemas.interview import DISPLAY_MODES, QUESTION_TYPES
from careerpilot.services.generation_service import GuidanceEngine

router = APIRouter()

_QUESTION_MODES = {"technical": "technical", "behavioral": "behavioral", "dsa": "dsa", "all": "mixed"}


def _required(value: str | None, message: str) -> str:
    clean = (value or "").strip()
    if not clean:
        raise ValidationError(message)
    return clean


@router.post("/interview-questions", response_model=InterviewPrepResponse)
@rate_limit()
async def interview_questions(
    request: Request,
    payload: InterviewQuestionsRequest,
    engine: GuidanceEngine = Depends(get_engine),
):
    role = _required(payload.role, "Role is required")
    question_type = (payload.question_type or "technical").strip().lower()
    if question_type not in QUESTION_TYPES:
        raise ValidationError("Invalid question type")
    display_mode = (payload.display_mode or "interview").strip().lower()
    if display_mode not in DISPLAY_MODES:
        raise ValidationError("Invalid display mode")
    company = (payload.company or "").strip()

    outcome = await engine.generate(
        GenerationRequest(
            subject_role=role,
            mode=_QUESTION_MODES[question_type],
            company=company or None,
            auxiliary_context={"display_mode": display_mode},
        )
    )
    return InterviewPrepResponse(
        **outcome.result.model_dump(),
        mode="company-specific" if company else "general",
        display_mode=display_mode,
        company=company,
        role=role,
        question_type=question_type,
    )


@router.post("/company-roadmap", response_model=CompanyRoadmap)
@rate_limit()
async def company_roadmap(
    request: Request,
    payload: CompanyRoadmapRequest,
    engine: GuidanceEngine = Depends(get_engine),
):
    role = _required(payload.role, "Role is required")
    company = (payload.company or "").strip()
    context = {"timeline": payload.timeline.strip()} if (payload.timeline or "").strip() else {}

    outcome = await engine.generate(
        GenerationRequest(subject_role=role, mode="roadmap", company=company or None, auxiliary_context=context)
    )
    result = outcome.result
    return result.model_copy(update={"company": company or getattr(result, "company", ""), "role": role})


@router.post("/career-analysis", response_model=CareerPathSet)
@rate_limit()
async def career_analysis(
    request: Request,
    payload: CareerAnalysisRequest,
    engine: GuidanceEngine = Depends(get_engine),
):
    resume_data = payload.resume_data
    if isinstance(resume_data, str):
        resume_data = resume_data.strip()
    if not resume_data:
        raise ValidationError("Resume data is required")
    target_role = (payload.target_role or "").strip()
    if isinstance(resume_data, str):
        serialized = resume_data
    else:
        serialized = json.dumps(resume_data, sort_keys=True, ensure_ascii=False)
    context = {"resume_data": serialized}
    if target_role:
        context["target_role"] = target_role

    outcome = await engine.generate(
        GenerationRequest(subject_role=target_role, mode="career", auxiliary_context=context)
    )
    return outcome.result


@router.post("/resume-analysis", response_model=ResumeReview)
@rate_limit()
async def resume_analysis(
    request: Request,
    payload: ResumeAnalysisRequest,
    engine: GuidanceEngine = Depends(get_engine),
):
    resume_text = _required(payload.resume_text, "Resume text is required")
    outcome = await engine.generate(
        GenerationRequest(
            subject_role=(payload.target_role or "").strip(),
            mode="resume",
            auxiliary_context={"resume_text": resume_text},
        )
    )
    return outcome.result


@router.post("/simulate-workday", response_model=WorkdaySimulation)
@rate_limit()
async def simulate_workday(
    request: Request,
    payload: WorkdaySimulationRequest,
    engine: GuidanceEngine = Depends(get_engine),
):
    job_role = _required(payload.job_role, "Job role is required")
    user_context = (payload.user_context or "").strip()
    context = {"user_context": user_context} if user_context else {}

    outcome = await engine.generate(
        GenerationRequest(subject_role=job_role, mode="simulation", auxiliary_context=context)
    )
    result = outcome.result
    return result.model_copy(update={"job_role": getattr(result, "job_role", "") or job_role})


@router.post("/failure-analysis", response_model=FailureAnalysisResponse)
@rate_limit()
async def failure_analysis(
    request: Request,
    payload: FailureAnalysisRequest,
    engine: GuidanceEngine = Depends(get_engine),
):
    resume = _required(payload.resume, "Resume content is required")
    target_role = _required(payload.target_role, "Target role is required")
    context = {"resume_text": resume}
    interview_feedback = (payload.interview_feedback or "").strip()
    if interview_feedback:
        context["interview_feedback"] = interview_feedback
    test_performance = (payload.test_performance or "").strip()
    if test_performance:
        context["test_performance"] = test_performance

    outcome = await engine.generate(
        GenerationRequest(subject_role=target_role, mode="failure", auxiliary_context=context)
    )
    return FailureAnalysisResponse(
        **outcome.result.model_dump(),
        resume_content=resume,
        target_role=target_role,
    )
