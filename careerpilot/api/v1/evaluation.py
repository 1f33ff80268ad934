from fastapi import APIRouter, Depends, Request

from careerpilot.ai.errors import ValidationError
from careerpilot.ai.types import GenerationRequest
from careerpilot.api.deps import get_engine, get_github_client
from careerpilot.core.config import settings
from careerpilot.core.rate_limit import rate_limit
from careerpilot.integrations.github import GitHubClient, is_valid_repository_name, is_valid_username
from careerpilot.schemas import ProjectComparison, ProjectComparisonRequest, SkillEvaluation, SkillEvaluationRequest
from careerpilot.services.generation_service import GuidanceEngine

router = APIRouter()


def _github_username(value: str | None, missing_message: str) -> str:
    username = (value or "").strip()
    if not username:
        raise ValidationError(missing_message)
    if not is_valid_username(username):
        raise ValidationError("Invalid GitHub username")
    return username


@router.post("/evaluate-skills", response_model=SkillEvaluation)
@rate_limit(settings.evaluation_rate_limit)
async def evaluate_skills(
    request: Request,
    payload: SkillEvaluationRequest,
    engine: GuidanceEngine = Depends(get_engine),
    github: GitHubClient = Depends(get_github_client),
):
    username = _github_username(payload.github_username, "GitHub username is required")

    generation_request = GenerationRequest(
        subject_role=username,
        mode="evaluation",
        auxiliary_context={
            "github_username": username,
            "portfolio_url": (payload.portfolio_url or "").strip(),
            "skills_list": (payload.skills_list or "").strip(),
        },
    )
    outcome = await engine.evaluate_skills(generation_request, github)
    return outcome.result


@router.post("/compare-projects", response_model=ProjectComparison)
@rate_limit(settings.evaluation_rate_limit)
async def compare_projects(
    request: Request,
    payload: ProjectComparisonRequest,
    engine: GuidanceEngine = Depends(get_engine),
    github: GitHubClient = Depends(get_github_client),
):
    missing_message = "GitHub username and two project names are required"
    first = (payload.project1 or "").strip()
    second = (payload.project2 or "").strip()
    if not first or not second:
        raise ValidationError(missing_message)
    username = _github_username(payload.github_username, missing_message)
    if not (is_valid_repository_name(first) and is_valid_repository_name(second)):
        raise ValidationError("Invalid project name")

    generation_request = GenerationRequest(
        subject_role=username,
        mode="comparison",
        auxiliary_context={"github_username": username, "project1": first, "project2": second},
    )
    outcome = await engine.compare_projects(generation_request, github)
    return outcome.result
