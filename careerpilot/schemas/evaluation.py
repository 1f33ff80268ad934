from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

SkillLevel = Literal["Beginner", "Intermediate", "Industry-Ready", "Advanced"]

SKILL_CATEGORIES: tuple[str, ...] = (
    "UI Complexity",
    "Styling Mastery",
    "Component Structure",
    "State Management",
    "API Integration",
    "Authentication",
    "Deployment",
    "Code Quality",
    "Accessibility",
    "Testing & Error Handling",
    "Animation & UX Polish",
    "Real-World Use Case",
    "Documentation",
)
MAX_CATEGORY_SCORE = 3
MAX_TOTAL_SCORE = MAX_CATEGORY_SCORE * len(SKILL_CATEGORIES)


class SkillEvaluationRequest(BaseModel):
    github_username: str | None = None
    portfolio_url: str | None = None
    skills_list: str | None = None


class SuggestionResource(BaseModel):
    topic: str = Field(min_length=1)
    link: str = Field(min_length=1)


class ImprovementSuggestion(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    resource: SuggestionResource
    estimated_time_hours: int = Field(ge=1, le=200)


class SkillEvaluation(BaseModel):
    github_username: str
    score_breakdown: dict[str, int]
    total_score: int = Field(ge=0, le=MAX_TOTAL_SCORE)
    skill_level: SkillLevel
    skill_emoji: str
    justification: str = Field(min_length=1)
    improvement_suggestions: list[ImprovementSuggestion] = Field(default_factory=list)
    motivation: str = Field(min_length=1)
    top_skills: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    priority_improvements: list[str] = Field(default_factory=list)
    evaluated_at: str

    @field_validator("score_breakdown")
    @classmethod
    def _validate_breakdown(cls, value: dict[str, int]) -> dict[str, int]:
        if set(value) != set(SKILL_CATEGORIES):
            raise ValueError("score_breakdown must contain exactly the skill categories")
        for category, score in value.items():
            if score < 0 or score > MAX_CATEGORY_SCORE:
                raise ValueError(f"score for '{category}' must be between 0 and {MAX_CATEGORY_SCORE}")
        return {category: value[category] for category in SKILL_CATEGORIES}

    @model_validator(mode="after")
    def _validate_total(self) -> "SkillEvaluation":
        if self.total_score != sum(self.score_breakdown.values()):
            raise ValueError("total_score must equal the sum of score_breakdown")
        return self


class EvaluationNarrative(BaseModel):
    """Textual fields a provider may contribute on top of the deterministic scores."""

    justification: str = Field(min_length=1)
    motivation: str = Field(min_length=1)
    improvement_suggestions: list[ImprovementSuggestion] = Field(default_factory=list)
    skill_level: SkillLevel | None = None
