from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from careerpilot.schemas.common import clean_str_list

InnovationLevel = Literal["Basic", "Intermediate", "Advanced", "Innovative"]

_INNOVATION_WORDS = {
    "basic": "Basic",
    "intermediate": "Intermediate",
    "advanced": "Advanced",
    "innovative": "Innovative",
}


class ProjectComparisonRequest(BaseModel):
    github_username: str | None = None
    project1: str | None = None
    project2: str | None = None


class ProjectProfile(BaseModel):
    name: str = Field(min_length=1)
    purpose: str = ""
    uniqueness: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    complexity_score: int = Field(ge=1, le=10)
    key_features: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    innovation_level: InnovationLevel = "Intermediate"
    market_relevance: str = ""
    user_experience_quality: str = ""

    @field_validator("tech_stack", "key_features", "strengths", "weaknesses", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)

    @field_validator("innovation_level", mode="before")
    @classmethod
    def _normalize_innovation(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        head = value.strip().split(" ", 1)[0].strip(" -:/,.").lower()
        return _INNOVATION_WORDS.get(head, value.strip())


class ComparisonInsights(BaseModel):
    winner: str = Field(min_length=1)
    reasoning: str = Field(min_length=1)
    technical_depth_comparison: str = ""
    innovation_gap: str = ""
    learning_opportunities: list[str] = Field(default_factory=list)
    combination_suggestions: list[str] = Field(default_factory=list)

    @field_validator("learning_opportunities", "combination_suggestions", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)


class ProjectComparison(BaseModel):
    project1: ProjectProfile
    project2: ProjectProfile
    comparison_insights: ComparisonInsights
    recommendation: str = Field(min_length=1)
