from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careerpilot.schemas.common import clean_str_list


class CareerAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # object, array or plain string; serialized as-is into the prompt
    resume_data: Any = Field(default=None, alias="resumeData")
    target_role: str | None = Field(default=None, alias="targetRole")


class RoadmapStep(BaseModel):
    step: str = Field(min_length=1)
    description: str = ""


class CareerPath(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    required_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    roadmap: list[RoadmapStep] = Field(min_length=1)

    @field_validator("required_skills", "missing_skills", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)


class CareerPathSet(BaseModel):
    career_paths: list[CareerPath] = Field(min_length=1)
    follow_up_questions: list[str] = Field(default_factory=list)

    @field_validator("follow_up_questions", mode="before")
    @classmethod
    def _clean_questions(cls, value: object) -> object:
        return clean_str_list(value)
