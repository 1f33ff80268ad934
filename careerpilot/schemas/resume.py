from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careerpilot.schemas.common import clean_str_list


class ResumeAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_text: str | None = Field(default=None, alias="resumeText", max_length=50000)
    target_role: str | None = Field(default=None, alias="targetRole")


class ResumeScores(BaseModel):
    content: int = Field(ge=1, le=10)
    format: int = Field(ge=1, le=10)
    impact: int = Field(ge=1, le=10)
    ats_compatibility: int = Field(ge=1, le=10)


class ResumeReview(BaseModel):
    detected_role: str = ""
    overall_assessment: str = Field(min_length=1)
    content_improvements: list[str] = Field(min_length=1)
    format_improvements: list[str] = Field(min_length=1)
    scores: ResumeScores

    @field_validator("content_improvements", "format_improvements", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)
