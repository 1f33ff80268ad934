from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careerpilot.schemas.common import clean_str_list

DEFAULT_ENCOURAGEMENT = "Keep working hard - you're on the right track!"


class FailureAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume: str | None = Field(default=None, max_length=50000)
    interview_feedback: str | None = Field(default=None, alias="interviewFeedback", max_length=20000)
    test_performance: str | None = Field(default=None, alias="testPerformance", max_length=20000)
    target_role: str | None = Field(default=None, alias="targetRole")


class IssueBreakdown(BaseModel):
    resume_issues: list[str] = Field(default_factory=list)
    interview_issues: list[str] = Field(default_factory=list)
    test_issues: list[str] = Field(default_factory=list)

    @field_validator("resume_issues", "interview_issues", "test_issues", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)


class FixSuggestions(BaseModel):
    resume_rewrite: str = ""
    mock_answer_rewrite: str = ""

    @field_validator("resume_rewrite", "mock_answer_rewrite", mode="before")
    @classmethod
    def _flatten(cls, value: object) -> object:
        # models sometimes answer with a {"before": ..., "after": ...} object
        if isinstance(value, (dict, list)):
            return json.dumps(value, indent=2, ensure_ascii=False)
        return value


class LearningResource(BaseModel):
    topic: str = Field(min_length=1)
    link: str = ""


class HighlightedIssue(BaseModel):
    text: str = Field(min_length=1)
    issue: str = ""
    suggestion: str = ""


class FailureAnalysis(BaseModel):
    analysis: IssueBreakdown
    recommendations: list[str] = Field(min_length=1)
    fix_suggestions: FixSuggestions = Field(default_factory=FixSuggestions)
    resources: list[LearningResource] = Field(default_factory=list)
    positive_notes: list[str] = Field(default_factory=list)
    encouragement: str = DEFAULT_ENCOURAGEMENT
    highlighted_issues: list[HighlightedIssue] = Field(default_factory=list)
    optimized_resume: str = ""

    @field_validator("recommendations", "positive_notes", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)


class FailureAnalysisResponse(FailureAnalysis):
    resume_content: str
    target_role: str
