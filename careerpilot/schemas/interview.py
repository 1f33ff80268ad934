from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careerpilot.schemas.common import Difficulty, clean_str_list, coerce_difficulty, coerce_level

Importance = Literal["High", "Medium", "Low"]
QuestionType = Literal["technical", "behavioral", "dsa", "all"]
DisplayMode = Literal["interview", "flashcard"]
PrepMode = Literal["general", "company-specific"]

QUESTION_TYPES: tuple[str, ...] = ("technical", "behavioral", "dsa", "all")
DISPLAY_MODES: tuple[str, ...] = ("interview", "flashcard")


class InterviewQuestionsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    role: str | None = None
    question_type: str | None = Field(default="technical", alias="questionType")
    company: str | None = None
    display_mode: str | None = Field(default="interview", alias="displayMode")


class QuestionAnswer(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    difficulty: Difficulty = "Medium"
    importance: Importance = "Medium"

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: object) -> object:
        return coerce_difficulty(value)

    @field_validator("importance", mode="before")
    @classmethod
    def _normalize_importance(cls, value: object) -> object:
        return coerce_level(value)


class PrepResource(BaseModel):
    title: str = Field(min_length=1)
    url: str | None = None
    type: str = "Website"
    description: str = ""


class InterviewQuestionSet(BaseModel):
    questions: list[QuestionAnswer] = Field(min_length=1)
    topics_to_prepare: list[str] = Field(default_factory=list)
    interview_rounds: list[str] = Field(default_factory=list)
    resources: list[PrepResource] = Field(default_factory=list)
    difficulty: Difficulty = "Medium"
    tip: str = ""

    @field_validator("topics_to_prepare", "interview_rounds", mode="before")
    @classmethod
    def _clean_lists(cls, value: object) -> object:
        return clean_str_list(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: object) -> object:
        return coerce_difficulty(value)


class InterviewPrepResponse(InterviewQuestionSet):
    mode: PrepMode
    display_mode: DisplayMode
    company: str
    role: str
    question_type: QuestionType
