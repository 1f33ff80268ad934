from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

SkillImportance = Literal["high", "medium", "low"]
ResourceType = Literal["Book", "Course", "Tutorial", "Documentation", "Other"]


class CompanyRoadmapRequest(BaseModel):
    role: str | None = None
    company: str | None = None
    timeline: str | None = None


class RoadmapSkill(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    importance: SkillImportance = "medium"

    @field_validator("importance", mode="before")
    @classmethod
    def _normalize_importance(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SkillCategory(BaseModel):
    category: str = Field(min_length=1)
    items: list[RoadmapSkill] = Field(min_length=1)


class RoadmapResource(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    type: ResourceType = "Other"
    url: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        if isinstance(value, str):
            title = value.strip().title()
            return title if title in {"Book", "Course", "Tutorial", "Documentation"} else "Other"
        return value


class TimelineItem(BaseModel):
    phase: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    description: str = ""


class CompanyRoadmap(BaseModel):
    company: str = ""
    role: str = ""
    overview: str = Field(min_length=1)
    culture_fit: str = ""
    skills: list[SkillCategory] = Field(min_length=1)
    resources: list[RoadmapResource] = Field(default_factory=list)
    timeline: list[TimelineItem] = Field(min_length=1)
