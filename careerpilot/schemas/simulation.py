from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from careerpilot.schemas.common import Level, clean_str_list, coerce_level


class WorkdaySimulationRequest(BaseModel):
    job_role: str | None = None
    user_context: str | None = None


class ScheduleSlot(BaseModel):
    time: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    activity: str = Field(min_length=1)
    description: str = ""
    tasks: list[str] = Field(default_factory=list)
    intensity: Level = "Medium"

    @field_validator("intensity", mode="before")
    @classmethod
    def _normalize_intensity(cls, value: object) -> object:
        return coerce_level(value)

    @field_validator("tasks", mode="before")
    @classmethod
    def _clean_tasks(cls, value: object) -> object:
        return clean_str_list(value)


class WorkdaySummary(BaseModel):
    tech_intensity: Level
    stress_level: Level
    teamwork: Level
    learning_curve: Level
    typical_day_hours: str = ""
    work_style: str = ""
    tools: list[str] = Field(default_factory=list)

    @field_validator("tech_intensity", "stress_level", "teamwork", "learning_curve", mode="before")
    @classmethod
    def _normalize_levels(cls, value: object) -> object:
        return coerce_level(value)

    @field_validator("tools", mode="before")
    @classmethod
    def _clean_tools(cls, value: object) -> object:
        return clean_str_list(value)


class WorkdaySimulation(BaseModel):
    job_role: str = ""
    schedule: list[ScheduleSlot] = Field(min_length=1)
    summary: WorkdaySummary
