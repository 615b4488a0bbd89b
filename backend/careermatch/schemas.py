from __future__ import annotations

from pydantic import BaseModel, Field


class CompetencyListOut(BaseModel):
    competencies: list[str] = Field(default_factory=list)


class CompetencyMatchIn(BaseModel):
    competencies: list[str] = Field(min_length=1)
    limit: int | None = Field(default=None, ge=1)


class JobMatchOut(BaseModel):
    onetsoc_code: str
    title: str
    description: str
    match_score: int = Field(ge=0, le=100)


class CompetencyStrengthOut(BaseModel):
    competency_name: str
    match_strength: float | None = None


class CompetencyScoreOut(BaseModel):
    competency: str
    score: float


class JobZoneOut(BaseModel):
    job_zone: int
    name: str
    experience: str | None = None
    education: str | None = None
    job_training: str | None = None
    examples: str | None = None
    svp_range: str | None = None


class OccupationAttributeOut(BaseModel):
    element_id: str
    element_name: str | None = None
    description: str | None = None
    scale_id: str
    data_value: float


class EducationTrainingOut(OccupationAttributeOut):
    category: int | None = None
    category_description: str | None = None


class JobDetailOut(BaseModel):
    onetsoc_code: str
    title: str
    description: str | None = None
    job_zone: JobZoneOut | None = None
    top_competencies: list[CompetencyStrengthOut] = Field(default_factory=list)
    skills: list[OccupationAttributeOut] = Field(default_factory=list)
    knowledge: list[OccupationAttributeOut] = Field(default_factory=list)
    work_activities: list[OccupationAttributeOut] = Field(default_factory=list)
    education_training: list[EducationTrainingOut] = Field(default_factory=list)
    all_competency_scores: list[CompetencyScoreOut] = Field(default_factory=list)


class MappingStatusOut(BaseModel):
    mappings_exist: bool


class MappingStatsOut(BaseModel):
    total_mappings: int
    total_jobs: int
    coverage_percentage: int


class HealthOut(BaseModel):
    status: str
    database: bool
