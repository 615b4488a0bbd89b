"""Read-only mappings of the O*NET tables loaded into Supabase.

The column names are the contract with the bulk loader; nothing in this
package writes to these tables.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from careermatch.db import Base


class OccupationData(Base):
    __tablename__ = "occupation_data"

    onetsoc_code: Mapped[str] = mapped_column(String(10), primary_key=True)
    title: Mapped[str | None] = mapped_column(String(150), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class JobNaceMapping(Base):
    __tablename__ = "job_nace_mappings"

    onetsoc_code: Mapped[str] = mapped_column(
        ForeignKey("occupation_data.onetsoc_code", ondelete="CASCADE"), primary_key=True
    )
    competency_1: Mapped[str] = mapped_column(String(64), nullable=False)
    competency_1_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    competency_2: Mapped[str] = mapped_column(String(64), nullable=False)
    competency_2_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    competency_3: Mapped[str] = mapped_column(String(64), nullable=False)
    competency_3_score: Mapped[float | None] = mapped_column(Float, nullable=True)

    def ranked(self) -> list[tuple[str, float | None]]:
        return [
            (self.competency_1, self.competency_1_score),
            (self.competency_2, self.competency_2_score),
            (self.competency_3, self.competency_3_score),
        ]


class JobCompetencyScore(Base):
    __tablename__ = "job_competency_scores"

    onetsoc_code: Mapped[str] = mapped_column(
        ForeignKey("occupation_data.onetsoc_code", ondelete="CASCADE"), primary_key=True
    )
    competency: Mapped[str] = mapped_column(String(64), primary_key=True)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class JobZoneReference(Base):
    __tablename__ = "job_zone_reference"

    job_zone: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    experience: Mapped[str | None] = mapped_column(Text, nullable=True)
    education: Mapped[str | None] = mapped_column(Text, nullable=True)
    job_training: Mapped[str | None] = mapped_column(Text, nullable=True)
    examples: Mapped[str | None] = mapped_column(Text, nullable=True)
    svp_range: Mapped[str | None] = mapped_column(String(25), nullable=True)


class JobZone(Base):
    __tablename__ = "job_zones"

    onetsoc_code: Mapped[str] = mapped_column(
        ForeignKey("occupation_data.onetsoc_code", ondelete="CASCADE"), primary_key=True
    )
    job_zone: Mapped[int] = mapped_column(ForeignKey("job_zone_reference.job_zone"), nullable=False)
    date_updated: Mapped[date | None] = mapped_column(Date, nullable=True)
    domain_source: Mapped[str | None] = mapped_column(String(30), nullable=True)


class ContentModelReference(Base):
    __tablename__ = "content_model_reference"

    element_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    element_name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class _OccupationAttribute:
    onetsoc_code: Mapped[str] = mapped_column(
        ForeignKey("occupation_data.onetsoc_code", ondelete="CASCADE"), primary_key=True
    )
    element_id: Mapped[str] = mapped_column(
        ForeignKey("content_model_reference.element_id"), primary_key=True
    )
    scale_id: Mapped[str] = mapped_column(String(3), primary_key=True)
    data_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class Skill(_OccupationAttribute, Base):
    __tablename__ = "skills"


class Knowledge(_OccupationAttribute, Base):
    __tablename__ = "knowledge"


class WorkActivity(_OccupationAttribute, Base):
    __tablename__ = "work_activities"


class EteCategory(Base):
    __tablename__ = "ete_categories"

    element_id: Mapped[str] = mapped_column(
        ForeignKey("content_model_reference.element_id"), primary_key=True
    )
    scale_id: Mapped[str] = mapped_column(String(3), primary_key=True)
    category: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_description: Mapped[str] = mapped_column(String(1000), nullable=False)


class EducationTrainingExperience(Base):
    __tablename__ = "education_training_experience"

    onetsoc_code: Mapped[str] = mapped_column(
        ForeignKey("occupation_data.onetsoc_code", ondelete="CASCADE"), primary_key=True
    )
    element_id: Mapped[str] = mapped_column(
        ForeignKey("content_model_reference.element_id"), primary_key=True
    )
    scale_id: Mapped[str] = mapped_column(String(3), primary_key=True)
    category: Mapped[int] = mapped_column(Integer, primary_key=True)
    data_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
