from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Literal, TypeVar

from pydantic import ValidationError
from sqlalchemy import and_, desc, func, or_, select
from sqlalchemy.orm import Session, sessionmaker

from careermatch import models
from careermatch.config import settings
from careermatch.schemas import (
    CompetencyScoreOut,
    CompetencyStrengthOut,
    EducationTrainingOut,
    JobDetailOut,
    JobMatchOut,
    JobZoneOut,
    MappingStatsOut,
    OccupationAttributeOut,
)
from careermatch.services.store import run_query

logger = logging.getLogger(__name__)

T = TypeVar("T")
LimitMode = Literal["ranked", "legacy"]


class Competency(str, Enum):
    COMMUNICATION = "Communication"
    CRITICAL_THINKING = "Critical Thinking"
    LEADERSHIP = "Leadership"
    TEAMWORK = "Teamwork"
    TECHNOLOGY = "Technology"
    PROFESSIONALISM = "Professionalism"
    CAREER_SELF_DEVELOPMENT = "Career & Self-Development"
    EQUITY_INCLUSION = "Equity & Inclusion"


NACE_COMPETENCIES: tuple[str, ...] = tuple(item.value for item in Competency)

# Rank 1 of an occupation's top three counts three times as much as rank 3.
POSITION_WEIGHTS: tuple[int, ...] = (3, 2, 1)

UNKNOWN_TITLE = "Unknown Title"
NO_DESCRIPTION = "No description available"


def get_all_competencies() -> list[str]:
    return list(NACE_COMPETENCIES)


def normalize_competencies(competencies: Iterable[str] | str | None) -> list[str]:
    if isinstance(competencies, str):
        competencies = [competencies]
    cleaned = {str(item).strip() for item in competencies or [] if item is not None}
    return sorted(item for item in cleaned if item)


def compute_match_score(
    ranked: list[tuple[str, float | None]],
    selected: Iterable[str],
) -> tuple[int, int]:
    """Weighted match of a selection against an occupation's ranked top competencies.

    Each selected competency found at rank position ``i`` contributes
    ``score_i * POSITION_WEIGHTS[i]`` to the accumulator and the weight to the
    total weight. The score is the weighted mean, clamped to 0..100 and rounded.

    Returns ``(match_score, total_weight)``; a total weight of 0 means the
    selection does not intersect the occupation's competencies at all.
    """
    names = [name for name, _ in ranked[: len(POSITION_WEIGHTS)]]
    accumulator = 0.0
    total_weight = 0

    for competency in selected:
        if competency not in names:
            continue
        position = names.index(competency)
        weight = POSITION_WEIGHTS[position]
        accumulator += float(ranked[position][1] or 0.0) * weight
        total_weight += weight

    percentage = accumulator / total_weight if total_weight > 0 else 0.0
    return _round_half_up(min(max(percentage, 0.0), 100.0)), total_weight


def match_jobs_by_competencies(
    db: Session,
    competencies: Iterable[str],
    limit: int | None = None,
    *,
    limit_mode: LimitMode | None = None,
) -> list[JobMatchOut]:
    """Occupations whose top three competencies intersect the selection.

    In ``ranked`` mode the results are ordered by match score and ``limit`` is
    applied afterwards. ``legacy`` mode applies ``limit`` in the query and keeps
    the store order (first-ranked competency score, descending), so the output
    is not necessarily sorted by match score.
    """
    selected = normalize_competencies(competencies)
    if not selected:
        logger.debug("Empty competency selection, nothing to match")
        return []

    mode = limit_mode or settings.match_limit_mode
    effective_limit = limit if limit is not None else settings.default_match_limit
    if not effective_limit or effective_limit < 1:
        effective_limit = None

    mapping = models.JobNaceMapping
    stmt = (
        select(mapping, models.OccupationData)
        .outerjoin(models.OccupationData, models.OccupationData.onetsoc_code == mapping.onetsoc_code)
        .where(
            or_(
                mapping.competency_1.in_(selected),
                mapping.competency_2.in_(selected),
                mapping.competency_3.in_(selected),
            )
        )
        .order_by(mapping.competency_1_score.desc().nulls_last(), mapping.onetsoc_code)
    )
    if mode == "legacy" and effective_limit:
        stmt = stmt.limit(effective_limit)

    rows = run_query("match_jobs_by_competencies", lambda: db.execute(stmt).all(), db=db).or_default([])

    scored: list[tuple[float, JobMatchOut]] = []
    for job_mapping, occupation in rows:
        match_score, total_weight = compute_match_score(job_mapping.ranked(), selected)
        if total_weight <= 0:
            continue
        scored.append(
            (
                float(job_mapping.competency_1_score or 0.0),
                JobMatchOut(
                    onetsoc_code=job_mapping.onetsoc_code,
                    title=(occupation.title if occupation else None) or UNKNOWN_TITLE,
                    description=(occupation.description if occupation else None) or NO_DESCRIPTION,
                    match_score=match_score,
                ),
            )
        )

    if mode == "legacy":
        return [item for _, item in scored]

    scored.sort(key=lambda pair: (-pair[1].match_score, -pair[0], pair[1].onetsoc_code))
    ranked = [item for _, item in scored]
    return ranked[:effective_limit] if effective_limit else ranked


async def get_detailed_job_info(session_factory: sessionmaker, onetsoc_code: str) -> JobDetailOut | None:
    """Full occupation profile, or ``None`` when the occupation itself is unavailable.

    The secondary lookups run concurrently, each on its own session; any of
    them failing only leaves its field empty.
    """
    code = (onetsoc_code or "").strip()
    if not code:
        return None

    try:
        occupation = await asyncio.to_thread(
            _read, session_factory, "get_detailed_job_info", lambda db: _fetch_occupation(db, code), None
        )
    except Exception as exc:
        logger.error("Error fetching occupation %s: %s", code, exc, exc_info=exc)
        return None
    if occupation is None:
        return None

    top_n = settings.detail_top_n
    branches: list[tuple[str, Callable[[Session], Any], Any]] = [
        ("job_zone", lambda db: _fetch_job_zone(db, code), None),
        ("top_competencies", lambda db: _fetch_top_competencies(db, code), []),
        ("all_competency_scores", lambda db: _fetch_competency_scores(db, code), []),
        ("skills", lambda db: _fetch_attributes(db, models.Skill, code, top_n), []),
        ("knowledge", lambda db: _fetch_attributes(db, models.Knowledge, code, top_n), []),
        ("work_activities", lambda db: _fetch_attributes(db, models.WorkActivity, code, top_n), []),
        ("education_training", lambda db: _fetch_education_training(db, code, top_n), []),
    ]

    results = await asyncio.gather(
        *(asyncio.to_thread(_read, session_factory, f"get_detailed_job_info.{name}", fetch, default)
          for name, fetch, default in branches),
        return_exceptions=True,
    )

    fields: dict[str, Any] = {}
    for (name, _fetch, default), result in zip(branches, results):
        if isinstance(result, Exception):
            logger.error("Error assembling %s for %s: %s", name, code, result, exc_info=result)
            result = default
        fields[name] = result

    try:
        return JobDetailOut(
            onetsoc_code=occupation["onetsoc_code"],
            title=occupation["title"] or UNKNOWN_TITLE,
            description=occupation["description"],
            **fields,
        )
    except ValidationError as exc:
        logger.error("Error building detail profile for %s: %s", code, exc)
        return None


def get_detailed_job_info_sync(session_factory: sessionmaker, onetsoc_code: str) -> JobDetailOut | None:
    """Blocking variant for callers without an event loop; async code must await the coroutine."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(get_detailed_job_info(session_factory, onetsoc_code))
    raise RuntimeError(
        "get_detailed_job_info_sync called from a running event loop; await get_detailed_job_info instead"
    )


def check_competency_mappings_exist(db: Session) -> bool:
    result = run_query(
        "check_competency_mappings_exist", lambda: _count_rows(db, models.JobNaceMapping), db=db
    )
    return result.or_default(0) > 0


def get_competency_mapping_stats(db: Session) -> MappingStatsOut | None:
    mappings = run_query("get_competency_mapping_stats.mappings", lambda: _count_rows(db, models.JobNaceMapping), db=db)
    jobs = run_query("get_competency_mapping_stats.jobs", lambda: _count_rows(db, models.OccupationData), db=db)
    if not mappings.ok or not jobs.ok:
        return None

    total_mappings = mappings.or_default(0)
    total_jobs = jobs.or_default(0)
    coverage = _round_half_up(total_mappings / total_jobs * 100) if total_jobs > 0 else 0
    return MappingStatsOut(
        total_mappings=total_mappings,
        total_jobs=total_jobs,
        coverage_percentage=coverage,
    )


def _read(session_factory: sessionmaker, label: str, fetch: Callable[[Session], T], default: T) -> T:
    with session_factory() as db:
        return run_query(label, lambda: fetch(db), db=db).or_default(default)


def _fetch_occupation(db: Session, code: str) -> dict[str, Any] | None:
    occupation = db.get(models.OccupationData, code)
    if occupation is None:
        return None
    return {
        "onetsoc_code": occupation.onetsoc_code,
        "title": occupation.title,
        "description": occupation.description,
    }


def _fetch_job_zone(db: Session, code: str) -> JobZoneOut | None:
    reference = db.scalars(
        select(models.JobZoneReference)
        .join(models.JobZone, models.JobZone.job_zone == models.JobZoneReference.job_zone)
        .where(models.JobZone.onetsoc_code == code)
    ).first()
    if reference is None:
        return None
    return JobZoneOut.model_validate(reference, from_attributes=True)


def _fetch_top_competencies(db: Session, code: str) -> list[CompetencyStrengthOut]:
    mapping = db.get(models.JobNaceMapping, code)
    if mapping is None:
        return []
    return [
        CompetencyStrengthOut(competency_name=name, match_strength=score)
        for name, score in mapping.ranked()
    ]


def _fetch_competency_scores(db: Session, code: str) -> list[CompetencyScoreOut]:
    rows = db.scalars(
        select(models.JobCompetencyScore)
        .where(models.JobCompetencyScore.onetsoc_code == code)
        .order_by(desc(models.JobCompetencyScore.score), models.JobCompetencyScore.competency)
    ).all()
    return [CompetencyScoreOut(competency=row.competency, score=row.score) for row in rows]


def _fetch_attributes(db: Session, model: type, code: str, limit: int) -> list[OccupationAttributeOut]:
    reference = models.ContentModelReference
    rows = db.execute(
        select(model, reference)
        .outerjoin(reference, reference.element_id == model.element_id)
        .where(model.onetsoc_code == code)
        .order_by(desc(model.data_value), model.element_id, model.scale_id)
        .limit(limit)
    ).all()
    return [
        OccupationAttributeOut(
            element_id=row.element_id,
            element_name=ref.element_name if ref else None,
            description=ref.description if ref else None,
            scale_id=row.scale_id,
            data_value=row.data_value,
        )
        for row, ref in rows
    ]


def _fetch_education_training(db: Session, code: str, limit: int) -> list[EducationTrainingOut]:
    ete = models.EducationTrainingExperience
    reference = models.ContentModelReference
    category = models.EteCategory
    rows = db.execute(
        select(ete, reference, category)
        .outerjoin(reference, reference.element_id == ete.element_id)
        .outerjoin(
            category,
            and_(
                category.element_id == ete.element_id,
                category.scale_id == ete.scale_id,
                category.category == ete.category,
            ),
        )
        .where(ete.onetsoc_code == code)
        .order_by(desc(ete.data_value), ete.element_id, ete.scale_id, ete.category)
        .limit(limit)
    ).all()
    return [
        EducationTrainingOut(
            element_id=row.element_id,
            element_name=ref.element_name if ref else None,
            description=ref.description if ref else None,
            scale_id=row.scale_id,
            data_value=row.data_value,
            category=row.category,
            category_description=cat.category_description if cat else None,
        )
        for row, ref, cat in rows
    ]


def _count_rows(db: Session, model: type) -> int:
    return int(db.scalar(select(func.count()).select_from(model)) or 0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
