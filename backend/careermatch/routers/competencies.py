from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from careermatch.db import get_db, get_session_factory
from careermatch.schemas import (
    CompetencyListOut,
    CompetencyMatchIn,
    JobDetailOut,
    JobMatchOut,
    MappingStatsOut,
    MappingStatusOut,
)
from careermatch.services.competency_service import (
    check_competency_mappings_exist,
    get_all_competencies,
    get_competency_mapping_stats,
    get_detailed_job_info,
    match_jobs_by_competencies,
)

router = APIRouter(prefix="/competencies", tags=["competencies"])


@router.get("", response_model=CompetencyListOut)
def list_competencies() -> CompetencyListOut:
    return CompetencyListOut(competencies=get_all_competencies())


@router.post("/match", response_model=list[JobMatchOut])
def match_jobs(payload: CompetencyMatchIn, db: Session = Depends(get_db)) -> list[JobMatchOut]:
    return match_jobs_by_competencies(db, payload.competencies, limit=payload.limit)


@router.get("/status", response_model=MappingStatusOut)
def mapping_status(db: Session = Depends(get_db)) -> MappingStatusOut:
    return MappingStatusOut(mappings_exist=check_competency_mappings_exist(db))


@router.get("/stats", response_model=MappingStatsOut)
def mapping_stats(db: Session = Depends(get_db)) -> MappingStatsOut:
    stats = get_competency_mapping_stats(db)
    if stats is None:
        raise HTTPException(status_code=503, detail="Mapping statistics unavailable")
    return stats


@router.get("/jobs/{onetsoc_code}", response_model=JobDetailOut)
async def job_detail(
    onetsoc_code: str,
    session_factory: sessionmaker = Depends(get_session_factory),
) -> JobDetailOut:
    detail = await get_detailed_job_info(session_factory, onetsoc_code)
    if detail is None:
        raise HTTPException(status_code=404, detail="Occupation not found")
    return detail
