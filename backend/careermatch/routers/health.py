from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from careermatch.db import get_db, ping_database
from careermatch.schemas import HealthOut
from careermatch.services.store import run_query

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(db: Session = Depends(get_db)) -> HealthOut:
    database_ok = run_query("health.ping", lambda: ping_database(db), db=db, max_retries=0).ok
    return HealthOut(status="ok" if database_ok else "degraded", database=database_ok)
