"""
Birthday jobs API (read-only): inspect pending and delivered jobs, newest first.
Jobs are created and updated only by the scheduler tick.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.constants import BIRTHDAY_JOBS_LIST_LIMIT
from app.db.session import get_db
from app.services.birthday.job_store import SqlJobStore

router = APIRouter()


@router.get("/birthday-jobs")
def list_birthday_jobs(
    db: Session = Depends(get_db),
    limit: int = Query(100, ge=1, le=BIRTHDAY_JOBS_LIST_LIMIT),
    pending_only: bool = Query(False),
) -> dict[str, Any]:
    """List birthday jobs newest first. pending_only=true returns jobs not yet sent."""
    rows = SqlJobStore(db).list_recent(limit=limit, pending_only=pending_only)
    return {"jobs": [r.serialize() for r in rows], "count": len(rows)}


@router.get("/birthday-jobs/{job_id}")
def get_birthday_job(job_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    row = SqlJobStore(db).get(job_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Birthday job not found")
    return row.serialize()
