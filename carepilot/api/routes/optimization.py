from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from carepilot.api.deps import get_db, get_current_user
from carepilot.core.config import settings
from carepilot.core.security import TokenData
from carepilot.schemas.optimization import (
    OptimizeRequest,
    BreakOptimizationResponse,
    MinimalCoverageResponse,
    SavedOptimizationResults,
)
from carepilot.services.coverage import (
    generate_break_schedule,
    generate_minimal_coverage,
    load_saved_results,
    SchoolNotFoundError,
)

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.post("/optimize", response_model=BreakOptimizationResponse)
def optimize_breaks(
    payload: OptimizeRequest,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    """Stagger breaks for every working teacher and flag surplus/shortage at peak."""
    try:
        return generate_break_schedule(db, payload.school_id, payload.date, persist=settings.PERSIST_RESULTS)
    except SchoolNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")


@router.post("/optimize-minimal", response_model=MinimalCoverageResponse)
def optimize_minimal(
    payload: OptimizeRequest,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    """Smallest qualification-respecting set of teachers that covers the whole day."""
    try:
        return generate_minimal_coverage(db, payload.school_id, payload.date, persist=settings.PERSIST_RESULTS)
    except SchoolNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")


@router.get("/optimization-results", response_model=SavedOptimizationResults)
def get_optimization_results(
    school_id: str,
    date: date,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    return load_saved_results(db, school_id, date)
