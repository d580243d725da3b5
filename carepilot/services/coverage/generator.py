"""
Coverage generator - main orchestration layer.

Loads a school's data for a date, runs one of the two procedures, shapes
the result into the payload the reporting layer consumes, and optionally
stores it so the dashboard can reload it later.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, delete, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carepilot.db.models.optimization_results import OptimizationResults, ResultType

from .data_loader import load_coverage_context
from .breaks import optimize_breaks
from .minimal import optimize_minimal_coverage, SelectionOrder, stable_order
from .types import BreakOptimizationResult, MinimalCoverageResult
from .time_grid import format_minutes, format_optional


logger = logging.getLogger(__name__)


def serialize_break_result(result: BreakOptimizationResult) -> dict:
    return {
        "success": result.success,
        "date": result.date.isoformat(),
        "school_id": result.school_id,
        "school_name": result.school_name,
        "breaks": [
            {
                "teacher_id": b.staff_id,
                "teacher_name": b.staff_name,
                "break1_start": format_minutes(b.break1_start),
                "break1_end": format_minutes(b.break1_end),
                "break2_start": format_minutes(b.break2_start),
                "break2_end": format_minutes(b.break2_end),
                "lunch_start": format_optional(b.lunch_start),
                "lunch_end": format_optional(b.lunch_end),
                "break1_sub_name": b.break1_sub_name,
                "break2_sub_name": b.break2_sub_name,
                "lunch_sub_name": b.lunch_sub_name,
            }
            for b in result.breaks
        ],
        "alerts": [
            {
                "type": a.type.value,
                "message": a.message,
                "count": a.count,
                "time_range": a.time_range,
            }
            for a in result.alerts
        ],
        "coverage_summary": {
            "total_teachers": result.total_staff,
            "teachers_needed_peak": result.staff_needed_peak,
            "teachers_needed_nap": result.staff_needed_nap,
            "total_students_present": result.total_students_present,
        },
    }


def serialize_minimal_result(result: MinimalCoverageResult) -> dict:
    plan = result.plan
    return {
        "success": result.success,
        "date": result.date.isoformat(),
        "school_id": result.school_id,
        "school_name": result.school_name,
        "current_teachers": result.current_staff,
        "minimal_teachers_needed": plan.minimal_staff_needed,
        "potential_savings": result.potential_savings,
        "essential_teachers": [
            {
                "teacher_id": e.staff_id,
                "teacher_name": e.staff_name,
                "role": e.role.value,
                "is_essential": True,
                "reason": e.reason,
                "blocks": [
                    {
                        "start_time": format_minutes(block.start),
                        "end_time": format_minutes(block.end),
                        "classroom_name": block.classroom_name,
                        "type": block.type.value,
                        "notes": block.notes,
                        "sub_name": block.sub_name,
                    }
                    for block in e.blocks
                ],
            }
            for e in plan.essential
        ],
        "surplus_teachers": [
            {"id": s.staff_id, "name": s.staff_name, "reason": s.reason}
            for s in plan.surplus
        ],
        "warnings": list(plan.warnings),
    }


def save_result(
    db: Session,
    school_id: str,
    on_date: date,
    result_type: ResultType,
    payload: dict,
) -> bool:
    """
    Replace the stored result for (school, date, type).

    A storage failure is logged and reported as False; the caller still
    has the computed payload.
    """
    try:
        db.execute(delete(OptimizationResults).where(
            and_(
                OptimizationResults.school_id == school_id,
                OptimizationResults.date == on_date,
                OptimizationResults.result_type == result_type,
            )
        ))
        db.add(OptimizationResults(
            school_id=school_id,
            date=on_date,
            result_type=result_type,
            result_data=payload,
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to save %s optimization result for %s on %s: %s", result_type.value, school_id, on_date, e)
        return False
    return True


def load_saved_results(db: Session, school_id: str, on_date: date) -> dict[str, Optional[dict]]:
    stmt = select(OptimizationResults).where(
        and_(
            OptimizationResults.school_id == school_id,
            OptimizationResults.date == on_date,
        )
    ).order_by(OptimizationResults.created_at)
    rows = db.execute(stmt).scalars().all()

    saved: dict[str, Optional[dict]] = {t.value: None for t in ResultType}
    for row in rows:
        saved[row.result_type.value] = row.result_data
    return saved


def generate_break_schedule(
    db: Session,
    school_id: str,
    on_date: date,
    persist: bool = False,
) -> dict:
    """
    Break optimization for a school/date, as a response payload.

    main entry point for the break schedule. This function:
    1. Loads staff, classrooms, present students and ratios for the date
    2. Assigns two breaks and a lunch to every teacher on shift
    3. Picks a substitute for each break and lunch where one is free
    4. Builds surplus/shortage alerts against peak demand
    5. Optionally replaces the stored result for the school and date

    Args:
        db: Database session
        school_id: The school to optimize
        on_date: Day to schedule
        persist: Store the payload as the day's regular result

    Returns:
        dict with:
        - success: always True once the school exists
        - breaks: one entry per teacher with HH:MM times and substitute names
        - alerts: surplus and shortage alerts
        - coverage_summary: headcount, peak and nap need, students present

    Raises:
        SchoolNotFoundError: if the school does not exist

    Example:
        from datetime import date
        from carepilot.services.coverage import generate_break_schedule

        payload = generate_break_schedule(db, school_id="...", on_date=date(2025, 3, 3))

        for entry in payload["breaks"]:
            print(entry["teacher_name"], entry["break1_start"], entry["break1_sub_name"])
    """
    context = load_coverage_context(db, school_id, on_date)
    payload = serialize_break_result(optimize_breaks(context))
    if persist:
        save_result(db, school_id, on_date, ResultType.REGULAR, payload)
    return payload


def generate_minimal_coverage(
    db: Session,
    school_id: str,
    on_date: date,
    persist: bool = False,
    order: SelectionOrder = stable_order,
) -> dict:
    """
    Minimal-coverage plan for a school/date, as a response payload.

    main entry point for minimal coverage. This function:
    1. Loads staff, classrooms, present students and ratios for the date
    2. Finds the infant/toddler and other-room peak needs over the day
    3. Splits working staff into essential and surplus, in ``order``
    4. Builds work/break/lunch blocks with substitutes for each essential member
    5. Optionally replaces the stored result for the school and date

    Args:
        db: Database session
        school_id: The school to plan
        on_date: Day to plan
        persist: Store the payload as the day's minimal result
        order: Ranks each pool before selection; roster order by default

    Returns:
        dict with:
        - current_teachers / minimal_teachers_needed / potential_savings
        - essential_teachers: each with a reason and day blocks
        - surplus_teachers: id, name and reason
        - warnings: loader warnings followed by planning warnings

    Raises:
        SchoolNotFoundError: if the school does not exist

    Example:
        from datetime import date
        from carepilot.services.coverage import generate_minimal_coverage

        payload = generate_minimal_coverage(db, school_id="...", on_date=date(2025, 3, 3))

        if payload["warnings"]:
            print(f"Warnings: {payload['warnings']}")
    """
    context = load_coverage_context(db, school_id, on_date)
    payload = serialize_minimal_result(optimize_minimal_coverage(context, order=order))
    if persist:
        save_result(db, school_id, on_date, ResultType.MINIMAL, payload)
    return payload
