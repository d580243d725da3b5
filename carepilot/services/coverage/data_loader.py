"""
Data loader for the coverage engine.
Fetches one school's roster, rooms, attendance and ratio settings for a
date and converts them to internal types.
"""

import logging
import re
from datetime import date
from typing import Optional

from sqlalchemy import select, and_, or_
from sqlalchemy.orm import Session

from carepilot.db.models.schools import Schools
from carepilot.db.models.classrooms import Classrooms
from carepilot.db.models.students import Students, StudentStatus
from carepilot.db.models.teachers import Teachers, TeacherStatus
from carepilot.db.models.attendance import Attendance, AttendanceStatus
from carepilot.db.models.pto_requests import PtoRequests, PtoStatus
from carepilot.db.models.school_settings import SchoolSettings

from .types import (
    AgeGroup,
    Classroom,
    CoverageContext,
    INFANT_CAPABILITY,
    RatioPolicy,
    StaffMember,
    StaffRole,
    StudentPresence,
)
from .demand import DEFAULT_AWAKE_RATIOS, DEFAULT_NAP_RATIOS
from .time_grid import minutes_from_time


logger = logging.getLogger(__name__)

RATIO_NORMAL_KEY = "ratio_normal"
RATIO_NAPTIME_KEY = "ratio_naptime"

WARNING_NO_ATTENDANCE = "No attendance data for this date - using all enrolled students for calculation"

_QUALIFICATION_SPLIT = re.compile(r"[,;/|\n]+")


class SchoolNotFoundError(LookupError):
    pass


def parse_qualifications(text: Optional[str]) -> frozenset[str]:
    """
    Turn free-text qualifications into a tag set.

    Each separated entry becomes a lowercase tag; entries mentioning infants
    also grant the infant capability tag.
    """
    if not text:
        return frozenset()
    tags = set()
    for token in _QUALIFICATION_SPLIT.split(text.lower()):
        token = " ".join(token.split())
        if not token:
            continue
        tags.add(token)
        if INFANT_CAPABILITY in token:
            tags.add(INFANT_CAPABILITY)
    return frozenset(tags)


def load_school(db: Session, school_id: str) -> Schools:
    school = db.execute(select(Schools).where(Schools.id == school_id)).scalar_one_or_none()
    if school is None:
        raise SchoolNotFoundError(f"School {school_id} not found")
    return school


def load_staff(db: Session, school_id: str, on_date: date) -> list[StaffMember]:
    """Load active teachers, minus anyone on approved PTO that day."""

    stmt = select(Teachers).where(
        and_(
            Teachers.school_id == school_id,
            Teachers.status == TeacherStatus.ACTIVE,
        )
    ).order_by(Teachers.last_name, Teachers.first_name, Teachers.id)
    rows = db.execute(stmt).scalars().all()

    pto_stmt = select(PtoRequests.teacher_id).where(
        and_(
            PtoRequests.school_id == school_id,
            PtoRequests.status == PtoStatus.APPROVED,
            PtoRequests.start_date <= on_date,
            PtoRequests.end_date >= on_date,
        )
    )
    on_pto = set(db.execute(pto_stmt).scalars().all())
    if on_pto:
        logger.info("Excluding %d teachers on approved PTO for %s", len(on_pto), on_date)

    staff = []
    for t in rows:
        if t.id in on_pto:
            continue

        shift_start = minutes_from_time(t.regular_shift_start)
        shift_end = minutes_from_time(t.regular_shift_end)
        if shift_start is not None and shift_end is not None and shift_end <= shift_start:
            logger.warning("Teacher %s has a shift ending before it starts; treating as off today", t.id)
            shift_start = shift_end = None

        staff.append(StaffMember(
            id=t.id,
            first_name=t.first_name,
            last_name=t.last_name,
            role=StaffRole(t.role.value),
            qualifications=parse_qualifications(t.qualifications),
            shift_start=shift_start,
            shift_end=shift_end,
            lunch_start=minutes_from_time(t.lunch_break_start),
            lunch_end=minutes_from_time(t.lunch_break_end),
            classroom_title=t.classroom_title,
        ))

    return staff


def load_classrooms(db: Session, school_id: str) -> list[Classroom]:
    stmt = select(Classrooms).where(Classrooms.school_id == school_id).order_by(Classrooms.name, Classrooms.id)
    rows = db.execute(stmt).scalars().all()

    return [
        Classroom(id=c.id, name=c.name, age_group=AgeGroup(c.age_group.value))
        for c in rows
    ]


def load_present_students(
    db: Session,
    school_id: str,
    on_date: date,
) -> tuple[list[StudentPresence], list[str]]:
    """
    Enrolled students marked present on the date.

    With no attendance taken for the date every enrolled student counts as
    present, and a warning says so.
    """
    stmt = select(Students).where(
        and_(
            Students.school_id == school_id,
            Students.status == StudentStatus.ENROLLED,
        )
    ).order_by(Students.id)
    rows = db.execute(stmt).scalars().all()

    attendance_stmt = select(Attendance.student_id).where(
        and_(
            Attendance.school_id == school_id,
            Attendance.date == on_date,
            Attendance.status == AttendanceStatus.PRESENT,
        )
    )
    present_ids = set(db.execute(attendance_stmt).scalars().all())

    warnings = []
    if present_ids:
        rows = [s for s in rows if s.id in present_ids]
    elif rows:
        logger.info("No attendance for school %s on %s; using all %d enrolled students", school_id, on_date, len(rows))
        warnings.append(WARNING_NO_ATTENDANCE)

    students = [
        StudentPresence(
            id=s.id,
            classroom_id=s.classroom_id,
            nap_start=minutes_from_time(s.nap_start),
            nap_end=minutes_from_time(s.nap_end),
        )
        for s in rows
    ]
    return students, warnings


def _merge_ratio_table(defaults: dict[str, int], *overrides) -> dict[str, int]:
    """Built-in table, then each override applied entry by entry."""
    table = dict(defaults)
    for value in overrides:
        if value is None:
            continue
        if not isinstance(value, dict):
            logger.warning("Ignoring ratio setting that is not a mapping: %r", value)
            continue
        for key, ratio in value.items():
            try:
                table[str(key)] = int(ratio)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric ratio %r for %s", ratio, key)
    return table


def load_ratio_policy(db: Session, school_id: str) -> RatioPolicy:
    """
    Merge ratio settings entry by entry: built-in tables first, then the
    global rows, then this school's rows.
    """
    stmt = select(SchoolSettings).where(
        and_(
            SchoolSettings.setting_key.in_([RATIO_NORMAL_KEY, RATIO_NAPTIME_KEY]),
            or_(SchoolSettings.school_id.is_(None), SchoolSettings.school_id == school_id),
        )
    )
    rows = db.execute(stmt).scalars().all()

    global_values = {row.setting_key: row.setting_value for row in rows if row.school_id is None}
    school_values = {row.setting_key: row.setting_value for row in rows if row.school_id is not None}

    return RatioPolicy(
        awake=_merge_ratio_table(
            DEFAULT_AWAKE_RATIOS,
            global_values.get(RATIO_NORMAL_KEY),
            school_values.get(RATIO_NORMAL_KEY),
        ),
        nap=_merge_ratio_table(
            DEFAULT_NAP_RATIOS,
            global_values.get(RATIO_NAPTIME_KEY),
            school_values.get(RATIO_NAPTIME_KEY),
        ),
    )


def load_coverage_context(db: Session, school_id: str, on_date: date) -> CoverageContext:
    """
    Load all data needed for one school/date run.

    Reads the school, its active teachers (minus approved PTO), classrooms,
    the students present on the date and the merged ratio settings, and
    converts them to internal types.

    Args:
        db: Database session
        school_id: The school to optimize
        on_date: The day being planned

    Returns:
        CoverageContext for the school/date; its warnings carry the
        attendance fallback when no attendance was taken

    Raises:
        SchoolNotFoundError: if the school does not exist

    Example:
        context = load_coverage_context(db, school_id="...", on_date=date(2025, 3, 3))
        result = optimize_breaks(context)
    """
    school = load_school(db, school_id)
    students, warnings = load_present_students(db, school_id, on_date)

    return CoverageContext(
        school_id=school.id,
        school_name=school.name,
        date=on_date,
        staff=load_staff(db, school_id, on_date),
        classrooms=load_classrooms(db, school_id),
        students=students,
        policy=load_ratio_policy(db, school_id),
        warnings=warnings,
    )
