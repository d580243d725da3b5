"""
Break scheduler.

Every working staff member gets two fixed-length breaks, one before lunch
and one after, plus a confirmed lunch window. Candidate starts sit on a
15-minute grid between 09:00 and 17:00. Selection order for each break:

1. the first valid candidate that falls while some classroom is napping
2. the default slot (shift start + 2h, or lunch end + 2h) when it is valid
3. the last valid candidate visited
4. the default slot, when no candidate is valid at all

Steps 1-3 skip starts already claimed by someone else's break in the same
run, so breaks spread out where they can. The claim set lives only for the
duration of one call.

Once breaks are placed, each break and lunch is offered to a substitute
(see substitutes.py).
"""

import logging
from typing import Callable, Optional

from .types import (
    AlertType,
    BreakAssignment,
    CoverageContext,
    BreakOptimizationResult,
    StaffMember,
    StaffingAlert,
)
from .demand import DemandModel
from .substitutes import assign_break_substitutes
from .time_grid import break_candidate_grid


logger = logging.getLogger(__name__)

BREAK_DURATION_MINUTES = 10
DEFAULT_LUNCH_MINUTES = 60
DEFAULT_BREAK_OFFSET_MINUTES = 120  # after shift start / lunch end
BREAK_MIN_AFTER_ANCHOR_MINUTES = 60
BREAK_MIN_BEFORE_BOUNDARY_MINUTES = 30
NO_LUNCH_BREAK2_BEFORE_END_MINUTES = 90

SURPLUS_ALERT_MARGIN = 2
PEAK_ALERT_TIME_RANGE = "9:00 AM - 12:00 PM"


def resolve_lunch(member: StaffMember) -> tuple[Optional[int], Optional[int]]:
    """
    Effective lunch window for the day, or (None, None).

    A missing end means a one-hour lunch. A lunch entirely outside the
    shift is ignored.
    """
    if member.lunch_start is None:
        return None, None
    lunch_start = member.lunch_start
    lunch_end = member.lunch_end if member.lunch_end is not None else lunch_start + DEFAULT_LUNCH_MINUTES
    if member.has_shift:
        if lunch_end <= member.shift_start or lunch_start >= member.shift_end:
            return None, None
    return lunch_start, lunch_end


def director_lunches(on_duty: list[StaffMember]) -> dict[str, list[tuple[int, int]]]:
    """Lunch windows of on-duty directors, who have no break assignment."""
    windows = {}
    for member in on_duty:
        if not member.is_coverage_exempt:
            continue
        lunch_start, lunch_end = resolve_lunch(member)
        if lunch_start is not None:
            windows[member.id] = [(lunch_start, lunch_end)]
    return windows


def _pick_break_start(
    default: int,
    is_valid: Callable[[int], bool],
    is_nap_time: Callable[[int], bool],
    claimed: set[int],
) -> int:
    candidates = [start for start in break_candidate_grid() if is_valid(start)]
    if not candidates:
        return default

    for start in candidates:
        if start not in claimed and is_nap_time(start):
            return start

    if default in candidates and default not in claimed:
        return default

    chosen = None
    for start in candidates:
        if start not in claimed:
            chosen = start
    return chosen if chosen is not None else default


def _schedule_member(
    member: StaffMember,
    is_nap_time: Callable[[int], bool],
    claimed: set[int],
) -> BreakAssignment:
    shift_start, shift_end = member.shift_start, member.shift_end
    lunch_start, lunch_end = resolve_lunch(member)

    # break 1: after the shift has settled, well before lunch (or before the break-2 default)
    boundary1 = lunch_start if lunch_start is not None else shift_end - NO_LUNCH_BREAK2_BEFORE_END_MINUTES
    latest_end1 = boundary1 - BREAK_MIN_BEFORE_BOUNDARY_MINUTES

    def valid1(start: int) -> bool:
        return (
            start > shift_start + BREAK_MIN_AFTER_ANCHOR_MINUTES
            and start + BREAK_DURATION_MINUTES < latest_end1
        )

    default1 = shift_start + DEFAULT_BREAK_OFFSET_MINUTES
    if default1 + BREAK_DURATION_MINUTES > latest_end1:
        default1 = max(shift_start, latest_end1 - BREAK_DURATION_MINUTES)

    break1 = _pick_break_start(default1, valid1, is_nap_time, claimed)
    claimed.add(break1)

    # break 2: mirror image, anchored after lunch (or after break 1 when no lunch is recorded)
    anchor2 = lunch_end if lunch_end is not None else break1 + BREAK_DURATION_MINUTES
    latest_end2 = shift_end - BREAK_MIN_BEFORE_BOUNDARY_MINUTES

    def valid2(start: int) -> bool:
        return (
            start > anchor2 + BREAK_MIN_AFTER_ANCHOR_MINUTES
            and start + BREAK_DURATION_MINUTES < latest_end2
        )

    if lunch_end is not None:
        default2 = lunch_end + DEFAULT_BREAK_OFFSET_MINUTES
    else:
        default2 = shift_end - NO_LUNCH_BREAK2_BEFORE_END_MINUTES
    latest_start2 = latest_end2 - BREAK_DURATION_MINUTES
    if default2 > latest_start2:
        default2 = max(anchor2, latest_start2)

    break2 = _pick_break_start(default2, valid2, is_nap_time, claimed)
    claimed.add(break2)

    return BreakAssignment(
        staff_id=member.id,
        staff_name=member.name,
        break1_start=break1,
        break1_end=break1 + BREAK_DURATION_MINUTES,
        break2_start=break2,
        break2_end=break2 + BREAK_DURATION_MINUTES,
        lunch_start=lunch_start,
        lunch_end=lunch_end,
    )


def schedule_breaks(
    staff: list[StaffMember],
    demand: DemandModel,
    claimed: Optional[set[int]] = None,
) -> list[BreakAssignment]:
    """
    Assign breaks to every staff member with a shift, in input order.

    Staff without both a shift start and end are not working today and are
    left out of the result. Pass ``claimed`` to share slot claims with a
    caller; by default each call starts from an empty set.
    """
    if claimed is None:
        claimed = set()

    assignments = []
    for member in staff:
        if not member.has_shift:
            continue
        assignments.append(_schedule_member(member, demand.any_napping, claimed))
    return assignments


def build_staffing_alerts(total_staff: int, peak_needed: int) -> list[StaffingAlert]:
    alerts = []

    if total_staff > peak_needed + SURPLUS_ALERT_MARGIN:
        extra = total_staff - peak_needed
        alerts.append(StaffingAlert(
            type=AlertType.SURPLUS,
            message=f"You have {extra} extra teachers. Consider sending some home or to another school.",
            count=extra,
        ))

    if total_staff < peak_needed:
        missing = peak_needed - total_staff
        alerts.append(StaffingAlert(
            type=AlertType.SHORTAGE,
            message=f"You need {missing} more teachers during peak hours. Consider calling in a floater.",
            count=missing,
            time_range=PEAK_ALERT_TIME_RANGE,
        ))

    return alerts


def optimize_breaks(context: CoverageContext) -> BreakOptimizationResult:
    """
    Break optimization for one school/date.

    Breaks go to coverage-eligible working staff; directors on shift still
    count toward the headcount the alerts compare against peak demand, and
    they step in as substitutes when no teacher can leave their room.
    """
    demand = DemandModel(context.classrooms, context.students, context.policy)

    on_duty = [s for s in context.staff if s.has_shift]
    working = [s for s in on_duty if not s.is_coverage_exempt]

    breaks = schedule_breaks(working, demand)
    assign_break_substitutes(breaks, on_duty, context.classrooms, demand, director_lunches(on_duty))
    peak = demand.peak_demand
    alerts = build_staffing_alerts(len(on_duty), peak)

    logger.info(
        "Break optimization for school %s on %s: %d breaks, %d on duty, peak need %d",
        context.school_id, context.date, len(breaks), len(on_duty), peak,
    )

    return BreakOptimizationResult(
        school_id=context.school_id,
        school_name=context.school_name,
        date=context.date,
        breaks=breaks,
        alerts=alerts,
        total_staff=len(on_duty),
        staff_needed_peak=peak,
        staff_needed_nap=demand.nap_demand,
        total_students_present=demand.total_present,
    )
