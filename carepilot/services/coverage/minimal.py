"""
Minimal-coverage selector.

Infant and toddler rooms may only be counted as covered by infant-qualified
staff, so the day's minimum is two numbers rather than one: the peak summed
demand across infant/toddler rooms, and the peak summed demand across every
other room, each taken over the whole demand grid. Infant-qualified staff
fill the first number; whoever is left (qualified or not) fills the second.

Pool order decides who is essential. The default keeps roster order; pass a
different ``order`` to rotate or rank staff.

Break and lunch blocks name a substitute drawn from the other essential
staff and the on-duty directors.
"""

import logging
from typing import Callable, Optional

from .types import (
    BlockType,
    Classroom,
    CoverageContext,
    CoveragePlan,
    EssentialStaff,
    MinimalCoverageResult,
    ScheduleBlock,
    StaffMember,
    SurplusStaff,
    is_infant_qualified,
)
from .demand import DemandModel
from .breaks import (
    BREAK_DURATION_MINUTES,
    BREAK_MIN_AFTER_ANCHOR_MINUTES,
    BREAK_MIN_BEFORE_BOUNDARY_MINUTES,
    DEFAULT_BREAK_OFFSET_MINUTES,
    NO_LUNCH_BREAK2_BEFORE_END_MINUTES,
    director_lunches,
    resolve_lunch,
)
from .substitutes import SubstitutePicker


logger = logging.getLogger(__name__)

SelectionOrder = Callable[[list[StaffMember]], list[StaffMember]]

REASON_ESSENTIAL_INFANT = "Infant-qualified - required for infant/toddler rooms"
REASON_ESSENTIAL_RATIO = "Required to meet ratio requirements"
REASON_SURPLUS_INFANT = "Infant-qualified but sufficient coverage exists"
REASON_SURPLUS_RATIO = "Ratios can be maintained without this position"

WARNING_NO_STUDENTS = "No enrolled students found for this school"


def stable_order(pool: list[StaffMember]) -> list[StaffMember]:
    """Roster order, unchanged."""
    return list(pool)


def peak_needs(classrooms: list[Classroom], demand: DemandModel) -> tuple[int, int]:
    """(infant/toddler peak, other-room peak) over the day's grid."""
    min_infant = 0
    min_other = 0
    for slot in demand.curve():
        infant_need = 0
        other_need = 0
        for classroom in classrooms:
            need = slot.required.get(classroom.id, 0)
            if classroom.is_infant_room:
                infant_need += need
            else:
                other_need += need
        min_infant = max(min_infant, infant_need)
        min_other = max(min_other, other_need)
    return min_infant, min_other


def _fit_break(
    start: int,
    earliest: int,
    latest_end: int,
    lunch: tuple[Optional[int], Optional[int]],
) -> Optional[int]:
    """Pull a break inside latest_end, then slide it clear of lunch; drop it if it lands before earliest."""
    lunch_start, lunch_end = lunch
    if start + BREAK_DURATION_MINUTES > latest_end:
        start = latest_end - BREAK_DURATION_MINUTES
    if lunch_start is not None and start < lunch_end and start + BREAK_DURATION_MINUTES > lunch_start:
        start = lunch_start - BREAK_DURATION_MINUTES
    if start < earliest:
        return None
    return start


def build_day_blocks(member: StaffMember, classroom_name: str) -> list[ScheduleBlock]:
    """
    Work/break/lunch blocks covering the member's shift.

    Break 1 sits two hours into the shift and break 2 two hours after lunch
    (or 90 minutes before the end with no lunch), each moved to fit the
    shift without touching lunch, or left out when it cannot fit.
    """
    shift_start, shift_end = member.shift_start, member.shift_end
    lunch_start, lunch_end = resolve_lunch(member)
    if lunch_start is not None:
        lunch_start = max(lunch_start, shift_start)
        lunch_end = min(lunch_end, shift_end)
    lunch = (lunch_start, lunch_end)

    points: list[tuple[int, int, BlockType]] = []

    break1 = _fit_break(
        shift_start + DEFAULT_BREAK_OFFSET_MINUTES,
        shift_start + BREAK_MIN_AFTER_ANCHOR_MINUTES,
        shift_end,
        lunch,
    )
    if break1 is not None:
        points.append((break1, break1 + BREAK_DURATION_MINUTES, BlockType.BREAK))

    if lunch_start is not None:
        points.append((lunch_start, lunch_end, BlockType.LUNCH))
        break2_target = lunch_end + DEFAULT_BREAK_OFFSET_MINUTES
        break2_earliest = lunch_end
    else:
        break2_target = shift_end - NO_LUNCH_BREAK2_BEFORE_END_MINUTES
        break2_earliest = break1 + BREAK_DURATION_MINUTES if break1 is not None else shift_start

    break2 = _fit_break(
        break2_target,
        break2_earliest,
        shift_end - BREAK_MIN_BEFORE_BOUNDARY_MINUTES,
        lunch,
    )
    if break2 is not None and (break1 is None or break2 >= break1 + BREAK_DURATION_MINUTES):
        points.append((break2, break2 + BREAK_DURATION_MINUTES, BlockType.BREAK))

    points.sort(key=lambda p: p[0])

    blocks = []
    current = shift_start
    for start, end, block_type in points:
        if current < start:
            blocks.append(ScheduleBlock(current, start, classroom_name, BlockType.WORK))
        if block_type == BlockType.LUNCH:
            blocks.append(ScheduleBlock(start, end, "Lunch", BlockType.LUNCH, notes="Lunch break"))
        else:
            blocks.append(ScheduleBlock(start, end, "Break", BlockType.BREAK, notes="10 minute break"))
        current = max(current, end)

    if current < shift_end:
        blocks.append(ScheduleBlock(current, shift_end, classroom_name, BlockType.WORK))

    return blocks


def _assign_block_substitutes(
    essential: list[EssentialStaff],
    staff: list[StaffMember],
    classrooms: list[Classroom],
    demand: DemandModel,
    rooms: dict[str, str],
) -> None:
    # only the essential staff and on-duty directors are in the building
    by_id = {s.id: s for s in staff}
    members = [by_id[e.staff_id] for e in essential]
    directors = [s for s in staff if s.has_shift and s.is_coverage_exempt]

    off_floor = director_lunches(directors)
    for entry in essential:
        off_floor[entry.staff_id] = [
            (b.start, b.end) for b in entry.blocks
            if b.type in (BlockType.BREAK, BlockType.LUNCH)
        ]

    picker = SubstitutePicker(members + directors, classrooms, demand, off_floor, rooms=rooms)
    for entry, member in zip(essential, members):
        for block in entry.blocks:
            if block.type == BlockType.WORK:
                continue
            sub = picker.find(member, block.start, block.end, include_directors=block.type == BlockType.LUNCH)
            block.sub_name = sub.name if sub is not None else None


def select_minimal_coverage(
    staff: list[StaffMember],
    classrooms: list[Classroom],
    demand: DemandModel,
    order: SelectionOrder = stable_order,
) -> CoveragePlan:
    """
    Split working staff into essential and surplus.

    Always returns a plan: too few infant-qualified staff is reported as a
    warning, not an error. Directors and assistant directors are outside
    the partition, as is anyone without a shift today.
    """
    warnings = []
    if demand.total_present == 0:
        warnings.append(WARNING_NO_STUDENTS)

    min_infant, min_other = peak_needs(classrooms, demand)

    working = [s for s in staff if s.is_working]
    infant_pool = order([s for s in working if is_infant_qualified(s)])
    other_pool = order([s for s in working if not is_infant_qualified(s)])

    if len(infant_pool) < min_infant:
        warnings.append(
            f"Need {min_infant} infant-qualified teachers but only have {len(infant_pool)}. "
            f"Cannot reduce staff for infant rooms."
        )

    selected_infant = infant_pool[:min_infant]
    selected_other = (infant_pool[min_infant:] + other_pool)[:min_other]
    essential_ids = {s.id for s in selected_infant} | {s.id for s in selected_other}

    active_ids = {c.id for c in demand.active_classrooms}
    infant_rooms = [c for c in classrooms if c.is_infant_room and c.id in active_ids]
    claimed_rooms: set[str] = set()
    rooms: dict[str, str] = {}

    essential = []
    surplus = []
    for member in working:
        qualified = is_infant_qualified(member)

        if member.id not in essential_ids:
            surplus.append(SurplusStaff(
                staff_id=member.id,
                staff_name=member.name,
                reason=REASON_SURPLUS_INFANT if qualified else REASON_SURPLUS_RATIO,
            ))
            continue

        classroom_name = member.classroom_title or ""
        if qualified and infant_rooms:
            room = next((c for c in infant_rooms if c.name not in claimed_rooms), infant_rooms[0])
            classroom_name = room.name
        claimed_rooms.add(classroom_name)

        essential.append(EssentialStaff(
            staff_id=member.id,
            staff_name=member.name,
            role=member.role,
            reason=REASON_ESSENTIAL_INFANT if qualified else REASON_ESSENTIAL_RATIO,
            blocks=build_day_blocks(member, classroom_name),
        ))
        rooms[member.id] = classroom_name

    _assign_block_substitutes(essential, staff, classrooms, demand, rooms)

    return CoveragePlan(
        essential=essential,
        surplus=surplus,
        min_infant_qualified_needed=min_infant,
        min_other_needed=min_other,
        warnings=warnings,
    )


def optimize_minimal_coverage(
    context: CoverageContext,
    order: SelectionOrder = stable_order,
) -> MinimalCoverageResult:
    demand = DemandModel(context.classrooms, context.students, context.policy)
    plan = select_minimal_coverage(context.staff, context.classrooms, demand, order=order)
    plan.warnings = list(context.warnings) + plan.warnings

    logger.info(
        "Minimal coverage for school %s on %s: %d of %d staff essential (infant peak %d, other peak %d)",
        context.school_id, context.date, plan.minimal_staff_needed, plan.working_staff,
        plan.min_infant_qualified_needed, plan.min_other_needed,
    )

    return MinimalCoverageResult(
        school_id=context.school_id,
        school_name=context.school_name,
        date=context.date,
        current_staff=plan.working_staff,
        plan=plan,
    )
