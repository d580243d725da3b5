"""
Substitute picker: who covers a room while its teacher is on break or lunch.

A substitute must be on shift at the start of the window, must not be on
their own break or lunch during it, and must not already be covering
someone else. Infant and toddler rooms only take infant-qualified
substitutes. A teacher may leave their own room to cover only if that room
keeps enough staff for its ratio without them; floaters and directors
carry no room of their own.

Breaks are offered to teachers first and directors as a fallback; for
lunch directors are considered alongside everyone else in roster order.
Assignments live for one picker, which lives for one run.
"""

from collections import defaultdict
from typing import Optional

from .types import (
    BreakAssignment,
    Classroom,
    StaffMember,
    is_infant_qualified,
)
from .demand import DemandModel


Window = tuple[int, int]


def _overlaps(windows: list[Window], start: int, end: int) -> bool:
    return any(start < w_end and w_start < end for w_start, w_end in windows)


def _room_key(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return " ".join(name.split()).lower()


def break_windows(assignment: BreakAssignment) -> list[Window]:
    windows = [
        (assignment.break1_start, assignment.break1_end),
        (assignment.break2_start, assignment.break2_end),
    ]
    if assignment.lunch_start is not None:
        windows.append((assignment.lunch_start, assignment.lunch_end))
    return windows


class SubstitutePicker:
    """
    Picks substitutes from a pool of on-duty staff.

    ``off_floor`` maps staff id to the windows that person is away on their
    own breaks and lunch. ``rooms`` overrides the room a staff member is
    working in for the day; by default it is their classroom title.
    """

    def __init__(
        self,
        pool: list[StaffMember],
        classrooms: list[Classroom],
        demand: DemandModel,
        off_floor: dict[str, list[Window]],
        rooms: Optional[dict[str, str]] = None,
    ):
        self.pool = [s for s in pool if s.has_shift]
        self.classrooms = {_room_key(c.name): c for c in classrooms}
        self.demand = demand
        self.off_floor = off_floor
        self.rooms = rooms or {}
        self.covering: dict[str, list[Window]] = defaultdict(list)

    def room_of(self, member: StaffMember) -> Optional[Classroom]:
        if member.is_coverage_exempt:
            return None
        name = self.rooms.get(member.id, member.classroom_title)
        return self.classrooms.get(_room_key(name))

    def is_busy(self, member: StaffMember, start: int, end: int) -> bool:
        return (
            _overlaps(self.off_floor.get(member.id, []), start, end)
            or _overlaps(self.covering[member.id], start, end)
        )

    def is_on_floor(self, member: StaffMember, minute: int) -> bool:
        return (
            member.has_shift
            and member.shift_start <= minute < member.shift_end
            and not self.is_busy(member, minute, minute + 1)
        )

    def can_leave_room(self, sub: StaffMember, target: Optional[Classroom], minute: int) -> bool:
        room = self.room_of(sub)
        if room is None or (target is not None and room.id == target.id):
            return True
        in_room = sum(
            1 for s in self.pool
            if not s.is_coverage_exempt and self.room_of(s) == room and self.is_on_floor(s, minute)
        )
        return in_room > self.demand.required_staff(room, None, minute)

    def _is_candidate(self, sub: StaffMember, member: StaffMember, target: Optional[Classroom], start: int, end: int) -> bool:
        if sub.id == member.id:
            return False
        if not (sub.shift_start <= start < sub.shift_end):
            return False
        if self.is_busy(sub, start, end):
            return False
        if target is not None and target.is_infant_room and not is_infant_qualified(sub):
            return False
        if target is not None and target.is_infant_room and self.room_of(sub) == target:
            # every teacher in an infant room is needed for its ratio
            return False
        return self.can_leave_room(sub, target, start)

    def find(
        self,
        member: StaffMember,
        start: int,
        end: int,
        include_directors: bool = False,
    ) -> Optional[StaffMember]:
        """
        Claim a substitute for ``member`` over [start, end), or None.

        Staff with no room to cover get None without a search.
        """
        target = self.room_of(member)
        if target is None:
            return None

        if include_directors:
            tiers = [self.pool]
        else:
            tiers = [
                [s for s in self.pool if not s.is_coverage_exempt],
                [s for s in self.pool if s.is_coverage_exempt],
            ]

        for tier in tiers:
            for sub in tier:
                if self._is_candidate(sub, member, target, start, end):
                    self.covering[sub.id].append((start, end))
                    return sub
        return None


def assign_break_substitutes(
    assignments: list[BreakAssignment],
    on_duty: list[StaffMember],
    classrooms: list[Classroom],
    demand: DemandModel,
    off_floor: Optional[dict[str, list[Window]]] = None,
) -> None:
    """
    Fill the substitute names on each assignment, in assignment order.

    ``off_floor`` holds away windows for on-duty staff without an
    assignment, such as a director's lunch.
    """
    by_id = {s.id: s for s in on_duty}
    off_floor = dict(off_floor or {})
    for assignment in assignments:
        off_floor[assignment.staff_id] = break_windows(assignment)

    picker = SubstitutePicker(on_duty, classrooms, demand, off_floor)

    def name_of(sub: Optional[StaffMember]) -> Optional[str]:
        return sub.name if sub is not None else None

    for a in assignments:
        member = by_id[a.staff_id]
        a.break1_sub_name = name_of(picker.find(member, a.break1_start, a.break1_end))
        a.break2_sub_name = name_of(picker.find(member, a.break2_start, a.break2_end))
        if a.lunch_start is not None:
            a.lunch_sub_name = name_of(picker.find(member, a.lunch_start, a.lunch_end, include_directors=True))
