"""
Demand model: how many staff each classroom needs at each instant.

A classroom is in nap mode at an instant when more than 70% of its present
students are inside their own nap window, so rooms flip modes independently
as children fall asleep and wake up. The ratio for the room's age group is
taken from the nap or awake table accordingly, and the required count is
ceil(present / ratio).
"""

import math
from collections import defaultdict
from typing import Optional

from .types import (
    AgeGroup,
    Classroom,
    RatioPolicy,
    StudentPresence,
    TimeSlot,
)
from .time_grid import demand_grid, PEAK_MINUTES, NAP_REPRESENTATIVE_MINUTES


NAP_MAJORITY_THRESHOLD = 0.7
FALLBACK_RATIO = 12

DEFAULT_AWAKE_RATIOS = {
    AgeGroup.INFANT.value: 4,
    AgeGroup.TODDLER.value: 4,
    AgeGroup.TWOS.value: 12,
    AgeGroup.THREES.value: 12,
    AgeGroup.PRESCHOOL.value: 12,
    AgeGroup.PRE_K.value: 12,
}

DEFAULT_NAP_RATIOS = {
    AgeGroup.INFANT.value: 12,
    AgeGroup.TODDLER.value: 12,
    AgeGroup.TWOS.value: 24,
    AgeGroup.THREES.value: 24,
    AgeGroup.PRESCHOOL.value: 24,
    AgeGroup.PRE_K.value: 24,
}


def default_policy() -> RatioPolicy:
    return RatioPolicy(awake=dict(DEFAULT_AWAKE_RATIOS), nap=dict(DEFAULT_NAP_RATIOS))


def ratio_for(policy: RatioPolicy, age_group: AgeGroup, napping: bool) -> int:
    table = policy.nap if napping else policy.awake
    ratio = table.get(age_group.value)
    if not ratio or ratio <= 0:
        return FALLBACK_RATIO
    return ratio


def staff_needed(present_count: int, ratio: int) -> int:
    if present_count <= 0:
        return 0
    return math.ceil(present_count / ratio)


def is_nap_mode(students: list[StudentPresence], minute: int) -> bool:
    """Strict majority rule: exactly 70% napping is still awake mode."""
    if not students:
        return False
    napping = sum(1 for s in students if s.is_napping_at(minute))
    return napping / len(students) > NAP_MAJORITY_THRESHOLD


class DemandModel:
    """
    Required-staff function for one school on one date.

    Built fresh per run from the present students; students without a
    classroom, or whose classroom is unknown, do not contribute.
    """

    def __init__(
        self,
        classrooms: list[Classroom],
        students: list[StudentPresence],
        policy: RatioPolicy,
    ):
        self.classrooms = list(classrooms)
        self.policy = policy
        known = {c.id for c in self.classrooms}
        self.students_by_classroom: dict[str, list[StudentPresence]] = defaultdict(list)
        for student in students:
            if student.classroom_id in known:
                self.students_by_classroom[student.classroom_id].append(student)

    def present_count(self, classroom_id: str) -> int:
        return len(self.students_by_classroom.get(classroom_id, []))

    @property
    def total_present(self) -> int:
        return sum(len(v) for v in self.students_by_classroom.values())

    @property
    def active_classrooms(self) -> list[Classroom]:
        """Classrooms with at least one present student, in input order."""
        return [c for c in self.classrooms if self.present_count(c.id) > 0]

    def is_napping(self, classroom: Classroom, minute: int) -> bool:
        return is_nap_mode(self.students_by_classroom.get(classroom.id, []), minute)

    def any_napping(self, minute: int) -> bool:
        return any(self.is_napping(c, minute) for c in self.active_classrooms)

    def required_staff(
        self,
        classroom: Classroom,
        present_count: Optional[int],
        minute: int,
    ) -> int:
        if present_count is None:
            present_count = self.present_count(classroom.id)
        if present_count <= 0:
            return 0
        ratio = ratio_for(self.policy, classroom.age_group, self.is_napping(classroom, minute))
        return staff_needed(present_count, ratio)

    def slot_at(self, minute: int) -> TimeSlot:
        required = {}
        napping = set()
        for classroom in self.active_classrooms:
            required[classroom.id] = self.required_staff(classroom, None, minute)
            if self.is_napping(classroom, minute):
                napping.add(classroom.id)
        return TimeSlot(minute=minute, required=required, napping=frozenset(napping))

    def curve(self) -> list[TimeSlot]:
        """The day's demand on the 30-minute grid."""
        return [self.slot_at(minute) for minute in demand_grid()]

    def demand_at(self, minute: int) -> int:
        return self.slot_at(minute).total_required

    @property
    def peak_demand(self) -> int:
        return self.demand_at(PEAK_MINUTES)

    @property
    def nap_demand(self) -> int:
        return self.demand_at(NAP_REPRESENTATIVE_MINUTES)
