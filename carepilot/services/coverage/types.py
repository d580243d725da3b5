"""
Internal data types for the coverage engine.
decoupled from SQLAlchemy models; all times are minutes since midnight.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class AgeGroup(str, Enum):
    INFANT = "infant"
    TODDLER = "toddler"
    TWOS = "twos"
    THREES = "threes"
    PRESCHOOL = "preschool"
    PRE_K = "pre_k"


INFANT_AGE_GROUPS = frozenset({AgeGroup.INFANT, AgeGroup.TODDLER})


class StaffRole(str, Enum):
    DIRECTOR = "director"
    ASSISTANT_DIRECTOR = "assistant_director"
    LEAD_TEACHER = "lead_teacher"
    TEACHER = "teacher"
    ASSISTANT = "assistant"
    FLOATER = "floater"


COVERAGE_EXEMPT_ROLES = frozenset({StaffRole.DIRECTOR, StaffRole.ASSISTANT_DIRECTOR})

INFANT_CAPABILITY = "infant"


class BlockType(str, Enum):
    WORK = "work"
    BREAK = "break"
    LUNCH = "lunch"


class AlertType(str, Enum):
    SURPLUS = "surplus"
    SHORTAGE = "shortage"


@dataclass
class StaffMember:
    id: str
    first_name: str
    last_name: str
    role: StaffRole
    qualifications: frozenset[str] = frozenset()
    shift_start: Optional[int] = None
    shift_end: Optional[int] = None
    lunch_start: Optional[int] = None
    lunch_end: Optional[int] = None
    classroom_title: Optional[str] = None

    def __post_init__(self):
        if self.shift_start is not None and self.shift_end is not None:
            if self.shift_end <= self.shift_start:
                raise ValueError(f"shift for staff {self.id} must end after it starts")

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_shift(self) -> bool:
        return self.shift_start is not None and self.shift_end is not None

    @property
    def is_coverage_exempt(self) -> bool:
        return self.role in COVERAGE_EXEMPT_ROLES

    @property
    def is_working(self) -> bool:
        """On the floor today and counted toward classroom coverage."""
        return self.has_shift and not self.is_coverage_exempt


def is_infant_qualified(staff: StaffMember) -> bool:
    """Lead teachers and anyone holding the infant capability may cover infant/toddler rooms."""
    return staff.role == StaffRole.LEAD_TEACHER or INFANT_CAPABILITY in staff.qualifications


@dataclass
class Classroom:
    id: str
    name: str
    age_group: AgeGroup

    @property
    def is_infant_room(self) -> bool:
        return self.age_group in INFANT_AGE_GROUPS


@dataclass
class StudentPresence:
    id: str
    classroom_id: Optional[str]
    nap_start: Optional[int] = None
    nap_end: Optional[int] = None

    def is_napping_at(self, minute: int) -> bool:
        if self.nap_start is None or self.nap_end is None:
            return False
        return self.nap_start <= minute < self.nap_end


@dataclass
class RatioPolicy:
    """Max students per staff member, by age group, awake and napping."""
    awake: dict[str, int]
    nap: dict[str, int]


@dataclass
class TimeSlot:
    """One point on the demand grid."""
    minute: int
    required: dict[str, int] = field(default_factory=dict)  # classroom_id -> staff needed
    napping: frozenset[str] = frozenset()  # classroom ids in nap mode

    @property
    def total_required(self) -> int:
        return sum(self.required.values())

    @property
    def is_nap_time(self) -> bool:
        return bool(self.napping)


@dataclass
class BreakAssignment:
    staff_id: str
    staff_name: str
    break1_start: int
    break1_end: int
    break2_start: int
    break2_end: int
    lunch_start: Optional[int] = None
    lunch_end: Optional[int] = None
    break1_sub_name: Optional[str] = None
    break2_sub_name: Optional[str] = None
    lunch_sub_name: Optional[str] = None


@dataclass
class StaffingAlert:
    type: AlertType
    message: str
    count: int
    time_range: Optional[str] = None


@dataclass
class ScheduleBlock:
    start: int
    end: int
    classroom_name: str
    type: BlockType
    notes: Optional[str] = None
    sub_name: Optional[str] = None  # who covers the room during a break or lunch


@dataclass
class EssentialStaff:
    staff_id: str
    staff_name: str
    role: StaffRole
    reason: str
    blocks: list[ScheduleBlock] = field(default_factory=list)


@dataclass
class SurplusStaff:
    staff_id: str
    staff_name: str
    reason: str


@dataclass
class CoveragePlan:
    """Output of the minimal-coverage selector."""
    essential: list[EssentialStaff]
    surplus: list[SurplusStaff]
    min_infant_qualified_needed: int
    min_other_needed: int
    warnings: list[str] = field(default_factory=list)

    @property
    def minimal_staff_needed(self) -> int:
        # actual selection, which qualification limits can push away from the theoretical sum
        return len(self.essential)

    @property
    def working_staff(self) -> int:
        return len(self.essential) + len(self.surplus)


@dataclass
class CoverageContext:
    """All data needed for one (school, date) optimization run."""
    school_id: str
    school_name: str
    date: date
    staff: list[StaffMember]
    classrooms: list[Classroom]
    students: list[StudentPresence]  # already narrowed to students present on the date
    policy: RatioPolicy
    warnings: list[str] = field(default_factory=list)


@dataclass
class BreakOptimizationResult:
    school_id: str
    school_name: str
    date: date
    breaks: list[BreakAssignment]
    alerts: list[StaffingAlert]
    total_staff: int
    staff_needed_peak: int
    staff_needed_nap: int
    total_students_present: int
    success: bool = True


@dataclass
class MinimalCoverageResult:
    school_id: str
    school_name: str
    date: date
    current_staff: int
    plan: CoveragePlan
    success: bool = True

    @property
    def potential_savings(self) -> int:
        return len(self.plan.surplus)
