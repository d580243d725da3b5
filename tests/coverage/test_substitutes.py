import pytest

from carepilot.services.coverage.types import (
    AgeGroup,
    BlockType,
    BreakAssignment,
    Classroom,
    StaffRole,
)
from carepilot.services.coverage.demand import DemandModel
from carepilot.services.coverage.minimal import select_minimal_coverage
from carepilot.services.coverage.substitutes import (
    SubstitutePicker,
    assign_break_substitutes,
    break_windows,
)

from conftest import hm, make_staff, make_students


@pytest.fixture
def prek_room() -> Classroom:
    return Classroom(id="room-prek", name="Pre-K D", age_group=AgeGroup.PRE_K)


def _picker(pool, classrooms, students, policy, off_floor=None, rooms=None):
    demand = DemandModel(classrooms, students, policy)
    return SubstitutePicker(pool, classrooms, demand, off_floor or {}, rooms=rooms)


class TestBreakWindows:
    def test_with_and_without_lunch(self):
        with_lunch = BreakAssignment("a", "A", hm(10), hm(10, 10), hm(15), hm(15, 10), hm(12), hm(13))
        assert break_windows(with_lunch) == [(hm(10), hm(10, 10)), (hm(15), hm(15, 10)), (hm(12), hm(13))]

        no_lunch = BreakAssignment("a", "A", hm(10), hm(10, 10), hm(15), hm(15, 10))
        assert len(break_windows(no_lunch)) == 2


class TestSubstitutePicker:
    def test_infant_room_needs_qualified_sub(self, infant_room, preschool_room, policy):
        lead = make_staff("lead", role=StaffRole.LEAD_TEACHER, classroom_title="Infant A")
        plain = make_staff("t1", classroom_title="Preschool C")
        qualified = make_staff("inf", qualifications={"infant"}, classroom_title="Preschool C")
        other = make_staff("t2", classroom_title="Preschool C")
        students = make_students(infant_room.id, 4) + make_students(preschool_room.id, 12)
        picker = _picker([lead, plain, qualified, other], [infant_room, preschool_room], students, policy)

        assert picker.find(lead, hm(10), hm(10, 10)) is qualified

    def test_infant_room_colleague_not_pulled(self, infant_room, policy):
        lead = make_staff("lead", role=StaffRole.LEAD_TEACHER, classroom_title="Infant A")
        colleague = make_staff("inf1", qualifications={"infant"}, classroom_title="Infant A")
        floater = make_staff("flo", role=StaffRole.FLOATER)
        qualified_floater = make_staff("flo2", role=StaffRole.FLOATER, qualifications={"infant"})
        picker = _picker(
            [lead, colleague, floater, qualified_floater], [infant_room],
            make_students(infant_room.id, 8), policy,
        )

        assert picker.find(lead, hm(10), hm(10, 10)) is qualified_floater

    def test_roommate_covers_outside_infant_rooms(self, preschool_room, policy):
        a = make_staff("a", classroom_title="Preschool C")
        b = make_staff("b", classroom_title="Preschool C")
        picker = _picker([a, b], [preschool_room], make_students(preschool_room.id, 12), policy)

        assert picker.find(a, hm(10), hm(10, 10)) is b

    def test_no_double_booking(self, preschool_room, policy):
        a = make_staff("a", classroom_title="Preschool C")
        b = make_staff("b", classroom_title="Preschool C")
        f1 = make_staff("f1", role=StaffRole.FLOATER)
        f2 = make_staff("f2", role=StaffRole.FLOATER)
        off_floor = {"a": [(hm(10), hm(10, 10))], "b": [(hm(10, 5), hm(10, 15))]}
        picker = _picker([a, b, f1, f2], [preschool_room], make_students(preschool_room.id, 12), policy, off_floor)

        assert picker.find(a, hm(10), hm(10, 10)) is f1
        # f1 is still covering a until 10:10
        assert picker.find(b, hm(10, 5), hm(10, 15)) is f2
        assert picker.find(a, hm(15), hm(15, 10)) is b

    def test_sub_on_own_break_skipped(self, preschool_room, policy):
        a = make_staff("a", classroom_title="Preschool C")
        f1 = make_staff("f1", role=StaffRole.FLOATER)
        f2 = make_staff("f2", role=StaffRole.FLOATER)
        picker = _picker(
            [a, f1, f2], [preschool_room], make_students(preschool_room.id, 12), policy,
            off_floor={"f1": [(hm(10, 5), hm(10, 15))]},
        )

        assert picker.find(a, hm(10), hm(10, 10)) is f2

    def test_sub_must_be_on_shift_at_start(self, preschool_room, policy):
        a = make_staff("a", classroom_title="Preschool C")
        late = make_staff("late", role=StaffRole.FLOATER, shift=(hm(12), hm(17)), lunch=None)
        picker = _picker([a, late], [preschool_room], make_students(preschool_room.id, 12), policy)

        assert picker.find(a, hm(10), hm(10, 10)) is None
        assert picker.find(a, hm(15), hm(15, 10)) is late

    def test_teacher_stays_when_their_room_needs_them(self, preschool_room, prek_room, policy):
        m = make_staff("m", classroom_title="Pre-K D")
        t1 = make_staff("t1", classroom_title="Preschool C")
        t2 = make_staff("t2", classroom_title="Preschool C")
        classrooms = [preschool_room, prek_room]

        # 20 preschoolers need both teachers
        full = make_students(preschool_room.id, 20) + make_students(prek_room.id, 5)
        assert _picker([m, t1, t2], classrooms, full, policy).find(m, hm(10), hm(10, 10)) is None

        # 12 need only one, so t1 can step out
        light = make_students(preschool_room.id, 12) + make_students(prek_room.id, 5)
        assert _picker([m, t1, t2], classrooms, light, policy).find(m, hm(10), hm(10, 10)) is t1

    def test_breaks_prefer_teachers_over_directors(self, preschool_room, policy):
        director = make_staff("dir", role=StaffRole.DIRECTOR, lunch=None)
        a = make_staff("a", classroom_title="Preschool C")
        floater = make_staff("flo", role=StaffRole.FLOATER)
        picker = _picker([director, a, floater], [preschool_room], make_students(preschool_room.id, 12), policy)

        assert picker.find(a, hm(10), hm(10, 10)) is floater
        assert picker.find(a, hm(12), hm(13), include_directors=True) is director

    def test_director_is_break_fallback(self, preschool_room, policy):
        director = make_staff("dir", role=StaffRole.DIRECTOR, lunch=None)
        a = make_staff("a", classroom_title="Preschool C")
        picker = _picker([director, a], [preschool_room], make_students(preschool_room.id, 12), policy)

        assert picker.find(a, hm(10), hm(10, 10)) is director

    def test_staff_without_a_room_get_no_sub(self, preschool_room, policy):
        floater = make_staff("flo", role=StaffRole.FLOATER)
        director = make_staff("dir", role=StaffRole.DIRECTOR)
        a = make_staff("a", classroom_title="Preschool C")
        picker = _picker([floater, director, a], [preschool_room], make_students(preschool_room.id, 12), policy)

        assert picker.find(floater, hm(10), hm(10, 10)) is None
        assert picker.find(director, hm(12), hm(13), include_directors=True) is None

    def test_room_override_and_title_matching(self, preschool_room, policy):
        a = make_staff("a", classroom_title="  preschool   c ")
        b = make_staff("b")
        picker = _picker(
            [a, b], [preschool_room], make_students(preschool_room.id, 12), policy,
            rooms={"b": "Preschool C"},
        )

        assert picker.room_of(a) is preschool_room
        assert picker.room_of(b) is preschool_room


class TestAssignBreakSubstitutes:
    def test_fills_names_and_respects_away_windows(self, preschool_room, policy):
        a = make_staff("a", classroom_title="Preschool C")
        director = make_staff("dir", role=StaffRole.DIRECTOR)
        assignment = BreakAssignment("a", "A Test", hm(10), hm(10, 10), hm(15), hm(15, 10), hm(12), hm(13))
        demand = DemandModel([preschool_room], make_students(preschool_room.id, 12), policy)

        assign_break_substitutes(
            [assignment], [director, a], [preschool_room], demand,
            off_floor={"dir": [(hm(12), hm(12, 30))]},
        )

        assert assignment.break1_sub_name == "Dir Test"
        assert assignment.break2_sub_name == "Dir Test"
        # director is at lunch until 12:30
        assert assignment.lunch_sub_name is None


class TestMinimalPlanSubstitutes:
    def test_block_subs(self, infant_room, preschool_room, policy):
        students = make_students(infant_room.id, 4) + make_students(preschool_room.id, 12)
        demand = DemandModel([infant_room, preschool_room], students, policy)
        staff = [
            make_staff("dir", role=StaffRole.DIRECTOR, lunch=None, qualifications={"infant"}),
            make_staff("lead", role=StaffRole.LEAD_TEACHER),
            make_staff("t1", classroom_title="Preschool C"),
            make_staff("t2", classroom_title="Preschool C"),
        ]
        plan = select_minimal_coverage(staff, [infant_room, preschool_room], demand)
        entries = {e.staff_id: e for e in plan.essential}
        assert sorted(entries) == ["lead", "t1"]

        lead_subs = [b.sub_name for b in entries["lead"].blocks if b.type != BlockType.WORK]
        assert lead_subs == ["Dir Test", "Dir Test", "Dir Test"]

        # t2 is surplus, and the lead and director are busy over the same windows
        t1_subs = [b.sub_name for b in entries["t1"].blocks if b.type != BlockType.WORK]
        assert t1_subs == [None, None, None]

        assert all(b.sub_name is None for e in plan.essential for b in e.blocks if b.type == BlockType.WORK)
