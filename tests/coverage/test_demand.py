from carepilot.services.coverage.types import AgeGroup, Classroom, RatioPolicy
from carepilot.services.coverage.demand import (
    DemandModel,
    FALLBACK_RATIO,
    is_nap_mode,
    ratio_for,
    staff_needed,
)

from conftest import hm, make_students


class TestStaffNeeded:
    def test_exact_multiple(self):
        assert staff_needed(8, 4) == 2

    def test_rounds_up(self):
        assert staff_needed(9, 4) == 3

    def test_zero_present(self):
        assert staff_needed(0, 4) == 0


class TestRatioFor:
    def test_awake_and_nap_tables(self, policy):
        assert ratio_for(policy, AgeGroup.INFANT, napping=False) == 4
        assert ratio_for(policy, AgeGroup.INFANT, napping=True) == 12
        assert ratio_for(policy, AgeGroup.PRESCHOOL, napping=True) == 24

    def test_missing_entry_falls_back(self):
        policy = RatioPolicy(awake={}, nap={})
        assert ratio_for(policy, AgeGroup.TODDLER, napping=False) == FALLBACK_RATIO

    def test_non_positive_entry_falls_back(self):
        policy = RatioPolicy(awake={"infant": 0}, nap={"infant": -3})
        assert ratio_for(policy, AgeGroup.INFANT, napping=False) == FALLBACK_RATIO
        assert ratio_for(policy, AgeGroup.INFANT, napping=True) == FALLBACK_RATIO


class TestIsNapMode:
    def _room(self, napping: int, total: int):
        nappers = make_students("r", napping, nap=(hm(12), hm(14)), prefix="n")
        awake = make_students("r", total - napping, prefix="a")
        return nappers + awake

    def test_exactly_seventy_percent_is_awake(self):
        assert is_nap_mode(self._room(7, 10), hm(13)) is False

    def test_above_seventy_percent_is_nap(self):
        assert is_nap_mode(self._room(8, 10), hm(13)) is True

    def test_nap_window_is_half_open(self):
        students = self._room(10, 10)
        assert is_nap_mode(students, hm(12)) is True
        assert is_nap_mode(students, hm(14)) is False

    def test_empty_room(self):
        assert is_nap_mode([], hm(13)) is False


class TestDemandModel:
    def test_infant_room_at_ten(self, infant_room, policy):
        demand = DemandModel([infant_room], make_students(infant_room.id, 8), policy)
        assert demand.required_staff(infant_room, 8, hm(10)) == 2
        assert demand.demand_at(hm(10)) == 2

    def test_explicit_count_overrides_present(self, infant_room, policy):
        demand = DemandModel([infant_room], make_students(infant_room.id, 8), policy)
        assert demand.required_staff(infant_room, 9, hm(10)) == 3

    def test_napping_room_uses_nap_ratio(self, infant_room, policy):
        students = make_students(infant_room.id, 8, nap=(hm(12, 30), hm(14, 30)))
        demand = DemandModel([infant_room], students, policy)
        assert demand.required_staff(infant_room, None, hm(13)) == 1
        assert demand.nap_demand == 1
        assert demand.peak_demand == 2

    def test_rooms_switch_modes_independently(self, infant_room, preschool_room, policy):
        students = (
            make_students(infant_room.id, 8, nap=(hm(12, 30), hm(14, 30)))
            + make_students(preschool_room.id, 20)
        )
        demand = DemandModel([infant_room, preschool_room], students, policy)
        slot = demand.slot_at(hm(13))
        assert slot.napping == frozenset({infant_room.id})
        assert slot.required == {infant_room.id: 1, preschool_room.id: 2}
        assert slot.total_required == 3

    def test_unknown_classroom_ignored(self, infant_room, policy):
        students = make_students(infant_room.id, 4) + make_students("room-gone", 30)
        demand = DemandModel([infant_room], students, policy)
        assert demand.total_present == 4
        assert demand.peak_demand == 1

    def test_empty_room_needs_nobody(self, infant_room, preschool_room, policy):
        demand = DemandModel([infant_room, preschool_room], make_students(preschool_room.id, 5), policy)
        assert demand.required_staff(infant_room, None, hm(10)) == 0
        assert demand.active_classrooms == [preschool_room]

    def test_curve_covers_the_day(self, preschool_room, policy):
        demand = DemandModel([preschool_room], make_students(preschool_room.id, 13), policy)
        curve = demand.curve()
        assert [s.minute for s in curve][:2] == [hm(7), hm(7, 30)]
        assert all(s.total_required == 2 for s in curve)

    def test_any_napping(self, toddler_room, policy):
        demand = DemandModel([toddler_room], make_students(toddler_room.id, 4, nap=(hm(13), hm(15))), policy)
        assert demand.any_napping(hm(13, 30)) is True
        assert demand.any_napping(hm(10)) is False
