import pytest
from datetime import time

from carepilot.services.coverage.time_grid import (
    parse_hhmm,
    format_minutes,
    format_optional,
    minutes_from_time,
    demand_grid,
    break_candidate_grid,
)


class TestParseHHMM:
    def test_basic(self):
        assert parse_hhmm("08:30") == 510

    def test_seconds_ignored(self):
        assert parse_hhmm("13:00:00") == 780

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_hhmm("noon")

    def test_out_of_range_raises(self):
        with pytest.raises(ValueError):
            parse_hhmm("25:00")


class TestFormat:
    def test_zero_padded(self):
        assert format_minutes(545) == "09:05"

    def test_optional_none(self):
        assert format_optional(None) is None

    def test_from_time(self):
        assert minutes_from_time(time(14, 15)) == 855
        assert minutes_from_time(None) is None


class TestGrids:
    def test_demand_grid_includes_close(self):
        grid = demand_grid()
        assert grid[0] == 420
        assert grid[-1] == 1080
        assert len(grid) == 23

    def test_break_grid_excludes_five_pm(self):
        grid = break_candidate_grid()
        assert grid[0] == 540
        assert grid[-1] == 1005
        assert 1020 not in grid
        assert all(b - a == 15 for a, b in zip(grid, grid[1:]))
