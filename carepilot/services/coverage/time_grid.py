"""
Wall-clock helpers and the fixed grids the engine runs on.
Times are "HH:MM" strings at the edges and minutes since midnight inside.
"""

from datetime import time
from typing import Optional

# Demand grid (inclusive of the closing slot)
DAY_START_MINUTES = 7 * 60
DAY_END_MINUTES = 18 * 60
SLOT_DURATION_MINUTES = 30

# Break candidate grid
BREAK_SEARCH_START_MINUTES = 9 * 60
BREAK_SEARCH_END_MINUTES = 17 * 60
BREAK_CANDIDATE_STEP_MINUTES = 15

# Alerting instants
PEAK_MINUTES = 10 * 60
NAP_REPRESENTATIVE_MINUTES = 13 * 60


def parse_hhmm(value: str) -> int:
    """Parse "HH:MM" (or "HH:MM:SS") into minutes since midnight."""
    parts = value.strip().split(":")
    if len(parts) < 2 or not all(p.isdigit() for p in parts[:2]):
        raise ValueError(f"expected HH:MM, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 24 or minutes > 59:
        raise ValueError(f"expected HH:MM, got {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_optional(minutes: Optional[int]) -> Optional[str]:
    return None if minutes is None else format_minutes(minutes)


def minutes_from_time(t: Optional[time]) -> Optional[int]:
    """Convert a DB Time column value to minutes."""
    if t is None:
        return None
    return t.hour * 60 + t.minute


def demand_grid() -> list[int]:
    return list(range(DAY_START_MINUTES, DAY_END_MINUTES + 1, SLOT_DURATION_MINUTES))


def break_candidate_grid() -> list[int]:
    return list(range(BREAK_SEARCH_START_MINUTES, BREAK_SEARCH_END_MINUTES, BREAK_CANDIDATE_STEP_MINUTES))
