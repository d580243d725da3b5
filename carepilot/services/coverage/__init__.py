"""
Staff-coverage optimization service.

Usage:
    from datetime import date
    from carepilot.services.coverage import generate_break_schedule

    # Load data and optimize in one call
    payload = generate_break_schedule(db, school_id="...", on_date=date(2025, 3, 3))

    # Or load context separately for inspection/testing
    from carepilot.services.coverage import load_coverage_context, optimize_minimal_coverage

    context = load_coverage_context(db, school_id="...", on_date=date(2025, 3, 3))
    result = optimize_minimal_coverage(context)
"""

from .types import (
    AgeGroup,
    StaffRole,
    BlockType,
    AlertType,
    StaffMember,
    Classroom,
    StudentPresence,
    RatioPolicy,
    TimeSlot,
    BreakAssignment,
    StaffingAlert,
    ScheduleBlock,
    EssentialStaff,
    SurplusStaff,
    CoveragePlan,
    CoverageContext,
    BreakOptimizationResult,
    MinimalCoverageResult,
    is_infant_qualified,
)
from .demand import DemandModel, default_policy
from .breaks import schedule_breaks, build_staffing_alerts, optimize_breaks
from .minimal import select_minimal_coverage, optimize_minimal_coverage, stable_order
from .substitutes import SubstitutePicker, assign_break_substitutes
from .data_loader import load_coverage_context, SchoolNotFoundError
from .generator import (
    generate_break_schedule,
    generate_minimal_coverage,
    load_saved_results,
)

__all__ = [
    # Types
    "AgeGroup",
    "StaffRole",
    "BlockType",
    "AlertType",
    "StaffMember",
    "Classroom",
    "StudentPresence",
    "RatioPolicy",
    "TimeSlot",
    "BreakAssignment",
    "StaffingAlert",
    "ScheduleBlock",
    "EssentialStaff",
    "SurplusStaff",
    "CoveragePlan",
    "CoverageContext",
    "BreakOptimizationResult",
    "MinimalCoverageResult",
    "is_infant_qualified",
    # Main entry points
    "generate_break_schedule",
    "generate_minimal_coverage",
    "load_saved_results",
    # Lower-level functions
    "DemandModel",
    "default_policy",
    "schedule_breaks",
    "build_staffing_alerts",
    "optimize_breaks",
    "select_minimal_coverage",
    "optimize_minimal_coverage",
    "stable_order",
    "SubstitutePicker",
    "assign_break_substitutes",
    "load_coverage_context",
    "SchoolNotFoundError",
]
