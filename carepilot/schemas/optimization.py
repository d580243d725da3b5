from pydantic import BaseModel
from datetime import date
from typing import List, Optional, Literal


class OptimizeRequest(BaseModel):
    school_id: str
    date: date


class BreakAssignmentResponse(BaseModel):
    teacher_id: str
    teacher_name: str
    break1_start: str
    break1_end: str
    break2_start: str
    break2_end: str
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    break1_sub_name: Optional[str] = None
    break2_sub_name: Optional[str] = None
    lunch_sub_name: Optional[str] = None


class StaffingAlertResponse(BaseModel):
    type: Literal["surplus", "shortage"]
    message: str
    count: int
    time_range: Optional[str] = None


class CoverageSummary(BaseModel):
    total_teachers: int
    teachers_needed_peak: int
    teachers_needed_nap: int
    total_students_present: int


class BreakOptimizationResponse(BaseModel):
    success: bool
    date: date
    school_id: str
    school_name: str
    breaks: List[BreakAssignmentResponse]
    alerts: List[StaffingAlertResponse]
    coverage_summary: CoverageSummary


class ScheduleBlockResponse(BaseModel):
    start_time: str
    end_time: str
    classroom_name: str
    type: Literal["work", "break", "lunch"]
    notes: Optional[str] = None
    sub_name: Optional[str] = None


class EssentialTeacherResponse(BaseModel):
    teacher_id: str
    teacher_name: str
    role: str
    is_essential: bool
    reason: str
    blocks: List[ScheduleBlockResponse]


class SurplusTeacherResponse(BaseModel):
    id: str
    name: str
    reason: str


class MinimalCoverageResponse(BaseModel):
    success: bool
    date: date
    school_id: str
    school_name: str
    current_teachers: int
    minimal_teachers_needed: int
    potential_savings: int
    essential_teachers: List[EssentialTeacherResponse]
    surplus_teachers: List[SurplusTeacherResponse]
    warnings: List[str]


class SavedOptimizationResults(BaseModel):
    regular: Optional[BreakOptimizationResponse] = None
    minimal: Optional[MinimalCoverageResponse] = None
