from carepilot.db.database import Base

# Import models
from carepilot.db.models.schools import Schools, SchoolStatus
from carepilot.db.models.classrooms import Classrooms, AgeGroup
from carepilot.db.models.students import Students, StudentStatus
from carepilot.db.models.teachers import Teachers, TeacherRole, TeacherStatus
from carepilot.db.models.attendance import Attendance, AttendanceStatus
from carepilot.db.models.pto_requests import PtoRequests, PtoStatus
from carepilot.db.models.school_settings import SchoolSettings
from carepilot.db.models.optimization_results import OptimizationResults, ResultType

__all__ = [
    "Base",
    # Models
    "Schools",
    "Classrooms",
    "Students",
    "Teachers",
    "Attendance",
    "PtoRequests",
    "SchoolSettings",
    "OptimizationResults",
    # Enums
    "SchoolStatus",
    "AgeGroup",
    "StudentStatus",
    "TeacherRole",
    "TeacherStatus",
    "AttendanceStatus",
    "PtoStatus",
    "ResultType",
]
