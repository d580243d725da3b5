import uuid
from typing import Optional
from datetime import datetime, time
from enum import Enum
from sqlalchemy import String, Text, DateTime, Time, ForeignKey, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from carepilot.db.database import Base, enum_values


class TeacherRole(str, Enum):
    DIRECTOR = "director"
    ASSISTANT_DIRECTOR = "assistant_director"
    LEAD_TEACHER = "lead_teacher"
    TEACHER = "teacher"
    ASSISTANT = "assistant"
    FLOATER = "floater"


class TeacherStatus(str, Enum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"



class Teachers(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    school_id: Mapped[str] = mapped_column(String(36), ForeignKey("schools.id"), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[TeacherRole] = mapped_column(SQLEnum(TeacherRole, name="teacher_role_enum", values_callable=enum_values), nullable=False, default=TeacherRole.TEACHER)
    status: Mapped[TeacherStatus] = mapped_column(SQLEnum(TeacherStatus, name="teacher_status_enum", values_callable=enum_values), nullable=False, default=TeacherStatus.ACTIVE)
    classroom_title: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)  # free text, matched to classroom names
    regular_shift_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    regular_shift_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    lunch_break_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    lunch_break_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    qualifications: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
