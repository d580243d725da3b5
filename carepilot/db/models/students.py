import uuid
from typing import Optional
from datetime import datetime, time
from enum import Enum
from sqlalchemy import String, DateTime, Time, ForeignKey, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from carepilot.db.database import Base, enum_values


class StudentStatus(str, Enum):
    ENROLLED = "enrolled"
    WAITLISTED = "waitlisted"
    WITHDRAWN = "withdrawn"


class Students(Base):
    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    school_id: Mapped[str] = mapped_column(String(36), ForeignKey("schools.id"), nullable=False, index=True)
    classroom_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("classrooms.id"), nullable=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[StudentStatus] = mapped_column(SQLEnum(StudentStatus, name="student_status_enum", values_callable=enum_values), nullable=False, default=StudentStatus.ENROLLED)
    nap_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    nap_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
