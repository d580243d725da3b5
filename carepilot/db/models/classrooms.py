import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import String, Integer, DateTime, ForeignKey, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from carepilot.db.database import Base, enum_values


class AgeGroup(str, Enum):
    INFANT = "infant"
    TODDLER = "toddler"
    TWOS = "twos"
    THREES = "threes"
    PRESCHOOL = "preschool"
    PRE_K = "pre_k"


class Classrooms(Base):
    __tablename__ = "classrooms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    school_id: Mapped[str] = mapped_column(String(36), ForeignKey("schools.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age_group: Mapped[AgeGroup] = mapped_column(SQLEnum(AgeGroup, name="age_group_enum", values_callable=enum_values), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
