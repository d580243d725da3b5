import uuid
import datetime as dt
from enum import Enum
from sqlalchemy import String, Date, DateTime, ForeignKey, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from carepilot.db.database import Base, enum_values
from carepilot.db.models.school_settings import JSONType


class ResultType(str, Enum):
    REGULAR = "regular"
    MINIMAL = "minimal"


class OptimizationResults(Base):
    __tablename__ = "optimization_results"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    school_id: Mapped[str] = mapped_column(String(36), ForeignKey("schools.id"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    result_type: Mapped[ResultType] = mapped_column(SQLEnum(ResultType, name="optimization_result_type_enum", values_callable=enum_values), nullable=False)
    result_data: Mapped[dict] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
