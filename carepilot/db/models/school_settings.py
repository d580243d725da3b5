import uuid
from typing import Optional
from datetime import datetime
from sqlalchemy import JSON, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from carepilot.db.database import Base

JSONType = JSON().with_variant(JSONB, "postgresql")


class SchoolSettings(Base):
    __tablename__ = "school_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    school_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("schools.id"), nullable=True, index=True)  # NULL = global default
    setting_key: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    setting_value: Mapped[dict] = mapped_column(JSONType, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("school_id", "setting_key", name="uix_school_settings_school_key"),
    )
