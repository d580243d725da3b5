from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from carepilot.core.config import settings


def _connect_args(url: str) -> dict:
    # sqlite connections are shared with the threadpool FastAPI runs sync routes on
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args(settings.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def enum_values(enum_cls) -> list[str]:
    """Persist str enums by value (lowercase) rather than member name."""
    return [member.value for member in enum_cls]
