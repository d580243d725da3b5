import pytest
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from carepilot.db.models import Base
from carepilot.services.coverage.types import (
    AgeGroup,
    Classroom,
    StaffMember,
    StaffRole,
    StudentPresence,
)
from carepilot.services.coverage.demand import default_policy


def get_test_date() -> date:
    # fixed weekday for deterministic tests
    return date(2025, 3, 3)


def hm(hours: int, minutes: int = 0) -> int:
    return hours * 60 + minutes


def make_staff(
    staff_id: str,
    role: StaffRole = StaffRole.TEACHER,
    shift=(hm(8), hm(17)),
    lunch=(hm(12), hm(13)),
    qualifications=frozenset(),
    classroom_title=None,
) -> StaffMember:
    shift_start, shift_end = shift if shift else (None, None)
    lunch_start, lunch_end = lunch if lunch else (None, None)
    return StaffMember(
        id=staff_id,
        first_name=staff_id.title(),
        last_name="Test",
        role=role,
        qualifications=frozenset(qualifications),
        shift_start=shift_start,
        shift_end=shift_end,
        lunch_start=lunch_start,
        lunch_end=lunch_end,
        classroom_title=classroom_title,
    )


def make_students(classroom_id: str, count: int, nap=None, prefix: str = "") -> list[StudentPresence]:
    nap_start, nap_end = nap if nap else (None, None)
    return [
        StudentPresence(
            id=f"{prefix or classroom_id}-{i}",
            classroom_id=classroom_id,
            nap_start=nap_start,
            nap_end=nap_end,
        )
        for i in range(count)
    ]


@pytest.fixture
def policy():
    return default_policy()


@pytest.fixture
def infant_room() -> Classroom:
    return Classroom(id="room-infant", name="Infant A", age_group=AgeGroup.INFANT)


@pytest.fixture
def toddler_room() -> Classroom:
    return Classroom(id="room-toddler", name="Toddler B", age_group=AgeGroup.TODDLER)


@pytest.fixture
def preschool_room() -> Classroom:
    return Classroom(id="room-preschool", name="Preschool C", age_group=AgeGroup.PRESCHOOL)


@pytest.fixture
def db_session():
    # in-memory sqlite shared across connections for the life of one test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
