"""
Seed script for CarePilot development database.

One school with three classrooms (infant, toddler, preschool), a small
teaching staff with regular shifts and lunches, enrolled students with nap
windows, attendance for today, and global ratio settings.

Run with: python -m scripts.seed_demo
"""

import sys
from datetime import date, time

from carepilot.db.database import Base, SessionLocal, engine
from carepilot.db.models.schools import Schools
from carepilot.db.models.classrooms import Classrooms, AgeGroup
from carepilot.db.models.students import Students
from carepilot.db.models.teachers import Teachers, TeacherRole
from carepilot.db.models.attendance import Attendance, AttendanceStatus
from carepilot.db.models.school_settings import SchoolSettings
from carepilot.services.coverage.demand import DEFAULT_AWAKE_RATIOS, DEFAULT_NAP_RATIOS
from carepilot.services.coverage.data_loader import RATIO_NORMAL_KEY, RATIO_NAPTIME_KEY

SCHOOL_ID = "00000000-0000-0000-0000-000000000001"
INFANT_ROOM_ID = "00000000-0000-0000-0000-000000000101"
TODDLER_ROOM_ID = "00000000-0000-0000-0000-000000000102"
PRESCHOOL_ROOM_ID = "00000000-0000-0000-0000-000000000103"


def reset_tables():
    """Drop and recreate every table."""
    print("Recreating tables...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("Tables recreated.")


def seed_school(db):
    print("Seeding school...")
    db.add(Schools(id=SCHOOL_ID, name="Sunrise Early Learning", timezone="America/Los_Angeles"))
    db.commit()


def seed_classrooms(db):
    print("Seeding classrooms...")
    classrooms = [
        Classrooms(id=INFANT_ROOM_ID, school_id=SCHOOL_ID, name="Infant A", age_group=AgeGroup.INFANT, capacity=8),
        Classrooms(id=TODDLER_ROOM_ID, school_id=SCHOOL_ID, name="Toddler B", age_group=AgeGroup.TODDLER, capacity=12),
        Classrooms(id=PRESCHOOL_ROOM_ID, school_id=SCHOOL_ID, name="Preschool C", age_group=AgeGroup.PRESCHOOL, capacity=24),
    ]
    for classroom in classrooms:
        db.add(classroom)
    db.commit()
    print(f"Seeded {len(classrooms)} classrooms.")


def seed_teachers(db):
    print("Seeding teachers...")

    teachers = [
        # Director - on site, never counted toward ratios
        Teachers(
            school_id=SCHOOL_ID, first_name="Dana", last_name="Reyes",
            role=TeacherRole.DIRECTOR,
            regular_shift_start=time(7, 30), regular_shift_end=time(16, 30),
        ),
        # Infant room
        Teachers(
            school_id=SCHOOL_ID, first_name="Alice", last_name="Smith",
            role=TeacherRole.LEAD_TEACHER, classroom_title="Infant A",
            regular_shift_start=time(8, 0), regular_shift_end=time(17, 0),
            lunch_break_start=time(12, 0), lunch_break_end=time(13, 0),
            qualifications="CPR, Infant care certificate",
        ),
        Teachers(
            school_id=SCHOOL_ID, first_name="Bob", last_name="Jones",
            role=TeacherRole.TEACHER, classroom_title="Infant A",
            regular_shift_start=time(7, 0), regular_shift_end=time(15, 0),
            lunch_break_start=time(11, 30), lunch_break_end=time(12, 30),
            qualifications="CPR; Infant/Toddler CDA",
        ),
        # Toddler room
        Teachers(
            school_id=SCHOOL_ID, first_name="Carol", last_name="Williams",
            role=TeacherRole.LEAD_TEACHER, classroom_title="Toddler B",
            regular_shift_start=time(8, 30), regular_shift_end=time(17, 30),
            lunch_break_start=time(12, 30), lunch_break_end=time(13, 30),
        ),
        Teachers(
            school_id=SCHOOL_ID, first_name="David", last_name="Brown",
            role=TeacherRole.ASSISTANT, classroom_title="Toddler B",
            regular_shift_start=time(9, 0), regular_shift_end=time(18, 0),
        ),
        # Preschool room
        Teachers(
            school_id=SCHOOL_ID, first_name="Emma", last_name="Davis",
            role=TeacherRole.TEACHER, classroom_title="Preschool C",
            regular_shift_start=time(8, 0), regular_shift_end=time(16, 0),
            lunch_break_start=time(12, 0), lunch_break_end=time(12, 30),
        ),
        # Floater - no regular classroom
        Teachers(
            school_id=SCHOOL_ID, first_name="Frank", last_name="Miller",
            role=TeacherRole.FLOATER,
            regular_shift_start=time(10, 0), regular_shift_end=time(18, 0),
            lunch_break_start=time(13, 30), lunch_break_end=time(14, 30),
        ),
    ]

    for teacher in teachers:
        db.add(teacher)
    db.commit()
    print(f"Seeded {len(teachers)} teachers.")


def seed_students(db):
    print("Seeding students...")

    # (classroom_id, count, nap_start, nap_end)
    groups = [
        (INFANT_ROOM_ID, 7, time(12, 30), time(14, 30)),
        (TODDLER_ROOM_ID, 10, time(12, 30), time(14, 30)),
        (PRESCHOOL_ROOM_ID, 18, time(13, 0), time(14, 30)),
    ]

    students = []
    for classroom_id, count, nap_start, nap_end in groups:
        for i in range(count):
            students.append(Students(
                school_id=SCHOOL_ID, classroom_id=classroom_id,
                first_name=f"Student{len(students) + 1}", last_name="Demo",
                nap_start=nap_start, nap_end=nap_end,
            ))

    for student in students:
        db.add(student)
    db.commit()
    print(f"Seeded {len(students)} students.")
    return students


def seed_attendance(db, students):
    print("Seeding attendance...")
    today = date.today()

    # every fifth student is out today
    records = [
        Attendance(
            school_id=SCHOOL_ID, student_id=s.id, date=today,
            status=AttendanceStatus.ABSENT if i % 5 == 4 else AttendanceStatus.PRESENT,
        )
        for i, s in enumerate(students)
    ]
    for record in records:
        db.add(record)
    db.commit()
    print(f"Seeded {len(records)} attendance records for {today}.")


def seed_ratio_settings(db):
    print("Seeding ratio settings...")
    db.add(SchoolSettings(
        school_id=None, setting_key=RATIO_NORMAL_KEY,
        setting_value=dict(DEFAULT_AWAKE_RATIOS),
        description="Children per staff member while awake",
    ))
    db.add(SchoolSettings(
        school_id=None, setting_key=RATIO_NAPTIME_KEY,
        setting_value=dict(DEFAULT_NAP_RATIOS),
        description="Children per staff member during nap time",
    ))
    db.commit()


def main():
    """Main seed function."""
    print("\n" + "="*50)
    print("CarePilot Database Seeder")
    print("="*50 + "\n")

    response = input("This will DELETE ALL EXISTING DATA. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(0)

    reset_tables()
    db = SessionLocal()

    try:
        seed_school(db)
        seed_classrooms(db)
        seed_teachers(db)
        students = seed_students(db)
        seed_attendance(db, students)
        seed_ratio_settings(db)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print(f"\nSchool id: {SCHOOL_ID}")
        print("Try:")
        print(f'  POST /api/v1/calendar/optimize {{"school_id": "{SCHOOL_ID}", "date": "{date.today()}"}}')
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
