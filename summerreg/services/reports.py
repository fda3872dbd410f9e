"""Admin reports.

Each report is computed independently from the store. When a date window is
given it restricts the ``created_at`` of the rows the report is built from.
"""
from __future__ import annotations

from sqlalchemy import exists
from sqlalchemy.orm import selectinload

from ..errors import InvalidInput
from ..models import Course, CourseSelection, Student, User, selection_courses
from ..utils.dates import parse_date_range
from ..utils.numbers import percentage, round_half_up


def _window(query, model, date_range):
    if date_range is None:
        return query
    start, end = date_range
    return query.filter(model.created_at >= start, model.created_at <= end)


def overview_report(date_range=None) -> dict:
    total_users = _window(User.query, User, date_range).count()
    total_students = _window(Student.query, Student, date_range).count()
    total_courses = _window(Course.query, Course, date_range).count()
    total_selections = _window(CourseSelection.query, CourseSelection, date_range).count()

    students_with_selection = (
        _window(Student.query, Student, date_range)
        .filter(exists().where(CourseSelection.student_id == Student.id))
        .count()
    )
    courses_with_students = (
        _window(Course.query, Course, date_range)
        .filter(exists().where(selection_courses.c.course_id == Course.id))
        .count()
    )

    # every selection holds exactly two courses
    average = total_selections * 2 / total_students if total_students else 0

    return {
        "overview": {
            "totalUsers": total_users,
            "totalStudents": total_students,
            "totalCourses": total_courses,
            "totalSelections": total_selections,
            "averageCoursesPerStudent": round_half_up(average, 2),
            "studentsWithoutCourses": total_students - students_with_selection,
            "coursesWithoutStudents": total_courses - courses_with_students,
        }
    }


def courses_report(date_range=None) -> dict:
    courses = (
        _window(Course.query, Course, date_range)
        .options(selectinload(Course.selections).joinedload(CourseSelection.student))
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )

    items = []
    for course in courses:
        enrolled = len(course.selections)
        items.append({
            "id": course.id,
            "name": course.name,
            "capacity": course.capacity,
            "currentEnrollment": enrolled,
            "occupancyRate": percentage(enrolled, course.capacity) if course.capacity > 0 else 0,
            "availableSpots": max(0, course.capacity - enrolled),
            "students": [
                {
                    "name": s.student.full_name,
                    "idCard": s.student.id_card,
                    "enrolledAt": s.created_at.isoformat(),
                }
                for s in course.selections
            ],
            "createdAt": course.created_at.isoformat(),
        })

    rates = [c["occupancyRate"] for c in items]
    return {
        "courses": items,
        "summary": {
            "totalCourses": len(items),
            "averageOccupancy": round_half_up(sum(rates) / len(rates)) if rates else 0,
            "fullCourses": sum(1 for r in rates if r >= 100),
            "lowOccupancyCourses": sum(1 for r in rates if r < 50),
        },
    }


def students_report(date_range=None) -> dict:
    students = (
        _window(Student.query, Student, date_range)
        .options(selectinload(Student.selection).selectinload(CourseSelection.selected_courses))
        .order_by(Student.created_at.desc(), Student.id.desc())
        .all()
    )

    items = []
    for student in students:
        selection = student.selection
        names = [c.name for c in selection.selected_courses] if selection else []
        items.append({
            "id": student.id,
            "name": student.name,
            "lastName": student.last_name,
            "email": student.user.email,
            "idCard": student.id_card,
            "age": student.age,
            "major": student.major,
            "semester": student.semester,
            "coursesCount": len(names),
            "courses": names,
            "registrationDate": student.created_at.isoformat(),
            "lastActivity": student.user.updated_at.isoformat(),
        })

    with_selection = sum(1 for s in items if s["coursesCount"] > 0)
    return {
        "students": items,
        "summary": {
            "totalStudents": len(items),
            "studentsWithSelections": with_selection,
            "studentsWithoutSelections": len(items) - with_selection,
            "averageAge": round_half_up(sum(s["age"] for s in items) / len(items)) if items else 0,
        },
    }


def preselection_status(courses_count: int) -> str:
    return "Completed" if courses_count == 2 else "Incomplete"


def preselections_report(date_range=None) -> dict:
    selections = (
        _window(CourseSelection.query, CourseSelection, date_range)
        .options(selectinload(CourseSelection.selected_courses))
        .order_by(CourseSelection.selection_date.desc(), CourseSelection.id.desc())
        .all()
    )

    items = []
    for selection in selections:
        names = [c.name for c in selection.selected_courses]
        student = selection.student
        items.append({
            "id": selection.id,
            "studentName": student.full_name,
            "studentEmail": student.user.email,
            "studentIdCard": student.id_card,
            "courses": names,
            "coursesCount": len(names),
            "status": preselection_status(len(names)),
            "selectedAt": selection.selection_date.isoformat(),
            "createdAt": selection.created_at.isoformat(),
        })

    completed = sum(1 for p in items if p["status"] == "Completed")
    linked = sum(p["coursesCount"] for p in items)
    return {
        "preselections": items,
        "summary": {
            "totalPreselections": len(items),
            "completedPreselections": completed,
            "incompletePreselections": len(items) - completed,
            "averageCoursesPerSelection": round_half_up(linked / len(items), 2) if items else 0,
        },
    }


REPORTS = {
    "overview": overview_report,
    "courses": courses_report,
    "students": students_report,
    "preselections": preselections_report,
}


def generate_report(report_type: str | None, start: str | None = None, end: str | None = None) -> dict:
    report_type = report_type or "overview"
    builder = REPORTS.get(report_type)
    if builder is None:
        raise InvalidInput("Tipo de reporte no válido")

    date_range = parse_date_range(start, end)
    return {"type": report_type, "data": builder(date_range)}
