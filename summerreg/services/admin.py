from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy import or_, select

from ..errors import InvalidInput, NotFound
from ..extensions import db
from ..models import Course, CourseSelection, Student, User, UserRole
from ..utils.numbers import parse_int, percentage
from .courses import enrollment_counts

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def page_params(args) -> tuple[int, int]:
    default_limit = current_app.config.get("REPORT_PAGE_SIZE", 10)
    page = parse_int(args.get("page", 1))
    limit = parse_int(args.get("limit", default_limit))
    if page is None or limit is None:
        raise InvalidInput("page y limit deben ser enteros")

    if page < 1 or not 1 <= limit <= MAX_PAGE_SIZE:
        raise InvalidInput(f"page debe ser >= 1 y limit entre 1 y {MAX_PAGE_SIZE}")
    return page, limit


def list_preselections(page: int, limit: int, search: str = "") -> dict:
    stmt = select(CourseSelection).join(CourseSelection.student)
    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            Student.name.ilike(pattern),
            Student.last_name.ilike(pattern),
            Student.id_card.ilike(pattern),
        ))
    stmt = stmt.order_by(CourseSelection.selection_date.desc(), CourseSelection.id.desc())

    result = db.paginate(stmt, page=page, per_page=limit, error_out=False)

    items = []
    for selection in result.items:
        student = selection.student
        items.append({
            "id": selection.id,
            "selectionDate": selection.selection_date.isoformat(),
            "createdAt": selection.created_at.isoformat(),
            "student": {
                "id": student.id,
                "name": student.name,
                "lastName": student.last_name,
                "idCard": student.id_card,
                "age": student.age,
                "major": student.major,
                "semester": student.semester,
            },
            "selectedCourses": [
                {"id": c.id, "name": c.name, "capacity": c.capacity}
                for c in selection.selected_courses
            ],
        })

    total_selections = CourseSelection.query.count()
    counts = enrollment_counts()
    course_stats = sorted(
        (
            {
                "id": course.id,
                "name": course.name,
                "capacity": course.capacity,
                "preselections": counts.get(course.id, 0),
                "popularityPercentage": percentage(counts.get(course.id, 0), total_selections),
            }
            for course in Course.query.all()
        ),
        key=lambda c: (-c["preselections"], c["name"]),
    )

    return {
        "preselections": items,
        "pagination": {
            "currentPage": page,
            "totalPages": result.pages,
            "totalItems": result.total,
            "itemsPerPage": limit,
            "hasNextPage": result.has_next,
            "hasPrevPage": result.has_prev,
        },
        "stats": {
            "totalPreselections": total_selections,
            "coursesWithStats": course_stats,
        },
    }


def delete_preselection(preselection_id) -> str:
    if preselection_id in (None, ""):
        raise InvalidInput("ID de preselección requerido")
    preselection_id = parse_int(preselection_id)
    if preselection_id is None:
        raise InvalidInput("ID de preselección inválido")

    selection = db.session.get(CourseSelection, preselection_id)
    if not selection:
        raise NotFound("Preselección no encontrada")

    owner = selection.student.full_name
    student_id = selection.student_id
    db.session.delete(selection)
    db.session.commit()

    logger.info("preselection %s of student %s deleted by admin", preselection_id, student_id)
    return f"Preselección de {owner} eliminada exitosamente"


def list_profiles(page: int, limit: int, role: str | None = None, search: str = "") -> dict:
    stmt = select(User).outerjoin(User.student)

    if role and role.upper() != "ALL":
        try:
            stmt = stmt.where(User.role == UserRole(role.upper()))
        except ValueError:
            raise InvalidInput("Rol no válido") from None

    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            User.email.ilike(pattern),
            Student.name.ilike(pattern),
            Student.last_name.ilike(pattern),
        ))
    stmt = stmt.order_by(User.created_at.desc(), User.id.desc())

    result = db.paginate(stmt, page=page, per_page=limit, error_out=False)

    profiles = []
    for user in result.items:
        student = user.student
        student_block = None
        if student:
            selection = student.selection
            courses = []
            if selection:
                courses = [
                    {"name": c.name, "selectedAt": selection.selection_date.isoformat()}
                    for c in selection.selected_courses
                ]
            student_block = {
                "id": student.id,
                "name": student.name,
                "lastName": student.last_name,
                "idCard": student.id_card,
                "age": student.age,
                "major": student.major,
                "semester": student.semester,
                "coursesCount": len(courses),
                "courses": courses,
            }
        profiles.append({**user.to_dict(), "student": student_block})

    return {
        "profiles": profiles,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": result.total,
            "totalPages": result.pages,
        },
    }
