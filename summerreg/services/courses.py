"""Course catalogue and the capacity guard for admin edits.

Enrollment for a course is the number of course selections linking it.
Capacity is checked only when an admin edits a course; selections never
consult it.
"""
from __future__ import annotations

import logging

from sqlalchemy import func

from ..errors import Conflict, InvalidInput, NotFound
from ..extensions import db
from ..models import Course, selection_courses
from ..utils.numbers import parse_int, round_half_up

logger = logging.getLogger(__name__)

INVALID_COURSE_MSG = "Nombre y capacidad son requeridos. La capacidad debe ser mayor a 0."
NAME_MAX_LEN = Course.__table__.c.name.type.length


def enrollment_count(course_id: int) -> int:
    return (
        db.session.query(func.count(selection_courses.c.selection_id))
        .filter(selection_courses.c.course_id == course_id)
        .scalar()
    ) or 0


def enrollment_counts() -> dict[int, int]:
    rows = (
        db.session.query(
            selection_courses.c.course_id,
            func.count(selection_courses.c.selection_id),
        )
        .group_by(selection_courses.c.course_id)
        .all()
    )
    return {course_id: int(count) for course_id, count in rows}


def _validate(name, capacity) -> tuple[str, int]:
    name = (name or "").strip() if isinstance(name, str) else ""
    capacity = parse_int(capacity)

    if not name or capacity is None or capacity < 1:
        raise InvalidInput(INVALID_COURSE_MSG)
    if len(name) > NAME_MAX_LEN:
        raise InvalidInput(f"El nombre del curso no puede superar {NAME_MAX_LEN} caracteres.")
    return name, capacity


def _get_course(course_id: int) -> Course:
    course = db.session.get(Course, course_id) if parse_int(course_id) is not None else None
    if not course:
        raise NotFound("Curso no encontrado.")
    return course


def list_courses() -> list[Course]:
    return Course.query.order_by(Course.name.asc()).all()


def list_courses_with_enrollment() -> list[dict]:
    counts = enrollment_counts()
    courses = Course.query.order_by(Course.created_at.desc(), Course.id.desc()).all()
    items = []
    for course in courses:
        enrolled = counts.get(course.id, 0)
        items.append({
            **course.to_dict(),
            "votes": enrolled,
            "availableSpots": course.capacity - enrolled,
        })
    return items


def create_course(name, capacity) -> Course:
    name, capacity = _validate(name, capacity)

    if Course.query.filter_by(name=name).first():
        raise Conflict("Ya existe un curso con ese nombre.")

    course = Course(name=name, capacity=capacity)
    db.session.add(course)
    db.session.commit()

    logger.info("course %s created (%r, capacity=%s)", course.id, name, capacity)
    return course


def update_course(course_id: int, name, capacity) -> Course:
    name, capacity = _validate(name, capacity)
    course = _get_course(course_id)

    enrolled = enrollment_count(course_id)
    if capacity < enrolled:
        logger.warning("refused capacity %s for course %s with %s enrolled", capacity, course_id, enrolled)
        raise InvalidInput(
            f"No se puede reducir la capacidad por debajo de {enrolled} (selecciones actuales)."
        )

    if name != course.name:
        existing = Course.query.filter(Course.name == name, Course.id != course_id).first()
        if existing:
            raise Conflict("Ya existe un curso con ese nombre.")

    course.name = name
    course.capacity = capacity
    db.session.commit()

    logger.info("course %s updated (%r, capacity=%s)", course.id, name, capacity)
    return course


def delete_course(course_id: int) -> None:
    course = _get_course(course_id)

    enrolled = enrollment_count(course_id)
    if enrolled > 0:
        logger.warning("refused delete of course %s with %s enrolled", course_id, enrolled)
        raise Conflict("No se puede eliminar un curso que tiene estudiantes inscritos.")

    db.session.delete(course)
    db.session.commit()
    logger.info("course %s deleted", course_id)


def course_popularity() -> dict:
    counts = enrollment_counts()
    rows = []
    for course in Course.query.all():
        enrolled = counts.get(course.id, 0)
        rows.append({
            "id": course.id,
            "name": course.name,
            "capacity": course.capacity,
            "votes": enrolled,
            "createdAt": course.created_at.isoformat() if course.created_at else None,
            "popularity": round_half_up(enrolled / max(1, course.capacity) * 100) if enrolled else 0,
        })

    rows.sort(key=lambda r: (-r["votes"], r["name"]))

    total_courses = len(rows)
    total_votes = sum(r["votes"] for r in rows)
    return {
        "top10": rows[:10],
        "allCourses": rows,
        "stats": {
            "totalCourses": total_courses,
            "totalVotes": total_votes,
            "averageVotes": round_half_up(total_votes / total_courses) if total_courses else 0,
            "mostPopular": rows[0] if rows else None,
        },
    }
