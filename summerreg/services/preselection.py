"""Course preselection: every student holds at most one selection of exactly
two distinct courses.
"""
from __future__ import annotations

import logging

from ..errors import Conflict, InvalidInput, NotFound
from ..extensions import db
from ..models import Course, CourseSelection, Student
from ..utils.dates import utc_now
from ..utils.numbers import parse_int

logger = logging.getLogger(__name__)

COURSES_PER_SELECTION = 2
WRONG_COUNT_MSG = "Debe seleccionar exactamente 2 cursos"


def parse_course_ids(raw) -> list[int]:
    if not isinstance(raw, list) or len(raw) != COURSES_PER_SELECTION:
        raise InvalidInput(WRONG_COUNT_MSG)

    ids = [parse_int(value) for value in raw]
    if None in ids:
        raise InvalidInput("ID de curso inválido.")

    if len(set(ids)) != COURSES_PER_SELECTION:
        raise InvalidInput(WRONG_COUNT_MSG)
    return ids


def _load_courses(course_ids: list[int]) -> list[Course]:
    courses = Course.query.filter(Course.id.in_(course_ids)).all()
    if len(courses) != len(course_ids):
        raise NotFound("Uno o más cursos seleccionados no existen")
    return courses


def _selection_for(student: Student) -> CourseSelection | None:
    return CourseSelection.query.filter_by(student_id=student.id).first()


def get_preselection(student: Student) -> dict:
    courses = Course.query.order_by(Course.name.asc()).all()
    selection = _selection_for(student)

    current = None
    if selection:
        current = {
            "id": selection.id,
            "selectionDate": selection.selection_date.isoformat(),
            "selectedCourses": [c.to_dict() for c in selection.selected_courses],
            "student": {"name": student.name, "lastName": student.last_name},
        }

    return {
        "courses": [c.to_dict() for c in courses],
        "hasPreselection": selection is not None,
        "currentSelection": current,
    }


def create_preselection(student: Student, raw_course_ids) -> CourseSelection:
    course_ids = parse_course_ids(raw_course_ids)
    courses = _load_courses(course_ids)

    if _selection_for(student):
        raise Conflict("Ya tienes una preselección registrada")

    selection = CourseSelection(student_id=student.id, selected_courses=courses)
    db.session.add(selection)
    db.session.commit()

    logger.info("student %s preselected courses %s", student.id, sorted(course_ids))
    return selection


def replace_preselection(student: Student, raw_course_ids) -> CourseSelection:
    course_ids = parse_course_ids(raw_course_ids)
    courses = _load_courses(course_ids)

    selection = _selection_for(student)
    if not selection:
        raise NotFound("No tienes una preselección para actualizar")

    # old links are deleted and new ones inserted in the same flush/commit
    selection.selected_courses = courses
    selection.selection_date = utc_now()
    db.session.commit()

    logger.info("student %s replaced preselection with courses %s", student.id, sorted(course_ids))
    return selection
