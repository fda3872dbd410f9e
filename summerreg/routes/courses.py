from flask import Blueprint

from ..services import courses as course_service

courses_bp = Blueprint("courses", __name__)


@courses_bp.get("/courses")
def list_courses():
    courses = course_service.list_courses()
    return [{"id": c.id, "name": c.name} for c in courses], 200


@courses_bp.get("/courses/stats")
def course_stats():
    return course_service.course_popularity(), 200
