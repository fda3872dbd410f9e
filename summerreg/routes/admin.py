"""Administrator endpoints, all mounted under ``/api/admin``."""
from flask import Blueprint, request

from ..services import admin as admin_service
from ..services import courses as course_service
from ..services import reports as report_service
from ..services import students as student_service
from ..services import votes as vote_service

admin_bp = Blueprint("admin", __name__)


# -----------------------------
# COURSES
# -----------------------------
@admin_bp.get("/courses")
def list_courses():
    return course_service.list_courses_with_enrollment(), 200


@admin_bp.post("/courses")
def create_course():
    data = request.get_json(silent=True) or {}
    course = course_service.create_course(data.get("name"), data.get("capacity"))
    return course.to_dict(), 201


@admin_bp.put("/courses/<int:course_id>")
def update_course(course_id: int):
    data = request.get_json(silent=True) or {}
    course = course_service.update_course(course_id, data.get("name"), data.get("capacity"))
    return course.to_dict(), 200


@admin_bp.delete("/courses/<int:course_id>")
def delete_course(course_id: int):
    course_service.delete_course(course_id)
    return {"message": "Curso eliminado exitosamente."}, 200


# -----------------------------
# PRESELECTIONS
# -----------------------------
@admin_bp.get("/preselections")
def list_preselections():
    page, limit = admin_service.page_params(request.args)
    return admin_service.list_preselections(page, limit, request.args.get("search", "")), 200


@admin_bp.delete("/preselections")
def delete_preselection():
    data = request.get_json(silent=True) or {}
    message = admin_service.delete_preselection(data.get("preselectionId"))
    return {"message": message}, 200


# -----------------------------
# PROFILES
# -----------------------------
@admin_bp.get("/profiles")
def list_profiles():
    page, limit = admin_service.page_params(request.args)
    return admin_service.list_profiles(
        page,
        limit,
        role=request.args.get("role"),
        search=request.args.get("search", ""),
    ), 200


@admin_bp.post("/profiles")
def create_profile():
    data = request.get_json(silent=True) or {}
    user = student_service.create_user(data)
    return {"message": "Usuario creado exitosamente", "user": user.to_dict()}, 201


# -----------------------------
# VOTES
# -----------------------------
@admin_bp.get("/votes")
def vote_statistics():
    return vote_service.vote_statistics(), 200


@admin_bp.delete("/votes")
def delete_votes():
    deleted = vote_service.delete_all_votes()
    return {"message": "Todos los votos han sido eliminados", "deletedCount": deleted}, 200


# -----------------------------
# REPORTS
# -----------------------------
@admin_bp.get("/reports")
def reports():
    return report_service.generate_report(
        request.args.get("type"),
        request.args.get("startDate"),
        request.args.get("endDate"),
    ), 200
