from flask import Blueprint, request

from ..services import preselection as preselection_service
from ..services.students import student_for_user
from ..utils.auth import current_principal

preselection_bp = Blueprint("preselection", __name__)


def _caller_student():
    return student_for_user(current_principal().id)


@preselection_bp.get("/preselection")
def get_preselection():
    student = _caller_student()
    return preselection_service.get_preselection(student), 200


@preselection_bp.post("/preselection")
def create_preselection():
    student = _caller_student()
    data = request.get_json(silent=True) or {}

    selection = preselection_service.create_preselection(student, data.get("courseIds"))
    return {
        "message": "Preselección registrada exitosamente",
        "selection": selection.to_dict(),
    }, 201


@preselection_bp.put("/preselection")
def replace_preselection():
    student = _caller_student()
    data = request.get_json(silent=True) or {}

    selection = preselection_service.replace_preselection(student, data.get("courseIds"))
    return {
        "message": "Preselección actualizada exitosamente",
        "selection": selection.to_dict(),
    }, 200
