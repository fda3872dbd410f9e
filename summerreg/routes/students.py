from flask import Blueprint, request

from ..services import students as student_service
from ..utils.auth import current_principal

students_bp = Blueprint("students", __name__)


@students_bp.post("/students")
def register_student():
    data = request.get_json(silent=True) or {}
    student = student_service.register_student(data)
    return {"message": "Estudiante registrado exitosamente.", "studentId": student.id}, 201


@students_bp.get("/student/profile")
def get_profile():
    principal = current_principal()
    return {"profile": student_service.get_profile(principal.id)}, 200


@students_bp.put("/student/profile")
def update_profile():
    principal = current_principal()
    data = request.get_json(silent=True) or {}

    student = student_service.update_profile(principal.id, data)
    return {
        "message": "Perfil actualizado exitosamente",
        "profile": student_service.profile_dict(student),
    }, 200
