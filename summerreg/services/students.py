from __future__ import annotations

import logging
import re

from ..errors import Conflict, InvalidInput, NotAuthorized, NotFound
from ..extensions import db
from ..models import Student, User, UserRole
from ..utils.numbers import parse_int

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_AGE = 16
MIN_PASSWORD_LEN = 6
ID_CARD_LEN = (5, 15)
EMAIL_MAX_LEN = User.__table__.c.email.type.length

# payload key, column, message when empty
PROFILE_TEXT_FIELDS = (
    ("name", "name", "El nombre es requerido."),
    ("lastName", "last_name", "El apellido es requerido."),
    ("major", "major", "La carrera es requerida."),
    ("semester", "semester", "El semestre es requerido."),
)


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


def _max_len(column: str) -> int:
    return Student.__table__.c[column].type.length


def _text_error(value: str, column: str, empty_msg: str) -> str | None:
    if not value:
        return empty_msg
    limit = _max_len(column)
    if len(value) > limit:
        return f"Máximo {limit} caracteres."
    return None


def validate_student_fields(data: dict) -> tuple[dict, dict]:
    """Validate the profile half of a registration payload."""
    errors = {}
    cleaned = {"id_card": _clean(data.get("idCard"))}

    for key, column, empty_msg in PROFILE_TEXT_FIELDS:
        cleaned[column] = _clean(data.get(key))
        error = _text_error(cleaned[column], column, empty_msg)
        if error:
            errors[key] = error

    low, high = ID_CARD_LEN
    if not low <= len(cleaned["id_card"]) <= high:
        errors["idCard"] = f"La cédula debe tener entre {low} y {high} caracteres."

    age = parse_int(data.get("age"))
    if age is None:
        errors["age"] = "La edad debe ser un número entero."
    elif age < MIN_AGE:
        errors["age"] = f"Debes tener al menos {MIN_AGE} años para registrarte."
    cleaned["age"] = age

    return cleaned, errors


def validate_credentials(data: dict) -> tuple[dict, dict]:
    errors = {}
    email = _clean(data.get("email")).lower()
    password = data.get("password") or ""

    if len(email) > EMAIL_MAX_LEN or not EMAIL_RE.match(email):
        errors["email"] = "Formato de correo electrónico inválido."
    if len(password) < MIN_PASSWORD_LEN:
        errors["password"] = f"La contraseña debe tener al menos {MIN_PASSWORD_LEN} caracteres."

    return {"email": email, "password": password}, errors


def _ensure_unique(email: str, id_card: str | None = None) -> None:
    if User.query.filter_by(email=email).first():
        raise Conflict("El email ya está registrado")
    if id_card and Student.query.filter_by(id_card=id_card).first():
        raise Conflict("La cédula ya está registrada")


def register_student(data: dict) -> Student:
    credentials, errors = validate_credentials(data)
    profile, profile_errors = validate_student_fields(data)
    errors.update(profile_errors)
    if errors:
        raise InvalidInput("Error de validación de datos", details=errors)

    _ensure_unique(credentials["email"], profile["id_card"])

    user = User(email=credentials["email"], role=UserRole.student)
    user.set_password(credentials["password"])
    student = Student(user=user, **profile)

    db.session.add(user)
    db.session.add(student)
    db.session.commit()

    logger.info("registered student %s (user=%s)", student.id, user.id)
    return student


def create_user(data: dict) -> User:
    """Admin-side account creation for any role."""
    credentials, errors = validate_credentials(data)
    if errors:
        raise InvalidInput("Email, contraseña y rol son requeridos", details=errors)

    try:
        role = UserRole(_clean(data.get("role")).upper())
    except ValueError:
        raise InvalidInput("El rol debe ser STUDENT, PROFESSOR o ADMIN") from None

    student_data = data.get("studentData") if role == UserRole.student else None
    profile = None
    if student_data:
        profile, profile_errors = validate_student_fields(student_data)
        if profile_errors:
            raise InvalidInput("Error de validación de datos", details=profile_errors)

    _ensure_unique(credentials["email"], profile["id_card"] if profile else None)

    user = User(email=credentials["email"], role=role)
    user.set_password(credentials["password"])
    db.session.add(user)
    if profile:
        db.session.add(Student(user=user, **profile))
    db.session.commit()

    logger.info("admin created user %s with role %s", user.id, role.value)
    return user


def student_for_user(user_id: int) -> Student:
    """Resolve the caller's profile; a STUDENT without one may not act."""
    student = Student.query.filter_by(user_id=user_id).first()
    if not student or student.user.role != UserRole.student:
        raise NotAuthorized("Acceso denegado")
    return student


def profile_dict(student: Student) -> dict:
    selection = student.selection
    courses = []
    if selection:
        courses = [
            {
                "id": c.id,
                "name": c.name,
                "capacity": c.capacity,
                "selectedAt": selection.selection_date.isoformat(),
            }
            for c in selection.selected_courses
        ]

    return {
        "id": student.id,
        "name": student.name,
        "lastName": student.last_name,
        "idCard": student.id_card,
        "age": student.age,
        "major": student.major,
        "semester": student.semester,
        "email": student.user.email,
        "role": student.user.role.value,
        "registeredAt": student.user.created_at.isoformat(),
        "coursesCount": len(courses),
        "courses": courses,
    }


def get_profile(user_id: int) -> dict:
    student = Student.query.filter_by(user_id=user_id).first()
    if not student:
        raise NotFound("Perfil de estudiante no encontrado")
    return profile_dict(student)


def update_profile(user_id: int, data: dict) -> Student:
    student = Student.query.filter_by(user_id=user_id).first()
    if not student:
        raise NotFound("Perfil de estudiante no encontrado")

    changes, errors = {}, {}
    for key, column, empty_msg in PROFILE_TEXT_FIELDS:
        value = _clean(data.get(key))
        # blank fields are left untouched, except an explicit blank semester
        if not value and not (key == "semester" and data.get(key) is not None):
            continue
        error = _text_error(value, column, empty_msg)
        if error:
            errors[key] = error
        else:
            changes[column] = value
    if data.get("age") is not None:
        age = parse_int(data.get("age"))
        if age is None or age < MIN_AGE:
            errors["age"] = f"La edad debe ser un entero mayor o igual a {MIN_AGE}"
        else:
            changes["age"] = age
    if errors:
        raise InvalidInput("Error de validación de datos", details=errors)

    for column, value in changes.items():
        setattr(student, column, value)

    db.session.commit()
    logger.info("student %s updated profile", student.id)
    return student
