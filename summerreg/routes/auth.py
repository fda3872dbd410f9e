from flask import Blueprint, request
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt,
    get_jwt_identity,
)
from ..extensions import db
from ..models import User, TokenBlocklist
from ..utils.auth import current_principal

auth_bp = Blueprint("auth", __name__)


def _claims(user: User) -> dict:
    return {"role": user.role.value, "email": user.email}


@auth_bp.post("/auth/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return {"error": "Credenciales incompletas."}, 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return {"error": "Correo o contraseña incorrectos."}, 401

    # identity is the user id as a string
    access_token = create_access_token(identity=str(user.id), additional_claims=_claims(user))
    refresh_token = create_refresh_token(identity=str(user.id), additional_claims=_claims(user))

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "user": user.to_dict(),
    }, 200


@auth_bp.get("/auth/me")
def me():
    principal = current_principal()
    return {"id": principal.id, "email": principal.email, "role": principal.role.value}, 200


@auth_bp.post("/auth/refresh")
@jwt_required(refresh=True)
def refresh():
    user_id = get_jwt_identity()
    claims = get_jwt()

    new_access = create_access_token(
        identity=user_id,
        additional_claims={"role": claims.get("role"), "email": claims.get("email")},
    )
    return {"access_token": new_access}, 200


@auth_bp.post("/auth/logout")
def logout_access():
    jti = get_jwt()["jti"]
    db.session.add(TokenBlocklist(jti=jti, token_type="access"))
    db.session.commit()
    return {"message": "Sesión cerrada"}, 200


@auth_bp.post("/auth/logout-refresh")
@jwt_required(refresh=True)
def logout_refresh():
    jti = get_jwt()["jti"]
    db.session.add(TokenBlocklist(jti=jti, token_type="refresh"))
    db.session.commit()
    return {"message": "refresh token revocado"}, 200
