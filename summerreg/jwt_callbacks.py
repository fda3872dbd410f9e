from .extensions import db
from .models import TokenBlocklist


def is_token_revoked(jwt_header, jwt_payload) -> bool:
    jti = jwt_payload["jti"]
    return db.session.query(TokenBlocklist.id).filter_by(jti=jti).first() is not None


def missing_token(reason: str):
    return {"error": "No autenticado"}, 401


def invalid_token(reason: str):
    return {"error": f"Token inválido: {reason}"}, 401


def expired_token(jwt_header, jwt_payload):
    return {"error": "La sesión ha expirado"}, 401


def revoked_token(jwt_header, jwt_payload):
    return {"error": "La sesión fue cerrada"}, 401
