"""Service-level errors and the handlers that turn them into JSON responses."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["errors"] = self.details
        return payload


class InvalidInput(ServiceError):
    status_code = 400


class NotAuthenticated(ServiceError):
    status_code = 401


class NotAuthorized(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        if err.status_code >= 500:
            logger.error("service error: %s", err.message)
        return err.to_dict(), err.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # a unique constraint beat a concurrent check-then-insert
        db.session.rollback()
        logger.warning("integrity error: %s", err.orig)
        return {"error": "El registro entra en conflicto con datos existentes"}, 409

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return {"error": err.description}, err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        db.session.rollback()
        logger.exception("unhandled error")
        return {"error": "Error interno del servidor"}, 500
