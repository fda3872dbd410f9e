from flask import Blueprint, request

from ..services import votes as vote_service
from ..services.students import student_for_user
from ..utils.auth import current_principal

votes_bp = Blueprint("votes", __name__)


@votes_bp.get("/votes")
def list_votes():
    student = student_for_user(current_principal().id)
    return vote_service.list_votes_and_categories(student), 200


@votes_bp.post("/votes")
def cast_vote():
    student = student_for_user(current_principal().id)
    data = request.get_json(silent=True) or {}

    vote = vote_service.cast_vote(student, data)
    return {"message": "Voto registrado exitosamente", "vote": vote.to_dict()}, 201


@votes_bp.put("/votes")
def update_vote():
    student = student_for_user(current_principal().id)
    data = request.get_json(silent=True) or {}

    vote = vote_service.update_vote(student, data)
    return {"message": "Voto actualizado exitosamente", "vote": vote.to_dict()}, 200
