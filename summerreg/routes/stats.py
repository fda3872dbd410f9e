from flask import Blueprint

from ..services.stats import general_stats

stats_bp = Blueprint("stats", __name__)


@stats_bp.get("/stats")
def stats():
    return general_stats(), 200
