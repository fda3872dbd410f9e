"""Satisfaction voting: one vote per student per category."""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timedelta

from sqlalchemy import func

from ..errors import Conflict, InvalidInput, NotFound
from ..extensions import db
from ..models import Course, Student, Vote
from ..utils.dates import utc_now
from ..utils.numbers import percentage, round_half_up

logger = logging.getLogger(__name__)

BEST_COURSE = "mejor_curso"
BEST_PROFESSOR = "mejor_profesor"
GENERAL_EXPERIENCE = "experiencia_general"
OPTION_MAX_LEN = Vote.__table__.c.option.type.length

CATEGORY_NAMES = {
    BEST_COURSE: "Mejor Curso del Semestre",
    BEST_PROFESSOR: "Mejor Profesor",
    GENERAL_EXPERIENCE: "Experiencia General",
}

STATIC_OPTIONS = {
    BEST_PROFESSOR: [],
    GENERAL_EXPERIENCE: ["Excelente", "Buena", "Regular", "Mala"],
}

RECENT_DAYS = 7
RECENT_LIMIT = 20
TREND_DAYS = 30


def category_catalog() -> list[dict]:
    """Categories in display order; ``mejor_curso`` lists the current courses."""
    courses = Course.query.with_entities(Course.id, Course.name).order_by(Course.name.asc()).all()
    catalog = []
    for key, name in CATEGORY_NAMES.items():
        if key == BEST_COURSE:
            options = [{"id": c.id, "name": c.name} for c in courses]
        else:
            options = list(STATIC_OPTIONS[key])
        catalog.append({"id": key, "name": name, "options": options})
    return catalog


def _validate(data: dict) -> tuple[str, str, str | None]:
    category = str(data.get("category") or "").strip()
    option = data.get("option")
    option = str(option).strip() if option is not None else ""
    comment = str(data.get("comment") or "").strip() or None

    if not category or not option:
        raise InvalidInput("Categoría y opción son requeridos")
    if category not in CATEGORY_NAMES:
        raise InvalidInput(f"Categoría desconocida: {category}")
    if len(option) > OPTION_MAX_LEN:
        raise InvalidInput(f"La opción no puede superar {OPTION_MAX_LEN} caracteres")
    return category, option, comment


def _existing(student: Student, category: str) -> Vote | None:
    return Vote.query.filter_by(student_id=student.id, category=category).first()


def list_votes_and_categories(student: Student) -> dict:
    votes = (
        Vote.query.filter_by(student_id=student.id)
        .order_by(Vote.created_at.desc(), Vote.id.desc())
        .all()
    )
    by_category = {v.category: v for v in votes}

    categories = []
    for category in category_catalog():
        vote = by_category.get(category["id"])
        categories.append({
            **category,
            "hasVoted": vote is not None,
            "vote": vote.to_dict() if vote else None,
        })

    return {"votes": [v.to_dict() for v in votes], "categories": categories}


def cast_vote(student: Student, data: dict) -> Vote:
    category, option, comment = _validate(data)

    if _existing(student, category):
        raise Conflict("Ya has votado en esta categoría. Solo se permite un voto por categoría.")

    vote = Vote(student_id=student.id, category=category, option=option, comment=comment)
    db.session.add(vote)
    db.session.commit()

    logger.info("student %s voted in %s", student.id, category)
    return vote


def update_vote(student: Student, data: dict) -> Vote:
    category, option, comment = _validate(data)

    vote = _existing(student, category)
    if not vote:
        raise NotFound("No se encontró un voto previo en esta categoría para actualizar.")

    vote.option = option
    vote.comment = comment
    db.session.commit()

    logger.info("student %s changed vote in %s", student.id, category)
    return vote


def option_distribution(rows) -> list[dict]:
    """Turn ``(category, option, count)`` rows into per-category shares.

    Percentages are relative to the category total, to one decimal.
    """
    grouped = defaultdict(list)
    for category, option, count in rows:
        grouped[category].append((option, int(count)))

    stats = []
    for category in sorted(grouped):
        options = sorted(grouped[category], key=lambda item: (-item[1], item[0]))
        total = sum(count for _, count in options)
        stats.append({
            "category": category,
            "totalVotes": total,
            "options": [
                {"option": option, "count": count, "percentage": percentage(count, total, 1)}
                for option, count in options
            ],
        })
    return stats


def vote_statistics() -> dict:
    now = utc_now()

    total_votes = Vote.query.count()
    total_students = Student.query.count()
    participation = total_votes / total_students * 100 if total_students else 0

    rows = (
        db.session.query(Vote.category, Vote.option, func.count(Vote.id))
        .group_by(Vote.category, Vote.option)
        .all()
    )
    category_stats = option_distribution(rows)

    recent = (
        Vote.query.join(Vote.student)
        .filter(Vote.created_at >= now - timedelta(days=RECENT_DAYS))
        .order_by(Vote.created_at.desc(), Vote.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )

    # comments are published without the voter's identity
    comments = (
        Vote.query.filter(Vote.comment.isnot(None))
        .order_by(Vote.created_at.desc(), Vote.id.desc())
        .all()
    )

    per_day = defaultdict(int)
    trend_rows = Vote.query.with_entities(Vote.created_at).filter(
        Vote.created_at >= now - timedelta(days=TREND_DAYS)
    )
    for (created_at,) in trend_rows:
        per_day[created_at.date().isoformat()] += 1

    return {
        "summary": {
            "totalVotes": total_votes,
            "totalStudents": total_students,
            "participationRate": round_half_up(participation, 2),
            "categoriesCount": len(category_stats),
        },
        "categoryStats": category_stats,
        "recentVotes": [
            {
                "id": v.id,
                "category": v.category,
                "option": v.option,
                "studentName": v.student.full_name,
                "studentMajor": v.student.major,
                "createdAt": v.created_at.isoformat(),
                "hasComment": bool(v.comment),
            }
            for v in recent
        ],
        "comments": [
            {
                "category": v.category,
                "option": v.option,
                "comment": v.comment,
                "createdAt": v.created_at.isoformat(),
            }
            for v in comments
        ],
        "votingTrend": [{"date": day, "count": per_day[day]} for day in sorted(per_day)],
    }


def delete_all_votes() -> int:
    deleted = Vote.query.delete()
    db.session.commit()
    logger.warning("all votes deleted (%s rows)", deleted)
    return deleted
