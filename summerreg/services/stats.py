from __future__ import annotations

from collections import Counter
from datetime import timedelta

from sqlalchemy import func

from ..extensions import db
from ..models import Course, CourseSelection, Student, User
from ..utils.dates import utc_now
from ..utils.numbers import round_half_up
from .courses import enrollment_counts

RECENT_DAYS = 7
MONTHS_BACK = 12
TOP_N = 10


def general_stats() -> dict:
    now = utc_now()

    total_users = User.query.count()
    total_students = Student.query.count()
    total_courses = Course.query.count()
    total_selections = CourseSelection.query.count()
    recent_selections = CourseSelection.query.filter(
        CourseSelection.created_at >= now - timedelta(days=RECENT_DAYS)
    ).count()
    average_age = db.session.query(func.avg(Student.age)).scalar() or 0

    users_by_role = (
        db.session.query(User.role, func.count(User.id))
        .group_by(User.role)
        .all()
    )

    counts = enrollment_counts()
    popular = sorted(Course.query.all(), key=lambda c: (-counts.get(c.id, 0), c.name))[:TOP_N]

    # month buckets (YYYY-MM) over roughly the last year
    monthly = Counter()
    rows = CourseSelection.query.with_entities(CourseSelection.created_at).filter(
        CourseSelection.created_at >= now - timedelta(days=30 * MONTHS_BACK)
    )
    for (created_at,) in rows:
        monthly[created_at.strftime("%Y-%m")] += 1

    by_semester = (
        db.session.query(Student.semester, func.count(Student.id))
        .group_by(Student.semester)
        .order_by(Student.semester.asc())
        .all()
    )
    by_major = (
        db.session.query(Student.major, func.count(Student.id).label("n"))
        .group_by(Student.major)
        .order_by(func.count(Student.id).desc(), Student.major.asc())
        .limit(TOP_N)
        .all()
    )

    return {
        "overview": {
            "totalUsers": total_users,
            "totalStudents": total_students,
            "totalCourses": total_courses,
            "totalSelections": total_selections,
            "recentSelections": recent_selections,
            "averageAge": round_half_up(float(average_age), 1),
        },
        "usersByRole": [{"role": role.value, "count": count} for role, count in users_by_role],
        "popularCourses": [
            {
                "id": c.id,
                "title": c.name,
                "capacity": c.capacity,
                "selections": counts.get(c.id, 0),
            }
            for c in popular
        ],
        "monthlySelections": dict(sorted(monthly.items())),
        "studentsBySemester": [{"semester": s, "count": n} for s, n in by_semester],
        "studentsByMajor": [{"major": m, "count": n} for m, n in by_major],
    }
