from __future__ import annotations
from typing import TYPE_CHECKING

from datetime import datetime
from sqlalchemy import Column, ForeignKey, DateTime, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..extensions import db
from ..utils.dates import utc_now

if TYPE_CHECKING:
    from .course import Course
    from .student import Student


selection_courses = Table(
    "course_selection_courses",
    db.metadata,
    Column(
        "selection_id",
        ForeignKey("course_selections.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "course_id",
        ForeignKey("courses.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    ),
)


class CourseSelection(db.Model):
    __tablename__ = "course_selections"

    id: Mapped[int] = mapped_column(primary_key=True)

    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    selection_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    # relations
    student: Mapped["Student"] = relationship("Student", back_populates="selection", lazy="joined")
    selected_courses: Mapped[list["Course"]] = relationship(
        "Course",
        secondary=selection_courses,
        back_populates="selections",
        order_by="Course.name",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "selectionDate": self.selection_date.isoformat() if self.selection_date else None,
            "selectedCourses": [c.to_dict() for c in self.selected_courses],
            "student": {"name": self.student.name, "lastName": self.student.last_name},
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
