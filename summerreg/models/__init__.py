from .user import User, UserRole
from .student import Student
from .course_selection import CourseSelection, selection_courses
from .course import Course
from .vote import Vote
from .token_blocklist import TokenBlocklist

__all__ = [
    "User",
    "UserRole",
    "Student",
    "Course",
    "CourseSelection",
    "selection_courses",
    "Vote",
    "TokenBlocklist",
]
