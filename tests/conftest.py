import itertools
from datetime import timedelta

import pytest

from summerreg import create_app
from summerreg.config import Config
from summerreg.extensions import db
from summerreg.models import Course, CourseSelection, Student, User, UserRole


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-for-hs256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=5)
    LOG_LEVEL = "WARNING"
    REPORT_PAGE_SIZE = 10


ANA = {
    "name": "Ana",
    "lastName": "García",
    "idCard": "123456789",
    "age": 20,
    "major": "Ingeniería de Sistemas",
    "semester": "4",
    "email": "ana@x.com",
    "password": "secret123",
}


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login(client):
    def _login(email, password):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return auth_header(resp.get_json()["access_token"])
    return _login


@pytest.fixture
def register(client, login):
    """Register a student through the API and return its auth headers."""
    def _register(**overrides):
        payload = {**ANA, **overrides}
        resp = client.post("/api/students", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return login(payload["email"], payload["password"])
    return _register


@pytest.fixture
def make_user(app):
    def _make_user(email, password="secret123", role=UserRole.admin):
        user = User(email=email, role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def admin_headers(make_user, login):
    make_user("admin@x.com")
    return login("admin@x.com", "secret123")


@pytest.fixture
def student_headers(register):
    return register()


@pytest.fixture
def make_course(app):
    def _make_course(name, capacity=30):
        course = Course(name=name, capacity=capacity)
        db.session.add(course)
        db.session.commit()
        return course.id
    return _make_course


@pytest.fixture
def courses(make_course):
    return {
        "mat": make_course("MATEMÁTICA I"),
        "fis": make_course("FÍSICA I"),
        "alg": make_course("ALGORITMOS I"),
    }


@pytest.fixture
def make_student(make_user):
    """Create a student directly in the store, bypassing registration."""
    counter = itertools.count(1)

    def _make_student(name="Test", last_name="Student", age=20, major="Sistemas", semester="2"):
        n = next(counter)
        user = make_user(f"student{n}@x.com", role=UserRole.student)
        student = Student(
            user_id=user.id,
            name=name,
            last_name=last_name,
            id_card=f"9{n:08d}",
            age=age,
            major=major,
            semester=semester,
        )
        db.session.add(student)
        db.session.commit()
        return student
    return _make_student


@pytest.fixture
def enroll(make_student):
    """Give ``count`` new students a selection of the two given courses."""
    def _enroll(course_ids, count=1):
        students = []
        for _ in range(count):
            student = make_student()
            selected = Course.query.filter(Course.id.in_(course_ids)).all()
            db.session.add(CourseSelection(student_id=student.id, selected_courses=selected))
            students.append(student)
        db.session.commit()
        return students
    return _enroll
