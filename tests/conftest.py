import os
import sys
import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# До импорта приложения: settings читаются один раз при импорте
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import skillsetu.infrastructure.db
import skillsetu.main
from skillsetu.domain.entities import (
    ApplicationStatus,
    ApplicationView,
    EnrollmentView,
    JobStatus,
    User,
)
from skillsetu.domain.errors import Conflict
from skillsetu.infrastructure.db import get_db
from skillsetu.infrastructure.models import Base
from skillsetu.infrastructure.security import TokenService
from skillsetu.interfaces.http.limiter import limiter
from skillsetu.main import app

# Тестовая БД в памяти, одно соединение на все потоки TestClient
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

skillsetu.infrastructure.db.engine = test_engine
skillsetu.infrastructure.db.SessionLocal = TestingSessionLocal
skillsetu.main.engine = test_engine
skillsetu.main.SessionLocal = TestingSessionLocal


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def disable_rate_limiting():
    """Отключаем rate limiting в тестах"""
    limiter.enabled = False
    yield
    limiter.enabled = False
    limiter.reset()


@pytest.fixture
def client():
    """Чистая схема и тестовый клиент на каждый тест"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session(client):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def register(client):
    """Регистрирует пользователя через API и возвращает тело ответа"""
    def _register(email: str, role: str, password: str = "pw123456", name: str = "Test User") -> dict:
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name, "role": role},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def auth_header():
    def _auth_header(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _auth_header


@pytest.fixture
def tokens():
    return TokenService()


# --- In-memory реализации портов для тестов use case без БД


class FakePasswordHasher:
    dummy_hash = "hashed:dummy"

    def __init__(self):
        self.verify_calls = 0

    def hash(self, plain: str) -> str:
        return f"hashed:{plain}"

    def verify(self, plain: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{plain}"


class FakeUserRepository:
    def __init__(self):
        self.rows: dict[int, User] = {}

    def get_by_email(self, email):
        return next((u for u in self.rows.values() if u.email == email), None)

    def get_by_id(self, user_id):
        return self.rows.get(user_id)

    def create(self, email, password_hash, name, role):
        if self.get_by_email(email):
            raise Conflict("Email already exists")
        user = User(id=len(self.rows) + 1, email=email, name=name, role=role, password_hash=password_hash)
        self.rows[user.id] = user
        return user


class FakeCourseRepository:
    def __init__(self):
        self.rows = {}

    def create(self, course):
        from dataclasses import replace
        stored = replace(course, id=len(self.rows) + 1)
        self.rows[stored.id] = stored
        return stored

    def get(self, course_id):
        return self.rows.get(course_id)

    def list(self, category=None, difficulty=None):
        return [c for c in self.rows.values()
                if (category is None or c.category == category)
                and (difficulty is None or c.difficulty == difficulty)]

    def count_by_instructor(self, instructor_id):
        return sum(1 for c in self.rows.values() if c.instructor_id == instructor_id)


class FakeJobRepository:
    def __init__(self):
        self.rows = {}

    def create(self, job):
        from dataclasses import replace
        stored = replace(job, id=len(self.rows) + 1)
        self.rows[stored.id] = stored
        return stored

    def get(self, job_id):
        return self.rows.get(job_id)

    def list(self, status=None):
        return [j for j in self.rows.values() if status is None or j.status == status]

    def count_by_client(self, client_id):
        return sum(1 for j in self.rows.values() if j.client_id == client_id)


class FakeEnrollmentRepository:
    def __init__(self, courses: FakeCourseRepository):
        self.courses = courses
        self.pairs: list[tuple[int, int]] = []

    def add(self, user_id, course_id):
        if (user_id, course_id) in self.pairs:
            raise Conflict("Already enrolled")
        self.pairs.append((user_id, course_id))

    def list_for_user(self, user_id):
        result = []
        for i, (uid, cid) in enumerate(self.pairs, start=1):
            if uid != user_id:
                continue
            c = self.courses.get(cid)
            result.append(EnrollmentView(
                id=i, user_id=uid, course_id=cid, progress=0, enrolled_at=None,
                title=c.title, description=c.description, category=c.category, difficulty=c.difficulty,
            ))
        return result

    def count_for_user(self, user_id):
        return sum(1 for uid, _ in self.pairs if uid == user_id)


class FakeApplicationRepository:
    def __init__(self, jobs: FakeJobRepository):
        self.jobs = jobs
        self.pairs: list[tuple[int, int]] = []

    def add(self, user_id, job_id):
        if (user_id, job_id) in self.pairs:
            raise Conflict("Already applied")
        self.pairs.append((user_id, job_id))

    def list_for_user(self, user_id):
        result = []
        for i, (uid, jid) in enumerate(self.pairs, start=1):
            if uid != user_id:
                continue
            j = self.jobs.get(jid)
            result.append(ApplicationView(
                id=i, user_id=uid, job_id=jid, status=ApplicationStatus.PENDING, applied_at=None,
                title=j.title, description=j.description, budget=j.budget, job_status=JobStatus(j.status),
            ))
        return result

    def count_for_user(self, user_id):
        return sum(1 for uid, _ in self.pairs if uid == user_id)


@pytest.fixture
def fake_hasher():
    return FakePasswordHasher()


@pytest.fixture
def fake_users():
    return FakeUserRepository()


@pytest.fixture
def fake_courses():
    return FakeCourseRepository()


@pytest.fixture
def fake_jobs():
    return FakeJobRepository()


@pytest.fixture
def fake_enrollments(fake_courses):
    return FakeEnrollmentRepository(fake_courses)


@pytest.fixture
def fake_applications(fake_jobs):
    return FakeApplicationRepository(fake_jobs)
