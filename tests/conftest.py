"""Shared fixtures: a temporary SQLite database per test and the services on top of it."""

import time
from typing import Callable, Dict, List

import pytest
from fastapi.testclient import TestClient

from language_platform.core.config import Settings
from language_platform.core.roles import Role
from language_platform.core.security import get_password_hash
from language_platform.crud import crud_lesson, crud_user
from language_platform.db.models_registry import Base
from language_platform.db.session import build_session_factory, create_db_engine, session_scope
from language_platform.main import create_app
from language_platform.services.progress_service import ProgressService
from language_platform.services.progress_store import ProgressStore

PASSWORDS = {
    "admin@example.com": "admin-pass-123",
    "instructor@example.com": "instructor-pass-123",
    "learner@example.com": "learner-pass-123",
    "learner2@example.com": "learner2-pass-123",
}


@pytest.fixture(scope="session")
def password_hashes() -> Dict[str, str]:
    """bcrypt is slow on purpose, hash the demo passwords once."""
    return {email: get_password_hash(password) for email, password in PASSWORDS.items()}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key",
        LOG_TO_FILE=False,
        LOG_LEVEL="WARNING",
        AUTOSAVE_INTERVAL_SECONDS=0.05,
        DB_WRITE_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def engine(settings: Settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def catalog(session_factory, password_hashes) -> Dict[str, List[int]]:
    """Learners 1-3 and lessons 1-4, so progress rows for those ids satisfy the foreign keys."""
    with session_scope(session_factory) as db:
        learner_ids = [
            crud_user.create_user(
                db, name=f"Learner {n}", email=f"catalog{n}@example.com", role=Role.LEARNER,
                hashed_password=password_hashes["learner@example.com"],
            ).id
            for n in range(1, 4)
        ]
        lesson_ids = [crud_lesson.create_lesson(db, f"Lesson {n}", None, None).id for n in range(1, 5)]
    return {"learner_ids": learner_ids, "lesson_ids": lesson_ids}


@pytest.fixture
def progress_store(session_factory, catalog) -> ProgressStore:
    return ProgressStore(session_factory)


@pytest.fixture
def progress_service(progress_store) -> ProgressService:
    return ProgressService(progress_store)


@pytest.fixture
def seeded(session_factory, password_hashes) -> Dict[str, int]:
    """One user per role, a second learner and two lessons owned by the instructor."""
    with session_scope(session_factory) as db:
        admin = crud_user.create_user(
            db, name="Ada", email="admin@example.com", role=Role.ADMIN,
            hashed_password=password_hashes["admin@example.com"],
        )
        instructor = crud_user.create_user(
            db, name="Ines", email="instructor@example.com", role=Role.INSTRUCTOR,
            hashed_password=password_hashes["instructor@example.com"],
        )
        learner = crud_user.create_user(
            db, name="Leo", email="learner@example.com", role=Role.LEARNER,
            hashed_password=password_hashes["learner@example.com"],
        )
        learner2 = crud_user.create_user(
            db, name="Lia", email="learner2@example.com", role=Role.LEARNER,
            hashed_password=password_hashes["learner2@example.com"],
        )
        greetings = crud_lesson.create_lesson(db, "Greetings", "Hola, buenos días", instructor.id)
        numbers = crud_lesson.create_lesson(db, "Numbers", "uno, dos, tres", instructor.id)
        return {
            "admin_id": admin.id,
            "instructor_id": instructor.id,
            "learner_id": learner.id,
            "learner2_id": learner2.id,
            "lesson_id": greetings.id,
            "other_lesson_id": numbers.id,
        }


@pytest.fixture
def client(settings, session_factory, seeded):
    app = create_app(settings, session_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client) -> Callable[[str], Dict[str, str]]:
    def _headers(email: str) -> Dict[str, str]:
        response = client.post(
            "/api/v1/auth/token",
            data={"username": email, "password": PASSWORDS[email]},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _headers


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout expires."""
    def _wait_for(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.01) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait_for
