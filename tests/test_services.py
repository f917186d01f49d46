"""Tests for the auth, lesson and user services."""

import pytest

from language_platform.core.exceptions import AuthError, NotFoundError, StorageError, ValidationError
from language_platform.core.roles import Role
from language_platform.services.auth_service import AuthService
from language_platform.services.lesson_service import LessonService
from language_platform.services.progress_service import ProgressService
from language_platform.services.progress_store import ProgressStore
from language_platform.services.user_service import UserService

from conftest import PASSWORDS


class TestAuthService:
    def test_login_returns_user_with_role(self, session_factory, seeded) -> None:
        user = AuthService(session_factory).login("learner@example.com", PASSWORDS["learner@example.com"])
        assert user.id == seeded["learner_id"]
        assert user.role is Role.LEARNER
        assert user.name == "Leo"

    def test_login_trims_email(self, session_factory, seeded) -> None:
        user = AuthService(session_factory).login("  admin@example.com ", PASSWORDS["admin@example.com"])
        assert user.role is Role.ADMIN

    def test_wrong_password(self, session_factory, seeded) -> None:
        with pytest.raises(AuthError):
            AuthService(session_factory).login("learner@example.com", "nope")

    def test_unknown_email(self, session_factory, seeded) -> None:
        with pytest.raises(AuthError):
            AuthService(session_factory).login("ghost@example.com", "whatever")


class TestLessonService:
    def test_create_and_list(self, session_factory, seeded) -> None:
        service = LessonService(session_factory)
        created = service.create_lesson("Colors", "rojo, azul", seeded["instructor_id"])
        titles = [lesson.title for lesson in service.get_all_lessons()]
        assert titles == ["Greetings", "Numbers", "Colors"]
        assert created.instructor_id == seeded["instructor_id"]

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_title_is_required(self, session_factory, seeded, title) -> None:
        with pytest.raises(ValidationError, match="Lesson title is required"):
            LessonService(session_factory).create_lesson(title, "content", seeded["instructor_id"])

    def test_title_is_stripped(self, session_factory, seeded) -> None:
        lesson = LessonService(session_factory).create_lesson("  Verbs ", None, seeded["instructor_id"])
        assert lesson.title == "Verbs"

    def test_get_lesson_by_id_uses_lookup_map(self, session_factory, seeded) -> None:
        service = LessonService(session_factory)
        service.get_all_lessons()
        first = service.get_lesson_by_id(seeded["lesson_id"])
        assert first.title == "Greetings"
        assert service.get_lesson_by_id(seeded["lesson_id"]) is first

    def test_get_lesson_by_id_miss_loads_from_database(self, session_factory, seeded) -> None:
        lesson = LessonService(session_factory).get_lesson_by_id(seeded["other_lesson_id"])
        assert lesson.title == "Numbers"

    def test_get_unknown_lesson(self, session_factory, seeded) -> None:
        assert LessonService(session_factory).get_lesson_by_id(9999) is None

    def test_update_refreshes_lookup_map(self, session_factory, seeded) -> None:
        service = LessonService(session_factory)
        service.get_all_lessons()
        service.update_lesson(seeded["lesson_id"], title="Greetings II")
        assert service.get_lesson_by_id(seeded["lesson_id"]).title == "Greetings II"
        assert service.get_lesson_by_id(seeded["lesson_id"]).content == "Hola, buenos días"

    def test_update_rejects_blank_title(self, session_factory, seeded) -> None:
        with pytest.raises(ValidationError):
            LessonService(session_factory).update_lesson(seeded["lesson_id"], title="  ")

    def test_delete_evicts_from_lookup_map(self, session_factory, seeded) -> None:
        service = LessonService(session_factory)
        service.get_all_lessons()
        service.delete_lesson(seeded["lesson_id"])
        assert service.get_lesson_by_id(seeded["lesson_id"]) is None

    def test_missing_lesson_raises_not_found(self, session_factory, seeded) -> None:
        service = LessonService(session_factory)
        with pytest.raises(NotFoundError):
            service.update_lesson(9999, title="x")
        with pytest.raises(NotFoundError):
            service.delete_lesson(9999)


class TestUserService:
    def test_list_users(self, session_factory, seeded) -> None:
        roles = {user.email: user.role for user in UserService(session_factory).list_users()}
        assert roles["admin@example.com"] is Role.ADMIN
        assert roles["instructor@example.com"] is Role.INSTRUCTOR
        assert len(roles) == 4

    def test_create_user_hashes_password(self, session_factory, seeded) -> None:
        created = UserService(session_factory).create_user("Nico", "nico@example.com", "nico-pass-123", Role.LEARNER)
        assert created.role is Role.LEARNER
        user = AuthService(session_factory).login("nico@example.com", "nico-pass-123")
        assert user.id == created.id

    def test_duplicate_email(self, session_factory, seeded) -> None:
        with pytest.raises(ValidationError):
            UserService(session_factory).create_user("Dup", "learner@example.com", "whatever-123", Role.LEARNER)

    def test_delete_user(self, session_factory, seeded) -> None:
        service = UserService(session_factory)
        service.delete_user(seeded["learner2_id"])
        assert "learner2@example.com" not in {u.email for u in service.list_users()}
        with pytest.raises(NotFoundError):
            service.delete_user(seeded["learner2_id"])


class TestProgressCascade:
    """Progress rows follow the lifetime of their learner and lesson."""

    def test_deleting_lesson_removes_its_progress(self, session_factory, seeded) -> None:
        progress = ProgressService(ProgressStore(session_factory))
        progress.update_progress(seeded["learner_id"], seeded["lesson_id"], 40)
        progress.update_progress(seeded["learner_id"], seeded["other_lesson_id"], 10)

        LessonService(session_factory).delete_lesson(seeded["lesson_id"])

        remaining = [
            (r.lesson_id, r.completion_percent)
            for r in progress.get_progress_for_learner(seeded["learner_id"])
        ]
        assert remaining == [(seeded["other_lesson_id"], 10)]

    def test_deleting_user_removes_their_progress(self, session_factory, seeded) -> None:
        progress = ProgressService(ProgressStore(session_factory))
        progress.update_progress(seeded["learner2_id"], seeded["lesson_id"], 55)
        progress.update_progress(seeded["learner_id"], seeded["lesson_id"], 20)

        UserService(session_factory).delete_user(seeded["learner2_id"])

        assert progress.get_progress_for_learner(seeded["learner2_id"]) == []
        assert len(progress.get_progress_for_learner(seeded["learner_id"])) == 1

    def test_progress_for_missing_lesson_is_rejected(self, session_factory, seeded) -> None:
        progress = ProgressService(ProgressStore(session_factory))
        with pytest.raises(StorageError):
            progress.update_progress(seeded["learner_id"], 9999, 10)
        assert progress.get_progress_for_learner(seeded["learner_id"]) == []
