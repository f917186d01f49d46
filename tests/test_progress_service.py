"""Tests for progress persistence and the progress service."""

import threading
import time
from unittest.mock import Mock

import pytest

from language_platform.core.exceptions import StorageError, ValidationError
from language_platform.core.config import Settings
from language_platform.db.session import build_session_factory, create_db_engine
from language_platform.services.progress_service import ProgressService, validate_percent
from language_platform.services.progress_store import ProgressStore


def records_for(service: ProgressService, learner_id: int, lesson_id: int):
    return [r for r in service.get_progress_for_learner(learner_id) if r.lesson_id == lesson_id]


class TestValidatePercent:
    """Tests for the percent range check."""

    @pytest.mark.parametrize("percent", [0, 1, 50, 99, 100])
    def test_valid_values(self, percent: int) -> None:
        assert validate_percent(percent) == percent

    @pytest.mark.parametrize("percent", [-1, 101, 150, 1.5, "50", None, True])
    def test_invalid_values(self, percent) -> None:
        with pytest.raises(ValidationError):
            validate_percent(percent)


class TestProgressStore:
    """Tests for the SQL-backed store."""

    def test_upsert_creates_record(self, progress_store: ProgressStore) -> None:
        record = progress_store.upsert(1, 2, 40)
        assert record.learner_id == 1
        assert record.lesson_id == 2
        assert record.completion_percent == 40
        assert record.last_updated is not None

    def test_upsert_updates_existing_pair(self, progress_store: ProgressStore) -> None:
        first = progress_store.upsert(1, 2, 10)
        second = progress_store.upsert(1, 2, 70)
        assert second.id == first.id
        assert second.completion_percent == 70
        assert len(progress_store.query_by_learner(1)) == 1

    def test_query_unknown_learner_is_empty(self, progress_store: ProgressStore) -> None:
        assert progress_store.query_by_learner(999) == []

    def test_delete(self, progress_store: ProgressStore) -> None:
        progress_store.upsert(1, 2, 10)
        assert progress_store.delete(1, 2) is True
        assert progress_store.delete(1, 2) is False
        assert progress_store.query_by_learner(1) == []

    def test_unreachable_database_raises_storage_error(self, tmp_path) -> None:
        settings = Settings(
            DATABASE_URL=f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}",
            LOG_TO_FILE=False,
        )
        engine = create_db_engine(settings)
        store = ProgressStore(build_session_factory(engine))
        try:
            with pytest.raises(StorageError):
                store.upsert(1, 2, 10)
            with pytest.raises(StorageError):
                store.query_by_learner(1)
        finally:
            engine.dispose()


class TestUpdateProgress:
    """Tests for ProgressService.update_progress."""

    @pytest.mark.parametrize("percent", [0, 1, 50, 99, 100])
    def test_repeated_update_keeps_one_record(self, progress_service: ProgressService, percent: int) -> None:
        progress_service.update_progress(1, 2, percent)
        progress_service.update_progress(1, 2, percent)

        records = records_for(progress_service, 1, 2)
        assert len(records) == 1
        assert records[0].completion_percent == percent

    def test_out_of_range_is_rejected_and_not_stored(self, progress_service: ProgressService) -> None:
        with pytest.raises(ValidationError):
            progress_service.update_progress(1, 2, 150)
        assert records_for(progress_service, 1, 2) == []

    def test_out_of_range_leaves_previous_value(self, progress_service: ProgressService) -> None:
        progress_service.update_progress(1, 2, 30)
        with pytest.raises(ValidationError):
            progress_service.update_progress(1, 2, 150)
        with pytest.raises(ValidationError):
            progress_service.update_progress(1, 2, -5)

        records = records_for(progress_service, 1, 2)
        assert [r.completion_percent for r in records] == [30]

    def test_validation_happens_before_the_store(self) -> None:
        store = Mock(spec=ProgressStore)
        service = ProgressService(store)
        with pytest.raises(ValidationError):
            service.update_progress(1, 2, 101)
        store.upsert.assert_not_called()

    def test_storage_error_is_surfaced(self) -> None:
        store = Mock(spec=ProgressStore)
        store.upsert.side_effect = StorageError("connection refused")
        service = ProgressService(store)
        with pytest.raises(StorageError):
            service.update_progress(1, 2, 50)

    def test_get_progress_for_learner(self, progress_service: ProgressService) -> None:
        progress_service.update_progress(1, 2, 20)
        progress_service.update_progress(1, 3, 60)
        progress_service.update_progress(3, 4, 80)

        mine = {(r.lesson_id, r.completion_percent) for r in progress_service.get_progress_for_learner(1)}
        assert mine == {(2, 20), (3, 60)}


class TestConcurrentUpdates:
    """Writes to different pairs run in parallel; writes to one pair never overlap."""

    def test_different_pairs_do_not_block_each_other(self) -> None:
        # Both writes must be inside the store at the same time to pass the barrier
        barrier = threading.Barrier(2, timeout=2)
        store = Mock(spec=ProgressStore)
        store.upsert.side_effect = lambda *args: barrier.wait()
        service = ProgressService(store)
        errors = []

        def write(learner_id: int, lesson_id: int) -> None:
            try:
                service.update_progress(learner_id, lesson_id, 50)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [
            threading.Thread(target=write, args=(1, 2)),
            threading.Thread(target=write, args=(3, 4)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert store.upsert.call_count == 2

    def test_same_pair_is_mutually_exclusive(self) -> None:
        in_flight = 0
        max_in_flight = 0
        counter_lock = threading.Lock()

        def slow_upsert(*args):
            nonlocal in_flight, max_in_flight
            with counter_lock:
                in_flight += 1
                max_in_flight = max(max_in_flight, in_flight)
            time.sleep(0.01)
            with counter_lock:
                in_flight -= 1

        store = Mock(spec=ProgressStore)
        store.upsert.side_effect = slow_upsert
        service = ProgressService(store)

        threads = [
            threading.Thread(target=service.update_progress, args=(1, 2, p))
            for p in range(0, 80, 10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.upsert.call_count == 8
        assert max_in_flight == 1

    def test_concurrent_writes_to_database(self, progress_service: ProgressService) -> None:
        errors = []

        def write(learner_id: int, lesson_id: int) -> None:
            try:
                for percent in range(0, 101, 10):
                    progress_service.update_progress(learner_id, lesson_id, percent)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [
            threading.Thread(target=write, args=(1, 2)),
            threading.Thread(target=write, args=(1, 2)),
            threading.Thread(target=write, args=(3, 4)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert [r.completion_percent for r in records_for(progress_service, 1, 2)] == [100]
        assert [r.completion_percent for r in records_for(progress_service, 3, 4)] == [100]
