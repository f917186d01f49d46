"""
Auto-guardado periódico del progreso.

Una `AutoSaveTask` lee en cada ciclo el porcentaje actual (que el hilo de
interfaz va actualizando) y lo persiste a través de `ProgressService`.
`AutoSaveManager` garantiza como máximo una tarea activa por estudiante.

Estados de la tarea: IDLE -> RUNNING -> STOPPED (terminal).
"""
import threading
from enum import Enum
from typing import Dict, Optional

from language_platform.core.exceptions import AutoSaveStateError, PlatformError
from language_platform.core.logging_config import get_autosave_logger
from language_platform.schemas.progress import AutoSaveStatus
from language_platform.services.progress_service import ProgressService, validate_percent

DEFAULT_INTERVAL_SECONDS = 5.0


class AutoSaveState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class PercentCell:
    """Valor compartido entre el hilo de interfaz y el de auto-guardado."""

    def __init__(self, value: int):
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def set(self, value: int) -> None:
        with self._lock:
            self._value = value


class AutoSaveTask:
    """
    Tarea cancelable que guarda el porcentaje actual cada `interval_seconds`.

    El primer guardado ocurre al arrancar. Un fallo de persistencia se
    registra en el log y se reintenta en el siguiente ciclo. `stop()` es
    síncrono: cuando retorna, el hilo ya terminó y no habrá más escrituras.
    """

    def __init__(self, progress_service: ProgressService,
                 interval_seconds: float = DEFAULT_INTERVAL_SECONDS):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = progress_service
        self._interval = interval_seconds

        self._state = AutoSaveState.IDLE
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._cell: Optional[PercentCell] = None
        self._log = get_autosave_logger()

        self.learner_id: Optional[int] = None
        self.lesson_id: Optional[int] = None
        self.saves = 0
        self.failures = 0
        self.last_saved_percent: Optional[int] = None

    @property
    def state(self) -> AutoSaveState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is AutoSaveState.RUNNING

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def current_percent(self) -> Optional[int]:
        if self._cell is None:
            return None
        return self._cell.get()

    def start(self, learner_id: int, lesson_id: int, initial_percent: int = 0) -> None:
        validate_percent(initial_percent)

        with self._state_lock:
            if self._state is not AutoSaveState.IDLE:
                raise AutoSaveStateError(f"Cannot start an auto-save task in state {self._state.value}")
            self.learner_id = learner_id
            self.lesson_id = lesson_id
            self._cell = PercentCell(initial_percent)
            self._log = get_autosave_logger(learner_id=learner_id, lesson_id=lesson_id)
            self._thread = threading.Thread(
                target=self._run,
                name=f"ProgressAutoSave-{learner_id}-{lesson_id}",
                daemon=True,
            )
            self._state = AutoSaveState.RUNNING
            self._thread.start()

        self._log.info(
            f"Auto-guardado iniciado: learner={learner_id}, lesson={lesson_id}, "
            f"interval={self._interval}s"
        )

    def set_current_percent(self, percent: int) -> None:
        """
        Actualiza el porcentaje que se guardará en el próximo ciclo.
        No bloquea ni persiste de inmediato.
        """
        validate_percent(percent)
        if self._state is not AutoSaveState.RUNNING:
            raise AutoSaveStateError(f"Auto-save task is {self._state.value}, not running")
        self._cell.set(percent)

    def stop(self) -> None:
        with self._state_lock:
            was_running = self._state is AutoSaveState.RUNNING
            self._state = AutoSaveState.STOPPED
            thread = self._thread
        self._stop_event.set()

        if thread is not None and thread is not threading.current_thread():
            thread.join()

        if was_running:
            self._log.info(
                f"Auto-guardado detenido: learner={self.learner_id}, lesson={self.lesson_id}, "
                f"saves={self.saves}, failures={self.failures}"
            )

    def snapshot(self) -> AutoSaveStatus:
        return AutoSaveStatus(
            learner_id=self.learner_id,
            lesson_id=self.lesson_id,
            state=self._state.value,
            current_percent=self.current_percent,
            interval_seconds=self._interval,
            saves=self.saves,
            failures=self.failures,
        )

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self._save_once()
            # wait() devuelve True en cuanto se llama a stop()
            if self._stop_event.wait(self._interval):
                break

    def _save_once(self) -> None:
        percent = self._cell.get()
        try:
            self._service.update_progress(self.learner_id, self.lesson_id, percent)
        except PlatformError as e:
            self.failures += 1
            self._log.warning(f"Auto-save error: {e}", extra={"percent": percent})
        except Exception:
            self.failures += 1
            self._log.exception("Unexpected auto-save error", extra={"percent": percent})
        else:
            self.saves += 1
            self.last_saved_percent = percent


class AutoSaveManager:
    """
    Mantiene como máximo una `AutoSaveTask` activa por estudiante.

    `_lock` solo protege los diccionarios y nunca se mantiene mientras una
    tarea se detiene. Los arranques y paradas de un mismo estudiante se
    serializan con un lock propio de ese estudiante.
    """

    def __init__(self, progress_service: ProgressService,
                 interval_seconds: float = DEFAULT_INTERVAL_SECONDS):
        self._service = progress_service
        self._interval = interval_seconds
        self._tasks: Dict[int, AutoSaveTask] = {}
        self._learner_locks: Dict[int, threading.Lock] = {}
        self._lock = threading.Lock()

    def _lock_for(self, learner_id: int) -> threading.Lock:
        with self._lock:
            lock = self._learner_locks.get(learner_id)
            if lock is None:
                lock = self._learner_locks[learner_id] = threading.Lock()
            return lock

    def start(self, learner_id: int, lesson_id: int, initial_percent: int = 0) -> AutoSaveTask:
        """
        Inicia el auto-guardado de una lección. Si el estudiante ya tenía una
        tarea activa, se detiene por completo antes de arrancar la nueva.
        """
        validate_percent(initial_percent)

        with self._lock_for(learner_id):
            with self._lock:
                previous = self._tasks.pop(learner_id, None)
            if previous is not None:
                previous.stop()

            task = AutoSaveTask(self._service, self._interval)
            task.start(learner_id, lesson_id, initial_percent)
            with self._lock:
                self._tasks[learner_id] = task
        return task

    def update_percent(self, learner_id: int, percent: int) -> None:
        task = self.active_task(learner_id)
        if task is None:
            raise AutoSaveStateError(f"No active auto-save for learner {learner_id}")
        task.set_current_percent(percent)

    def stop(self, learner_id: int) -> bool:
        """
        Detiene el auto-guardado del estudiante. Devuelve False si no había ninguno.
        """
        with self._lock_for(learner_id):
            with self._lock:
                task = self._tasks.pop(learner_id, None)
            if task is None:
                return False
            task.stop()
        return True

    def active_task(self, learner_id: int) -> Optional[AutoSaveTask]:
        with self._lock:
            task = self._tasks.get(learner_id)
        if task is not None and task.is_running:
            return task
        return None

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for task in self._tasks.values() if task.is_running)

    def stop_all(self) -> None:
        with self._lock:
            tasks = list(self._tasks.values())
            self._tasks.clear()
        for task in tasks:
            task.stop()
