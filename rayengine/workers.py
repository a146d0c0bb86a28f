"""Work tasks, long-lived worker threads and a pool that dispatches tasks to them."""

from __future__ import annotations

import abc
import itertools
import threading
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Iterable, Optional

from rayengine import log

__all__ = ["WorkTask", "WorkerThread", "ThreadPool"]

_uid_counter = itertools.count()
_uid_lock = threading.Lock()


def _next_uid() -> int:
    with _uid_lock:
        return next(_uid_counter)


@dataclass(eq=False)
class WorkTask:
    """A unit of work; every task gets a unique, increasing id."""

    uid: int = field(init=False, default_factory=_next_uid)


CompletionCallback = Callable[["WorkerThread", bool], None]


class WorkerThread(abc.ABC):
    """A thread that waits for tasks and handles them one at a time.

    After each task the completion callback is called with the worker and
    whether the task succeeded.
    """

    def __init__(self, name: str, on_complete: Optional[CompletionCallback] = None) -> None:
        self.name = name
        self._on_complete = on_complete
        self._cond = threading.Condition()
        self._task: Optional[WorkTask] = None
        self._last_uid: Optional[int] = None
        self._awaiting = True
        self._stopped = False
        self._thread: Optional[threading.Thread] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def start(self) -> None:
        """Begin running the thread; a second call only logs a warning."""
        if self._thread is not None:
            log.warn(f"{self.name}: Thread was requested to start when already active")
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def join(self) -> None:
        """Block until the thread has finished."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def set_task(self, task: WorkTask) -> None:
        """Hand the worker its next task."""
        with self._cond:
            self._task = task
            self._awaiting = False
            self._cond.notify()

    def is_awaiting_task(self) -> bool:
        with self._cond:
            return self._awaiting

    def stop(self) -> None:
        """Stop the thread once any task already handed over is done, and join it."""
        with self._cond:
            if self._stopped:
                return
            self._stopped = True
            self._cond.notify()
        self.join()

    @abc.abstractmethod
    def handle_task(self, task: WorkTask) -> bool:
        """Do the work of one task and report whether it succeeded."""

    def _has_new_task(self) -> bool:
        return self._task is not None and self._task.uid != self._last_uid

    def _run(self) -> None:
        while True:
            with self._cond:
                log.debug(f"{self.name}: Thread awaits new task")
                self._cond.wait_for(lambda: self._stopped or self._has_new_task())
                if not self._has_new_task():
                    break
                task = self._task
                self._last_uid = task.uid
                log.debug(f"{self.name}: Thread received new task (ID: {task.uid})")

            try:
                success = bool(self.handle_task(task))
            except Exception as exc:  # a failing task must not kill the worker
                log.error(f"{self.name}: task {task.uid} raised {exc!r}")
                success = False
            log.debug(f"{self.name}: Thread completed task (ID: {task.uid})")

            with self._cond:
                if not self._has_new_task():
                    self._awaiting = True

            if self._on_complete is not None:
                self._on_complete(self, success)
            if not success:
                log.error(f"{self.name}: WorkerThread failed to handle task with ID {task.uid}")
        log.debug(f"{self.name}: Thread exited")


WorkerFactory = Callable[[str, CompletionCallback], WorkerThread]


class ThreadPool:
    """A fixed set of worker threads fed from a shared queue of pending tasks."""

    def __init__(self, name: str, n_threads: int, worker_factory: WorkerFactory) -> None:
        if n_threads < 1:
            raise ValueError(f"a thread pool needs at least one thread, got {n_threads}")
        self.name = name
        self.n_threads = n_threads
        self._factory = worker_factory
        self._cond = threading.Condition()
        self._pending: deque[WorkTask] = deque()
        self._idle: deque[int] = deque()
        self._workers: list[WorkerThread] = []
        self._active = False

    def __repr__(self) -> str:
        return f"ThreadPool(name={self.name!r}, n_threads={self.n_threads})"

    def __enter__(self) -> ThreadPool:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def start(self) -> None:
        """Create and start the worker threads."""
        if self._workers:
            raise RuntimeError(f"thread pool {self.name} has already been started")
        for index in range(self.n_threads):
            worker = self._factory(f"{self.name}_{index}", partial(self._on_task_complete, index))
            self._workers.append(worker)
            with self._cond:
                self._idle.append(index)
            worker.start()
            log.debug(f"{worker.name}: Initialized thread")
        self._active = True
        log.debug(f"ThreadPool: Successfully initialized thread pool with name {self.name}")

    def _require_active(self) -> None:
        if not self._active:
            raise RuntimeError(f"thread pool {self.name} is not active")

    def _on_task_complete(self, index: int, worker: WorkerThread, success: bool) -> None:
        if not success:
            log.error(f"{self.name}_{index}: Failed to accomplish task")
        with self._cond:
            if self._pending:
                worker.set_task(self._pending.popleft())
            else:
                self._idle.append(index)
                if len(self._idle) == self.n_threads:
                    self._cond.notify_all()

    def add_task(self, task: WorkTask) -> None:
        """Give a task to an idle worker, or queue it when none is idle."""
        self.add_tasks([task])

    def add_tasks(self, tasks: Iterable[WorkTask]) -> None:
        """Give tasks to idle workers in order and queue the rest."""
        self._require_active()
        with self._cond:
            for task in tasks:
                if self._idle:
                    worker = self._workers[self._idle.popleft()]
                    worker.set_task(task)
                    log.debug(f"{self.name}: Added task (ID: {task.uid}) to worker thread ({worker.name})")
                else:
                    self._pending.append(task)
                    log.debug(f"{self.name}: Added task (ID: {task.uid}) to work queue")

    def wait_idle(self) -> None:
        """Block until every task has been handled and all workers are idle."""
        self._require_active()
        log.debug(f"{self.name}: Waiting for tasks to complete")
        with self._cond:
            self._cond.wait_for(
                lambda: len(self._idle) == self.n_threads and not self._pending
            )
        log.debug(f"{self.name}: Tasks complete")

    def shutdown(self) -> None:
        """Stop and join every worker thread."""
        self._active = False
        for worker in self._workers:
            worker.stop()