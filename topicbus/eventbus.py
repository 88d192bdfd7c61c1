"""Topic-based asynchronous event bus with per-topic worker threads."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from types import TracebackType

from .logger import DefaultLogger, Logger

DEFAULT_MAX_RETRIES = 3
DEFAULT_CHANNEL_SIZE = 1000


class Event(ABC):
    """An event carries the name of the topic it belongs to."""

    @abstractmethod
    def topic(self) -> str:
        """Return the topic this event is published on."""


class Handler(ABC):
    """Processes events; raising an exception marks the attempt as failed."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """Process ``event``."""


@dataclass(frozen=True)
class _Task:
    event: Event
    handler: Handler


class _TaskQueue:
    """Bounded FIFO that can be closed; consumers drain it, then get None."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._items: deque[_Task] = deque()
        self._cond = threading.Condition()
        self._closed = False

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, task: _Task) -> None:
        with self._cond:
            while len(self._items) >= self._capacity and not self._closed:
                self._cond.wait()
            if self._closed:
                raise RuntimeError("event queue is closed")
            self._items.append(task)
            self._cond.notify_all()

    def get(self) -> _Task | None:
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if not self._items:
                return None
            task = self._items.popleft()
            self._cond.notify_all()
            return task

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()


class EventBus:
    """Delivers published events to every handler subscribed to their topic.

    Each topic has its own bounded queue and worker thread; handlers run in
    that thread, and a failing handler is tried up to ``max_retries`` times.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        channel_size: int = DEFAULT_CHANNEL_SIZE,
        logger: Logger | None = None,
    ) -> None:
        self.max_retries = max_retries
        self.channel_size = channel_size if channel_size > 0 else DEFAULT_CHANNEL_SIZE
        self.logger: Logger = logger if logger is not None else DefaultLogger()
        self._handlers: dict[str, list[Handler]] = {}
        self._queues: dict[str, _TaskQueue] = {}
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._workers: list[threading.Thread] = []

    def subscribe(self, topic: str, handler: Handler) -> None:
        """Register ``handler`` for ``topic``, starting a worker if needed."""
        with self._lock:
            if self._done.is_set():
                raise RuntimeError("event bus is closed")
            if topic not in self._handlers:
                queue = _TaskQueue(self.channel_size)
                self._handlers[topic] = []
                self._queues[topic] = queue
                worker = threading.Thread(
                    target=self._process,
                    args=(topic, queue),
                    name=f"topicbus-{topic}",
                    daemon=True,
                )
                self._workers = [w for w in self._workers if w.is_alive()]
                self._workers.append(worker)
                worker.start()
            self._handlers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: Handler) -> None:
        """Remove ``handler`` from ``topic``; drop the topic when none remain."""
        with self._lock:
            handlers = self._handlers.get(topic)
            if handlers is None:
                return
            for position, registered in enumerate(handlers):
                if registered is handler:
                    del handlers[position]
                    break
            if not handlers:
                self._queues.pop(topic).close()
                del self._handlers[topic]

    def publish(self, event: Event) -> None:
        """Queue ``event`` once for each handler of its topic.

        Blocks while the topic's queue is full.
        """
        topic = event.topic()
        with self._lock:
            handlers = list(self._handlers.get(topic, ()))
            queue = self._queues.get(topic)
        if queue is None:
            return
        for handler in handlers:
            queue.put(_Task(event, handler))

    def close(self) -> None:
        """Stop all workers, discard pending events and wait for the workers."""
        with self._lock:
            self._done.set()
            for queue in self._queues.values():
                queue.close()
            self._queues.clear()
            self._handlers.clear()
            workers = list(self._workers)
        current = threading.current_thread()
        for worker in workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> EventBus:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _process(self, topic: str, queue: _TaskQueue) -> None:
        while True:
            self.logger.info(
                "current event queue length - topic: %s, length: %d", topic, len(queue)
            )
            task = queue.get()
            if task is None or self._done.is_set():
                return
            self._dispatch(task)

    def _dispatch(self, task: _Task) -> None:
        for attempt in range(1, self.max_retries + 1):
            try:
                task.handler.handle(task.event)
            except Exception as exc:
                self.logger.error(
                    "event topic %s handle failed: %s, retrying %d times...",
                    task.event.topic(),
                    exc,
                    attempt,
                )
            else:
                return