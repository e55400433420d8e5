"""In-process message bus with named FIFO queues of text messages."""

from __future__ import annotations

import queue
import threading


class MessageBus:
    """Named queues that carry text messages between the drone subsystems."""

    def __init__(self) -> None:
        self._queues: dict[str, queue.Queue[str]] = {}
        self._lock = threading.Lock()

    def _queue(self, name: str) -> queue.Queue[str]:
        with self._lock:
            try:
                return self._queues[name]
            except KeyError:
                created: queue.Queue[str] = queue.Queue()
                self._queues[name] = created
                return created

    def send(self, message: str, queue: str) -> None:
        """Append a message to the named queue."""
        if not isinstance(message, str):
            raise TypeError(f"message must be str, got {type(message).__name__}")
        self._queue(queue).put(message)

    def receive(self, queue: str, timeout: float | None = None) -> str:
        """Take the oldest message from the queue, waiting for one if needed.

        Raises TimeoutError if no message arrives within ``timeout`` seconds.
        """
        try:
            return self._queue(queue).get(timeout=timeout)
        except _Empty:
            raise TimeoutError(f"no message on queue {queue!r}") from None

    def try_receive(self, queue: str) -> str | None:
        """Take the oldest message from the queue, or None if it is empty."""
        try:
            return self._queue(queue).get_nowait()
        except _Empty:
            return None


_Empty = queue.Empty