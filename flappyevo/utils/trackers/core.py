from __future__ import annotations

from queue import Empty, Full, Queue
import threading
import time
from typing import Any

from loguru import logger

from flappyevo.utils.trackers.base import LogWriter


def _sanitize(s: str) -> str:
    return "".join(ch if ch.isalnum() or ch in "-_.=," else "_" for ch in str(s))


def render_tag(path: list[str], metric: str) -> str:
    return "/".join(_sanitize(x) for x in [*path, metric] if x)


class LoggerBackend:
    """
    Minimal adapter every backend must implement.
    write_* may buffer; flush() must push buffered data out.
    """

    def open(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def write_scalar(self, tag: str, value: float, step: int, wall_time: float) -> None:
        raise NotImplementedError

    def write_hist(self, tag: str, values: Any, step: int, wall_time: float) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        raise NotImplementedError


class GenericLogger(LogWriter):
    """Queues events and hands them to a backend on a background thread.

    The simulation never waits on the backend; events offered to a full
    queue are dropped.
    """

    def __init__(
        self, backend: LoggerBackend, *, queue_size: int = 8192, flush_secs: float = 3.0
    ):
        self.backend = backend
        self._steps: dict[str, int] = {}
        self._q: Queue[dict[str, Any]] = Queue(maxsize=queue_size)
        self._stop = threading.Event()
        self._closed = False
        self._flush_secs = float(flush_secs)
        self._last_flush = time.time()
        self.dropped = 0

        self.backend.open()

        self._t = threading.Thread(target=self._loop, name="tracker-writer", daemon=True)
        self._t.start()

    def bind(self, path: list[str]) -> "BoundLogger":
        return BoundLogger(self, path)

    def scalar(
        self, metric: str, value: float, *, step: int | None = None, path: list[str] | None = None
    ) -> None:
        self._offer("scalar", render_tag(path or [], metric), float(value), step)

    def hist(
        self,
        metric: str,
        values: list[float],
        *,
        step: int | None = None,
        path: list[str] | None = None,
    ) -> None:
        self._offer("hist", render_tag(path or [], metric), list(values), step)

    def close(self, drain_timeout_s: float = 1.5) -> None:
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        if self._t.is_alive():
            self._t.join(timeout=2.0)

        deadline = time.time() + max(0.0, drain_timeout_s)
        while time.time() < deadline:
            try:
                event = self._q.get_nowait()
            except Empty:
                break
            self._handle(event)

        self.backend.flush()
        self.backend.close()
        if self.dropped:
            logger.warning("[GenericLogger] Dropped {} events on a full queue", self.dropped)

    # internals
    def _offer(self, kind: str, tag: str, payload: Any, step: int | None) -> None:
        if self._closed:
            return
        event = {"k": kind, "tag": tag, "v": payload, "step": step, "t": time.time()}
        try:
            self._q.put_nowait(event)
        except Full:
            self.dropped += 1

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                event = self._q.get(timeout=0.1)
            except Empty:
                event = None
            if event is not None:
                self._handle(event)
            now = time.time()
            if (now - self._last_flush) >= self._flush_secs:
                self._safe_flush()
                self._last_flush = now

    def _handle(self, e: dict[str, Any]) -> None:
        step = self._resolve_step(e["tag"], e["step"])
        try:
            if e["k"] == "scalar":
                self.backend.write_scalar(e["tag"], e["v"], step, e["t"])
            else:
                self.backend.write_hist(e["tag"], e["v"], step, e["t"])
        except Exception as exc:
            logger.warning("[GenericLogger] Failed to write {}: {}", e["tag"], exc)

    def _safe_flush(self) -> None:
        try:
            self.backend.flush()
        except Exception as exc:
            logger.warning("[GenericLogger] Backend flush failed: {}", exc)

    def _resolve_step(self, tag: str, step: int | None) -> int:
        if step is None:
            step = self._steps.get(tag, -1) + 1
        self._steps[tag] = int(step)
        return int(step)


class BoundLogger(LogWriter):
    def __init__(self, base: GenericLogger, path: list[str]):
        self._base = base
        self._path = list(path)

    def bind(self, path: list[str]) -> "BoundLogger":
        return BoundLogger(self._base, [*self._path, *path])

    def scalar(self, metric: str, value: float, *, step: int | None = None) -> None:
        self._base.scalar(metric, value, step=step, path=self._path)

    def hist(self, metric: str, values: list[float], *, step: int | None = None) -> None:
        self._base.hist(metric, values, step=step, path=self._path)

    def close(self) -> None:
        self._base.close()
