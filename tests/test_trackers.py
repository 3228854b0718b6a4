import threading
from typing import Any

from flappyevo.utils.trackers.core import GenericLogger, LoggerBackend, render_tag


class MemoryBackend(LoggerBackend):
    def __init__(self):
        self.opened = False
        self.closed = False
        self.scalars: list[tuple[str, float, int]] = []
        self.hists: list[tuple[str, Any, int]] = []

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def write_scalar(self, tag, value, step, wall_time) -> None:
        self.scalars.append((tag, value, step))

    def write_hist(self, tag, values, step, wall_time) -> None:
        self.hists.append((tag, values, step))

    def flush(self) -> None:
        pass


def test_render_tag_sanitizes_segments():
    assert render_tag(["evolution", "gen 1"], "best/ticks") == "evolution/gen_1/best_ticks"


def test_bound_writer_prefixes_tags_and_drains_on_close():
    backend = MemoryBackend()
    tracker = GenericLogger(backend, flush_secs=0.1)
    writer = tracker.bind(["evolution"])

    writer.scalar("best_ticks", 120, step=1)
    writer.scalar("best_ticks", 340, step=2)
    writer.bind(["survival"]).hist("ticks", [1.0, 2.0], step=2)
    tracker.close()

    assert backend.opened and backend.closed
    assert backend.scalars == [
        ("evolution/best_ticks", 120.0, 1),
        ("evolution/best_ticks", 340.0, 2),
    ]
    assert backend.hists == [("evolution/survival/ticks", [1.0, 2.0], 2)]


def test_missing_step_auto_increments():
    backend = MemoryBackend()
    tracker = GenericLogger(backend)

    for value in (1.0, 2.0, 3.0):
        tracker.scalar("mean_ticks", value)
    tracker.close()

    assert [step for _, _, step in backend.scalars] == [0, 1, 2]


def test_writes_after_close_are_ignored():
    backend = MemoryBackend()
    tracker = GenericLogger(backend)
    tracker.close()

    tracker.scalar("late", 1.0)

    assert backend.scalars == []


class BlockingBackend(MemoryBackend):
    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def write_scalar(self, tag, value, step, wall_time) -> None:
        self.release.wait(timeout=5.0)
        super().write_scalar(tag, value, step, wall_time)


def test_full_queue_drops_events_instead_of_blocking():
    backend = BlockingBackend()
    tracker = GenericLogger(backend, queue_size=1)

    for step in range(6):
        tracker.scalar("best_ticks", float(step), step=step)
    backend.release.set()
    tracker.close()

    # one event can be in the writer thread and one in the queue
    assert tracker.dropped >= 4
    assert len(backend.scalars) + tracker.dropped == 6
