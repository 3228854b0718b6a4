import asyncio
import contextlib
from typing import Callable

from loguru import logger

from flappyevo.runner.driver import FrameSnapshot, SimulationDriver

FrameCallback = Callable[[FrameSnapshot], None]


class SimulationRunner:
    """Drives a :class:`SimulationDriver` from the event loop.

    Ticks never yield; the runner only awaits between complete frames.
    """

    def __init__(
        self,
        driver: SimulationDriver,
        *,
        frame_interval: float = 1.0 / 60.0,
        max_generations: int | None = None,
        on_frame: FrameCallback | None = None,
    ) -> None:
        self._driver = driver
        self._frame_interval = frame_interval
        self._max_generations = max_generations
        self._on_frame = on_frame
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def driver(self) -> SimulationDriver:
        return self._driver

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self.run(), name="simulation-runner")
        logger.info("[SimulationRunner] Simulation started")

    async def run(self) -> None:
        self._running = True
        try:
            while self._running:
                if self._reached_generation_cap():
                    logger.info(
                        "[SimulationRunner] Stop: max_generations={}",
                        self._max_generations,
                    )
                    break
                snapshot = self._driver.frame()
                if self._on_frame is not None:
                    self._on_frame(snapshot)
                await asyncio.sleep(self._frame_interval)
        except Exception:
            logger.exception(
                "[SimulationRunner] Simulation failed in generation {} at tick {}",
                self._driver.generation,
                self._driver.tick_index,
            )
            raise
        finally:
            self._running = False
            logger.info(
                "[SimulationRunner] Stopped | generations={}, ticks={}",
                self._driver.metrics.total_generations,
                self._driver.metrics.total_ticks,
            )

    async def stop(self) -> None:
        """Stop the frame loop and wait for it; a failure inside it is re-raised."""
        self._running = False
        if self._task:
            try:
                with contextlib.suppress(asyncio.CancelledError):
                    await self._task
            finally:
                self._task = None

    def _reached_generation_cap(self) -> bool:
        return (
            self._max_generations is not None
            and self._driver.metrics.total_generations >= self._max_generations
        )
