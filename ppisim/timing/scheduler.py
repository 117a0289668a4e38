"""
Frame Scheduler

Drives named update tasks from a single frame clock:
- Continuous tasks run on every accepted tick with the elapsed time
- Fixed tasks run once per accumulated interval (remainder carried over)
- Global time scaling, with scale <= 0 acting as a pause
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Absorbs float error when tick deltas are summed against an interval
ACCUMULATOR_TOLERANCE_S = 1e-9


@dataclass
class TaskRecord:
    """A registered update task."""
    name: str
    func: Callable
    interval_s: Optional[float] = None  # None = continuous
    accumulated_s: float = 0.0
    calls: int = 0

    @property
    def is_fixed(self) -> bool:
        return self.interval_s is not None


class FrameScheduler:
    """Single-threaded frame scheduler with speed control and pause.

    The scheduler is driven by a display refresh callback (``on_frame``) and
    throttles itself: a tick is only processed once the scaled wall time since
    the last accepted tick reaches ``1 / tick_rate_hz``. Deltas are clamped to
    ``max_delta_s`` so a stalled display cannot produce one huge step.

    Task bodies are expected not to raise; exceptions propagate to whoever
    drives the frame callback.

    Args:
        tick_rate_hz: Target simulation tick rate
        max_delta_s: Largest elapsed time a single tick may carry
        time_scale: Initial speed factor
        clock: Callable returning monotonic seconds
    """

    def __init__(
        self,
        tick_rate_hz: float = 75.0,
        max_delta_s: float = 0.1,
        time_scale: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if tick_rate_hz <= 0:
            raise ValueError("tick_rate_hz must be positive")
        if max_delta_s <= 0:
            raise ValueError("max_delta_s must be positive")

        self.tick_rate_hz = tick_rate_hz
        self.max_delta_s = max_delta_s
        self._clock = clock
        self._tasks: Dict[str, TaskRecord] = {}
        self._time_scale = 1.0
        self._running = False
        self.last_time = clock()
        self.ticks = 0
        self.set_time_scale(time_scale)

    @classmethod
    def from_config(cls, config, clock: Callable[[], float] = time.monotonic) -> "FrameScheduler":
        """Build a scheduler from a RadarConfig."""
        return cls(
            tick_rate_hz=config.tick_rate_hz,
            max_delta_s=config.max_delta_s,
            time_scale=config.time_scale,
            clock=clock,
        )

    # --- Task table ---------------------------------------------------------

    def register_continuous(self, name: str, func: Callable[[float], None]) -> TaskRecord:
        """Run ``func(elapsed_s)`` on every accepted tick."""
        return self._register(TaskRecord(name=name, func=func))

    def register_fixed(self, name: str, interval_s: float, func: Callable[[], None]) -> TaskRecord:
        """Run ``func()`` once every ``interval_s`` of accumulated time."""
        if not interval_s > 0:
            raise ValueError(f"Fixed task {name!r} needs a positive interval, got {interval_s}")
        return self._register(TaskRecord(name=name, func=func, interval_s=float(interval_s)))

    def _register(self, task: TaskRecord) -> TaskRecord:
        if task.name in self._tasks:
            logger.debug("Replacing task %r", task.name)
        self._tasks[task.name] = task
        logger.debug(
            "Registered %s task %r%s",
            "fixed" if task.is_fixed else "continuous",
            task.name,
            f" every {task.interval_s:g}s" if task.is_fixed else "",
        )
        return task

    def unregister(self, name: str) -> None:
        """Remove a task permanently."""
        try:
            del self._tasks[name]
        except KeyError:
            raise KeyError(f"No task named {name!r}") from None
        logger.debug("Unregistered task %r", name)

    def task(self, name: str) -> TaskRecord:
        return self._tasks[name]

    @property
    def task_names(self):
        return list(self._tasks)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    # --- Speed control ------------------------------------------------------

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def paused(self) -> bool:
        return self._time_scale <= 0

    def set_time_scale(self, factor: float) -> None:
        """Scale all elapsed times by ``factor``; ``factor <= 0`` pauses."""
        was_paused = self.paused
        self._time_scale = float(factor)
        if was_paused and not self.paused:
            # Wall time spent paused is never handed to the tasks
            self.last_time = self._clock()
        logger.info("Time scale set to %g%s", self._time_scale, " (paused)" if self.paused else "")

    # --- Ticking ------------------------------------------------------------

    @property
    def min_tick_s(self) -> float:
        return 1.0 / self.tick_rate_hz

    def on_frame(self, now: Optional[float] = None) -> bool:
        """Display refresh callback.

        Args:
            now: Current clock reading; read from the clock when omitted

        Returns:
            True if a tick was processed, False if it was throttled
        """
        if now is None:
            now = self._clock()
        wall_delta = now - self.last_time

        if self.paused:
            # Ticks keep flowing at the tick rate but carry no time, so
            # nothing accrues while paused.
            if wall_delta < self.min_tick_s:
                return False
            self.last_time = now
            self.advance(0.0)
            return True

        delta = min(wall_delta * self._time_scale, self.max_delta_s)
        if delta < self.min_tick_s:
            return False

        self.last_time = now
        self.advance(delta)
        return True

    def advance(self, elapsed_s: float) -> None:
        """Process one tick carrying ``elapsed_s`` of simulation time.

        Iterates a snapshot of the task table in insertion order. A task
        removed by an earlier task in the same tick is skipped; a task added
        during the tick first runs on the next one.
        """
        elapsed_s = max(float(elapsed_s), 0.0)
        self.ticks += 1

        for task in list(self._tasks.values()):
            if self._tasks.get(task.name) is not task:
                continue

            if task.is_fixed:
                task.accumulated_s += elapsed_s
                while task.accumulated_s + ACCUMULATOR_TOLERANCE_S >= task.interval_s:
                    task.accumulated_s = max(task.accumulated_s - task.interval_s, 0.0)
                    task.calls += 1
                    task.func()
            else:
                task.accumulated_s += elapsed_s
                task.calls += 1
                task.func(elapsed_s)

    # --- Run loop -----------------------------------------------------------

    def run(
        self,
        max_frames: Optional[int] = None,
        wait: Optional[Callable[[], None]] = None,
    ) -> int:
        """Run the cooperative frame loop.

        Args:
            max_frames: Stop after this many refresh callbacks (None = until
                ``stop()`` is called)
            wait: Blocks until the next display refresh; defaults to sleeping
                one tick period

        Returns:
            Number of ticks that were accepted
        """
        if wait is None:
            period = self.min_tick_s

            def wait():
                time.sleep(period)

        self._running = True
        self.last_time = self._clock()
        accepted = 0
        frames = 0
        logger.info("Frame loop started with %d task(s)", len(self._tasks))

        while self._running and (max_frames is None or frames < max_frames):
            wait()
            frames += 1
            if self.on_frame():
                accepted += 1

        self._running = False
        logger.info("Frame loop stopped after %d frame(s), %d tick(s)", frames, accepted)
        return accepted

    def stop(self) -> None:
        """End ``run()`` after the current frame."""
        self._running = False

    @property
    def running(self) -> bool:
        return self._running
