"""
Radar Application Wiring

Builds the world, scheduler, render pipeline and bezel from one
configuration, seeds the targets and connects scheduler ticks to the
sweep and render updates.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .config import RadarConfig
from .interfaces import ElevationGrid
from .render.composite import alpha_over, premultiply
from .render.overlay import IndicatorOverlay
from .render.pipeline import SweepRenderPipeline
from .timing.scheduler import FrameScheduler
from .world.entities import Entity, PeriodicStep
from .world.model import WorldModel

logger = logging.getLogger(__name__)

SWEEP_TASK = "sweep"


@dataclass
class TargetSpec:
    """Target to place at scene setup."""
    name: str
    position: Tuple[float, float, float]
    visibility_weight: float = 0.8
    motion: Optional[object] = None
    radius: float = 3.0


# Three targets drifting north-east by (3, 3) every 7 s
DEFAULT_TARGETS = [
    TargetSpec("Target01", (100.0, 100.0, 100.0), motion=PeriodicStep((3.0, 3.0, 0.0), 7.0)),
    TargetSpec("Target02", (170.0, 120.0, 180.0), motion=PeriodicStep((3.0, 3.0, 0.0), 7.0)),
    TargetSpec("Target03", (70.0, 20.0, 80.0), motion=PeriodicStep((3.0, 3.0, 0.0), 7.0)),
]


class RadarApp:
    """A complete PPI display.

    Args:
        config: Radar configuration (validated here)
        grid: Decoded elevation grid
        clock: Monotonic clock for the scheduler
    """

    def __init__(
        self,
        config: RadarConfig,
        grid: ElevationGrid,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config.ensure_valid()
        self.world = WorldModel.from_config(config, grid)
        self.scheduler = FrameScheduler.from_config(config, clock=clock)
        self.pipeline = SweepRenderPipeline.from_config(config, self.world)
        self.overlay = IndicatorOverlay.from_config(config)
        self._backdrop: Optional[np.ndarray] = None
        self._started = False

    def seed_targets(self, specs: Sequence[TargetSpec] = DEFAULT_TARGETS) -> List[Entity]:
        """Add targets to the world; call before ``start()``."""
        return [
            self.world.add_target(
                spec.name,
                spec.position,
                visibility_weight=spec.visibility_weight,
                motion=spec.motion,
                radius=spec.radius,
            )
            for spec in specs
        ]

    def start(self) -> None:
        """Register the sweep, target motion and render tasks.

        Order matters: the sweep advances before the frame is rendered.
        """
        if self._started:
            raise RuntimeError("RadarApp already started")

        self.scheduler.register_continuous(SWEEP_TASK, self._advance_sweep)
        moving = self.world.schedule_motion(self.scheduler)
        self.pipeline.attach(self.scheduler, interval_s=self.config.render_interval_s)
        self._started = True
        logger.info(
            "Radar started: %d target(s), %d moving, tasks %s",
            len(self.world.targets), moving, self.scheduler.task_names
        )

    def _advance_sweep(self, elapsed_s: float) -> None:
        if elapsed_s > 0:
            self.world.sensor.advance(self.config.sweep_step_deg)

    # --- Driving ------------------------------------------------------------

    def on_frame(self, now: Optional[float] = None) -> bool:
        """Display refresh callback."""
        return self.scheduler.on_frame(now)

    def step(self, elapsed_s: Optional[float] = None) -> None:
        """Process one tick; defaults to one nominal tick period."""
        if elapsed_s is None:
            elapsed_s = self.scheduler.min_tick_s
        self.scheduler.advance(elapsed_s * max(self.scheduler.time_scale, 0.0))

    def set_speed(self, factor: float) -> None:
        self.scheduler.set_time_scale(factor)

    def pause(self) -> None:
        self.scheduler.set_time_scale(0.0)

    def resume(self, factor: float = 1.0) -> None:
        self.scheduler.set_time_scale(factor)

    def set_gain(self, gain: float) -> None:
        self.world.sensor.gain = gain

    # --- Display ------------------------------------------------------------

    def backdrop(self) -> np.ndarray:
        """Bezel over opaque black, premultiplied; rendered once."""
        if self._backdrop is None:
            bezel = premultiply(self.overlay.render())
            black = np.zeros_like(bezel)
            black[..., 3] = 1.0
            self._backdrop = alpha_over(bezel, black)
        return self._backdrop

    def display_image(self) -> np.ndarray:
        """Latest indicator frame layered over the bezel (opaque RGBA)."""
        frame = self.pipeline.latest
        if frame is None:
            frame = self.pipeline.render()
        return alpha_over(frame.rgba, self.backdrop())
