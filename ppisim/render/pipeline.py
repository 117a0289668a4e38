"""
Sweep Render Pipeline

Two passes per indicator update, both fed from one frozen sensor snapshot:
1. Top-down capture of the world into the off-screen buffer
2. Composite of that buffer through the circular indicator mask
"""
import logging
from typing import Optional, Sequence

from ..interfaces import IndicatorFrame
from ..world.model import WorldModel
from .capture import TopDownCapture
from .composite import circular_mask, composite_indicator

logger = logging.getLogger(__name__)

ROTATION_TASK = "rotationPPI"
RENDER_TASK = "renderLoop"


class SweepRenderPipeline:
    """Capture + composite renderer for the PPI display.

    Args:
        world: World to render
        size_px: Indicator side in pixels (the capture buffer uses the same size)
        reveal_color: RGBA of a fully illuminated return
        resample: Terrain rasterisation, "bilinear" or "nearest"
        display_radius_px: Indicator radius; defaults to half the size
        rotation_step_deg: Cosmetic rotation advance per non-paused tick
        sweep_line_width_deg: Cosmetic sweep line trail (0 disables it)
        sweep_line_color: Straight RGBA of the sweep line
    """

    def __init__(
        self,
        world: WorldModel,
        size_px: int = 800,
        reveal_color: Sequence[float] = (1.0, 1.0, 0.0, 1.0),
        resample: str = "bilinear",
        display_radius_px: Optional[float] = None,
        rotation_step_deg: float = 1.0,
        sweep_line_width_deg: float = 0.0,
        sweep_line_color: Sequence[float] = (1.0, 1.0, 0.6, 0.5),
    ):
        self.world = world
        self.size_px = int(size_px)
        self.capture = TopDownCapture(world, self.size_px, reveal_color, resample)
        self.display_radius_px = self.size_px / 2 if display_radius_px is None else display_radius_px
        self.rotation_step_deg = rotation_step_deg
        self.sweep_line_width_deg = sweep_line_width_deg
        self.sweep_line_color = tuple(sweep_line_color)

        self.rotation_ppi = 0.0
        self.latest: Optional[IndicatorFrame] = None
        self.updates = 0
        self._mask = circular_mask(self.size_px, self.display_radius_px)

    @classmethod
    def from_config(cls, config, world: WorldModel) -> "SweepRenderPipeline":
        return cls(
            world,
            size_px=config.indicator_size_px,
            reveal_color=config.reveal_color,
            resample=config.terrain_resample,
            rotation_step_deg=config.sweep_step_deg,
            sweep_line_width_deg=config.sweep_line_width_deg,
            sweep_line_color=config.sweep_line_color,
        )

    def advance_rotation(self) -> float:
        """Step the cosmetic rotation, wrapping at 360 degrees."""
        self.rotation_ppi = (self.rotation_ppi + self.rotation_step_deg) % 360.0
        return self.rotation_ppi

    def render(self) -> IndicatorFrame:
        """Run both passes against one snapshot of the sensor state."""
        snapshot = self.world.snapshot()
        rotation = self.rotation_ppi

        capture = self.capture.render(snapshot)
        rgba = composite_indicator(
            capture,
            rotation_deg=rotation,
            sweep_line_width_deg=self.sweep_line_width_deg,
            sweep_line_color=self.sweep_line_color,
            mask=self._mask,
        )

        self.latest = IndicatorFrame(rgba=rgba, snapshot=snapshot, rotation_deg=rotation, capture=capture)
        self.updates += 1
        logger.debug(
            "Update %d: sweep %.1f deg, rotation %.1f deg",
            self.updates, snapshot.sweep_angle_deg, rotation
        )
        return self.latest

    def attach(self, scheduler, interval_s: Optional[float] = None) -> None:
        """Register the rotation and render tasks on a scheduler.

        The cosmetic rotation always advances once per non-paused tick;
        rendering runs on every accepted tick or on a fixed cadence.

        Args:
            scheduler: FrameScheduler to register with
            interval_s: None renders on every accepted tick; a positive
                interval renders on that fixed cadence instead
        """
        def rotate(elapsed_s: float) -> None:
            if elapsed_s > 0:
                self.advance_rotation()

        def render_every_tick(elapsed_s: float) -> None:
            self.render()

        scheduler.register_continuous(ROTATION_TASK, rotate)
        if interval_s is None:
            scheduler.register_continuous(RENDER_TASK, render_every_tick)
            logger.info("Render pipeline attached: every tick, %dpx", self.size_px)
        else:
            scheduler.register_fixed(RENDER_TASK, interval_s, self.render)
            logger.info("Render pipeline attached: every %.3fs, %dpx", interval_s, self.size_px)

    def detach(self, scheduler) -> None:
        for name in (ROTATION_TASK, RENDER_TASK):
            if name in scheduler:
                scheduler.unregister(name)
