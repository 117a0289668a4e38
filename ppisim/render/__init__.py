"""Two-pass sweep rendering and indicator artwork."""
from .capture import TopDownCapture, pixel_centers, world_to_pixel
from .composite import (
    circular_mask,
    sweep_line_mask,
    composite_indicator,
    premultiply,
    alpha_over,
)
from .pipeline import SweepRenderPipeline
from .overlay import IndicatorOverlay, OverlayGeometry, BearingTick

__all__ = [
    'TopDownCapture',
    'pixel_centers',
    'world_to_pixel',
    'circular_mask',
    'sweep_line_mask',
    'composite_indicator',
    'premultiply',
    'alpha_over',
    'SweepRenderPipeline',
    'IndicatorOverlay',
    'OverlayGeometry',
    'BearingTick',
]
