"""
Indicator Overlay

Static bezel drawn under the radar video: outer ring, bearing ticks with
outward-reading degree labels, concentric range rings and a centre cross.
Everything is a pure function of the display size, so the layer can be
rendered once and reused.
"""
import numpy as np
from dataclasses import dataclass
from typing import List, Tuple

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import Circle


@dataclass
class BearingTick:
    bearing_deg: float
    start: Tuple[float, float]   # inner end, screen pixels
    end: Tuple[float, float]     # outer end, screen pixels
    label: str
    label_rotation_deg: float    # clockwise screen rotation


@dataclass
class OverlayGeometry:
    """Screen-space bezel layout (pixels, origin top-left, y down)."""
    size_px: int
    centre: Tuple[float, float]
    outer_radius: float
    ticks: List[BearingTick]
    ring_radii: List[float]
    cross_half_length: float


def bearing_to_screen(bearing_deg: float, radius: float, centre: Tuple[float, float]) -> Tuple[float, float]:
    """Screen position at ``radius`` along a bearing (0 = up, clockwise)."""
    theta = np.radians(bearing_deg) - np.pi / 2
    return (
        float(radius * np.cos(theta) + centre[0]),
        float(radius * np.sin(theta) + centre[1]),
    )


class IndicatorOverlay:
    """PPI bezel artwork.

    Args:
        size_px: Side of the (square) indicator
        bearing_ticks: Number of evenly spaced bearing ticks
        range_rings: Number of concentric range ring divisions
        margin_px: Gap between the outer ring and the image edge
        color: Line and label colour
        font_size: Label font size in points
    """

    def __init__(
        self,
        size_px: int = 800,
        bearing_ticks: int = 36,
        range_rings: int = 10,
        margin_px: float = 18.0,
        color: str = "white",
        font_size: float = 9.0,
    ):
        self.size_px = size_px
        self.bearing_ticks = bearing_ticks
        self.range_rings = range_rings
        self.margin_px = margin_px
        self.color = color
        self.font_size = font_size

    @classmethod
    def from_config(cls, config) -> "IndicatorOverlay":
        return cls(
            size_px=config.indicator_size_px,
            bearing_ticks=config.bearing_ticks,
            range_rings=config.range_rings,
        )

    def geometry(self) -> OverlayGeometry:
        """Compute the bezel layout."""
        half = self.size_px / 2
        centre = (half, half)
        outer = half - self.margin_px
        inner = self.size_px / 20

        ticks = []
        for i in range(self.bearing_ticks):
            bearing = i * 360.0 / self.bearing_ticks
            ticks.append(BearingTick(
                bearing_deg=bearing,
                start=bearing_to_screen(bearing, inner, centre),
                end=bearing_to_screen(bearing, outer, centre),
                label=f"{bearing:g}",
                label_rotation_deg=bearing,
            ))

        ring_radii = [r * half / self.range_rings for r in range(1, self.range_rings)] if self.range_rings else []

        return OverlayGeometry(
            size_px=self.size_px,
            centre=centre,
            outer_radius=outer,
            ticks=ticks,
            ring_radii=ring_radii,
            cross_half_length=20.0,
        )

    def draw(self, ax) -> list:
        """Draw the bezel on a matplotlib Axes laid out in screen pixels.

        The axes limits are set to the indicator size with y pointing down.

        Returns:
            Artists added to the axes
        """
        geo = self.geometry()
        cx, cy = geo.centre
        artists = []

        ax.set_xlim(0, geo.size_px)
        ax.set_ylim(geo.size_px, 0)
        ax.set_aspect('equal')
        ax.set_axis_off()

        artists.append(ax.add_patch(Circle(geo.centre, geo.outer_radius, fill=False,
                                           edgecolor=self.color, linewidth=2.0)))

        for radius in geo.ring_radii:
            artists.append(ax.add_patch(Circle(geo.centre, radius, fill=False,
                                               edgecolor=self.color, linewidth=0.3)))

        for tick in geo.ticks:
            line, = ax.plot([tick.start[0], tick.end[0]], [tick.start[1], tick.end[1]],
                            color=self.color, linewidth=0.3)
            artists.append(line)
            # Matplotlib rotates counter-clockwise on screen
            artists.append(ax.text(tick.end[0], tick.end[1], tick.label,
                                   rotation=-tick.label_rotation_deg, rotation_mode='anchor',
                                   ha='center', va='bottom', color=self.color,
                                   fontsize=self.font_size))

        h = geo.cross_half_length
        for xs, ys in (([cx - h, cx + h], [cy, cy]), ([cx, cx], [cy - h, cy + h])):
            line, = ax.plot(xs, ys, color=self.color, linewidth=1.0)
            artists.append(line)

        return artists

    def render(self, dpi: int = 100) -> np.ndarray:
        """Rasterise the bezel once.

        Returns:
            Straight-alpha RGBA float array (size, size, 4), transparent
            background
        """
        fig = Figure(figsize=(self.size_px / dpi, self.size_px / dpi), dpi=dpi)
        fig.patch.set_alpha(0.0)
        canvas = FigureCanvasAgg(fig)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.patch.set_alpha(0.0)
        self.draw(ax)
        canvas.draw()

        rgba = np.asarray(canvas.buffer_rgba(), dtype=np.float32) / 255.0

        # Inch-based figure sizes can round a pixel short
        out = np.zeros((self.size_px, self.size_px, 4), dtype=np.float32)
        h = min(rgba.shape[0], self.size_px)
        w = min(rgba.shape[1], self.size_px)
        out[:h, :w] = rgba[:h, :w]
        return out
