"""
World Model

Terrain, targets and the sensor in one coordinate space (x east, y north,
z up, map centred on the origin). Exposes the visibility evaluation used by
the capture pass.
"""
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..interfaces import ElevationGrid, SensorSnapshot, SweepReturns, TargetReturn
from ..terrain.surface import TerrainSurface
from .entities import Entity
from .sensor import SensorState
from .visibility import evaluate_returns

logger = logging.getLogger(__name__)


class WorldModel:
    """Terrain surface, moving targets and sensor state.

    Args:
        terrain: Terrain surface spanning the map
        sensor: Sweep sensor state
    """

    def __init__(self, terrain: TerrainSurface, sensor: SensorState):
        self.terrain = terrain
        self.sensor = sensor
        self._targets: Dict[str, Entity] = {}

        # Terrain geometry never changes, flatten it once
        self._terrain_points = terrain.points()
        self._terrain_normals = terrain.flat_normals()

    @classmethod
    def from_config(cls, config, grid: ElevationGrid) -> "WorldModel":
        """Build terrain and sensor from a validated RadarConfig.

        The grid must already be decoded, so acquisition failures surface
        before anything is scheduled.
        """
        config.ensure_valid()
        terrain = TerrainSurface.from_grid(grid, config.map_size_m)
        sensor = SensorState.from_config(config)
        logger.info(
            "World built: %dx%d terrain over %.0f units, %s",
            grid.width, grid.height, config.map_size_m, sensor
        )
        return cls(terrain, sensor)

    @property
    def map_size_m(self) -> float:
        return self.terrain.map_size_m

    # --- Targets ------------------------------------------------------------

    def add_target(
        self,
        name: str,
        position: Sequence[float],
        visibility_weight: float = 1.0,
        motion=None,
        radius: float = 3.0
    ) -> Entity:
        """Add a named point target."""
        if name in self._targets:
            raise ValueError(f"Target {name!r} already exists")
        entity = Entity(
            name=name,
            position=position,
            visibility_weight=visibility_weight,
            radius=radius,
            motion=motion,
        )
        self._targets[name] = entity
        logger.debug("Added target %s at %s (weight %.2f)", name, entity.xyz, entity.visibility_weight)
        return entity

    def target(self, name: str) -> Entity:
        return self._targets[name]

    @property
    def targets(self) -> List[Entity]:
        return list(self._targets.values())

    def schedule_motion(self, scheduler) -> int:
        """Register every target's motion rule; returns how many were registered."""
        count = 0
        for entity in self._targets.values():
            if entity.motion is not None:
                entity.motion.register(scheduler, entity)
                count += 1
        return count

    # --- Visibility ---------------------------------------------------------

    def snapshot(self) -> SensorSnapshot:
        return self.sensor.snapshot()

    def terrain_returns(self, snapshot: Optional[SensorSnapshot] = None) -> SweepReturns:
        """Visibility of every terrain sample, flattened row-major."""
        if snapshot is None:
            snapshot = self.snapshot()
        return evaluate_returns(self._terrain_points, snapshot, normals=self._terrain_normals)

    def target_returns(self, snapshot: Optional[SensorSnapshot] = None) -> List[TargetReturn]:
        """Visibility of every target, in insertion order."""
        if snapshot is None:
            snapshot = self.snapshot()
        entities = self.targets
        if not entities:
            return []

        positions = np.array([e.position for e in entities])
        weights = np.array([e.visibility_weight for e in entities])
        returns = evaluate_returns(positions, snapshot, weights=weights)

        return [
            TargetReturn(
                name=e.name,
                position=e.xyz,
                illumination=float(returns.illumination[i]),
                in_range=bool(returns.in_range[i]),
                detected=bool(returns.detected[i]),
            )
            for i, e in enumerate(entities)
        ]
