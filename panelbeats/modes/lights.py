"""Moving point lights for the diffusion effect."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from panelbeats.errors import BoundsViolation, ConfigurationError
from panelbeats.layout import LayoutGraph
from panelbeats.palette import BLACK, RGB, WHITE

logger = logging.getLogger(__name__)

TILE_DISTANCE = 86.6
MAX_SOURCES = 2


@dataclass
class LightSource:
    """A point light with linear motion and a falloff radius."""
    x: float
    y: float
    dirx: float = 0.0
    diry: float = 0.0
    speed: float = 0.0
    radius: float = 0.0
    color: RGB = BLACK

    def advance(self) -> None:
        self.x += self.dirx * self.speed
        self.y += self.diry * self.speed


class LightSourceField:
    """Ordered set of lights: slot 0 is the ambient light, the rest are transient.

    Transient lights are born on onsets at the top or bottom edge of the
    layout, travel vertically and die once they are far enough from the
    center. When the field is full the oldest transient light makes room.
    """

    def __init__(self, layout: LayoutGraph,
                 tile_distance: float = TILE_DISTANCE,
                 max_sources: int = MAX_SOURCES,
                 despawn_tiles: float = 10.0,
                 speed_tiles: float = 2.0,
                 falloff_radius: float = 1.0,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            layout: Panel layout the lights move across
            tile_distance: Distance between adjacent panel centroids
            max_sources: Capacity including the ambient light
            despawn_tiles: Distance from center, in tiles, past which lights die
            speed_tiles: Distance travelled per propagation step, in tiles
            falloff_radius: Radius, in tiles, of full brightness around a light
            rng: Random generator for spawn edge and X position
        """
        if max_sources < 2:
            raise ConfigurationError("Light field needs room for the ambient light and one more")
        if tile_distance <= 0:
            raise ConfigurationError("tile_distance must be positive")
        if min(despawn_tiles, speed_tiles, falloff_radius) < 0:
            raise ConfigurationError("Light field distances must be >= 0")
        self._layout = layout
        self._tile_distance = tile_distance
        self._max_sources = max_sources
        self._despawn_distance = despawn_tiles * tile_distance
        self._speed = speed_tiles * tile_distance
        self._falloff_radius = falloff_radius
        self._rng = rng if rng is not None else np.random.default_rng()
        self._extents = layout.extents()

        cx, cy = layout.center
        self._sources: list[LightSource] = [LightSource(x=cx, y=cy)]

    @property
    def tile_distance(self) -> float:
        return self._tile_distance

    @property
    def max_sources(self) -> int:
        return self._max_sources

    @property
    def sources(self) -> list[LightSource]:
        return self._sources

    @property
    def ambient(self) -> LightSource:
        return self._sources[0]

    @property
    def transients(self) -> list[LightSource]:
        """Transient lights in creation order."""
        return self._sources[1:]

    def __len__(self) -> int:
        return len(self._sources)

    def remove(self, index: int) -> None:
        """Remove a transient light, shifting later ones down."""
        if index < 1 or index >= len(self._sources):
            raise BoundsViolation(f"Cannot remove light slot {index} of {len(self._sources)}")
        del self._sources[index]

    def spawn(self) -> LightSource:
        """Create a white light on the top or bottom edge, evicting the oldest if full."""
        if len(self._sources) >= self._max_sources:
            self.remove(1)
            logger.debug("Evicted oldest light to make room")

        ext = self._extents
        if self._rng.random() >= 0.5:
            y, diry = ext.min_y, 1.0
        else:
            y, diry = ext.max_y, -1.0

        low, high = int(ext.min_x), int(ext.max_x)
        x = float(self._rng.integers(low, high)) if high > low else float(low)

        light = LightSource(
            x=x,
            y=y,
            dirx=0.0,
            diry=diry,
            speed=self._speed,
            radius=self._falloff_radius,
            color=WHITE,
        )
        self._sources.append(light)
        if len(self._sources) > self._max_sources:
            raise BoundsViolation(f"Light field holds {len(self._sources)} of {self._max_sources} sources")
        logger.debug(f"Spawned light at ({light.x:.1f}, {light.y:.1f}) heading {'up' if diry > 0 else 'down'}")
        return light

    def propagate(self) -> None:
        """Move every transient light one step and drop those that left the layout."""
        i = 1
        while i < len(self._sources):
            light = self._sources[i]
            light.advance()
            if self._layout.distance_from_center(light.x, light.y) > self._despawn_distance:
                self.remove(i)
                logger.debug(f"Light left the layout at ({light.x:.1f}, {light.y:.1f})")
                continue
            i += 1

    def recolor(self, color: RGB) -> None:
        """Set the ambient light colour; its position never changes."""
        self._sources[0].color = color
