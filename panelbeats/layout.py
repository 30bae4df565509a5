"""Panel layout graph and the geometry helpers the effects rely on."""

import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

import numpy as np

from panelbeats.errors import ConfigurationError

# Recommended layouts hold about 30 panels; 50 leaves headroom.
MAX_PANELS = 50


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Cartesian distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


@dataclass(frozen=True)
class Panel:
    """A single addressable panel and its centroid."""
    panel_id: int
    x: float
    y: float


@dataclass(frozen=True)
class Extents:
    """Axis-aligned bounding box of a layout."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x


@dataclass(frozen=True)
class LayoutGraph:
    """Read-only panel layout, already resolved from the physical topology.

    Panels keep the order they were given in; every frame lists panels in
    this order.
    """
    panels: tuple[Panel, ...]
    center: tuple[float, float]
    centroids: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        panels = tuple(self.panels)
        if not panels:
            raise ConfigurationError("Layout has no panels")
        if len(panels) > MAX_PANELS:
            raise ConfigurationError(
                f"Layout has {len(panels)} panels, at most {MAX_PANELS} are supported"
            )
        ids = [p.panel_id for p in panels]
        if len(set(ids)) != len(ids):
            raise ConfigurationError("Layout panel ids must be unique")

        centroids = np.array([(p.x, p.y) for p in panels], dtype=np.float64)
        centroids.setflags(write=False)
        object.__setattr__(self, "panels", panels)
        object.__setattr__(self, "center", (float(self.center[0]), float(self.center[1])))
        object.__setattr__(self, "centroids", centroids)

    @classmethod
    def from_points(cls, points: Iterable[tuple[int, float, float]],
                    center: Optional[tuple[float, float]] = None) -> "LayoutGraph":
        """Build a layout from ``(panel_id, x, y)`` tuples.

        When no center is given the mean of the centroids is used.
        """
        panels = tuple(Panel(int(pid), float(x), float(y)) for pid, x, y in points)
        if center is None and panels:
            center = (
                sum(p.x for p in panels) / len(panels),
                sum(p.y for p in panels) / len(panels),
            )
        return cls(panels=panels, center=center or (0.0, 0.0))

    def __len__(self) -> int:
        return len(self.panels)

    def __iter__(self) -> Iterator[Panel]:
        return iter(self.panels)

    @property
    def panel_ids(self) -> list[int]:
        return [p.panel_id for p in self.panels]

    def extents(self) -> Extents:
        """Bounding box of all centroids, seeded from the geometric center."""
        cx, cy = self.center
        xs = self.centroids[:, 0]
        ys = self.centroids[:, 1]
        return Extents(
            min_x=min(cx, float(xs.min())),
            max_x=max(cx, float(xs.max())),
            min_y=min(cy, float(ys.min())),
            max_y=max(cy, float(ys.max())),
        )

    def distance_from_center(self, x: float, y: float) -> float:
        return distance(self.center[0], self.center[1], x, y)

    def distances_to(self, x: float, y: float) -> np.ndarray:
        """Distance from every panel centroid to a point, in panel order."""
        return np.hypot(self.centroids[:, 0] - x, self.centroids[:, 1] - y)
