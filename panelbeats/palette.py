"""Colour palette and the bin-index to colour mapping."""

from dataclasses import dataclass
from typing import Iterable, Iterator

from panelbeats.errors import ConfigurationError

RGB = tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)


def clamp_rgb(color: Iterable[int]) -> RGB:
    """Clamp a colour to 0-255 per channel."""
    channels = [max(0, min(255, int(c))) for c in color]
    if len(channels) != 3:
        raise ConfigurationError(f"Expected an RGB triple, got {len(channels)} channels")
    return channels[0], channels[1], channels[2]


@dataclass(frozen=True)
class Palette:
    """Ordered, non-empty sequence of RGB colours."""
    colors: tuple[RGB, ...]

    def __post_init__(self):
        colors = tuple(clamp_rgb(c) for c in self.colors)
        if not colors:
            raise ConfigurationError("Palette must contain at least one color")
        object.__setattr__(self, "colors", colors)

    @classmethod
    def from_list(cls, colors: Iterable[Iterable[int]]) -> "Palette":
        return cls(colors=tuple(tuple(c) for c in colors))

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> RGB:
        return self.colors[index]

    def __iter__(self) -> Iterator[RGB]:
        return iter(self.colors)


class PaletteColorMapper:
    """Maps a palette index, already reduced modulo the palette size, to its colour."""

    def __init__(self, palette: Palette):
        self._palette = palette

    @property
    def size(self) -> int:
        return len(self._palette)

    def color_for(self, index: int) -> RGB:
        return self._palette[index]
