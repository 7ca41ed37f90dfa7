"""HEALPix sky partitioning used as the key of the star index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple
import logging
import math

import healpy as hp
import numpy as np

from .angles import Angle

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = Angle.from_arcminutes(20)
MAX_ORDER = 29

Vector = Tuple[float, float, float]
PixelRange = Tuple[int, int]


def direction(ra: Angle, dec: Angle) -> Vector:
    """Unit vector for right ascension (longitude) and declination (latitude)."""
    ra_rad = ra.to_radians()
    dec_rad = dec.to_radians()
    cos_dec = math.cos(dec_rad)
    return (cos_dec * math.cos(ra_rad), cos_dec * math.sin(ra_rad), math.sin(dec_rad))


def nside_for_resolution(resolution: Angle) -> int:
    """Coarsest power-of-two nside whose pixels are not larger than ``resolution``."""
    if resolution.micro_arcsec <= 0:
        raise ValueError(f"resolution must be positive, got {resolution!r}")
    target_arcmin = float(resolution.to_arcminutes())
    for order in range(MAX_ORDER + 1):
        nside = 1 << order
        if hp.nside2resol(nside, arcmin=True) <= target_arcmin:
            return nside
    return 1 << MAX_ORDER


def pixel_ranges(pixels: Iterable[int]) -> List[PixelRange]:
    """Collapse pixel ids into sorted, closed ``(first, last)`` runs."""
    values = np.unique(np.asarray(list(pixels), dtype=np.int64))
    if values.size == 0:
        return []
    breaks = np.flatnonzero(np.diff(values) != 1)
    starts = np.concatenate(([0], breaks + 1))
    ends = np.concatenate((breaks, [values.size - 1]))
    return [(int(values[s]), int(values[e])) for s, e in zip(starts, ends)]


@dataclass(frozen=True)
class SkyGrid:
    """NESTED HEALPix grid at a fixed resolution."""

    nside: int

    def __post_init__(self) -> None:
        if self.nside < 1 or self.nside & (self.nside - 1):
            raise ValueError(f"nside must be a power of two, got {self.nside}")

    @classmethod
    def for_resolution(cls, resolution: Angle = DEFAULT_RESOLUTION) -> "SkyGrid":
        grid = cls(nside_for_resolution(resolution))
        logger.debug("sky grid for %s: nside=%d", resolution, grid.nside)
        return grid

    @property
    def pixel_count(self) -> int:
        return int(hp.nside2npix(self.nside))

    def vect2pix(self, vector: Vector) -> int:
        x, y, z = vector
        return int(hp.vec2pix(self.nside, x, y, z, nest=True))

    def disc_ranges(self, ra: Angle, dec: Angle, radius: Angle) -> List[PixelRange]:
        """Pixel ranges of every pixel overlapping a cone around (ra, dec)."""
        vec = np.asarray(direction(ra, dec), dtype=np.float64)
        pixels = hp.query_disc(self.nside, vec, radius.to_radians(), inclusive=True, nest=True)
        ranges = pixel_ranges(pixels)
        logger.debug("cone radius %s covers %d pixel(s) in %d range(s)", radius, len(pixels), len(ranges))
        return ranges


DEFAULT_GRID = SkyGrid.for_resolution(DEFAULT_RESOLUTION)


__all__ = [
    "DEFAULT_GRID",
    "DEFAULT_RESOLUTION",
    "PixelRange",
    "SkyGrid",
    "direction",
    "nside_for_resolution",
    "pixel_ranges",
]
