"""In-memory star index keyed by HEALPix pixel id."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np

from .angles import Angle
from .sky import DEFAULT_GRID, SkyGrid
from .star import Star

logger = logging.getLogger(__name__)

STAR_DTYPE = np.dtype(
    [
        ("x", "<f8"),
        ("y", "<f8"),
        ("z", "<f8"),
        ("mag", "<i4"),
        ("pixel", "<i8"),
    ]
)


class StarDao:
    """Stars grouped by pixel id, queried with sorted pixel ranges.

    Every key is a pixel of ``grid``; stars pixelized on another grid are
    rejected. Not synchronised: load it from one thread, then treat it as
    read-only.
    """

    def __init__(self, grid: SkyGrid = DEFAULT_GRID) -> None:
        self._grid = grid
        self._stars: List[Star] = []
        self._area_index: Dict[int, List[Star]] = {}
        self._sorted_keys: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self._stars)

    @property
    def stars(self) -> Sequence[Star]:
        return tuple(self._stars)

    @property
    def grid(self) -> SkyGrid:
        return self._grid

    @property
    def pixel_count(self) -> int:
        return len(self._area_index)

    def add_star(self, star: Star) -> None:
        if star.grid != self._grid:
            raise ValueError(f"star pixelized at nside={star.grid.nside}, index uses nside={self._grid.nside}")
        self._stars.append(star)
        sublist = self._area_index.get(star.pixel_id)
        if sublist is None:
            self._area_index[star.pixel_id] = [star]
            self._sorted_keys = None
        else:
            sublist.append(star)

    def add_stars(self, stars: Iterable[Star]) -> int:
        added = 0
        for star in stars:
            self.add_star(star)
            added += 1
        return added

    def _keys(self) -> np.ndarray:
        keys = self._sorted_keys
        if keys is None:
            keys = np.fromiter(self._area_index.keys(), dtype=np.int64, count=len(self._area_index))
            keys.sort()
            self._sorted_keys = keys
        return keys

    def get_stars_by_area(self, ranges: Iterable[Tuple[int, int]]) -> List[Star]:
        """Stars whose pixel falls in any closed ``(first, last)`` range.

        Every range is scanned on its own: a pixel covered by two overlapping
        ranges contributes its stars twice.
        """
        keys = self._keys()
        result: List[Star] = []
        for first, last in ranges:
            if first > last:
                raise ValueError(f"invalid pixel range [{first}, {last}]")
            lo = int(np.searchsorted(keys, first, side="left"))
            hi = int(np.searchsorted(keys, last, side="right"))
            for key in keys[lo:hi]:
                result.extend(self._area_index[int(key)])
        return result

    def query_cone(self, ra: Angle, dec: Angle, radius: Angle) -> List[Star]:
        """Stars in the pixels overlapping a cone; may include stars just outside it."""
        ranges = self._grid.disc_ranges(ra, dec, radius)
        stars = self.get_stars_by_area(ranges)
        logger.debug("cone query returned %d star(s) from %d range(s)", len(stars), len(ranges))
        return stars

    def to_array(self) -> np.ndarray:
        out = np.zeros(len(self._stars), dtype=STAR_DTYPE)
        if not self._stars:
            return out
        positions = np.array([star.position for star in self._stars], dtype=np.float64)
        out["x"] = positions[:, 0]
        out["y"] = positions[:, 1]
        out["z"] = positions[:, 2]
        out["mag"] = [star.magnitude for star in self._stars]
        out["pixel"] = [star.pixel_id for star in self._stars]
        return out


__all__ = ["STAR_DTYPE", "StarDao"]
