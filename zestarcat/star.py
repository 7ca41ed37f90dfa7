from __future__ import annotations

from dataclasses import dataclass, field
import math

from .angles import Angle
from .sky import DEFAULT_GRID, SkyGrid, Vector, direction


@dataclass(frozen=True, slots=True)
class Star:
    """Star on the sky.

    ``pixel_id`` must be the pixel of ``position`` on ``grid``; construction
    fails otherwise. :meth:`create` derives it from ra/dec.
    """

    position: Vector
    magnitude: int  # milli-magnitude
    pixel_id: int
    grid: SkyGrid = field(default=DEFAULT_GRID, compare=False, repr=False)

    def __post_init__(self) -> None:
        expected = self.grid.vect2pix(self.position)
        if self.pixel_id != expected:
            raise ValueError(
                f"pixel id {self.pixel_id} does not match position {self.position} "
                f"(pixel {expected} at nside={self.grid.nside})"
            )

    @classmethod
    def create(cls, ra: Angle, dec: Angle, magnitude: int, grid: SkyGrid = DEFAULT_GRID) -> "Star":
        position = direction(ra, dec)
        return cls(position=position, magnitude=magnitude, pixel_id=grid.vect2pix(position), grid=grid)

    @property
    def ra_deg(self) -> float:
        x, y, _ = self.position
        return math.degrees(math.atan2(y, x)) % 360.0

    @property
    def dec_deg(self) -> float:
        z = min(1.0, max(-1.0, self.position[2]))
        return math.degrees(math.asin(z))
