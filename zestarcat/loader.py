"""Import an ADC catalogue (ReadMe + data file) into a :class:`StarDao`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
import logging

from tqdm import tqdm

from .adc_parser import ColumnDescriptor, ParsedCell, ParserError, parse_adc_column_definition, parse_fixed_width
from .catalog_io import open_catalog, read_catalog_text
from .sky import DEFAULT_GRID, SkyGrid
from .star import Star
from .star_dao import StarDao

logger = logging.getLogger(__name__)

# Placeholder used for rows whose magnitude cell is blank
DEFAULT_MAGNITUDE = 1111


@dataclass(frozen=True)
class CatalogSource:
    """Where a catalogue lives and which of its columns carry positions."""

    readme: Path
    data: Path
    block_index: int = 0
    ra_column: str = "RAdeg"
    dec_column: str = "DEdeg"
    mag_column: Optional[str] = "Vmag"
    default_magnitude: int = DEFAULT_MAGNITUDE

    def columns(self) -> Tuple[ColumnDescriptor, ...]:
        columns = parse_adc_column_definition(read_catalog_text(self.readme), self.block_index)
        names = {column.name for column in columns}
        for required in (self.ra_column, self.dec_column):
            if required not in names:
                raise ParserError(f"column {required!r} not described in {self.readme}", column=required)
        logger.info("%s: %d column(s) in byte-by-byte block %d", self.readme, len(columns), self.block_index)
        return columns


def iter_rows(source: CatalogSource) -> Iterator[Tuple[int, Dict[str, ParsedCell]]]:
    """Yield ``(line_number, cells)`` for every non-blank data line, once."""
    columns = source.columns()
    with open_catalog(source.data) as handle:
        for line_number, raw in enumerate(handle, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            yield line_number, parse_fixed_width(line, columns)


def _row_to_star(cells: Dict[str, ParsedCell], source: CatalogSource, grid: SkyGrid) -> Star:
    ra = cells[source.ra_column].to_angle()
    dec = cells[source.dec_column].to_angle()
    magnitude = source.default_magnitude
    if source.mag_column:
        mag_cell = cells.get(source.mag_column)
        if mag_cell is not None and mag_cell.value:
            magnitude = mag_cell.to_milli_magnitude()
    return Star.create(ra, dec, magnitude, grid)


def iter_stars(source: CatalogSource, grid: SkyGrid = DEFAULT_GRID) -> Iterator[Star]:
    """Lazily convert data lines to stars; the first bad row aborts the iteration."""
    for line_number, cells in iter_rows(source):
        try:
            yield _row_to_star(cells, source, grid)
        except ParserError as exc:
            exc.line_number = line_number
            raise


def load_catalog(
    source: CatalogSource,
    dao: Optional[StarDao] = None,
    grid: Optional[SkyGrid] = None,
    *,
    atomic: bool = True,
    progress: bool = False,
) -> StarDao:
    """Parse ``source`` and add every star to ``dao`` (a new one by default).

    With ``atomic`` the whole catalogue is parsed before the first insert, so
    a malformed row leaves ``dao`` untouched. Stars are pixelized on the
    grid of ``dao``; a new index is built on ``grid`` (the default grid when
    omitted). Passing a ``grid`` that differs from ``dao.grid`` is an error.
    """
    if dao is None:
        dao = StarDao(DEFAULT_GRID if grid is None else grid)
    elif grid is not None and grid != dao.grid:
        raise ValueError(f"cannot load nside={grid.nside} stars into an nside={dao.grid.nside} index")
    grid = dao.grid
    before = len(dao)
    stars = tqdm(iter_stars(source, grid), desc="load", unit=" stars", disable=not progress, leave=False)
    if atomic:
        parsed: List[Star] = list(stars)
        dao.add_stars(parsed)
    else:
        dao.add_stars(stars)
    logger.info(
        "loaded %d star(s) from %s into %d pixel(s) (nside=%d)",
        len(dao) - before,
        source.data,
        dao.pixel_count,
        grid.nside,
    )
    return dao


__all__ = ["CatalogSource", "DEFAULT_MAGNITUDE", "iter_rows", "iter_stars", "load_catalog"]
