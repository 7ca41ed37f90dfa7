"""Command line entry point: load an ADC catalogue and run a cone query.

Example:
    zestarcat --readme cat/xhip.readme --data cat/xhip.dat.bz2 --center "10.68 41.27" --radius-deg 1
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Sequence

import astropy.units as u
from astropy.coordinates import SkyCoord

from zestarcat.adc_parser import ColumnDescriptor
from zestarcat.angles import Angle
from zestarcat.loader import load_catalog
from zestarcat.settings_store import load_persistent_settings

logger = logging.getLogger(__name__)


def parse_center(text: str) -> tuple[Angle, Angle]:
    """Parse "ra dec" in degrees or sexagesimal ("10h42m44s +41d16m09s")."""
    unit = (u.hourangle, u.deg) if any(ch in text for ch in "hm:") else (u.deg, u.deg)
    coord = SkyCoord(text, unit=unit, frame="icrs")
    return (
        Angle.from_degrees(float(coord.ra.deg)),
        Angle.from_degrees(float(coord.dec.deg)),
    )


def _format_columns(columns: Sequence[ColumnDescriptor]) -> str:
    lines = []
    for column in columns:
        lines.append(
            f"{column.begin_index:>5} {column.end_index:>5}  {column.format:<6} {column.unit:<7} "
            f"{column.name:<12} {column.description}"
        )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    settings = load_persistent_settings()
    parser = argparse.ArgumentParser(description="Index an ADC star catalogue by HEALPix pixel and query it.")
    parser.add_argument("--readme", default=settings.readme_path, help="ADC ReadMe (default: %(default)s)")
    parser.add_argument("--data", default=settings.data_path, help="Data file, optionally .gz/.bz2 (default: %(default)s)")
    parser.add_argument(
        "--block",
        type=int,
        default=settings.block_index,
        help="Byte-by-byte description block to use (default: %(default)s)",
    )
    parser.add_argument(
        "--resolution-arcmin",
        type=float,
        default=settings.resolution_arcmin,
        help="Maximum HEALPix pixel size (default: %(default)s)",
    )
    parser.add_argument("--columns", action="store_true", help="Print the parsed column layout and exit")
    parser.add_argument("--center", help='Cone center, e.g. "10.68 41.27" or "00h42m44s +41d16m09s"')
    parser.add_argument("--radius-deg", type=float, default=1.0, help="Cone radius in degrees (default: %(default)s)")
    parser.add_argument("--limit", type=int, default=20, help="Stars to print (default: %(default)s)")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while loading")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(levelname)s: %(message)s",
    )
    if args.resolution_arcmin <= 0:
        parser.error("--resolution-arcmin must be positive")

    settings = replace(
        load_persistent_settings(),
        readme_path=args.readme,
        data_path=args.data,
        block_index=args.block,
        resolution_arcmin=args.resolution_arcmin,
    )
    source = settings.catalog_source()
    try:
        if args.columns:
            print(_format_columns(source.columns()))
            return 0
        grid = settings.sky_grid()
        dao = load_catalog(source, grid=grid, atomic=settings.atomic_load, progress=args.progress)
        print(f"{len(dao)} stars in {dao.pixel_count} pixels (nside={grid.nside})")
        if args.center:
            ra, dec = parse_center(args.center)
            radius = Angle.from_degrees(args.radius_deg)
            stars = dao.query_cone(ra, dec, radius)
            print(f"{len(stars)} stars near {args.center} (radius {args.radius_deg} deg)")
            for star in stars[: max(0, args.limit)]:
                print(f"{star.ra_deg:11.6f} {star.dec_deg:+11.6f} {star.magnitude / 1000.0:7.3f} {star.pixel_id}")
        return 0
    except Exception as exc:
        logger.exception("Catalogue load failed: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
