from __future__ import annotations

import os
import types
from dataclasses import replace
from pathlib import Path

import pytest

from zestarcat.adc_parser import ParserError, UnitError, parse_adc_column_definition
from zestarcat.angles import Angle
from zestarcat.catalog_io import read_catalog_text
from zestarcat.loader import DEFAULT_MAGNITUDE, CatalogSource, iter_rows, iter_stars, load_catalog
from zestarcat.sky import DEFAULT_GRID, SkyGrid
from zestarcat.star import Star
from zestarcat.star_dao import StarDao

from conftest import MAIN_ROWS, data_row, write_catalog


@pytest.mark.parametrize("suffix", ["", ".gz", ".bz2"])
def test_load_plain_and_compressed(tmp_path, suffix):
    source = write_catalog(tmp_path, MAIN_ROWS, suffix=suffix)
    dao = load_catalog(source)
    assert len(dao) == len(MAIN_ROWS)
    first = Star.create(Angle.from_degrees("0.00091185"), Angle.from_degrees("1.08901332"), 9_100)
    assert dao.stars[0] == first
    assert first in dao.get_stars_by_area([(first.pixel_id, first.pixel_id)])


def test_blank_magnitude_uses_default(mini_catalog):
    stars = list(iter_stars(mini_catalog))
    assert [star.magnitude for star in stars] == [9_100, 9_270, 6_610, DEFAULT_MAGNITUDE, 12_500]
    custom = replace(mini_catalog, default_magnitude=20_000, mag_column=None)
    assert {star.magnitude for star in iter_stars(custom)} == {20_000}


def test_rows_are_lazy_and_single_pass(mini_catalog):
    rows = iter_rows(mini_catalog)
    assert isinstance(rows, types.GeneratorType)
    line_number, cells = next(rows)
    assert line_number == 1
    assert cells["HIP"].to_int() == 1
    assert cells["Comp"].value == ""
    assert cells["SpType"].value == "F3 V"
    assert [number for number, _ in rows] == [2, 3, 4, 5]
    assert list(rows) == []


def test_blank_lines_are_skipped(tmp_path):
    source = write_catalog(tmp_path, [MAIN_ROWS[0], "", "   ", MAIN_ROWS[1]])
    assert [number for number, _ in iter_rows(source)] == [1, 4]


def test_unknown_unit_aborts_load(tmp_path):
    source = write_catalog(tmp_path, MAIN_ROWS, ra_unit="furlong")
    with pytest.raises(UnitError) as excinfo:
        load_catalog(source)
    assert excinfo.value.column == "RAdeg"
    assert excinfo.value.line_number == 1
    assert "line 1" in str(excinfo.value)


def test_bad_value_reports_line_number(tmp_path):
    rows = [MAIN_ROWS[0], MAIN_ROWS[1], data_row(3, "", "x.y", "38.85928608", "6.61", "B9", "")]
    source = write_catalog(tmp_path, rows)
    with pytest.raises(ParserError, match="RAdeg") as excinfo:
        list(iter_stars(source))
    assert excinfo.value.line_number == 3


def test_atomic_load_leaves_index_untouched(tmp_path):
    rows = [MAIN_ROWS[0], MAIN_ROWS[1], data_row(3, "", "x.y", "38.85928608", "6.61", "B9", "")]
    source = write_catalog(tmp_path, rows)
    seed = Star.create(Angle(0), Angle.from_degrees(90), 0)

    dao = StarDao()
    dao.add_star(seed)
    with pytest.raises(ParserError):
        load_catalog(source, dao)
    assert dao.stars == (seed,)

    with pytest.raises(ParserError):
        load_catalog(source, dao, atomic=False)
    assert len(dao) == 3


def test_missing_position_column(mini_catalog):
    source = replace(mini_catalog, ra_column="RA_ICRS")
    with pytest.raises(ParserError, match="RA_ICRS"):
        list(iter_stars(source))


def test_second_block_selects_other_layout(mini_catalog):
    source = replace(mini_catalog, block_index=1, ra_column="Ref", dec_column="Text")
    assert [column.name for column in source.columns()] == ["Ref", "Text"]


def test_existing_index_is_extended(mini_catalog):
    dao = load_catalog(mini_catalog)
    assert load_catalog(mini_catalog, dao) is dao
    assert len(dao) == 2 * len(MAIN_ROWS)



def test_index_keeps_the_grid_it_was_built_on(mini_catalog):
    coarse = SkyGrid(64)
    dao = load_catalog(mini_catalog, grid=coarse)
    assert dao.grid == coarse
    assert all(star.grid == coarse for star in dao.stars)

    assert load_catalog(mini_catalog, dao) is dao
    found = dao.query_cone(Angle.from_degrees(180), Angle(0), Angle.from_degrees("0.5"))
    assert [star.magnitude for star in found] == [12_500, 12_500]

    with pytest.raises(ValueError, match="nside"):
        load_catalog(mini_catalog, dao, grid=DEFAULT_GRID)
    assert len(dao) == 2 * len(MAIN_ROWS)


XHIP_DIR = os.environ.get("ZESTARCAT_XHIP_DIR")


@pytest.mark.skipif(XHIP_DIR is None, reason="XHIP catalogue not configured")
def test_full_xhip_catalogue():
    root = Path(XHIP_DIR)
    readme = root / "xhip.readme"
    first = parse_adc_column_definition(read_catalog_text(readme))[0]
    assert (first.name, first.unit, first.format) == ("HIP", "---", "I6")
    assert first.description == "Hipparcos identifier"
    assert (first.begin_index, first.end_index) == (0, 6)

    source = CatalogSource(readme=readme, data=root / "xhip.dat.bz2")
    _, cells = next(iter_rows(source))
    assert cells["HIP"].to_int() == 1
    assert cells["Comp"].value == ""
    assert cells["SpType"].value == "F3 V"

    dao = load_catalog(source)
    assert len(dao) == 117955
