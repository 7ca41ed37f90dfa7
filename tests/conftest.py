from __future__ import annotations

import bz2
import gzip
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from zestarcat.loader import CatalogSource

RULE = "-" * 80


def adc_column(begin, end, fmt: str, unit: str, label: str, desc: str) -> str:
    """One line of a byte-by-byte table in the CDS column layout."""
    dash = "-" if begin != "" else " "
    return f"{begin:>4}{dash}{end:>4}  {fmt:<5}{unit:<7} {label:<10} {desc}"


def build_readme(ra_unit: str = "deg") -> str:
    main_columns = [
        adc_column(1, 6, "I6", "---", "HIP", "Hipparcos identifier"),
        adc_column("", 8, "A1", "---", "Comp", "[A-D] Component flag"),
        adc_column(10, 21, "F12.8", ra_unit, "RAdeg", "Right ascension (ICRS, Ep=J2000)"),
        adc_column(23, 34, "F12.8", "deg", "DEdeg", "Declination (ICRS, Ep=J2000)"),
        adc_column(36, 41, "F6.3", "mag", "Vmag", "? Johnson V magnitude"),
        adc_column(43, 54, "A12", "---", "SpType", "Spectral type - MK class / notes"),
        " " * 35 + "(see Note 1)",
        adc_column(56, 61, "F6.2", "mas", "e_RAdeg", "? Formal error on RAdeg"),
    ]
    ref_columns = [
        adc_column(1, 4, "I4", "---", "Ref", "Reference number"),
        adc_column(6, 60, "A55", "---", "Text", "Reference text"),
    ]
    parts = [
        "V/999       Extended Hipparcos test extract          (Test, 2012)",
        "",
        "Byte-by-byte Description of file: main.dat",
        RULE,
        "   Bytes Format Units   Label     Explanations",
        RULE,
        *main_columns,
        RULE,
        "Note (1): spectral types -- as given / not re-classified.",
        "",
        "Byte-by-byte Description of file: refs.dat",
        RULE,
        "   Bytes Format Units   Label     Explanations",
        RULE,
        *ref_columns,
        RULE,
        "",
        "=" * 80,
    ]
    return "\n".join(parts) + "\n"


def data_row(hip, comp, ra, de, vmag, sptype, e_ra) -> str:
    return f"{hip:>6} {comp:1} {ra:>12} {de:>12} {vmag:>6} {sptype:<12} {e_ra:>6}".rstrip()


MAIN_ROWS = [
    data_row(1, "", "0.00091185", "1.08901332", "9.10", "F3 V", "1.29"),
    data_row(2, "A", "0.00379737", "-19.49883745", "9.27", "K3V", "0.95"),
    data_row(3, "", "0.00500795", "38.85928608", "6.61", "B9", ""),
    data_row(4, "", "0.00838170", "-51.89354612", "", "", ""),
    data_row(5, "", "180.00000000", "0.00000000", "12.50", "M0", "2.00"),
]


def write_catalog(directory: Path, rows, *, suffix: str = "", ra_unit: str = "deg") -> CatalogSource:
    readme = directory / "ReadMe"
    readme.write_text(build_readme(ra_unit), encoding="latin-1")
    payload = "\n".join(rows) + "\n"
    data = directory / f"main.dat{suffix}"
    if suffix == ".gz":
        with gzip.open(data, "wt", encoding="latin-1") as handle:
            handle.write(payload)
    elif suffix == ".bz2":
        with bz2.open(data, "wt", encoding="latin-1") as handle:
            handle.write(payload)
    else:
        data.write_text(payload, encoding="latin-1")
    return CatalogSource(readme=readme, data=data)


@pytest.fixture
def readme_text() -> str:
    return build_readme()


@pytest.fixture
def mini_catalog(tmp_path) -> CatalogSource:
    return write_catalog(tmp_path, MAIN_ROWS)
