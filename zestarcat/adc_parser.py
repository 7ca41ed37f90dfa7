"""Parsers for fixed-width catalogues in the ADC (CDS/VizieR) ReadMe convention.

Parsing happens in two stages. :func:`parse_adc_column_definition` reads the
"Byte-by-byte Description" table of a ReadMe once and yields the column
layout, then :func:`parse_fixed_width` slices every data line with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from .angles import Angle

logger = logging.getLogger(__name__)

BYTE_BY_BYTE_MARKER = "Byte-by-byte Description of file"
RULE_LINE = "-" * 80

# Byte layout of a line inside the column definition table
_BEGIN_SLICE = slice(0, 4)
_END_SLICE = slice(5, 9)
_FORMAT_SLICE = slice(9, 16)
_UNIT_SLICE = slice(16, 23)
_LABEL_SLICE = slice(23, 35)
_DESC_START = 35

_ANGLE_UNITS = {
    "deg": Angle.from_degrees,
    "mas": Angle.from_milliarcseconds,
}


class ParserError(ValueError):
    """Malformed catalogue metadata or data row."""

    def __init__(self, message: str, *, column: Optional[str] = None, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.column = column
        self.line_number = line_number

    def __str__(self) -> str:
        message = super().__str__()
        if self.line_number is not None:
            return f"line {self.line_number}: {message}"
        return message


class UnitError(ParserError):
    """Cell declares a unit the converter does not understand."""

    def __init__(self, unit: Optional[str], column: str, *, line_number: Optional[int] = None) -> None:
        super().__init__(f"Unknown unit {unit} in column {column}", column=column, line_number=line_number)
        self.unit = unit


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """One column of a fixed-width table.

    ``begin_index``/``end_index`` are 0-based, half-open offsets into a data
    line. ``end_index == -1`` means the column runs to the end of the line.
    """

    name: str
    unit: str
    format: str = ""
    description: str = ""
    begin_index: int = -1
    end_index: int = -1

    def extract(self, line: str) -> str:
        if self.begin_index >= len(line):
            return ""
        if self.end_index == -1 or self.end_index >= len(line):
            return line[self.begin_index:]
        return line[self.begin_index:self.end_index]


@dataclass(frozen=True, slots=True)
class ParsedCell:
    """Trimmed text of one column in one data row."""

    name: str
    value: str
    unit: Optional[str] = None

    def to_decimal(self) -> Decimal:
        try:
            value = Decimal(self.value)
        except InvalidOperation as exc:
            raise ParserError(
                f"Cannot parse {self.value!r} as a number in column {self.name}",
                column=self.name,
            ) from exc
        if not value.is_finite():
            raise ParserError(f"Non-finite value {self.value!r} in column {self.name}", column=self.name)
        return value

    def to_int(self) -> int:
        try:
            return int(self.value)
        except ValueError as exc:
            raise ParserError(
                f"Cannot parse {self.value!r} as an integer in column {self.name}",
                column=self.name,
            ) from exc

    def to_angle(self) -> Angle:
        convert = _ANGLE_UNITS.get(self.unit or "")
        if convert is None:
            raise UnitError(self.unit, self.name)
        return convert(self.to_decimal())

    def to_milli_magnitude(self) -> int:
        if self.unit != "mag":
            raise UnitError(self.unit, self.name)
        return int(self.to_decimal() * 1000)


def _split_rules(segment: str) -> List[List[str]]:
    """Split a description block into chunks delimited by whole 80-dash lines."""
    chunks: List[List[str]] = [[]]
    for line in segment.splitlines():
        if line.rstrip() == RULE_LINE:
            chunks.append([])
        else:
            chunks[-1].append(line)
    return chunks


def _parse_position(text: str, line: str) -> int:
    cleaned = text.replace(" ", "")
    if not cleaned:
        return -1
    try:
        return int(cleaned)
    except ValueError as exc:
        raise ParserError(f"Invalid byte position {text!r} in column definition {line!r}") from exc


def _parse_column_line(line: str) -> Tuple[int, int, str, str, str, str]:
    end_index = _parse_position(line[_END_SLICE], line)
    begin_index = _parse_position(line[_BEGIN_SLICE], line)
    if begin_index == -1 and end_index != -1:
        # single byte column, only the (1-based) end position is given
        begin_index = end_index - 1
    elif begin_index != -1:
        begin_index -= 1
    return (
        begin_index,
        end_index,
        line[_FORMAT_SLICE].strip(),
        line[_UNIT_SLICE].strip(),
        line[_LABEL_SLICE].strip(),
        line[_DESC_START:].strip(),
    )


def parse_adc_column_definition(readme_content: str, position: int = 0) -> Tuple[ColumnDescriptor, ...]:
    """Return the column layout of the ``position``-th byte-by-byte table in a ReadMe."""
    segments = readme_content.split(BYTE_BY_BYTE_MARKER)
    if position < 0 or position + 1 >= len(segments):
        raise ParserError(
            f"ReadMe has {len(segments) - 1} {BYTE_BY_BYTE_MARKER!r} block(s), block {position} requested"
        )
    chunks = _split_rules(segments[position + 1])
    if len(chunks) < 4:
        raise ParserError(f"Byte-by-byte block {position} is missing its dashed rule delimiters")

    rows: List[list] = []
    for line in chunks[2]:
        if not line.strip():
            continue
        begin, end, fmt, unit, name, desc = _parse_column_line(line)
        if begin == -1 and end == -1 and not name:
            # wrapped explanation text belongs to the previous column
            if rows:
                rows[-1][3] = f"{rows[-1][3]} {desc}".strip()
            continue
        rows.append([name, unit, fmt, desc, begin, end])

    columns = tuple(
        ColumnDescriptor(name=name, unit=unit, format=fmt, description=desc, begin_index=begin, end_index=end)
        for name, unit, fmt, desc, begin, end in rows
    )
    logger.debug("parsed %d column(s) from byte-by-byte block %d", len(columns), position)
    return columns


def parse_fixed_width(line: str, columns: Sequence[ColumnDescriptor]) -> Dict[str, ParsedCell]:
    """Slice one data line into trimmed cells keyed by column name."""
    cells: Dict[str, ParsedCell] = {}
    for column in columns:
        cells[column.name] = ParsedCell(column.name, column.extract(line).strip(), column.unit)
    return cells


__all__ = [
    "BYTE_BY_BYTE_MARKER",
    "ColumnDescriptor",
    "ParsedCell",
    "ParserError",
    "RULE_LINE",
    "UnitError",
    "parse_adc_column_definition",
    "parse_fixed_width",
]
