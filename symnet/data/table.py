"""Reader for single-byte symbol tables.

The first line of a table is a header and is discarded. Every following
line holds ``output_length`` symbols and then ``input_length`` symbols, each
one byte wide and separated by a one byte delimiter, so the ``k``-th symbol
of a record sits at byte offset ``2 * k``. Files are decoded as latin-1 so
each byte maps to exactly one character.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from ..core.types import Example
from ..errors import FileAccessFailure, InvalidParameter

ENCODING = "latin-1"


@dataclass(frozen=True)
class TableInfo:
    """Dimensions inferred from a table's header and body."""

    path: str
    input_length: int
    output_length: int
    record_count: int


def _read_lines(path: str | Path) -> List[str]:
    path = Path(path)
    try:
        text = path.read_bytes().decode(ENCODING)
    except OSError as exc:
        raise FileAccessFailure(f'could not open file "{path}"') from exc
    return text.split("\n")


def _records(lines: List[str]) -> List[Tuple[int, str]]:
    return [(lineno, line) for lineno, line in enumerate(lines[1:], start=2) if line.strip("\r")]


def inspect_table(path: str | Path, output_length: int = 1, delimiter: str = ",") -> TableInfo:
    """Infer the input width and record count of the table at ``path``."""

    if output_length < 1:
        raise InvalidParameter("length of final output vector must be greater than 0")
    lines = _read_lines(path)
    columns = lines[0].count(delimiter) + 1
    input_length = columns - output_length
    if input_length < 1:
        raise InvalidParameter("requested outputLen must allow for inputLen of at least 1")
    return TableInfo(
        path=str(path),
        input_length=input_length,
        output_length=output_length,
        record_count=len(_records(lines)),
    )


def read_table(path: str | Path, input_length: int, output_length: int) -> List[Example]:
    """Parse every record of ``path`` into an :class:`Example`."""

    width = 2 * (input_length + output_length) - 1
    examples: List[Example] = []
    for lineno, line in _records(_read_lines(path)):
        if len(line) < width:
            raise InvalidParameter(
                f"line {lineno} of {path} holds {len(line)} bytes, expected at least {width}"
            )
        outputs = tuple(line[2 * k] for k in range(output_length))
        inputs = tuple(line[2 * (output_length + k)] for k in range(input_length))
        examples.append(Example(inputs=inputs, outputs=outputs))
    return examples


__all__ = ["TableInfo", "inspect_table", "read_table"]
