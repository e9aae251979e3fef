"""Delimited-text time course tables.

A table has a header row followed by data rows. Column 1 holds time, every
other column holds one measured quantity. Row and column numbers in error
messages are 1-based and count the header row, so they match what a user
sees in a spreadsheet.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import Iterator, Sequence, TextIO

import numpy as np

from ..errors import TimeCourseFormatError

MIN_DATA_ROWS = 3


def parse_separator(text: str) -> str:
    """Turn a user-supplied separator into a single character.

    ``TAB`` (any case) means a tab character.
    """
    if text.upper() == 'TAB':
        return '\t'
    if len(text) != 1:
        raise ValueError("CSV separator must be a single character (or TAB)")
    return text


@dataclass
class TimeCourse:
    """Validated tabular time course data.

    Attributes:
        header: Column names, time column first.
        times: Strictly ascending times, shape (n_rows,).
        values: Data values, shape (n_rows, n_columns).
    """
    header: list[str]
    times: np.ndarray
    values: np.ndarray

    @property
    def time_name(self) -> str:
        return self.header[0]

    @property
    def names(self) -> list[str]:
        """Names of the data columns."""
        return self.header[1:]

    @property
    def n_rows(self) -> int:
        return len(self.times)

    def columns(self) -> Iterator[tuple[str, np.ndarray]]:
        """Yield ``(name, values)`` for each data column."""
        for j, name in enumerate(self.names):
            yield name, self.values[:, j]

    def __repr__(self) -> str:
        return f"TimeCourse(columns={self.names}, n_rows={self.n_rows})"


def read_time_course(stream: TextIO, separator: str = ',') -> TimeCourse:
    """Read and validate a time course table.

    Args:
        stream: Text stream positioned at the header row.
        separator: Field separator character.

    Returns:
        The parsed table.

    Raises:
        TimeCourseFormatError: If the table is too small, ragged,
            non-numeric or not sorted by ascending time.
    """
    rows = [row for row in csv.reader(stream, delimiter=separator) if row]

    if len(rows) < MIN_DATA_ROWS + 1:
        raise TimeCourseFormatError(
            f"Input CSV data must have header row and at least {MIN_DATA_ROWS} data rows"
        )

    header = [name.strip() for name in rows[0]]
    n_columns = len(header)
    if n_columns < 2:
        raise TimeCourseFormatError(
            "Input CSV data must have time column and at least one data column"
        )

    data = np.empty((len(rows) - 1, n_columns))
    for r, row in enumerate(rows[1:], start=1):
        if len(row) != n_columns:
            raise TimeCourseFormatError(
                f"Input CSV data must have same number of columns in each row. "
                f"Row {r + 1} has {len(row)} columns, expected it to have {n_columns}",
                row=r + 1,
            )
        for c, cell in enumerate(row):
            data[r - 1, c] = _parse_cell(cell, r, c)

        if r > 1 and data[r - 1, 0] <= data[r - 2, 0]:
            raise TimeCourseFormatError(
                f"Input CSV data must be sorted with ascending time. The time in "
                f"row {r + 1} ({data[r - 1, 0]}) is not after the time in row {r} "
                f"({data[r - 2, 0]})",
                row=r + 1,
                column=1,
            )

    return TimeCourse(header=header, times=data[:, 0].copy(), values=data[:, 1:].copy())


def _parse_cell(cell: str, row_index: int, col_index: int) -> float:
    try:
        return float(cell)
    except ValueError:
        raise TimeCourseFormatError(
            f"Input CSV data in row {row_index + 1}, column {col_index + 1} "
            f"is not a numerical value: {cell}",
            row=row_index + 1,
            column=col_index + 1,
        ) from None


def write_fitted(
    stream: TextIO,
    header: Sequence[str],
    times: np.ndarray,
    columns: Sequence[np.ndarray],
    separator: str = ',',
) -> None:
    """Write fitted values as a table with the input's header.

    Args:
        stream: Destination text stream.
        header: Column names, time column first.
        times: Times of the fitted rows, shape (m,).
        columns: One array of shape (m,) per data column.
        separator: Field separator character.
    """
    if len(columns) != len(header) - 1:
        raise ValueError(
            f"Header names {len(header) - 1} data columns but {len(columns)} were given"
        )

    writer = csv.writer(stream, delimiter=separator, lineterminator='\n')
    writer.writerow(header)
    for i, t in enumerate(times):
        writer.writerow([repr(float(t))] + [repr(float(col[i])) for col in columns])
