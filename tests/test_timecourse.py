"""Tests for time course tables."""

import io

import numpy as np
import pytest

from spline_rules.data.timecourse import (
    parse_separator,
    read_time_course,
    write_fitted,
)
from spline_rules.errors import TimeCourseFormatError

GOOD_CSV = """time,A,B
0,1.0,10
1,2.0,20
2,4.0,30
3,8.0,40
"""


class TestReadTimeCourse:
    """Tests for read_time_course()."""

    def test_read(self):
        table = read_time_course(io.StringIO(GOOD_CSV))

        assert table.header == ['time', 'A', 'B']
        assert table.time_name == 'time'
        assert table.names == ['A', 'B']
        assert table.n_rows == 4
        np.testing.assert_array_equal(table.times, [0, 1, 2, 3])
        np.testing.assert_array_equal(table.values[:, 1], [10, 20, 30, 40])

    def test_columns(self):
        table = read_time_course(io.StringIO(GOOD_CSV))
        columns = dict(table.columns())

        assert list(columns) == ['A', 'B']
        np.testing.assert_array_equal(columns['A'], [1, 2, 4, 8])

    def test_tab_separator(self):
        text = GOOD_CSV.replace(',', '\t')
        table = read_time_course(io.StringIO(text), separator='\t')

        assert table.names == ['A', 'B']

    def test_blank_lines_ignored(self):
        table = read_time_course(io.StringIO(GOOD_CSV + "\n\n"))
        assert table.n_rows == 4

    def test_too_few_rows(self):
        with pytest.raises(TimeCourseFormatError, match="at least 3 data rows"):
            read_time_course(io.StringIO("time,A\n0,1\n1,2\n"))

    def test_no_data_column(self):
        with pytest.raises(TimeCourseFormatError, match="at least one data column"):
            read_time_course(io.StringIO("time\n0\n1\n2\n"))

    def test_ragged_row(self):
        text = "time,A\n0,1\n1,2,3\n2,3\n"
        with pytest.raises(TimeCourseFormatError, match="Row 3 has 3 columns") as exc:
            read_time_course(io.StringIO(text))

        assert exc.value.row == 3

    def test_non_numeric(self):
        text = "time,A\n0,1\n1,abc\n2,3\n"
        with pytest.raises(TimeCourseFormatError, match="row 3, column 2") as exc:
            read_time_course(io.StringIO(text))

        assert exc.value.row == 3
        assert exc.value.column == 2
        assert "abc" in str(exc.value)

    def test_not_ascending(self):
        text = "time,A\n0,1\n2,2\n1,3\n"
        with pytest.raises(TimeCourseFormatError, match="ascending time") as exc:
            read_time_course(io.StringIO(text))

        assert exc.value.row == 4
        assert "row 4 (1.0)" in str(exc.value)


class TestSeparator:
    """Tests for parse_separator()."""

    def test_single_character(self):
        assert parse_separator(';') == ';'

    def test_tab(self):
        assert parse_separator('TAB') == '\t'
        assert parse_separator('tab') == '\t'

    def test_invalid(self):
        with pytest.raises(ValueError, match="single character"):
            parse_separator(';;')


class TestWriteFitted:
    """Tests for write_fitted()."""

    def test_write(self):
        out = io.StringIO()
        write_fitted(
            out, ['time', 'A'], np.array([0.0, 0.5]), [np.array([1.0, 1.5])]
        )

        assert out.getvalue() == "time,A\n0.0,1.0\n0.5,1.5\n"

    def test_full_precision(self):
        out = io.StringIO()
        write_fitted(out, ['t', 'x'], np.array([0.1]), [np.array([1 / 3])], separator=';')

        row = out.getvalue().splitlines()[1].split(';')
        assert float(row[1]) == 1 / 3

    def test_column_count_mismatch(self):
        with pytest.raises(ValueError):
            write_fitted(io.StringIO(), ['time', 'A', 'B'], np.array([0.0]), [np.array([1.0])])
