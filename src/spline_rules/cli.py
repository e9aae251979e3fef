"""Command line tool: add time course data to a model as spline rules.

Usage:
    spline-rules --csv-in data.csv --model-out model.json
    spline-rules --csv-in data.csv --csv-out fitted.csv --kind akima
    cat data.csv | spline-rules --model-in base.json --model-out model.json

The first CSV column is time and the header row names the parameters. Each
data column becomes a parameter whose assignment rule is the piecewise
polynomial fitted to it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Sequence, TextIO

import numpy as np

from .data.timecourse import TimeCourse, parse_separator, read_time_course, write_fitted
from .errors import SplineRuleError
from .interpolation.polynomial import PolynomialInterpolator
from .interpolation.sampler import DEFAULT_INTERVALS, fitted_times
from .model.document import ModelDocument, add_time_course_parameter
from .splines.fitting import KINDS

logger = logging.getLogger(__name__)

PROGRAM_NAME = 'spline-rules'


@dataclass
class TimeCourseOptions:
    """Settings for turning a table into model parameters.

    Attributes:
        separator: CSV field separator.
        n_intervals: Fitted points per sample gap in the CSV output.
        kind: Interpolation kind passed to ``SplineFitter``.
    """
    separator: str = ','
    n_intervals: int = DEFAULT_INTERVALS
    kind: str = 'natural'


def process(
    reader: TextIO,
    document: ModelDocument,
    writer: TextIO | None = None,
    options: TimeCourseOptions | None = None,
) -> TimeCourse:
    """Read a table, add each column to the model and optionally write fits.

    Args:
        reader: CSV input.
        document: Model receiving one parameter per data column.
        writer: Destination for the fitted CSV, or None.
        options: Processing settings.

    Returns:
        The parsed input table.
    """
    options = options or TimeCourseOptions()
    table = read_time_course(reader, options.separator)

    grid = fitted_times(table.times, options.n_intervals) if writer is not None else None

    fitted_columns: list[np.ndarray] = []
    for name, values in table.columns():
        logger.info("Adding parameter %s (%d samples, %s fit)", name, table.n_rows, options.kind)
        interpolator = PolynomialInterpolator.of_kind(options.kind)
        fitted = add_time_course_parameter(
            document, name, table.times, values, interpolator, fitted_times=grid
        )
        if fitted is not None:
            fitted_columns.append(fitted)

    if writer is not None:
        write_fitted(writer, table.header, grid, fitted_columns, options.separator)

    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description='Add external time course data to a model as piecewise '
                    'polynomial assignment rules.',
    )
    parser.add_argument('--csv-in', metavar='FILE',
                        help='CSV time course data file (default: stdin)')
    parser.add_argument('--csv-out', metavar='FILE',
                        help='CSV file to write fitted data to')
    parser.add_argument('--model-in', metavar='FILE',
                        help='Input model file (default: empty model)')
    parser.add_argument('--model-out', metavar='FILE',
                        help='Output model file')
    parser.add_argument('--csv-separator', default=',', metavar='SEP',
                        help="Single character field separator, or TAB (default: ',')")
    parser.add_argument('--kind', choices=KINDS, default='natural',
                        help='Interpolation kind (default: natural cubic spline)')
    parser.add_argument('--intervals', type=int, default=DEFAULT_INTERVALS,
                        help='Fitted points per sample gap in the CSV output '
                             f'(default: {DEFAULT_INTERVALS})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Report progress')
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    if args.model_out is None and args.csv_out is None:
        parser.print_usage(sys.stderr)
        print("Error: one of --model-out or --csv-out is required", file=sys.stderr)
        return 1

    try:
        options = TimeCourseOptions(
            separator=parse_separator(args.csv_separator),
            n_intervals=args.intervals,
            kind=args.kind,
        )

        if args.model_in is not None:
            document = ModelDocument.load(args.model_in)
        else:
            document = ModelDocument(name='model')

        reader = open(args.csv_in, newline='') if args.csv_in else sys.stdin
        try:
            if args.csv_out is not None:
                with open(args.csv_out, 'w', newline='') as writer:
                    process(reader, document, writer, options)
            else:
                process(reader, document, None, options)
        finally:
            if reader is not sys.stdin:
                reader.close()

        if args.model_out is not None:
            document.save(args.model_out)
            logger.info("Wrote %d parameters to %s", len(document), args.model_out)

    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except (SplineRuleError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
