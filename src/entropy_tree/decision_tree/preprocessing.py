"""Preprocessing: sample coercion, schema validation, dataset loading, and train/test splitting."""

from __future__ import annotations

import io
import math
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

import numpy as np
import polars as pl
from loguru import logger
from polars.exceptions import ComputeError

from entropy_tree.decision_tree.models import Sample
from entropy_tree.exceptions import DuplicateColumnsError, EmptyInputError, SchemaMismatchError

type SampleLike = Sample | Sequence[str]

_MIN_SAMPLE_WIDTH: int = 2  # At least one attribute column besides the label.


class LoadedDataset(NamedTuple):
    """A parsed table: column names and one sample per data row.

    Attributes:
        attributes (list[str]): Header names, label column included.
        samples (list[Sample]): Data rows in file order.
    """

    attributes: list[str]
    samples: list[Sample]


class TrainTestSplit(NamedTuple):
    """Two disjoint sample collections drawn from one dataset.

    Attributes:
        training (list[Sample]): Samples for building the tree, in selection order.
        test (list[Sample]): Remaining samples, in their original order.
    """

    training: list[Sample]
    test: list[Sample]


# ---------------------------------------------------------------------------
# Public interface -- Coercion and validation
# ---------------------------------------------------------------------------


def as_sample(row: SampleLike) -> Sample:
    """Return `row` as a `Sample`, wrapping plain string sequences.

    Args:
        row (SampleLike): A `Sample` or a sequence of string fields.

    Returns:
        Sample: The row as a `Sample`; existing instances are returned as-is.

    Raises:
        EmptyInputError: If `row` has no fields at all.
    """
    if isinstance(row, Sample):
        return row
    fields = tuple(row)
    if not fields:
        raise EmptyInputError("Sample has no fields", sample_count=1, column_count=0)
    return Sample(fields=fields)


def coerce_samples(rows: Sequence[SampleLike]) -> tuple[Sample, ...]:
    """Convert rows to an immutable tuple of `Sample`s.

    The caller's collection is only read, never modified.

    Args:
        rows (Sequence[SampleLike]): Samples or sequences of string fields.

    Returns:
        tuple[Sample, ...]: The rows as samples, in input order.
    """
    return tuple(as_sample(row) for row in rows)


def validate_training_inputs(samples: Sequence[Sample], attributes: Sequence[str]) -> None:
    """Check that samples and attributes describe one rectangular, non-trivial table.

    Args:
        samples (Sequence[Sample]): Training samples.
        attributes (Sequence[str]): Attribute names; either one per attribute
            column (`width - 1`) or one per column including the label (`width`).

    Raises:
        EmptyInputError: If `samples` is empty or the samples have fewer than
            two columns.
        SchemaMismatchError: If sample widths differ or `attributes` has the
            wrong length.
    """
    if not samples:
        raise EmptyInputError("Cannot build a tree from zero samples", sample_count=0)

    width = samples[0].width
    for position, sample in enumerate(samples):
        if sample.width != width:
            raise SchemaMismatchError(
                f"Sample {position} has {sample.width} fields, expected {width}",
                expected=width,
                actual=sample.width,
                position=position,
            )

    if width < _MIN_SAMPLE_WIDTH:
        raise EmptyInputError(
            "Samples need at least one attribute column besides the label",
            sample_count=len(samples),
            column_count=width,
        )

    if len(attributes) not in {width - 1, width}:
        raise SchemaMismatchError(
            f"Expected {width - 1} or {width} attribute names for samples of width {width}, got {len(attributes)}",
            expected=width,
            actual=len(attributes),
        )


def is_pure(samples: Sequence[Sample]) -> bool:
    """Return `True` when every sample carries the same label.

    Args:
        samples (Sequence[Sample]): Non-empty samples.

    Returns:
        bool: Whether all labels equal the first sample's label.
    """
    first_label = samples[0].label
    return all(sample.label == first_label for sample in samples)


def majority_label(samples: Sequence[Sample]) -> str:
    """Return the most frequent label, breaking ties by sorted label order.

    Args:
        samples (Sequence[Sample]): Non-empty samples.

    Returns:
        str: The most frequent label.
    """
    labels, counts = np.unique([sample.label for sample in samples], return_counts=True)
    return str(labels[int(np.argmax(counts))])


# ---------------------------------------------------------------------------
# Public interface -- Loading
# ---------------------------------------------------------------------------


def parse_samples(text: str) -> LoadedDataset:
    """Parse a comma-delimited table whose first line is the header.

    Every column is read as a string; numeric parsing happens later, on
    demand, when a field is compared against a threshold.

    Args:
        text (str): The table contents.

    Returns:
        LoadedDataset: The header names and one sample per non-blank row.

    Raises:
        EmptyInputError: If the table has no data rows.
        DuplicateColumnsError: If a header name repeats.
        SchemaMismatchError: If a data row has more or fewer fields than the header.

    Examples:
        >>> dataset = parse_samples("x,y,label\\n1,2,A\\n5,6,B\\n")
        >>> dataset.attributes
        ['x', 'y', 'label']
        >>> dataset.samples[1].fields
        ('5', '6', 'B')
    """
    return _dataset_from_frame(_read_string_table(io.BytesIO(text.encode("utf-8"))))


def load_samples(path: str | Path) -> LoadedDataset:
    """Load a comma-delimited table from disk.

    Args:
        path (str | Path): Location of the file.

    Returns:
        LoadedDataset: The header names and one sample per non-blank row.

    Raises:
        EmptyInputError: If the file has no data rows.
        DuplicateColumnsError: If a header name repeats.
        SchemaMismatchError: If a data row has more or fewer fields than the header.
    """
    dataset = _dataset_from_frame(_read_string_table(Path(path)))
    logger.debug(
        "Samples loaded",
        path=str(path),
        sample_count=len(dataset.samples),
        column_count=len(dataset.attributes),
    )
    return dataset


# ---------------------------------------------------------------------------
# Public interface -- Train/test split
# ---------------------------------------------------------------------------


def train_test_split(
    samples: Sequence[SampleLike],
    proportion: float,
    rng: np.random.Generator | int | None = None,
) -> TrainTestSplit:
    """Randomly divide samples into a training and a test set.

    `round(proportion * len(samples))` samples (halves rounded up) are drawn
    without replacement into the training set, in the order they were drawn.
    The test set keeps the remaining samples in their original order. The
    input collection is not modified.

    Args:
        samples (Sequence[SampleLike]): The full dataset.
        proportion (float): Training fraction in `[0, 1]`.
        rng (np.random.Generator | int | None): Random source, or a seed for
            `np.random.default_rng`. `None` means non-deterministic.

    Returns:
        TrainTestSplit: The disjoint training and test sets.

    Raises:
        ValueError: If `proportion` is outside `[0, 1]`.
    """
    if not 0.0 <= proportion <= 1.0:
        raise ValueError(f"proportion must be between 0 and 1, got {proportion}")

    pool = coerce_samples(samples)
    training_size = math.floor(proportion * len(pool) + 0.5)
    generator = np.random.default_rng(rng)
    chosen = [int(position) for position in generator.permutation(len(pool))[:training_size]]
    chosen_set = set(chosen)

    training = [pool[position] for position in chosen]
    test = [sample for position, sample in enumerate(pool) if position not in chosen_set]
    return TrainTestSplit(training=training, test=test)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _read_string_table(source: Path | io.BytesIO) -> pl.DataFrame:
    """Read a CSV source as raw string rows, header line included, blank rows dropped.

    The header stays in row 0 so its names survive unchanged; polars would
    otherwise rename repeated names.

    Args:
        source (Path | io.BytesIO): File path or in-memory bytes.

    Returns:
        pl.DataFrame: The table, all columns `pl.String`.

    Raises:
        SchemaMismatchError: If a row has more fields than the header.
    """
    try:
        df = pl.read_csv(
            source,
            has_header=False,
            infer_schema=False,
            raise_if_empty=False,
            truncate_ragged_lines=False,
        )
    except ComputeError as error:
        if "more fields" not in str(error):
            raise
        header_width = _header_width(source)
        raise SchemaMismatchError(
            f"A data row has more than the {header_width} fields named in the header",
            expected=header_width,
            actual=None,
        ) from error
    if df.width == 0:
        return df
    return df.filter(~pl.all_horizontal(pl.all().is_null()))


def _header_width(source: Path | io.BytesIO) -> int:
    """Count the fields on the first line of `source`.

    Args:
        source (Path | io.BytesIO): File path or in-memory bytes.

    Returns:
        int: Number of header fields.
    """
    if isinstance(source, io.BytesIO):
        source.seek(0)
    return pl.read_csv(source, has_header=False, infer_schema=False, n_rows=1).width


def _dataset_from_frame(df: pl.DataFrame) -> LoadedDataset:
    """Split a raw string table into header names and samples.

    Polars pads a short row with nulls, so a row whose last field is null is
    reported as short. An empty label is therefore rejected the same way.

    Args:
        df (pl.DataFrame): Table read by `_read_string_table`.

    Returns:
        LoadedDataset: Header names and samples.

    Raises:
        EmptyInputError: If the table has no data rows.
        DuplicateColumnsError: If a header name repeats.
        SchemaMismatchError: If a data row has fewer fields than the header.
    """
    if df.height <= 1:
        raise EmptyInputError("Dataset contains no data rows", sample_count=0, column_count=df.width)

    header, *rows = df.iter_rows()
    attributes = ["" if name is None else name for name in header]
    if len(set(attributes)) != len(attributes):
        raise DuplicateColumnsError(columns=attributes)

    samples = []
    for position, row in enumerate(rows):
        if row[-1] is None:
            field_count = max((index + 1 for index, field in enumerate(row) if field is not None), default=0)
            raise SchemaMismatchError(
                f"Row {position} has {field_count} fields, expected {df.width}",
                expected=df.width,
                actual=field_count,
                position=position,
            )
        samples.append(Sample(fields=tuple("" if field is None else field for field in row)))
    return LoadedDataset(attributes=attributes, samples=samples)
