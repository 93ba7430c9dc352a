"""Split selection: label entropy, threshold partitioning, and the exhaustive (attribute, threshold) search."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import NamedTuple

import numpy as np

from entropy_tree.decision_tree.models import Sample
from entropy_tree.exceptions import EmptyInputError


class SplitCandidate(NamedTuple):
    """An (attribute, threshold) pair that divides samples into `<=` and `>` groups.

    Attributes:
        attribute_index (int): Field position of the attribute.
        threshold (float): Values `<= threshold` form the low group.
    """

    attribute_index: int
    threshold: float


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------


def entropy(samples: Sequence[Sample]) -> float:
    """Compute the Shannon entropy (base 2) of the label distribution.

    Args:
        samples (Sequence[Sample]): Non-empty samples.

    Returns:
        float: `-sum(p * log2(p))` over the observed labels; `0.0` when every
            sample has the same label.

    Raises:
        EmptyInputError: If `samples` is empty.

    Examples:
        >>> entropy([Sample(fields=("1", "A")), Sample(fields=("2", "B"))])
        1.0
    """
    if not samples:
        raise EmptyInputError("Cannot compute the entropy of zero samples", sample_count=0)
    # np.unique returns labels sorted, so summation order is deterministic.
    _, counts = np.unique([sample.label for sample in samples], return_counts=True)
    probabilities = counts / len(samples)
    # Adding 0.0 turns the -0.0 of a pure set into 0.0.
    return float(-np.sum(probabilities * np.log2(probabilities))) + 0.0


def partition(
    samples: Sequence[Sample],
    attribute_index: int,
    threshold: float,
) -> tuple[tuple[Sample, ...], tuple[Sample, ...]]:
    """Split samples into those at or below a threshold and those above it.

    Args:
        samples (Sequence[Sample]): Samples to split; not modified.
        attribute_index (int): Field position of the attribute to compare.
        threshold (float): Values `<= threshold` go to the low group.

    Returns:
        tuple[tuple[Sample, ...], tuple[Sample, ...]]: `(low, high)`, each
            preserving input order.

    Raises:
        MalformedSampleError: If a sample's field at `attribute_index` is
            missing or not numeric.
    """
    low: list[Sample] = []
    high: list[Sample] = []
    for sample in samples:
        if sample.value(attribute_index) <= threshold:
            low.append(sample)
        else:
            high.append(sample)
    return tuple(low), tuple(high)


def weighted_entropy(samples: Sequence[Sample], attribute_index: int, threshold: float) -> float:
    """Compute the size-weighted entropy of the partition induced by a threshold.

    An empty side contributes exactly `0.0`; `entropy` is never called on it.

    Args:
        samples (Sequence[Sample]): Non-empty samples.
        attribute_index (int): Field position of the attribute to compare.
        threshold (float): Values `<= threshold` form the low group.

    Returns:
        float: `|low|/n * H(low) + |high|/n * H(high)`.

    Raises:
        EmptyInputError: If `samples` is empty.
        MalformedSampleError: If a needed field is missing or not numeric.
    """
    if not samples:
        raise EmptyInputError("Cannot evaluate a split of zero samples", sample_count=0)
    total = len(samples)
    return sum(
        (len(group) / total) * entropy(group)
        for group in partition(samples, attribute_index, threshold)
        if group
    )


def select_split(samples: Sequence[Sample]) -> SplitCandidate:
    """Find the (attribute, threshold) pair with the lowest weighted entropy.

    Every attribute column is scanned (the label column excluded), using each
    sample's own value in that column as a threshold. Candidates are visited
    column by column, then sample by sample; the first candidate reaching the
    minimum wins, so ties favor the lowest attribute index and then the
    earliest sample.

    Args:
        samples (Sequence[Sample]): Non-empty samples of equal width.

    Returns:
        SplitCandidate: The winning `(attribute_index, threshold)`.

    Raises:
        EmptyInputError: If `samples` is empty or has no attribute column.
        MalformedSampleError: If an attribute field is missing or not numeric.

    Examples:
        >>> rows = [("1", "1", "A"), ("1", "2", "A"), ("5", "5", "B"), ("5", "6", "B")]
        >>> select_split([Sample(fields=row) for row in rows])
        SplitCandidate(attribute_index=0, threshold=1.0)
    """
    if not samples:
        raise EmptyInputError("Cannot select a split from zero samples", sample_count=0)
    width = samples[0].width
    if width < 2:
        raise EmptyInputError(
            "Samples need at least one attribute column besides the label",
            sample_count=len(samples),
            column_count=width,
        )
    # min() keeps the first of several equal minima.
    return min(
        _threshold_candidates(samples, attribute_count=width - 1),
        key=lambda candidate: weighted_entropy(samples, *candidate),
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _threshold_candidates(samples: Sequence[Sample], *, attribute_count: int) -> Iterator[SplitCandidate]:
    """Yield each distinct observed value of each attribute, column-major then sample-major.

    A repeated value within a column scores the same as its first occurrence
    and can never win a strict comparison, so it is skipped.

    Args:
        samples (Sequence[Sample]): Non-empty samples.
        attribute_count (int): Number of attribute columns to scan.

    Yields:
        SplitCandidate: Candidates in scan order.
    """
    for attribute_index in range(attribute_count):
        seen: set[float] = set()
        for sample in samples:
            threshold = sample.value(attribute_index)
            if threshold in seen:
                continue
            seen.add(threshold)
            yield SplitCandidate(attribute_index, threshold)
