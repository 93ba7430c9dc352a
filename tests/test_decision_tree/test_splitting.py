"""Tests for split selection: entropy, partition, weighted_entropy, select_split."""

from __future__ import annotations

import math

import pytest
from pytest_check import check

from entropy_tree.decision_tree.models import Sample
from entropy_tree.decision_tree.splitting import (
    SplitCandidate,
    entropy,
    partition,
    select_split,
    weighted_entropy,
)
from entropy_tree.exceptions import EmptyInputError, MalformedSampleError


def _samples(*rows: tuple[str, ...]) -> list[Sample]:
    """Build samples from raw field tuples.

    Args:
        *rows (tuple[str, ...]): Raw fields per sample, label last.

    Returns:
        list[Sample]: One sample per row.
    """
    return [Sample(fields=row) for row in rows]


def _labeled(labels: list[str]) -> list[Sample]:
    """Build single-attribute samples carrying the given labels.

    Args:
        labels (list[str]): Labels in order.

    Returns:
        list[Sample]: Samples `(str(i), label)`.
    """
    return [Sample(fields=(str(position), label)) for position, label in enumerate(labels)]


class TestEntropy:
    """Tests for `entropy`: Shannon entropy of the label distribution."""

    def test_single_label_has_zero_entropy(self) -> None:
        """A set of samples sharing one label should have entropy exactly 0."""
        # Arrange
        samples = _labeled(["setosa", "setosa", "setosa"])

        # Act
        result = entropy(samples)

        # Assert
        assert result == 0.0

    def test_single_sample_has_zero_entropy(self) -> None:
        """One sample is trivially pure."""
        # Act / Assert
        assert entropy(_labeled(["C"])) == 0.0

    def test_two_balanced_labels_have_one_bit(self) -> None:
        """An even two-label split should have entropy 1.0."""
        # Arrange
        samples = _labeled(["A", "B", "A", "B"])

        # Act
        result = entropy(samples)

        # Assert
        assert math.isclose(result, 1.0)

    def test_skewed_distribution_matches_formula(self) -> None:
        """A 3:1 split should match -(0.75*log2(0.75) + 0.25*log2(0.25))."""
        # Arrange
        samples = _labeled(["A", "A", "A", "B"])
        expected = -(0.75 * math.log2(0.75) + 0.25 * math.log2(0.25))

        # Act
        result = entropy(samples)

        # Assert
        assert math.isclose(result, expected)

    @pytest.mark.parametrize("label_count", [2, 3, 4, 5])
    def test_uniform_distribution_reaches_log2_upper_bound(self, label_count: int) -> None:
        """A uniform distribution over k labels should have entropy log2(k).

        Args:
            label_count (int): Number of distinct labels.
        """
        # Arrange
        samples = _labeled([f"class_{k}" for k in range(label_count)] * 3)

        # Act
        result = entropy(samples)

        # Assert
        assert math.isclose(result, math.log2(label_count))

    def test_uniform_entropy_grows_with_label_diversity(self) -> None:
        """Uniform distributions over more labels should never have lower entropy."""
        # Arrange / Act
        entropies = [entropy(_labeled([f"class_{k}" for k in range(count)])) for count in range(1, 7)]

        # Assert
        assert entropies == sorted(entropies)

    @pytest.mark.parametrize(
        "labels",
        [
            ["A", "A", "B"],
            ["A", "B", "C", "C", "C", "C"],
            ["x", "y", "y", "z", "z", "z", "z"],
        ],
    )
    def test_entropy_bounded_by_log2_of_distinct_labels(self, labels: list[str]) -> None:
        """Entropy should lie in `(0, log2(k)]` for k >= 2 distinct labels.

        Args:
            labels (list[str]): Label sequence with at least two distinct labels.
        """
        # Act
        result = entropy(_labeled(labels))

        # Assert
        with check:
            assert result > 0.0
        with check:
            assert result <= math.log2(len(set(labels))) + 1e-12

    def test_attribute_fields_are_not_parsed(self) -> None:
        """Entropy depends only on labels, so non-numeric attribute fields are fine."""
        # Arrange
        samples = _samples(("not-a-number", "A"), ("also-not", "B"))

        # Act / Assert
        assert math.isclose(entropy(samples), 1.0)

    def test_empty_input_raises_empty_input_error(self) -> None:
        """Entropy of zero samples is undefined and should raise."""
        # Act / Assert
        with pytest.raises(EmptyInputError):
            entropy([])


class TestPartition:
    """Tests for `partition`: splitting on `value <= threshold`."""

    def test_values_equal_to_threshold_go_low(self) -> None:
        """A value equal to the threshold belongs to the low group."""
        # Arrange
        samples = _samples(("1", "A"), ("2", "A"), ("3", "B"))

        # Act
        low, high = partition(samples, 0, 2.0)

        # Assert
        with check:
            assert [s.fields[0] for s in low] == ["1", "2"]
        with check:
            assert [s.fields[0] for s in high] == ["3"]

    def test_preserves_input_order_within_groups(self) -> None:
        """Each group should keep the relative order of the input."""
        # Arrange
        samples = _samples(("5", "B"), ("1", "A"), ("6", "B"), ("0", "A"))

        # Act
        low, high = partition(samples, 0, 2.5)

        # Assert
        with check:
            assert low == (samples[1], samples[3])
        with check:
            assert high == (samples[0], samples[2])

    def test_does_not_mutate_input(self) -> None:
        """The caller's list should be unchanged after partitioning."""
        # Arrange
        samples = _samples(("2", "A"), ("1", "B"))
        snapshot = list(samples)

        # Act
        partition(samples, 0, 1.5)

        # Assert
        assert samples == snapshot

    def test_compares_numerically_not_lexically(self) -> None:
        """A value of 10 should compare greater than 9 as numbers, not as text."""
        # Arrange
        samples = _samples(("9", "A"), ("10", "B"))

        # Act
        low, high = partition(samples, 0, 9.0)

        # Assert
        with check:
            assert low == (samples[0],)
        with check:
            assert high == (samples[1],)

    def test_malformed_field_raises(self) -> None:
        """A non-numeric attribute should surface as MalformedSampleError."""
        # Arrange
        samples = _samples(("1", "A"), ("abc", "B"))

        # Act / Assert
        with pytest.raises(MalformedSampleError):
            partition(samples, 0, 1.0)


class TestWeightedEntropy:
    """Tests for `weighted_entropy`: size-weighted entropy of a threshold partition."""

    def test_perfect_separation_scores_zero(self) -> None:
        """A threshold separating the labels cleanly should score 0."""
        # Arrange
        samples = _samples(("1", "A"), ("2", "A"), ("5", "B"), ("6", "B"))

        # Act
        result = weighted_entropy(samples, 0, 2.0)

        # Assert
        assert result == 0.0

    def test_mixed_partition_matches_weighted_sum(self) -> None:
        """Low {A, A} and high {B, A} should score 0.5 * 0 + 0.5 * 1."""
        # Arrange
        samples = _samples(("1", "A"), ("2", "A"), ("3", "B"), ("4", "A"))

        # Act
        result = weighted_entropy(samples, 0, 2.0)

        # Assert
        assert math.isclose(result, 0.5)

    def test_one_sided_partition_equals_parent_entropy(self) -> None:
        """When every sample falls low, the empty high side contributes nothing."""
        # Arrange
        samples = _samples(("1", "A"), ("2", "B"), ("3", "B"))

        # Act
        result = weighted_entropy(samples, 0, 10.0)

        # Assert
        assert math.isclose(result, entropy(samples))

    def test_uses_requested_attribute_index(self) -> None:
        """The second attribute column should be used when asked for."""
        # Arrange
        samples = _samples(("1", "9", "A"), ("1", "1", "B"))

        # Act
        first_column = weighted_entropy(samples, 0, 1.0)
        second_column = weighted_entropy(samples, 1, 1.0)

        # Assert
        with check:
            assert math.isclose(first_column, 1.0)
        with check:
            assert second_column == 0.0

    def test_empty_input_raises_empty_input_error(self) -> None:
        """Zero samples cannot be weighted."""
        # Act / Assert
        with pytest.raises(EmptyInputError):
            weighted_entropy([], 0, 1.0)


class TestSelectSplit:
    """Tests for `select_split`: exhaustive (attribute, threshold) search with first-wins ties."""

    def test_separating_threshold_is_selected(self) -> None:
        """The four-sample scenario should split on x <= 1."""
        # Arrange
        samples = _samples(("1", "1", "A"), ("1", "2", "A"), ("5", "5", "B"), ("5", "6", "B"))

        # Act
        result = select_split(samples)

        # Assert
        with check:
            assert result == SplitCandidate(attribute_index=0, threshold=1.0)
        with check:
            assert weighted_entropy(samples, *result) == 0.0

    def test_ties_favor_lowest_attribute_index(self) -> None:
        """When two columns separate equally well, the first column wins."""
        # Arrange - both columns separate A from B perfectly
        samples = _samples(("1", "10", "A"), ("2", "20", "B"))

        # Act
        result = select_split(samples)

        # Assert
        assert result.attribute_index == 0

    def test_ties_favor_first_sample_value_not_smallest(self) -> None:
        """Within a column the first perfect threshold encountered wins."""
        # Arrange - thresholds 3 (first sample) and 2 both isolate the single B
        samples = _samples(("3", "A"), ("1", "A"), ("2", "A"), ("8", "B"))

        # Act
        result = select_split(samples)

        # Assert
        assert result == SplitCandidate(attribute_index=0, threshold=3.0)

    def test_later_column_wins_only_when_strictly_better(self) -> None:
        """A later column is chosen when it scores strictly lower."""
        # Arrange - column 0 is noise, column 1 separates perfectly
        samples = _samples(("1", "1", "A"), ("2", "9", "B"), ("3", "2", "A"), ("4", "8", "B"))

        # Act
        result = select_split(samples)

        # Assert
        with check:
            assert result.attribute_index == 1
        with check:
            assert result.threshold == 2.0

    def test_label_column_is_never_a_candidate(self) -> None:
        """Labels that look numeric must not be treated as an attribute."""
        # Arrange - the label column would separate perfectly if scanned
        samples = _samples(("1", "0"), ("1", "1"))

        # Act
        result = select_split(samples)

        # Assert
        assert result.attribute_index == 0

    def test_pure_samples_select_first_candidate(self) -> None:
        """Every candidate scores 0 on pure samples, so the very first wins."""
        # Arrange
        samples = _samples(("4", "7", "A"), ("2", "3", "A"))

        # Act
        result = select_split(samples)

        # Assert
        assert result == SplitCandidate(attribute_index=0, threshold=4.0)

    def test_does_not_mutate_input(self) -> None:
        """The caller's sample list is only read."""
        # Arrange
        samples = _samples(("3", "B"), ("1", "A"), ("2", "A"))
        snapshot = list(samples)

        # Act
        select_split(samples)

        # Assert
        assert samples == snapshot

    def test_empty_input_raises_empty_input_error(self) -> None:
        """There is nothing to select from zero samples."""
        # Act / Assert
        with pytest.raises(EmptyInputError):
            select_split([])

    def test_label_only_samples_raise_empty_input_error(self) -> None:
        """Samples without an attribute column cannot be split."""
        # Arrange
        samples = _samples(("A",), ("B",))

        # Act / Assert
        with pytest.raises(EmptyInputError) as exc_info:
            select_split(samples)
        with check:
            assert exc_info.value.column_count == 1

    def test_malformed_attribute_raises(self) -> None:
        """A non-numeric attribute value should propagate as MalformedSampleError."""
        # Arrange
        samples = _samples(("1", "A"), ("n/a", "B"))

        # Act / Assert
        with pytest.raises(MalformedSampleError):
            select_split(samples)
