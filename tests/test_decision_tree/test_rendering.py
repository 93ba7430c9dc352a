"""Tests for tree and evaluation rendering."""

from __future__ import annotations

import polars as pl
import pytest
from pytest_check import check

from entropy_tree.decision_tree.fitting import evaluate
from entropy_tree.decision_tree.models import Leaf, SplitNode
from entropy_tree.decision_tree.rendering import evaluation_to_frame, evaluation_to_markdown, render_tree
from entropy_tree.exceptions import DuplicateColumnsError


class TestRenderTree:
    """Tests for `render_tree`: indented outline of splits and leaves."""

    def test_single_leaf_renders_one_line(self) -> None:
        """A leaf-only tree renders its decision."""
        # Act / Assert
        assert render_tree(Leaf(decision="C")) == "-> C"

    def test_nested_tree_indents_children_under_parent(self) -> None:
        """Each level indents by two spaces and marks its branch."""
        # Arrange
        tree = SplitNode(
            attribute="x",
            attribute_index=0,
            threshold=1.0,
            children=(
                Leaf(decision="A"),
                SplitNode(
                    attribute="y",
                    attribute_index=1,
                    threshold=4.5,
                    children=(Leaf(decision="B"), Leaf(decision="C")),
                ),
            ),
        )

        # Act
        text = render_tree(tree)

        # Assert
        assert text.splitlines() == [
            "x <= 1.0",
            "  [<=] -> A",
            "  [>] y <= 4.5",
            "    [<=] -> B",
            "    [>] -> C",
        ]


class TestEvaluationToFrame:
    """Tests for `evaluation_to_frame` and `evaluation_to_markdown`."""

    def test_frame_holds_features_and_outcomes(self) -> None:
        """Columns are the attribute names followed by actual, predicted, correct."""
        # Arrange
        evaluation = evaluate([["0.5", "A"], ["3", "A"]], _stump())

        # Act
        df = evaluation_to_frame(evaluation, ["x", "label"])

        # Assert
        with check:
            assert df.columns == ["x", "actual", "predicted", "correct"]
        with check:
            assert df["x"].to_list() == ["0.5", "3"]
        with check:
            assert df["predicted"].to_list() == ["A", "B"]
        with check:
            assert df["correct"].to_list() == [True, False]
        with check:
            assert df.schema["correct"] == pl.Boolean

    def test_attribute_names_without_label_column(self) -> None:
        """Attribute lists that omit the label name should work the same way."""
        # Arrange
        evaluation = evaluate([["0.5", "A"]], _stump())

        # Act
        df = evaluation_to_frame(evaluation, ["x"])

        # Assert
        assert df.columns == ["x", "actual", "predicted", "correct"]

    def test_empty_evaluation_has_only_outcome_columns(self) -> None:
        """No samples leaves nothing to name feature columns from."""
        # Arrange
        evaluation = evaluate([], _stump())

        # Act
        df = evaluation_to_frame(evaluation, ["x", "label"])

        # Assert
        with check:
            assert df.columns == ["actual", "predicted", "correct"]
        with check:
            assert df.height == 0

    def test_attribute_named_like_outcome_column_raises(self) -> None:
        """An attribute called `predicted` would collide with an outcome column."""
        # Arrange
        evaluation = evaluate([["0.5", "A"]], _stump())

        # Act / Assert
        with pytest.raises(DuplicateColumnsError) as exc_info:
            evaluation_to_frame(evaluation, ["predicted", "label"])
        with check:
            assert exc_info.value.duplicate_columns == ["predicted"]

    def test_markdown_contains_header_and_rows(self) -> None:
        """The markdown view should list column names and sample values."""
        # Arrange
        evaluation = evaluate([["0.5", "A"], ["3", "B"]], _stump())

        # Act
        text = evaluation_to_markdown(evaluation, ["x", "label"])

        # Assert
        with check:
            assert "| x" in text
        with check:
            assert "predicted" in text
        with check:
            assert "0.5" in text
        with check:
            assert "---" in text


def _stump() -> SplitNode:
    """Build a one-split tree sending x <= 1 to "A" and the rest to "B".

    Returns:
        SplitNode: The stump.
    """
    return SplitNode(
        attribute="x",
        attribute_index=0,
        threshold=1.0,
        children=(Leaf(decision="A"), Leaf(decision="B")),
    )
