"""Plain-text and markdown views of trees and classification results."""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from entropy_tree.decision_tree.models import EvaluationResult, Leaf, SplitNode, Tree
from entropy_tree.exceptions import DuplicateColumnsError
from entropy_tree.polars_utils import to_markdown_table

_INDENT: str = "  "
_OUTCOME_COLUMNS: tuple[str, ...] = ("actual", "predicted", "correct")


def render_tree(tree: Tree) -> str:
    """Render a tree as an indented outline.

    Split nodes print as `"<attribute> <= <threshold>"`, leaves as
    `"-> <decision>"`. Each child line is prefixed by the branch it belongs to.

    Args:
        tree (Tree): The tree to render.

    Returns:
        str: One line per node, children indented below their parent.

    Examples:
        >>> tree = SplitNode(
        ...     attribute="x",
        ...     attribute_index=0,
        ...     threshold=1.0,
        ...     children=(Leaf(decision="A"), Leaf(decision="B")),
        ... )
        >>> print(render_tree(tree))
        x <= 1.0
          [<=] -> A
          [>] -> B
    """
    lines: list[str] = []
    _render_node(tree, prefix="", depth=0, lines=lines)
    return "\n".join(lines)


def evaluation_to_frame(evaluation: EvaluationResult, attributes: Sequence[str]) -> pl.DataFrame:
    """Tabulate classification outcomes, one row per sample.

    The frame holds the raw attribute fields (named from `attributes`)
    followed by `actual`, `predicted`, and `correct`. An empty evaluation
    yields only the three outcome columns.

    Args:
        evaluation (EvaluationResult): Outcomes from `evaluate`.
        attributes (Sequence[str]): Attribute names aligned with sample fields;
            a trailing label column name is ignored.

    Returns:
        pl.DataFrame: The outcome table.

    Raises:
        DuplicateColumnsError: If an attribute name collides with an outcome
            column name.
    """
    feature_names: list[str] = []
    if evaluation.classified:
        feature_names = list(attributes[: evaluation.classified[0].sample.width - 1])

    column_names = [*feature_names, *_OUTCOME_COLUMNS]
    if len(set(column_names)) != len(column_names):
        raise DuplicateColumnsError(columns=column_names)

    data: dict[str, list[str] | list[bool]] = {
        name: [outcome.sample.fields[position] for outcome in evaluation.classified]
        for position, name in enumerate(feature_names)
    }
    data["actual"] = [outcome.expected for outcome in evaluation.classified]
    data["predicted"] = [outcome.predicted for outcome in evaluation.classified]
    data["correct"] = [outcome.correct for outcome in evaluation.classified]

    schema = {name: pl.String for name in column_names} | {"correct": pl.Boolean}
    return pl.DataFrame(data, schema=schema)


def evaluation_to_markdown(
    evaluation: EvaluationResult,
    attributes: Sequence[str],
    *,
    num_rows: int = 20,
) -> str:
    """Render classification outcomes as a markdown table.

    Args:
        evaluation (EvaluationResult): Outcomes from `evaluate`.
        attributes (Sequence[str]): Attribute names aligned with sample fields.
        num_rows (int): Maximum number of rows to display. Defaults to 20.

    Returns:
        str: Markdown-formatted table string.
    """
    return to_markdown_table(evaluation_to_frame(evaluation, attributes), num_rows=num_rows)


def _render_node(node: Tree, *, prefix: str, depth: int, lines: list[str]) -> None:
    """Append the outline lines for `node` and its descendants.

    Args:
        node (Tree): The node to render.
        prefix (str): Branch marker for this node, e.g. `"[<=] "`.
        depth (int): Nesting level, used for indentation.
        lines (list[str]): Accumulator; lines are appended in-place.
    """
    indent = _INDENT * depth
    match node:
        case Leaf():
            lines.append(f"{indent}{prefix}-> {node.decision}")
        case SplitNode():
            lines.append(f"{indent}{prefix}{node.attribute} <= {node.threshold}")
            _render_node(node.low, prefix="[<=] ", depth=depth + 1, lines=lines)
            _render_node(node.high, prefix="[>] ", depth=depth + 1, lines=lines)
