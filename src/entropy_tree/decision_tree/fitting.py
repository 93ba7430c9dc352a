"""Tree induction, classification, rule extraction, evaluation, and pipeline orchestration."""

from __future__ import annotations

import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np
from loguru import logger

from entropy_tree.config import DEFAULT_MAX_DEPTH, MAX_TREE_DEPTH, DepthLimitLabel, InductionSettings
from entropy_tree.decision_tree.models import (
    ClassifiedSample,
    DecisionRule,
    EvaluationResult,
    InductionResult,
    Leaf,
    Predicate,
    Sample,
    SplitNode,
    Tree,
)
from entropy_tree.decision_tree.preprocessing import (
    SampleLike,
    as_sample,
    coerce_samples,
    is_pure,
    majority_label,
    train_test_split,
    validate_training_inputs,
)
from entropy_tree.decision_tree.splitting import partition, select_split
from entropy_tree.exceptions import EmptyInputError, InductionError
from entropy_tree.logging import INDUCTION_LEVEL

# ---------------------------------------------------------------------------
# Public interface -- Tree induction
# ---------------------------------------------------------------------------


def build_tree(
    samples: Sequence[SampleLike],
    attributes: Sequence[str],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    depth_limit_label: DepthLimitLabel = "first_sample",
) -> Tree:
    """Induce a binary decision tree from labeled samples.

    At each node the samples become a leaf when they all share one label or
    when `max_depth` is reached. Otherwise the lowest weighted-entropy split
    is chosen. If that split leaves one side empty the node becomes a
    fallback leaf whose decision is `"<attributes[-1]>: <first label>"`;
    otherwise both sides are built recursively one level deeper.

    Args:
        samples (Sequence[SampleLike]): Training samples, as `Sample`s or
            sequences of strings whose last field is the label. The caller's
            collection is not modified.
        attributes (Sequence[str]): Attribute names aligned with sample fields;
            the label column name may be included as the last entry.
        max_depth (int): Depth at which splitting stops. Must be an integer
            (numpy integers included) between 0 and `MAX_TREE_DEPTH` (64), inclusive.
        depth_limit_label (DepthLimitLabel): Label for leaves created at the
            depth limit: `"first_sample"` (default) or `"majority"`.

    Returns:
        Tree: The root `Leaf` or `SplitNode`.

    Raises:
        ValueError: If `max_depth` is not an integer or is outside
            `[0, MAX_TREE_DEPTH]`.
        EmptyInputError: If there are no samples or no attribute columns.
        SchemaMismatchError: If the samples are ragged or `attributes` has the
            wrong length.
        MalformedSampleError: If an attribute field is not numeric.

    Examples:
        >>> rows = [["1", "1", "A"], ["1", "2", "A"], ["5", "5", "B"], ["5", "6", "B"]]
        >>> tree = build_tree(rows, ["x", "y", "label"])
        >>> (tree.attribute, tree.threshold, tree.low.decision, tree.high.decision)
        ('x', 1.0, 'A', 'B')
    """
    if isinstance(max_depth, bool) or not isinstance(max_depth, numbers.Integral):
        raise ValueError(f"max_depth must be an integer, got {max_depth!r}")
    max_depth = int(max_depth)
    if not 0 <= max_depth <= MAX_TREE_DEPTH:
        raise ValueError(f"max_depth must be between 0 and {MAX_TREE_DEPTH}, got {max_depth}.")
    if depth_limit_label not in {"first_sample", "majority"}:
        raise ValueError(f"Unknown depth_limit_label: {depth_limit_label!r}")

    training_samples = coerce_samples(samples)
    attribute_names = tuple(attributes)
    validate_training_inputs(training_samples, attribute_names)
    return _grow(
        training_samples,
        attribute_names,
        depth=0,
        max_depth=max_depth,
        depth_limit_label=depth_limit_label,
    )


# ---------------------------------------------------------------------------
# Public interface -- Classification
# ---------------------------------------------------------------------------


def classify(sample: SampleLike, tree: Tree) -> str:
    """Return the decision of the leaf that `sample` reaches.

    Args:
        sample (SampleLike): The sample to classify. Only the fields tested on
            its path are read; a trailing label is allowed but not required.
        tree (Tree): A tree produced by `build_tree`.

    Returns:
        str: The reached leaf's decision. A leaf root answers without reading
            `sample` at all.

    Raises:
        EmptyInputError: If `sample` has no fields and `tree` is a split.
        MalformedSampleError: If a tested field is missing or not numeric.
    """
    record: Sample | None = None
    node = tree
    while True:
        match node:
            case Leaf():
                return node.decision
            case SplitNode():
                if record is None:
                    record = as_sample(sample)
                node = node.low if record.value(node.attribute_index) <= node.threshold else node.high
            case _:
                raise TypeError(f"Unexpected tree node: {type(node).__name__}")


def classify_samples(samples: Sequence[SampleLike], tree: Tree) -> list[str]:
    """Classify each sample in order.

    Args:
        samples (Sequence[SampleLike]): Samples to classify.
        tree (Tree): A tree produced by `build_tree`.

    Returns:
        list[str]: One decision per sample.
    """
    return [classify(sample, tree) for sample in samples]


def evaluate(samples: Sequence[SampleLike], tree: Tree) -> EvaluationResult:
    """Classify labeled samples and compare each decision with the sample's label.

    Args:
        samples (Sequence[SampleLike]): Labeled samples, e.g. a held-out test set.
        tree (Tree): A tree produced by `build_tree`.

    Returns:
        EvaluationResult: Per-sample outcomes, counts, and accuracy (`None`
            when `samples` is empty).
    """
    classified: list[ClassifiedSample] = []
    for record in coerce_samples(samples):
        predicted = classify(record, tree)
        classified.append(
            ClassifiedSample(sample=record, expected=record.label, predicted=predicted, correct=predicted == record.label)
        )
    correct_count = sum(outcome.correct for outcome in classified)
    accuracy = correct_count / len(classified) if classified else None
    return EvaluationResult(
        classified=classified,
        correct_count=correct_count,
        sample_count=len(classified),
        accuracy=accuracy,
    )


# ---------------------------------------------------------------------------
# Public interface -- Tree inspection
# ---------------------------------------------------------------------------


def tree_depth(tree: Tree) -> int:
    """Return the number of split levels on the longest root-to-leaf path.

    Args:
        tree (Tree): The tree to measure.

    Returns:
        int: `0` for a single leaf.
    """
    match tree:
        case Leaf():
            return 0
        case SplitNode():
            return 1 + max(tree_depth(child) for child in tree.children)
    raise TypeError(f"Unexpected tree node: {type(tree).__name__}")


def leaf_count(tree: Tree) -> int:
    """Return the number of leaves in `tree`."""
    match tree:
        case Leaf():
            return 1
        case SplitNode():
            return sum(leaf_count(child) for child in tree.children)
    raise TypeError(f"Unexpected tree node: {type(tree).__name__}")


def extract_rules(tree: Tree) -> list[DecisionRule]:
    """Extract one human-readable rule per leaf.

    Leaves are visited depth-first, low branch before high branch.

    Args:
        tree (Tree): The tree to describe.

    Returns:
        list[DecisionRule]: One rule per leaf.

    Examples:
        >>> rows = [["1", "A"], ["5", "B"]]
        >>> [str(rule) for rule in extract_rules(build_tree(rows, ["x", "label"]))]
        ['IF x <= 1.0 THEN A', 'IF x > 1.0 THEN B']
    """
    rules: list[DecisionRule] = []
    _walk_tree(tree, path_predicates=[], rules=rules)
    return rules


# ---------------------------------------------------------------------------
# Public interface -- Pipeline orchestration
# ---------------------------------------------------------------------------


def run_induction(
    samples: Sequence[SampleLike],
    attributes: Sequence[str],
    *,
    settings: InductionSettings | None = None,
    rng: np.random.Generator | int | None = None,
) -> InductionResult:
    """Split a dataset, build a tree on the training part, and evaluate it on the rest.

    Args:
        samples (Sequence[SampleLike]): The full labeled dataset.
        attributes (Sequence[str]): Attribute names aligned with sample fields.
        settings (InductionSettings | None): Run configuration. `None` uses
            `InductionSettings()` (defaults plus `ENTROPY_TREE_*` environment
            variables).
        rng (np.random.Generator | int | None): Random source for the split.
            Overrides `settings.seed` when given.

    Returns:
        InductionResult: The tree, its rules, size metadata, and the
            evaluation on the held-out samples.

    Raises:
        EmptyInputError: If the training split is empty.
        InductionError: On any other invalid sample or attribute input.
    """
    run_settings = settings if settings is not None else InductionSettings()
    random_source = rng if rng is not None else run_settings.seed

    logger.log(
        INDUCTION_LEVEL,
        "Induction run started",
        sample_count=len(samples),
        max_depth=run_settings.max_depth,
        train_proportion=run_settings.train_proportion,
    )

    try:
        split = train_test_split(samples, run_settings.train_proportion, random_source)
        logger.debug("Samples split", training_count=len(split.training), test_count=len(split.test))
        if not split.training:
            raise EmptyInputError(
                f"Training split is empty (train_proportion={run_settings.train_proportion}, samples={len(samples)})",
                sample_count=0,
            )
        tree = build_tree(
            split.training,
            attributes,
            max_depth=run_settings.max_depth,
            depth_limit_label=run_settings.depth_limit_label,
        )
        evaluation = evaluate(split.test, tree)
    except InductionError as error:
        logger.warning("Induction run failed", error_type=type(error).__name__, message=str(error))
        raise

    result = InductionResult(
        tree=tree,
        rules=extract_rules(tree),
        depth=tree_depth(tree),
        leaf_count=leaf_count(tree),
        training_count=len(split.training),
        test_count=len(split.test),
        evaluation=evaluation,
    )
    logger.info(
        "Induction run finished",
        depth=result.depth,
        leaf_count=result.leaf_count,
        accuracy=evaluation.accuracy,
        test_count=result.test_count,
    )
    return result


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _grow(
    samples: tuple[Sample, ...],
    attributes: tuple[str, ...],
    *,
    depth: int,
    max_depth: int,
    depth_limit_label: DepthLimitLabel,
) -> Tree:
    """Recursively build the subtree for `samples` at `depth`.

    Args:
        samples (tuple[Sample, ...]): Non-empty, validated samples reaching this node.
        attributes (tuple[str, ...]): Attribute names.
        depth (int): Depth of the node being built; the root is 0.
        max_depth (int): Depth at which a leaf is forced.
        depth_limit_label (DepthLimitLabel): Label policy for forced leaves.

    Returns:
        Tree: The subtree rooted at this node.
    """
    if is_pure(samples):
        return Leaf(decision=samples[0].label, samples=samples)

    if depth == max_depth:
        decision = samples[0].label if depth_limit_label == "first_sample" else majority_label(samples)
        return Leaf(decision=decision, samples=samples)

    attribute_index, threshold = select_split(samples)
    low, high = partition(samples, attribute_index, threshold)
    if not low or not high:
        return Leaf(decision=f"{attributes[-1]}: {samples[0].label}", samples=samples)

    child_kwargs: dict[str, Any] = {
        "attributes": attributes,
        "max_depth": max_depth,
        "depth_limit_label": depth_limit_label,
    }
    return SplitNode(
        attribute=attributes[attribute_index],
        attribute_index=attribute_index,
        threshold=threshold,
        children=(
            _grow(low, depth=depth + 1, **child_kwargs),
            _grow(high, depth=depth + 1, **child_kwargs),
        ),
    )


def _walk_tree(node: Tree, *, path_predicates: list[Predicate], rules: list[DecisionRule]) -> None:
    """Recursively walk a tree node and accumulate leaf rules.

    Args:
        node (Tree): The current node.
        path_predicates (list[Predicate]): Predicates from the root to `node`.
        rules (list[DecisionRule]): Accumulator; leaf rules are appended in-place.
    """
    match node:
        case Leaf():
            rules.append(DecisionRule(predicates=path_predicates, prediction=node.decision, samples=len(node.samples)))
        case SplitNode():
            left_predicate, right_predicate = _build_split_predicates(node)
            _walk_tree(node.low, path_predicates=[*path_predicates, left_predicate], rules=rules)
            _walk_tree(node.high, path_predicates=[*path_predicates, right_predicate], rules=rules)


def _build_split_predicates(node: SplitNode) -> tuple[Predicate, Predicate]:
    """Build the low (`<=`) and high (`>`) branch predicates for a split node.

    Args:
        node (SplitNode): The split node.

    Returns:
        tuple[Predicate, Predicate]: `(low_predicate, high_predicate)`.
    """
    left_predicate = Predicate(variable=node.attribute, operator="<=", value=node.threshold)
    right_predicate = Predicate(variable=node.attribute, operator=">", value=node.threshold)
    return left_predicate, right_predicate
