"""Decision tree sub-package: models, preprocessing, split selection, fitting, and rendering."""

from __future__ import annotations

from entropy_tree.decision_tree.fitting import (
    build_tree,
    classify,
    classify_samples,
    evaluate,
    extract_rules,
    leaf_count,
    run_induction,
    tree_depth,
)
from entropy_tree.decision_tree.models import (
    ClassifiedSample,
    DecisionRule,
    EvaluationResult,
    InductionResult,
    Leaf,
    Predicate,
    PredicateOp,
    Sample,
    SplitNode,
    Tree,
)
from entropy_tree.decision_tree.preprocessing import (
    LoadedDataset,
    TrainTestSplit,
    load_samples,
    parse_samples,
    train_test_split,
)
from entropy_tree.decision_tree.rendering import evaluation_to_frame, evaluation_to_markdown, render_tree
from entropy_tree.decision_tree.splitting import SplitCandidate, entropy, partition, select_split, weighted_entropy

__all__ = [
    "ClassifiedSample",
    "DecisionRule",
    "EvaluationResult",
    "InductionResult",
    "Leaf",
    "LoadedDataset",
    "Predicate",
    "PredicateOp",
    "Sample",
    "SplitCandidate",
    "SplitNode",
    "TrainTestSplit",
    "Tree",
    "build_tree",
    "classify",
    "classify_samples",
    "entropy",
    "evaluate",
    "evaluation_to_frame",
    "evaluation_to_markdown",
    "extract_rules",
    "leaf_count",
    "load_samples",
    "parse_samples",
    "partition",
    "render_tree",
    "run_induction",
    "select_split",
    "train_test_split",
    "tree_depth",
    "weighted_entropy",
]
