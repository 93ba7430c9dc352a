"""entropy-tree: binary decision tree induction by entropy minimization over numeric thresholds."""

from loguru import logger

from entropy_tree.config import InductionSettings
from entropy_tree.decision_tree import (
    Leaf,
    Sample,
    SplitNode,
    Tree,
    build_tree,
    classify,
    load_samples,
    run_induction,
    train_test_split,
)
from entropy_tree.logging import PACKAGE_NAME, enable_logging

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the entropy_tree package by default

__all__ = [
    "InductionSettings",
    "Leaf",
    "Sample",
    "SplitNode",
    "Tree",
    "build_tree",
    "classify",
    "enable_logging",
    "load_samples",
    "run_induction",
    "train_test_split",
]
