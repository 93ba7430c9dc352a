"""Pydantic models for samples, trees, rules, and evaluation results."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from entropy_tree.exceptions import MalformedSampleError

# ---------------------------------------------------------------------------
# Public type aliases
# ---------------------------------------------------------------------------

type PredicateOp = Literal["<=", ">"]

# ---------------------------------------------------------------------------
# Samples
# ---------------------------------------------------------------------------


class Sample(BaseModel):
    """One row of a dataset: raw string fields, the last of which is the label.

    Attribute values stay as the strings they were read as and are parsed on
    demand by `value`, which raises instead of returning a sentinel.

    Attributes:
        fields (tuple[str, ...]): Raw field values. All fields but the last are
            numeric attributes; the last is the class label.

    Examples:
        >>> sample = Sample(fields=("5.1", "1.4", "setosa"))
        >>> sample.label
        'setosa'
        >>> sample.value(1)
        1.4
    """

    model_config = ConfigDict(frozen=True)

    fields: tuple[str, ...] = Field(
        min_length=1,
        description="Raw field values; the last field is the class label.",
    )

    @property
    def label(self) -> str:
        """Return the class label (the last field)."""
        return self.fields[-1]

    @property
    def width(self) -> int:
        """Return the number of fields, label included."""
        return len(self.fields)

    def value(self, index: int) -> float:
        """Parse the field at `index` as a number.

        Args:
            index (int): Zero-based field position.

        Returns:
            float: The parsed value.

        Raises:
            MalformedSampleError: If the field does not exist or is not a
                number (NaN included).
        """
        if not 0 <= index < len(self.fields):
            raise MalformedSampleError(self.fields, index, "missing field")
        try:
            number = float(self.fields[index])
        except ValueError:
            raise MalformedSampleError(self.fields, index, "not a number") from None
        if math.isnan(number):
            raise MalformedSampleError(self.fields, index, "not a number")
        return number


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


class Leaf(BaseModel):
    """Terminal node holding the decision returned by classification.

    Attributes:
        kind (Literal["leaf"]): Discriminator field; always `"leaf"`.
        decision (str): Class label, or the fallback marker
            `"<last attribute name>: <label>"` produced by a one-sided split.
        samples (tuple[Sample, ...]): Training samples that reached this leaf,
            kept for inspection only.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = Field(default="leaf", description='Discriminator field. Always "leaf".')
    decision: str = Field(description="Class label or fallback marker returned for every sample reaching this leaf.")
    samples: tuple[Sample, ...] = Field(
        default=(),
        repr=False,
        description="Training samples that reached this leaf; not used for classification.",
    )


class SplitNode(BaseModel):
    """Internal node splitting samples on `attribute <= threshold`.

    Attributes:
        kind (Literal["split"]): Discriminator field; always `"split"`.
        attribute (str): Name of the attribute tested at this node.
        attribute_index (int): Field position of the attribute in a sample.
        threshold (float): Samples with a value `<= threshold` go to
            `children[0]`, the rest to `children[1]`.
        children (tuple[Leaf | SplitNode, Leaf | SplitNode]): The low and high
            subtrees, in that order.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["split"] = Field(default="split", description='Discriminator field. Always "split".')
    attribute: str = Field(description="Name of the attribute tested at this node.")
    attribute_index: int = Field(ge=0, description="Field position of the tested attribute.")
    threshold: float = Field(description="Split threshold; values <= threshold go to the low child.")
    children: tuple[Leaf | SplitNode, Leaf | SplitNode] = Field(
        description="Low subtree (value <= threshold) followed by high subtree (value > threshold).",
    )

    @property
    def low(self) -> Leaf | SplitNode:
        """Return the subtree for values `<= threshold`."""
        return self.children[0]

    @property
    def high(self) -> Leaf | SplitNode:
        """Return the subtree for values `> threshold`."""
        return self.children[1]


# Use this alias wherever a whole tree is accepted; Pydantic selects the node model from `kind`.
type Tree = Annotated[Leaf | SplitNode, Field(discriminator="kind")]

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class Predicate(BaseModel):
    """A single threshold condition on one attribute.

    Attributes:
        variable (str): Attribute name the condition applies to.
        operator (PredicateOp): `"<="` for the low branch, `">"` for the high
            branch.
        value (float): Split threshold.

    Examples:
        >>> p = Predicate(variable="petal_length", operator="<=", value=1.9)
        >>> str(p)
        'petal_length <= 1.9'
        >>> p.eval(1.4)
        True
    """

    variable: str = Field(description="Attribute name the condition applies to.")
    operator: PredicateOp = Field(description="'<=' for the low branch, '>' for the high branch.")
    value: float = Field(description="Split threshold.")

    def __str__(self) -> str:
        """Return the predicate as `"<variable> <operator> <value>"`."""
        return f"{self.variable} {self.operator} {self.value}"

    def eval(self, x: float) -> bool:
        """Evaluate this predicate against an attribute value.

        Args:
            x (float): The attribute value to test.

        Returns:
            bool: `True` if the predicate holds for `x`.
        """
        return _SCALAR_OPS[self.operator](x, self.value)


class DecisionRule(BaseModel):
    """The path from the root to one leaf, with that leaf's decision.

    Attributes:
        predicates (list[Predicate]): Conditions along the path from root to
            leaf. Empty for a single-leaf tree.
        prediction (str): The leaf's decision.
        samples (int): Number of training samples that reached the leaf.
    """

    predicates: list[Predicate] = Field(description="Conditions along the path from root to leaf.")
    prediction: str = Field(description="Decision of the leaf this rule ends in.")
    samples: int = Field(ge=0, description="Number of training samples that reached the leaf.")

    def __str__(self) -> str:
        """Return the rule as `"IF <p1> AND <p2> THEN <prediction>"`."""
        if not self.predicates:
            return f"ALWAYS {self.prediction}"
        conditions = " AND ".join(str(predicate) for predicate in self.predicates)
        return f"IF {conditions} THEN {self.prediction}"


# ---------------------------------------------------------------------------
# Evaluation and run results
# ---------------------------------------------------------------------------


class ClassifiedSample(BaseModel):
    """Outcome of classifying one labeled sample.

    Attributes:
        sample (Sample): The sample that was classified.
        expected (str): The sample's own label.
        predicted (str): The decision returned by the tree.
        correct (bool): Whether `predicted` equals `expected`.
    """

    sample: Sample
    expected: str
    predicted: str
    correct: bool


class EvaluationResult(BaseModel):
    """Classification outcomes for a set of labeled samples.

    Attributes:
        classified (list[ClassifiedSample]): One entry per sample, in input order.
        correct_count (int): Number of correct predictions.
        sample_count (int): Number of samples classified.
        accuracy (float | None): `correct_count / sample_count`, or `None`
            when no samples were classified.
    """

    classified: list[ClassifiedSample] = Field(description="Per-sample outcomes in input order.")
    correct_count: int = Field(ge=0, description="Number of correct predictions.")
    sample_count: int = Field(ge=0, description="Number of samples classified.")
    accuracy: float | None = Field(ge=0.0, le=1.0, description="Share of correct predictions; None when empty.")

    @model_validator(mode="after")
    def _validate_counts(self) -> EvaluationResult:
        """Validate that the counts agree with the per-sample outcomes.

        Returns:
            EvaluationResult: The validated model instance.

        Raises:
            ValueError: If `sample_count` differs from `len(classified)` or
                `correct_count` differs from the number of correct outcomes.
        """
        if self.sample_count != len(self.classified):
            raise ValueError(f"sample_count ({self.sample_count}) must equal len(classified) ({len(self.classified)})")
        actual_correct = sum(outcome.correct for outcome in self.classified)
        if self.correct_count != actual_correct:
            raise ValueError(f"correct_count ({self.correct_count}) must equal correct outcomes ({actual_correct})")
        return self


class InductionResult(BaseModel):
    """Everything produced by one `run_induction` call.

    Attributes:
        tree (Tree): The induced tree.
        rules (list[DecisionRule]): One rule per leaf.
        depth (int): Depth of `tree`; a single leaf has depth 0.
        leaf_count (int): Number of leaves in `tree`.
        training_count (int): Number of samples the tree was built from.
        test_count (int): Number of held-out samples.
        evaluation (EvaluationResult): Classification outcomes on the
            held-out samples.
    """

    tree: Tree
    rules: list[DecisionRule]
    depth: int = Field(ge=0)
    leaf_count: int = Field(ge=1)
    training_count: int = Field(ge=1)
    test_count: int = Field(ge=0)
    evaluation: EvaluationResult

    @model_validator(mode="after")
    def _validate_rules_count_matches_leaf_count(self) -> InductionResult:
        """Validate that there is one rule per leaf.

        Returns:
            InductionResult: The validated model instance.

        Raises:
            ValueError: If `len(rules)` does not equal `leaf_count`.
        """
        if len(self.rules) != self.leaf_count:
            raise ValueError(f"rules length ({len(self.rules)}) must equal leaf_count ({self.leaf_count})")
        return self


# ---------------------------------------------------------------------------
# Private helpers -- Predicate operator evaluation
# ---------------------------------------------------------------------------

_SCALAR_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "<=": operator.le,
    ">": operator.gt,
}
