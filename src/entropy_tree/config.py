"""Settings for one induction run."""

from __future__ import annotations

from typing import Final, Literal

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_MAX_DEPTH: Final[int] = 5
MAX_TREE_DEPTH: Final[int] = 64  # Recursion guard for depth values coming from configuration.
DEFAULT_TRAIN_PROPORTION: Final[float] = 0.7

type DepthLimitLabel = Literal["first_sample", "majority"]


class InductionSettings(BaseSettings, env_prefix="ENTROPY_TREE_", extra="ignore", frozen=True):
    """Configuration for an induction run, readable from `ENTROPY_TREE_*` environment variables.

    The settings object is passed explicitly to `run_induction`; nothing in
    the package reads it implicitly.

    Attributes:
        max_depth (int): Depth at which the builder stops splitting and emits a
            leaf. `0` yields a single-leaf tree.
        train_proportion (float): Fraction of samples drawn into the training
            set; the remainder forms the test set.
        seed (int | None): Seed for the train/test split. `None` means
            non-deterministic.
        depth_limit_label (DepthLimitLabel): Label chosen for a leaf created
            because `max_depth` was reached. `"first_sample"` takes the label
            of the first sample at that node; `"majority"` takes the most
            frequent label.

    Examples:
        >>> settings = InductionSettings(max_depth=3, seed=7)
        >>> settings.max_depth
        3
    """

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=0,
        le=MAX_TREE_DEPTH,
        description="Maximum tree depth; 0 yields a single leaf.",
    )
    train_proportion: float = Field(
        default=DEFAULT_TRAIN_PROPORTION,
        ge=0.0,
        le=1.0,
        description="Fraction of samples used for training.",
    )
    seed: int | None = Field(default=None, description="Seed for the train/test split.")
    depth_limit_label: DepthLimitLabel = Field(
        default="first_sample",
        description="Label policy for leaves created at the depth limit.",
    )
