"""Custom exceptions for entropy-tree.

This module defines exceptions for induction input validation and table rendering:

Induction input exceptions (subclass InductionError, itself a ValueError):
- InductionError: Base class for all induction input errors. Catch this to
  handle any failure caused by the samples or attributes handed to the core.
- MalformedSampleError: Raised when a sample field needed for a comparison is
  missing or cannot be parsed as a number.
- EmptyInputError: Raised when there are no samples, or the samples carry no
  attribute column besides the label.
- SchemaMismatchError: Raised when samples have unequal widths or the
  attribute list does not line up with the sample width.

Column selection exceptions (subclass ValueError):
- ColumnsNotFoundError: Raised when requested columns do not exist in a DataFrame.
- DuplicateColumnsError: Raised when duplicate column names are provided.
"""

from __future__ import annotations

from collections.abc import Sequence


class InductionError(ValueError):
    """Base exception for invalid induction or classification input.

    Subclasses `ValueError` so callers that already guard against bad values
    keep working, while `except InductionError` narrows to this package.
    """

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Detailed string representation including the message.
        """
        return f"{self.__class__.__name__}(message={str(self)!r})"


class MalformedSampleError(InductionError):
    """Raised when a sample field cannot be read as a number.

    Attributes:
        fields (tuple[str, ...]): The raw fields of the offending sample.
        index (int): Position of the field that was requested.
        reason (str): Short explanation, e.g. `"missing field"` or
            `"not a number"`.

    Examples:
        >>> err = MalformedSampleError(fields=("abc", "A"), index=0, reason="not a number")
        >>> err.index
        0
        >>> str(err)
        "Field 0 of sample ('abc', 'A') is malformed: not a number"
    """

    fields: tuple[str, ...]
    index: int
    reason: str

    def __init__(self, fields: Sequence[str], index: int, reason: str) -> None:
        """Initialize MalformedSampleError.

        Args:
            fields (Sequence[str]): The raw fields of the offending sample.
            index (int): Position of the field that was requested.
            reason (str): Short explanation of what is wrong with the field.
        """
        self.fields = tuple(fields)
        self.index = index
        self.reason = reason
        super().__init__(f"Field {index} of sample {self.fields!r} is malformed: {reason}")

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Detailed string representation including fields, index and reason.
        """
        return f"{self.__class__.__name__}(fields={self.fields!r}, index={self.index!r}, reason={self.reason!r})"


class EmptyInputError(InductionError):
    """Raised when there is nothing to induce a tree from.

    Attributes:
        sample_count (int): Number of samples that were supplied.
        column_count (int | None): Width of the supplied samples, or `None`
            when there were no samples to measure.
    """

    sample_count: int
    column_count: int | None

    def __init__(self, message: str, *, sample_count: int, column_count: int | None = None) -> None:
        """Initialize EmptyInputError.

        Args:
            message (str): Description of the missing input.
            sample_count (int): Number of samples that were supplied.
            column_count (int | None): Width of the supplied samples.
        """
        super().__init__(message)
        self.sample_count = sample_count
        self.column_count = column_count

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Detailed string representation including counts.
        """
        return (
            f"{self.__class__.__name__}("
            f"message={str(self)!r}, sample_count={self.sample_count!r}, "
            f"column_count={self.column_count!r})"
        )


class SchemaMismatchError(InductionError):
    """Raised when samples and attributes do not describe one rectangular table.

    Attributes:
        expected (int): The width (or attribute count) that was expected.
        actual (int | None): The width (or attribute count) that was found, or
            `None` when the reader stopped before the row could be measured.
        position (int | None): Index of the first offending sample, or `None`
            when the attribute list itself is the problem.

    Examples:
        >>> err = SchemaMismatchError("Ragged samples", expected=3, actual=2, position=4)
        >>> (err.expected, err.actual, err.position)
        (3, 2, 4)
    """

    expected: int
    actual: int | None
    position: int | None

    def __init__(self, message: str, *, expected: int, actual: int | None, position: int | None = None) -> None:
        """Initialize SchemaMismatchError.

        Args:
            message (str): Description of the mismatch.
            expected (int): The width (or attribute count) that was expected.
            actual (int | None): The width (or attribute count) that was found.
            position (int | None): Index of the first offending sample.
        """
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.position = position

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Detailed string representation including widths and position.
        """
        return (
            f"{self.__class__.__name__}("
            f"message={str(self)!r}, expected={self.expected!r}, "
            f"actual={self.actual!r}, position={self.position!r})"
        )


class ColumnsNotFoundError(ValueError):
    """Raised when requested columns do not exist in a DataFrame.

    Attributes:
        missing_columns (list[str]): Column names that were not found.
        available_columns (list[str]): Column names present in the DataFrame.

    Examples:
        >>> err = ColumnsNotFoundError(
        ...     missing_columns=["petal_width"],
        ...     available_columns=["sepal_length", "predicted"],
        ... )
        >>> err.missing_columns
        ['petal_width']
    """

    missing_columns: list[str]
    available_columns: list[str]

    def __init__(
        self,
        missing_columns: list[str],
        available_columns: list[str],
    ) -> None:
        """Initialize ColumnsNotFoundError.

        Args:
            missing_columns (list[str]): Column names not found in the DataFrame.
            available_columns (list[str]): Column names present in the DataFrame.
        """
        super().__init__(f"Columns not found in DataFrame: {sorted(missing_columns)}")
        self.missing_columns = missing_columns
        self.available_columns = available_columns


class DuplicateColumnsError(ValueError):
    """Raised when duplicate column names are provided.

    Attributes:
        columns (list[str]): The column list that contains duplicates.
        duplicate_columns (list[str]): The specific column names that are
            duplicated (each listed once).
    """

    columns: list[str]
    duplicate_columns: list[str]

    def __init__(self, columns: list[str]) -> None:
        """Initialize DuplicateColumnsError.

        Args:
            columns (list[str]): The column list containing duplicates.
        """
        super().__init__("Duplicate column names are not allowed")
        self.columns = columns
        seen: set[str] = set()
        self.duplicate_columns = []
        for col in columns:
            if col in seen and col not in self.duplicate_columns:
                self.duplicate_columns.append(col)
            seen.add(col)
