"""
Autograd- and shape-related exceptions for keygrad.

This module defines the error kinds raised by the tensor primitives, the
differentiable functions and the backward engine. Every error derives from
`KeyGradError` and, in addition, from the closest builtin exception so that
callers may catch either the library-specific type or the generic one
(e.g., `ShapeMismatchError` is also a `ValueError`).

All errors are raised synchronously at the call that triggers them. None of
them are retried internally; after an error inside a backward pass the
gradient state of the graph must be considered invalid.
"""

from __future__ import annotations

from typing import Optional, Sequence


class KeyGradError(Exception):
    """
    Base class for all keygrad errors.
    """


class ShapeMismatchError(KeyGradError, ValueError):
    """
    Raised when two shapes cannot be combined.

    Typical triggers are non-broadcastable operands of a binary operation,
    a reshape to a different element count, a `sum_to` target that could not
    have been broadcast to the source, or a gradient whose shape disagrees
    with the node it is accumulated into.

    Attributes
    ----------
    shape_a : tuple[int, ...]
        First (usually left-hand or source) shape.
    shape_b : tuple[int, ...]
        Second (usually right-hand or target) shape.
    op : Optional[str]
        Name of the operation that detected the mismatch, if known.
    """

    def __init__(
        self,
        shape_a: Sequence[int],
        shape_b: Sequence[int],
        *,
        op: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        shape_a : Sequence[int]
            First shape involved in the failed operation.
        shape_b : Sequence[int]
            Second shape involved in the failed operation.
        op : Optional[str], optional
            Operation name used to prefix the message.
        detail : Optional[str], optional
            Extra human-readable explanation appended to the message.
        """
        self.shape_a = tuple(int(d) for d in shape_a)
        self.shape_b = tuple(int(d) for d in shape_b)
        self.op = op

        prefix = f"{op}: " if op else ""
        msg = f"{prefix}shape mismatch: {self.shape_a} vs {self.shape_b}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class ArityError(KeyGradError, TypeError):
    """
    Raised when a function is called with the wrong number of inputs.

    Attributes
    ----------
    function : str
        Name of the function class.
    expected : int
        Number of inputs the function declares via `require_input_num()`.
    got : int
        Number of inputs actually supplied.
    """

    def __init__(self, function: str, expected: int, got: int) -> None:
        super().__init__(f"{function} requires {expected} inputs, but got {got}")
        self.function = function
        self.expected = expected
        self.got = got


class MissingGradientError(KeyGradError, RuntimeError):
    """
    Raised when a gradient is required but not available.

    Examples are reading a gradient through `Variable.get_grad()` before any
    backward pass has populated it, starting a backward pass from a
    non-scalar node without a seed while strict seeding is enabled, or a
    function whose output no longer carries a gradient during traversal.
    """


class DivisionDegenerateError(KeyGradError, ArithmeticError):
    """
    Raised when a division's divisor has no elements to divide by.

    Attributes
    ----------
    dividend_shape : tuple[int, ...]
        Shape of the dividend.
    divisor_shape : tuple[int, ...]
        Shape of the (zero-sized) divisor.
    """

    def __init__(
        self, dividend_shape: Sequence[int], divisor_shape: Sequence[int]
    ) -> None:
        self.dividend_shape = tuple(int(d) for d in dividend_shape)
        self.divisor_shape = tuple(int(d) for d in divisor_shape)
        super().__init__(
            f"Cannot divide tensor of shape {self.dividend_shape} by a "
            f"zero-sized divisor of shape {self.divisor_shape}."
        )
