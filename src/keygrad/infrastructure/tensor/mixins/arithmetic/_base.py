"""
Arithmetic mixin defining elementwise binary Tensor operations.

This module implements :class:`TensorMixinArithmetic`, the mixin that gives
the concrete `Tensor` its elementwise binary operations:

- ``add`` / ``__add__`` / ``__radd__``
- ``sub`` / ``__sub__`` / ``__rsub__``
- ``mul`` / ``__mul__`` / ``__rmul__``
- ``div`` / ``__truediv__`` / ``__rtruediv__``

All operations are pure: they allocate a new result tensor and never write
into an operand. When the operand shapes differ they are first expanded to
their common broadcast shape with `broadcast_to`; incompatible shapes raise
`ShapeMismatchError`. Python scalars are lifted to rank-0 tensors and then
broadcast like any other operand.

These are raw tensor primitives and record no autograd history. The
differentiable counterparts live in ``infrastructure.functions``.
"""

from __future__ import annotations

from typing import Callable, Union
from abc import ABC

import numpy as np

from .....domain._errors import DivisionDegenerateError, ShapeMismatchError
from .....domain._shape import broadcast_shape
from .....domain._tensor import ITensor

Number = Union[int, float]


class TensorMixinArithmetic(ABC):
    """
    Mixin implementing broadcasting elementwise arithmetic.

    Notes
    -----
    The host class must provide `_data`, `shape`, `dtype`, `_wrap` and
    `broadcast_to`.
    """

    # ----------------------------
    # Internal helpers
    # ----------------------------
    def _lift(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Promote a Python/NumPy scalar to a rank-0 tensor of this dtype.

        Raises
        ------
        TypeError
            If `other` is neither a tensor nor a real scalar.
        """
        if isinstance(other, TensorMixinArithmetic):
            return other
        if isinstance(other, (int, float, np.integer, np.floating)) and not isinstance(
            other, bool
        ):
            return self._wrap(np.asarray(other, dtype=self.dtype))
        raise TypeError(f"Unsupported operand type: {type(other)!r}")

    def _binary_op(
        self: ITensor,
        other: Union["ITensor", Number],
        op: str,
        kernel: Callable[[np.ndarray, np.ndarray], np.ndarray],
    ) -> "ITensor":
        """
        Broadcast both operands to their common shape and apply `kernel`.
        """
        other_t = self._lift(other)
        try:
            out_shape = broadcast_shape(self.shape, other_t.shape)
        except ShapeMismatchError as e:
            raise ShapeMismatchError(self.shape, other_t.shape, op=op) from e

        a = self if self.shape == out_shape else self.broadcast_to(out_shape)
        b = other_t if other_t.shape == out_shape else other_t.broadcast_to(out_shape)
        out = kernel(a._data, b._data)
        return self._wrap(np.asarray(out, dtype=self.dtype))

    # ----------------------------
    # Addition
    # ----------------------------
    def add(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise addition ``self + other`` with broadcasting.
        """
        return self._binary_op(other, "add", np.add)

    def __add__(self, other: Union["ITensor", Number]) -> "ITensor":
        return self.add(other)

    def __radd__(self, other: Number) -> "ITensor":
        return self._lift(other).add(self)

    # ----------------------------
    # Subtraction
    # ----------------------------
    def sub(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise subtraction ``self - other`` with broadcasting.
        """
        return self._binary_op(other, "sub", np.subtract)

    def __sub__(self, other: Union["ITensor", Number]) -> "ITensor":
        return self.sub(other)

    def __rsub__(self, other: Number) -> "ITensor":
        return self._lift(other).sub(self)

    # ----------------------------
    # Multiplication
    # ----------------------------
    def mul(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise multiplication ``self * other`` with broadcasting.
        """
        return self._binary_op(other, "mul", np.multiply)

    def __mul__(self, other: Union["ITensor", Number]) -> "ITensor":
        return self.mul(other)

    def __rmul__(self, other: Number) -> "ITensor":
        return self._lift(other).mul(self)

    # ----------------------------
    # True division
    # ----------------------------
    def div(self: ITensor, other: Union["ITensor", Number]) -> "ITensor":
        """
        Elementwise true division ``self / other`` with broadcasting.

        Raises
        ------
        DivisionDegenerateError
            If the divisor has zero elements while the dividend does not.
        ShapeMismatchError
            If the operands are not broadcast-compatible.

        Notes
        -----
        Division by a zero *value* follows IEEE semantics (inf / nan), as in
        NumPy; only a zero-*sized* divisor is rejected.
        """
        other_t = self._lift(other)
        if other_t.numel() == 0 and self.numel() > 0:
            raise DivisionDegenerateError(self.shape, other_t.shape)
        return self._binary_op(other_t, "div", np.true_divide)

    def __truediv__(self, other: Union["ITensor", Number]) -> "ITensor":
        return self.div(other)

    def __rtruediv__(self, other: Number) -> "ITensor":
        return self._lift(other).div(self)
