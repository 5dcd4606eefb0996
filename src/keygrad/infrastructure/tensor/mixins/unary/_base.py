"""
Unary operation mixin defining elementwise Tensor unary operations.

This module implements :class:`TensorMixinUnary`, which provides
``neg``, ``square``, ``exp``, ``log``, ``sqrt`` and ``clip`` on the
concrete `Tensor`. Every operation returns a new tensor of the same shape
and never mutates its input.

Derivative rules for these operations are implemented by the matching
autograd functions in ``infrastructure.functions._unary``; the mixin only
performs the forward numerical kernel.
"""

from __future__ import annotations

from abc import ABC
from typing import Optional

import numpy as np

from .....domain._tensor import ITensor


class TensorMixinUnary(ABC):
    """
    Mixin implementing elementwise unary tensor operations.
    """

    def _unary(self: ITensor, out: np.ndarray) -> "ITensor":
        return self._wrap(np.asarray(out, dtype=self.dtype))

    def neg(self: ITensor) -> "ITensor":
        """
        Elementwise negation ``-self``.
        """
        return self._unary(np.negative(self._data))

    def __neg__(self) -> "ITensor":
        return self.neg()

    def square(self: ITensor) -> "ITensor":
        """
        Elementwise square ``self * self``.
        """
        return self._unary(np.square(self._data))

    def exp(self: ITensor) -> "ITensor":
        """
        Compute the elementwise exponential of the tensor.

        Returns
        -------
        ITensor
            A tensor of the same shape as ``self`` with ``exp`` applied
            elementwise.
        """
        return self._unary(np.exp(self._data))

    def log(self: ITensor) -> "ITensor":
        """
        Compute the elementwise natural logarithm of the tensor.

        Notes
        -----
        Non-positive entries produce ``-inf`` / ``nan`` as in NumPy.
        """
        return self._unary(np.log(self._data))

    def sqrt(self: ITensor) -> "ITensor":
        """
        Compute the elementwise square root of the tensor.
        """
        return self._unary(np.sqrt(self._data))

    def clip(
        self: ITensor,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
    ) -> "ITensor":
        """
        Clamp every element into ``[min_value, max_value]``.

        Parameters
        ----------
        min_value : Optional[float]
            Lower bound, or None for no lower bound.
        max_value : Optional[float]
            Upper bound, or None for no upper bound.

        Raises
        ------
        ValueError
            If both bounds are None, or if ``min_value > max_value``.
        """
        if min_value is None and max_value is None:
            raise ValueError("clip requires at least one of min_value / max_value")
        if min_value is not None and max_value is not None and min_value > max_value:
            raise ValueError(
                f"clip lower bound {min_value} exceeds upper bound {max_value}"
            )
        return self._unary(np.clip(self._data, min_value, max_value))
