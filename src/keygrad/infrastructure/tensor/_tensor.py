"""
Concrete Tensor implementation (NumPy backend).

This module provides a concrete `Tensor` implementation that satisfies the
domain-level `ITensor` protocol. A tensor is a NumPy ndarray buffer plus a
`Shape`; every operation is contributed by a focused mixin:

- `TensorMixinArithmetic`: broadcasting add / sub / mul / div
- `TensorMixinUnary`: neg / square / exp / log / sqrt / clip
- `TensorMixinReduction`: sum / mean / max / var
- `TensorMixinMemory`: factories, views, element access, host interop
- `TensorMixinBroadcast`: broadcast_to / sum_to

Design notes
------------
- This file sits in the infrastructure layer: it imports NumPy and provides
  the concrete runtime implementation used by the autograd functions.
- Tensors carry no autograd state. Gradient tracking belongs to `Variable`
  (see ``infrastructure.autograd``), which wraps a tensor.
- The element dtype defaults to `EngineConfig.dtype` (float32).
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._shape import Shape, ShapeLike
from ...domain._tensor import ITensor
from .._config import get_config

from .mixins.arithmetic import TensorMixinArithmetic
from .mixins.unary import TensorMixinUnary
from .mixins.reduction import TensorMixinReduction
from .mixins.memory import TensorMixinMemory, TensorMixinBroadcast

Number = Union[int, float]


class Tensor(
    TensorMixinArithmetic,
    TensorMixinUnary,
    TensorMixinReduction,
    TensorMixinMemory,
    TensorMixinBroadcast,
    ITensor,
):
    """
    Concrete dense tensor backed by a NumPy ndarray.

    Parameters
    ----------
    shape : ShapeLike
        Tensor shape. The buffer is allocated and zero-initialized.
    dtype : optional
        Element dtype. Defaults to the configured engine dtype.

    Notes
    -----
    - `_data` always holds exactly ``shape.numel`` elements.
    - `_shared` is True while `_data` may alias another tensor's buffer
      (see `TensorMixinMemory.set`).
    """

    __array_ufunc__ = None

    def __init__(self, shape: ShapeLike, *, dtype=None) -> None:
        self._shape = Shape(shape)
        self._dtype = np.dtype(dtype) if dtype is not None else get_config().np_dtype
        self._data = np.zeros(self._shape, dtype=self._dtype)
        self._shared = False

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Tensor":
        """
        Wrap an ndarray without copying it.

        Only used internally for freshly computed arrays or for views; callers
        are responsible for flagging shared buffers.
        """
        obj = cls.__new__(cls)
        obj._data = arr
        obj._shape = Shape(arr.shape)
        obj._dtype = arr.dtype
        obj._shared = False
        return obj

    # ----------------------------
    # Metadata
    # ----------------------------
    @property
    def shape(self) -> Shape:
        """
        Return the tensor shape.
        """
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def dtype(self) -> np.dtype:
        """
        Return the element dtype of this tensor.
        """
        return self._dtype

    def numel(self) -> int:
        """
        Return the total number of elements in the tensor.
        """
        return self._shape.numel

    def size(self, dim: Optional[int] = None):
        """
        Return the full shape, or the extent of one dimension.
        """
        if dim is None:
            return self._shape
        return self._shape[dim]

    def __len__(self) -> int:
        if not self._shape:
            raise TypeError("len() of a rank-0 tensor")
        return self._shape[0]

    def __repr__(self) -> str:
        return f"Tensor(shape={tuple(self._shape)}, dtype={self._dtype})"

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        out = self._data if dtype is None else self._data.astype(dtype)
        return out.copy() if copy else out

    # ----------------------------
    # Linear algebra / composites
    # ----------------------------
    def matmul(self, other: "Tensor") -> "Tensor":
        """
        Matrix product following NumPy `matmul` semantics.

        Raises
        ------
        ShapeMismatchError
            If the contracted dimensions differ or the batch dimensions do
            not broadcast.
        """
        if self.ndim == 0 or other.ndim == 0:
            raise ShapeMismatchError(
                self.shape, other.shape, op="matmul", detail="operands must have rank >= 1"
            )
        try:
            out = np.matmul(self._data, other._data)
        except ValueError as e:
            raise ShapeMismatchError(self.shape, other.shape, op="matmul") from e
        return self._wrap(np.asarray(out, dtype=self._dtype))

    def __matmul__(self, other: "Tensor") -> "Tensor":
        return self.matmul(other)

    def softmax(self, axis: int = -1) -> "Tensor":
        """
        Numerically stable softmax along `axis`.

        The per-slice maximum is subtracted before exponentiation.
        """
        shifted = self._data - np.max(self._data, axis=axis, keepdims=True)
        e = np.exp(shifted)
        return self._wrap(np.asarray(e / np.sum(e, axis=axis, keepdims=True), dtype=self._dtype))
