"""
Tensor memory / construction mixin.

This module defines `TensorMixinMemory`, a focused mixin that provides
factory constructors (zeros/ones/full/from_numpy), host interop, views and
element access for a concrete `Tensor` that satisfies the domain-level
`ITensor` protocol.

Buffer sharing
--------------
`reshape` and `transpose` return *views* whenever NumPy can express the
result without copying. A view and its source share one buffer, so both
are flagged `_shared`. The only in-place element write, `set`, is
copy-on-write: a shared tensor first detaches onto a private copy of its
buffer and only then writes, so a write through one tensor is never
observable through another. All other operations allocate fresh buffers.

Notes
-----
- The mixin assumes the concrete `Tensor` class provides `_wrap`, `_data`,
  `_shared`, `shape` and `dtype`.
- None of these helpers record autograd history.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Sequence, Type, Union

import numpy as np

from .....domain._errors import ShapeMismatchError
from .....domain._shape import Shape, ShapeLike
from .....domain._tensor import ITensor
from ...._config import get_config

Number = Union[int, float]


def _shape_args(shape: tuple) -> tuple:
    """Accept both ``t.reshape(2, 3)`` and ``t.reshape((2, 3))``."""
    if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
        return tuple(shape[0])
    return tuple(shape)


class TensorMixinMemory(ABC):
    """
    Mixin that implements tensor construction and memory-management helpers.

    It provides:

    - Factory constructors: `zeros`, `ones`, `full`, `from_numpy`
    - Host interop: `to_numpy`, `copy_from_numpy`, `fill`, `clone`, `item`
    - Views: `reshape`, `transpose`, `permute`, `T`
    - Element access: `get`, copy-on-write `set`
    """

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def zeros(cls: Type[ITensor], shape: ShapeLike, *, dtype=None) -> "ITensor":
        """
        Create a tensor filled with zeros.

        Parameters
        ----------
        shape : ShapeLike
            Shape of the output tensor.
        dtype : optional
            Element dtype. Defaults to the configured engine dtype.
        """
        return cls(shape, dtype=dtype)

    @classmethod
    def ones(cls: Type[ITensor], shape: ShapeLike, *, dtype=None) -> "ITensor":
        """
        Create a tensor filled with ones.
        """
        return cls.full(shape, 1.0, dtype=dtype)

    @classmethod
    def full(
        cls: Type[ITensor], shape: ShapeLike, value: Number, *, dtype=None
    ) -> "ITensor":
        """
        Create a tensor filled with a constant value.

        Parameters
        ----------
        shape : ShapeLike
            Shape of the output tensor.
        value : Number
            Fill value.
        dtype : optional
            Element dtype. Defaults to the configured engine dtype.
        """
        dt = np.dtype(dtype) if dtype is not None else get_config().np_dtype
        return cls._wrap(np.full(Shape(shape), value, dtype=dt))

    @classmethod
    def from_numpy(cls: Type[ITensor], arr: Any, *, dtype=None) -> "ITensor":
        """
        Create a tensor holding a private copy of array-like data.

        Parameters
        ----------
        arr : array_like
            NumPy array, nested list or scalar.
        dtype : optional
            Element dtype. Defaults to the configured engine dtype.

        Returns
        -------
        ITensor
            A tensor whose buffer is not shared with `arr`.
        """
        dt = np.dtype(dtype) if dtype is not None else get_config().np_dtype
        return cls._wrap(np.array(arr, dtype=dt, copy=True))

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def to_numpy(self: ITensor) -> np.ndarray:
        """
        Return a copy of the tensor contents as a NumPy array.
        """
        return self._data.copy()

    def copy_from_numpy(self: ITensor, arr: Any) -> None:
        """
        Replace the contents of this tensor with `arr`.

        The tensor is rebound to a fresh buffer, so views previously taken
        from it keep their old values.

        Raises
        ------
        ShapeMismatchError
            If `arr` does not have exactly this tensor's shape.
        """
        arr = np.asarray(arr)
        if Shape(arr.shape) != self.shape:
            raise ShapeMismatchError(self.shape, arr.shape, op="copy_from_numpy")
        self._data = np.array(arr, dtype=self.dtype, copy=True)
        self._shared = False

    def fill(self: ITensor, value: Number) -> None:
        """
        Set every element to `value` (copy-on-write).
        """
        self._data = np.full(self.shape, value, dtype=self.dtype)
        self._shared = False

    def clone(self: ITensor) -> "ITensor":
        """
        Return a deep copy backed by a new buffer.
        """
        return self._wrap(self._data.copy())

    copy = clone

    def item(self: ITensor) -> float:
        """
        Return the single element of a one-element tensor as a Python float.

        Raises
        ------
        ValueError
            If the tensor does not hold exactly one element.
        """
        if self.numel() != 1:
            raise ValueError(
                f"item() requires a tensor with one element, got shape {tuple(self.shape)}"
            )
        return float(self._data.reshape(-1)[0])

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def _as_view(self: ITensor, arr: np.ndarray) -> "ITensor":
        out = self._wrap(arr)
        if np.shares_memory(arr, self._data):
            self._shared = True
            out._shared = True
        return out

    def view(self: ITensor) -> "ITensor":
        """
        Return a new tensor over the same buffer.

        Both tensors are flagged shared, so a later `set` on either one
        copies first and the other keeps its values.
        """
        return self._as_view(self._data.view())

    def reshape(self: ITensor, *shape) -> "ITensor":
        """
        Reinterpret the tensor with a new shape of the same element count.

        A single ``-1`` entry is inferred from the remaining dimensions.

        Parameters
        ----------
        *shape : int or Sequence[int]
            Target shape, either unpacked or as one sequence.

        Returns
        -------
        ITensor
            A view when the layout permits, otherwise a copy.

        Raises
        ------
        ShapeMismatchError
            If the element counts differ or `-1` cannot be inferred.
        """
        dims = [int(d) for d in _shape_args(shape)]
        if dims.count(-1) > 1:
            raise ShapeMismatchError(self.shape, dims, op="reshape", detail="more than one -1")
        if -1 in dims:
            known = 1
            for d in dims:
                if d != -1:
                    known *= d
            if known == 0 or self.numel() % known != 0:
                raise ShapeMismatchError(self.shape, dims, op="reshape")
            dims[dims.index(-1)] = self.numel() // known

        new_shape = Shape(dims)
        if new_shape.numel != self.numel():
            raise ShapeMismatchError(
                self.shape,
                new_shape,
                op="reshape",
                detail=f"{self.numel()} elements vs {new_shape.numel}",
            )
        return self._as_view(self._data.reshape(new_shape))

    def transpose(self: ITensor, *axes: int) -> "ITensor":
        """
        Permute the axes of the tensor.

        With no arguments the axis order is reversed (matrix transpose for
        rank 2). Otherwise `axes` must be a permutation of
        ``range(self.ndim)``; negative axes are allowed.

        Returns
        -------
        ITensor
            A view sharing this tensor's buffer.

        Raises
        ------
        ValueError
            If `axes` is not a permutation of the tensor's axes.
        """
        if not axes:
            perm = tuple(reversed(range(self.ndim)))
        else:
            perm = tuple(int(a) % self.ndim if self.ndim else int(a) for a in _shape_args(axes))
            if sorted(perm) != list(range(self.ndim)):
                raise ValueError(
                    f"axes {axes!r} is not a permutation of a rank {self.ndim} tensor"
                )
        return self._as_view(np.transpose(self._data, perm))

    def permute(self: ITensor, *axes: int) -> "ITensor":
        """
        Alias of `transpose` that requires an explicit axis order.
        """
        if not axes:
            raise ValueError("permute() requires an explicit axis order")
        return self.transpose(*axes)

    @property
    def T(self: ITensor) -> "ITensor":
        return self.transpose()

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _check_index(self: ITensor, index: Sequence[int]) -> tuple:
        if isinstance(index, (int, np.integer)):
            index = (index,)
        index = tuple(int(i) for i in index)
        if len(index) != self.ndim:
            raise IndexError(
                f"expected {self.ndim} indices for shape {tuple(self.shape)}, got {len(index)}"
            )
        for i, (ix, dim) in enumerate(zip(index, self.shape)):
            if not 0 <= ix < dim:
                raise IndexError(f"index {ix} is out of bounds for axis {i} with size {dim}")
        return index

    def get(self: ITensor, index: Sequence[int]) -> float:
        """
        Read the element at a full multi-index.

        Raises
        ------
        IndexError
            If the index rank or any coordinate is out of range.
        """
        return float(self._data[self._check_index(index)])

    def set(self: ITensor, index: Sequence[int], value: Number) -> None:
        """
        Write one element (copy-on-write).

        If this tensor shares its buffer with a view or a source, it first
        detaches onto a private copy so the write is invisible elsewhere.

        Raises
        ------
        IndexError
            If the index rank or any coordinate is out of range.
        """
        index = self._check_index(index)
        if self._shared or not self._data.flags.writeable:
            self._data = self._data.copy()
            self._shared = False
        self._data[index] = value
