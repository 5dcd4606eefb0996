"""
Reduction mixin defining Tensor reduction operations.

This module implements :class:`TensorMixinReduction`, which provides
``sum``, ``mean``, ``max`` and ``var`` on the concrete `Tensor`.

Every reduction accepts:
- ``axis=None``: reduce over all elements and return a rank-0 tensor,
- an ``int`` axis (negative values count from the end),
- a tuple of axes,

and a ``keepdims`` flag which, when True, keeps the reduced axes with
size 1 so the result broadcasts against the input.
"""

from __future__ import annotations

from abc import ABC
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .....domain._tensor import ITensor

Axis = Optional[Union[int, Sequence[int]]]


def normalize_axes(axis: Axis, ndim: int) -> Optional[Tuple[int, ...]]:
    """
    Normalize `axis` into a sorted tuple of non-negative axes.

    Parameters
    ----------
    axis : Optional[int | Sequence[int]]
        Axis specification. None means "all axes" and is returned as None.
    ndim : int
        Rank of the tensor being reduced.

    Returns
    -------
    Optional[tuple[int, ...]]
        Sorted, de-duplicated non-negative axes, or None.

    Raises
    ------
    TypeError
        If an axis is not an integer.
    ValueError
        If an axis is out of range or repeated.
    """
    if axis is None:
        return None
    axes = (axis,) if isinstance(axis, (int, np.integer)) else tuple(axis)

    out = []
    for a in axes:
        if isinstance(a, bool) or not isinstance(a, (int, np.integer)):
            raise TypeError(f"axis must be an int or a sequence of ints, got {a!r}")
        a = int(a)
        if not -ndim <= a < ndim:
            raise ValueError(f"axis {a} is out of bounds for tensor of rank {ndim}")
        out.append(a % ndim)
    if len(set(out)) != len(out):
        raise ValueError(f"repeated axis in {axis!r}")
    return tuple(sorted(out))


class TensorMixinReduction(ABC):
    """
    Mixin implementing reductions over one, several or all axes.
    """

    def _reduce(self: ITensor, kernel, axis: Axis, keepdims: bool) -> "ITensor":
        axes = normalize_axes(axis, self.ndim)
        out = kernel(self._data, axis=axes, keepdims=keepdims)
        return self._wrap(np.asarray(out, dtype=self.dtype))

    def sum(self: ITensor, axis: Axis = None, keepdims: bool = False) -> "ITensor":
        """
        Sum elements over the given axes.

        Parameters
        ----------
        axis : Optional[int | Sequence[int]]
            Axes to reduce. None reduces over all elements.
        keepdims : bool
            Whether to retain reduced axes with size 1.

        Returns
        -------
        ITensor
            The reduced tensor.
        """
        return self._reduce(np.sum, axis, keepdims)

    def mean(self: ITensor, axis: Axis = None, keepdims: bool = False) -> "ITensor":
        """
        Arithmetic mean over the given axes.

        Notes
        -----
        The mean of an empty reduction is ``nan``, as in NumPy.
        """
        return self._reduce(np.mean, axis, keepdims)

    def max(self: ITensor, axis: Axis = None, keepdims: bool = False) -> "ITensor":
        """
        Maximum over the given axes.

        Raises
        ------
        ValueError
            If the reduction is over zero elements.
        """
        if self.numel() == 0:
            raise ValueError("max() of an empty tensor is undefined")
        return self._reduce(np.max, axis, keepdims)

    def var(self: ITensor, axis: Axis = None, keepdims: bool = False) -> "ITensor":
        """
        Population variance (``ddof=0``) over the given axes.
        """
        return self._reduce(np.var, axis, keepdims)
