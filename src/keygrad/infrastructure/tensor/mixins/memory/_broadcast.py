"""
Broadcasting primitives: `broadcast_to` and its adjoint `sum_to`.

Conceptually, `sum_to` is the inverse of `broadcast_to`:
- Forward: broadcast a smaller tensor to a larger shape for elementwise ops.
- Backward: sum-reduce the gradient over the broadcasted axes to recover the
  gradient in the original smaller shape.

Both primitives always return a tensor backed by a newly allocated buffer.
"""

from __future__ import annotations

from abc import ABC

import numpy as np

from .....domain._errors import ShapeMismatchError
from .....domain._shape import Shape, ShapeLike, is_broadcastable_to, reduce_axes_for
from .....domain._tensor import ITensor


class TensorMixinBroadcast(ABC):
    """
    Mixin implementing `broadcast_to` / `sum_to` for a concrete `Tensor`.
    """

    def broadcast_to(self: ITensor, shape: ShapeLike) -> "ITensor":
        """
        Expand this tensor to `shape` by replicating size-1 and missing
        leading axes.

        Parameters
        ----------
        shape : ShapeLike
            Destination shape.

        Returns
        -------
        ITensor
            A new tensor of shape `shape`.

        Raises
        ------
        ShapeMismatchError
            If this tensor's shape does not broadcast to `shape`.
        """
        target = Shape(shape)
        if not is_broadcastable_to(self.shape, target):
            raise ShapeMismatchError(self.shape, target, op="broadcast_to")
        return self._wrap(np.array(np.broadcast_to(self._data, target), copy=True))

    def sum_to(self: ITensor, shape: ShapeLike) -> "ITensor":
        """
        Reduce this tensor to `shape` by summing over broadcast axes.

        `shape` is left-padded with ones to this tensor's rank; every axis
        where the padded target is 1 and the source is not is summed with
        ``keepdims=True``, and the result is finally reshaped to `shape`.

        Parameters
        ----------
        shape : ShapeLike
            Target (pre-broadcast) shape.

        Returns
        -------
        ITensor
            A new tensor of shape `shape`.

        Raises
        ------
        ShapeMismatchError
            If `shape` could not have been broadcast to this tensor's shape.
        """
        target = Shape(shape)
        axes = reduce_axes_for(self.shape, target)
        out = self._data
        if axes:
            out = np.sum(out, axis=axes, keepdims=True)
        out = np.array(out, dtype=self.dtype, copy=True).reshape(target)
        return self._wrap(out)
