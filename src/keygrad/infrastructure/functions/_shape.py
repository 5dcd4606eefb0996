"""
Differentiable shape transforms: reshape and transpose.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._tensor import ITensor
from ..autograd._function import GraphFunction


class Reshape(GraphFunction):
    """
    Reinterpret the input with a new shape of the same element count.
    """

    def __init__(self, shape: Sequence[int]) -> None:
        super().__init__()
        self.shape = tuple(shape)

    def forward(self, x: ITensor) -> ITensor:
        self.ctx.saved_meta["in_shape"] = x.shape
        return x.reshape(self.shape)

    def backward(self, grad_out: ITensor):
        return (grad_out.reshape(self.ctx.saved_meta["in_shape"]),)


class Transpose(GraphFunction):
    """
    Permute axes (reverse them when `axes` is empty).

    The backward pass applies the inverse permutation.
    """

    def __init__(self, axes: Sequence[int] = ()) -> None:
        super().__init__()
        self.axes = tuple(axes)

    def forward(self, x: ITensor) -> ITensor:
        y = x.transpose(*self.axes)
        if self.axes:
            perm = tuple(int(a) % x.ndim for a in self.axes)
        else:
            perm = tuple(reversed(range(x.ndim)))
        self.ctx.saved_meta["perm"] = perm
        return y

    def backward(self, grad_out: ITensor):
        inverse = tuple(int(i) for i in np.argsort(self.ctx.saved_meta["perm"]))
        return (grad_out.transpose(*inverse),)


def reshape(x, shape: Sequence[int]):
    return Reshape(shape)(x)


def transpose(x, *axes: int):
    """
    Differentiable axis permutation; no axes reverses the axis order.
    """
    return Transpose(axes)(x)
