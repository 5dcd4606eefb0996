"""
Differentiable reductions and the broadcasting pair.

- `Sum` / `Mean` / `Variance` reduce over an axis, several axes or all
  elements. Their backward passes restore the reduced axes as size-1 dims
  and then expand the gradient back to the input shape.
- `BroadcastTo` and `SumTo` are mutual adjoints: the gradient of an
  expansion is a collapse and vice versa.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Union

from ...domain._shape import Shape
from ...domain._tensor import ITensor
from ..autograd._function import GraphFunction
from ..tensor.mixins.reduction._base import normalize_axes

Axis = Optional[Union[int, Sequence[int]]]


def _kept_shape(in_shape: Shape, axes: Optional[Tuple[int, ...]]) -> Shape:
    """
    Shape of a ``keepdims=True`` reduction of `in_shape` over `axes`.
    """
    if axes is None:
        return Shape((1,) * len(in_shape))
    return Shape(1 if i in axes else d for i, d in enumerate(in_shape))


def _reduced_count(in_shape: Shape, axes: Optional[Tuple[int, ...]]) -> int:
    if axes is None:
        return in_shape.numel
    n = 1
    for a in axes:
        n *= in_shape[a]
    return n


class _AxisReduction(GraphFunction):
    def __init__(self, axis: Axis = None, keepdims: bool = False) -> None:
        super().__init__()
        self.axis = axis
        self.keepdims = bool(keepdims)

    def _remember(self, x: ITensor) -> None:
        self.ctx.saved_meta["in_shape"] = x.shape
        self.ctx.saved_meta["axes"] = normalize_axes(self.axis, x.ndim)

    def _expand_grad(self, grad_out: ITensor) -> ITensor:
        """
        Bring `grad_out` back to the input shape.
        """
        in_shape = self.ctx.saved_meta["in_shape"]
        kept = _kept_shape(in_shape, self.ctx.saved_meta["axes"])
        return grad_out.reshape(kept).broadcast_to(in_shape)


class Sum(_AxisReduction):
    """
    Sum over `axis`; the gradient is broadcast back unchanged.
    """

    def forward(self, x: ITensor) -> ITensor:
        self._remember(x)
        return x.sum(axis=self.axis, keepdims=self.keepdims)

    def backward(self, grad_out: ITensor):
        return (self._expand_grad(grad_out),)


class Mean(_AxisReduction):
    """
    Mean over `axis`; the gradient is broadcast back divided by the number
    of reduced elements.
    """

    def forward(self, x: ITensor) -> ITensor:
        self._remember(x)
        return x.mean(axis=self.axis, keepdims=self.keepdims)

    def backward(self, grad_out: ITensor):
        meta = self.ctx.saved_meta
        n = _reduced_count(meta["in_shape"], meta["axes"])
        return (self._expand_grad(grad_out).div(float(max(n, 1))),)


class Variance(_AxisReduction):
    """
    Population variance over `axis`.

    ``dvar/dx = 2 (x - mean) / n``, scaled by the broadcast output gradient.
    """

    def forward(self, x: ITensor) -> ITensor:
        self._remember(x)
        self.ctx.save_for_backward(x)
        return x.var(axis=self.axis, keepdims=self.keepdims)

    def backward(self, grad_out: ITensor):
        (x,) = self.ctx.saved_tensors
        meta = self.ctx.saved_meta
        n = _reduced_count(meta["in_shape"], meta["axes"])
        centered = x.sub(x.mean(axis=meta["axes"], keepdims=True))
        scale = centered.mul(2.0 / max(n, 1))
        return (scale.mul(self._expand_grad(grad_out)),)


class SumTo(GraphFunction):
    """
    Collapse onto `shape` (sum over broadcast axes); adjoint is `broadcast_to`.
    """

    def __init__(self, shape: Sequence[int]) -> None:
        super().__init__()
        self.shape = Shape(shape)

    def forward(self, x: ITensor) -> ITensor:
        self.ctx.saved_meta["in_shape"] = x.shape
        return x.sum_to(self.shape)

    def backward(self, grad_out: ITensor):
        return (grad_out.broadcast_to(self.ctx.saved_meta["in_shape"]),)


class BroadcastTo(GraphFunction):
    """
    Expand onto `shape`; adjoint is `sum_to`.
    """

    def __init__(self, shape: Sequence[int]) -> None:
        super().__init__()
        self.shape = Shape(shape)

    def forward(self, x: ITensor) -> ITensor:
        self.ctx.saved_meta["in_shape"] = x.shape
        return x.broadcast_to(self.shape)

    def backward(self, grad_out: ITensor):
        return (grad_out.sum_to(self.ctx.saved_meta["in_shape"]),)


def sum(x, axis: Axis = None, keepdims: bool = False):
    """
    Differentiable sum over `axis` (all elements when None).
    """
    return Sum(axis, keepdims)(x)


def mean(x, axis: Axis = None, keepdims: bool = False):
    """
    Differentiable mean over `axis` (all elements when None).
    """
    return Mean(axis, keepdims)(x)


def variance(x, axis: Axis = None, keepdims: bool = False):
    return Variance(axis, keepdims)(x)


def sum_to(x, shape: Sequence[int]):
    return SumTo(shape)(x)


def broadcast_to(x, shape: Sequence[int]):
    return BroadcastTo(shape)(x)
