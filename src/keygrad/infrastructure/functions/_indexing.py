"""
Differentiable indexing along one dimension.

- `Select` picks one index along `dim` and drops that dimension.
- `SliceRange` keeps ``[start, end)`` along `dim`.
- `split` cuts a tensor into consecutive chunks of `size` along `dim`.

Both functions scatter the incoming gradient into a zero tensor of the input
shape, so positions that were not read receive a zero gradient. `split` is a
composition of `SliceRange` calls, giving one single-output node per chunk;
their partials accumulate into the shared input like any fan-out.
"""

from __future__ import annotations

from typing import List

import numpy as np

from ...domain._tensor import ITensor
from ..autograd._function import GraphFunction
from ..tensor._tensor import Tensor


def _resolve_dim(dim: int, ndim: int, op: str) -> int:
    actual = dim + ndim if dim < 0 else dim
    if not 0 <= actual < ndim:
        raise ValueError(f"{op}: dimension {dim} out of range for rank {ndim}")
    return actual


def _scatter(grad_out: ITensor, in_shape, dim: int, key) -> ITensor:
    full = np.zeros(in_shape, dtype=grad_out.dtype)
    index = [slice(None)] * len(in_shape)
    index[dim] = key
    full[tuple(index)] = grad_out.to_numpy()
    return Tensor.from_numpy(full, dtype=grad_out.dtype)


class Select(GraphFunction):
    """
    ``y = x[..., index, ...]`` along `dim`; the output drops `dim`.

    Negative `dim` / `index` count from the end.

    Raises
    ------
    ValueError
        If `dim` is out of range.
    IndexError
        If `index` is out of range for `dim`.
    """

    def __init__(self, dim: int, index: int) -> None:
        super().__init__()
        self.dim = int(dim)
        self.index = int(index)

    def forward(self, x: ITensor) -> ITensor:
        dim = _resolve_dim(self.dim, x.ndim, "select")
        size = x.shape[dim]
        index = self.index + size if self.index < 0 else self.index
        if not 0 <= index < size:
            raise IndexError(
                f"select: index {self.index} out of range [0, {size}) for dimension {dim}"
            )
        self.ctx.saved_meta.update(in_shape=x.shape, dim=dim, index=index)
        out = np.take(x.to_numpy(), index, axis=dim)
        return Tensor.from_numpy(out, dtype=x.dtype)

    def backward(self, grad_out: ITensor):
        meta = self.ctx.saved_meta
        return (_scatter(grad_out, meta["in_shape"], meta["dim"], meta["index"]),)


class SliceRange(GraphFunction):
    """
    ``y = x[..., start:end, ...]`` along `dim`.

    Negative bounds count from the end; bounds are then clamped into
    ``[0, size]`` and an inverted range yields an empty slice.
    """

    def __init__(self, dim: int, start: int, end: int) -> None:
        super().__init__()
        self.dim = int(dim)
        self.start = int(start)
        self.end = int(end)

    def forward(self, x: ITensor) -> ITensor:
        dim = _resolve_dim(self.dim, x.ndim, "slice_range")
        size = x.shape[dim]
        start = self.start + size if self.start < 0 else self.start
        end = self.end + size if self.end < 0 else self.end
        start = max(start, 0)
        end = min(end, size)
        start = min(start, end)

        self.ctx.saved_meta.update(in_shape=x.shape, dim=dim, key=slice(start, end))
        index = [slice(None)] * x.ndim
        index[dim] = slice(start, end)
        return Tensor.from_numpy(x.to_numpy()[tuple(index)], dtype=x.dtype)

    def backward(self, grad_out: ITensor):
        meta = self.ctx.saved_meta
        return (_scatter(grad_out, meta["in_shape"], meta["dim"], meta["key"]),)


def select(x, dim: int, index: int):
    return Select(dim, index)(x)


def slice_range(x, dim: int, start: int, end: int):
    """
    Differentiable slice ``[start, end)`` along `dim`.
    """
    return SliceRange(dim, start, end)(x)


def split(x, size: int, dim: int = 0) -> List:
    """
    Split `x` into chunks of `size` along `dim`; the last chunk may be
    shorter.

    Raises
    ------
    ValueError
        If `size` is not positive or `dim` is out of range.
    """
    from ..autograd._variable import as_variable

    if size <= 0:
        raise ValueError(f"split size must be positive, got {size}")
    x = as_variable(x)
    dim = _resolve_dim(dim, x.ndim, "split")
    extent = x.shape[dim]
    return [slice_range(x, dim, start, min(start + size, extent)) for start in range(0, extent, size)]
