"""
Tensor interface definitions.

This module defines the domain-level interface for dense numeric tensors using
structural typing. The interface captures the primitives that differentiable
functions are allowed to call: shape queries, elementwise arithmetic,
reductions, shape transforms and the two broadcasting primitives
(`broadcast_to` / `sum_to`).

Notes
-----
- Tensors carry no autograd state. Gradient tracking lives on the graph node
  (`Variable`) that wraps a tensor.
- Functions must not assume a storage layout beyond shape/index semantics.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Union, runtime_checkable

from ._shape import Shape

Number = Union[int, float]
Axis = Optional[Union[int, Sequence[int]]]


@runtime_checkable
class ITensor(Protocol):
    """
    Dense n-dimensional tensor interface.

    An `ITensor` owns (or shares) a flat numeric buffer together with a
    `Shape` mapping logical multi-indices to buffer offsets. Elementwise,
    reduction and broadcast results always live in a newly allocated buffer;
    `reshape` / `transpose` may return views.
    """

    # ---------------------------------------------------------------------
    # Shape queries
    # ---------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        """
        Return the shape of the tensor.
        """
        ...

    @property
    def ndim(self) -> int:
        """
        Return the number of dimensions.
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements.
        """
        ...

    # ---------------------------------------------------------------------
    # Elementwise arithmetic (broadcasting)
    # ---------------------------------------------------------------------
    def add(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def sub(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def mul(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def div(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def neg(self) -> "ITensor": ...

    def square(self) -> "ITensor": ...

    def exp(self) -> "ITensor": ...

    def log(self) -> "ITensor": ...

    def clip(self, min_value: Optional[float], max_value: Optional[float]) -> "ITensor":
        ...

    # ---------------------------------------------------------------------
    # Reductions
    # ---------------------------------------------------------------------
    def sum(self, axis: Axis = None, keepdims: bool = False) -> "ITensor": ...

    def mean(self, axis: Axis = None, keepdims: bool = False) -> "ITensor": ...

    # ---------------------------------------------------------------------
    # Shape transforms and broadcasting primitives
    # ---------------------------------------------------------------------
    def reshape(self, shape: Sequence[int]) -> "ITensor": ...

    def transpose(self, *axes: int) -> "ITensor": ...

    def broadcast_to(self, shape: Sequence[int]) -> "ITensor":
        """
        Expand this tensor to `shape` (replicating size-1 / missing axes).
        """
        ...

    def sum_to(self, shape: Sequence[int]) -> "ITensor":
        """
        Collapse this tensor onto `shape`; the adjoint of `broadcast_to`.
        """
        ...

    # ---------------------------------------------------------------------
    # Element access / host interop
    # ---------------------------------------------------------------------
    def get(self, index: Sequence[int]) -> float: ...

    def set(self, index: Sequence[int], value: float) -> None: ...

    def item(self) -> float: ...

    def to_numpy(self) -> Any:
        """
        Return the backend-native array (a NumPy ndarray in this backend).
        """
        ...
