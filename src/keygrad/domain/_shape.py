"""
Shape value type and broadcasting rules.

This module defines `Shape`, an immutable ordered sequence of non-negative
dimension sizes, together with the broadcasting rules used by every
elementwise tensor operation:

- `is_broadcastable_to(src, dst)`: can `src` be expanded to `dst`?
- `broadcast_shape(a, b)`: the common shape two operands expand to.

Broadcasting follows NumPy semantics. Shapes are compared from the trailing
(rightmost) dimension; the shorter shape is conceptually left-padded with
ones, and each aligned pair must either be equal or contain a 1.

The module is backend-agnostic and intentionally free of NumPy so it can be
used from both the domain and infrastructure layers.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

from ._errors import ShapeMismatchError

ShapeLike = Union["Shape", Sequence[int], int]


class Shape(tuple):
    """
    Immutable tensor shape.

    `Shape` subclasses `tuple` so that it compares equal to plain tuples,
    hashes like a tuple, and can be passed directly to NumPy. Every derived
    shape (padding, broadcasting, reshaping) is a new instance.

    Parameters
    ----------
    dims : Iterable[int] or int
        Dimension sizes. A bare integer is treated as a rank-1 shape.

    Raises
    ------
    TypeError
        If a dimension is not an integer.
    ValueError
        If a dimension is negative.

    Notes
    -----
    Rank-0 shapes (``Shape(())``) describe scalars and have one element.
    Dimensions of size 0 are allowed and describe empty tensors.
    """

    __slots__ = ()

    def __new__(cls, dims: Union[Iterable[int], int] = ()) -> "Shape":
        if isinstance(dims, Shape):
            return dims
        if isinstance(dims, int):
            dims = (dims,)

        normalized = []
        for d in dims:
            if isinstance(d, bool) or not hasattr(d, "__index__"):
                raise TypeError(f"Shape dimensions must be integers, got {d!r}")
            d = int(d.__index__())
            if d < 0:
                raise ValueError(f"Shape dimensions must be non-negative, got {d}")
            normalized.append(d)
        return super().__new__(cls, normalized)

    def __repr__(self) -> str:
        return f"Shape{tuple(self)!r}"

    @property
    def rank(self) -> int:
        """
        Number of dimensions.
        """
        return len(self)

    @property
    def numel(self) -> int:
        """
        Total number of elements described by this shape.

        Returns
        -------
        int
            Product of all dimensions (1 for a rank-0 shape).
        """
        n = 1
        for d in self:
            n *= d
        return n

    def left_pad(self, rank: int) -> "Shape":
        """
        Left-pad this shape with ones up to `rank` dimensions.

        Parameters
        ----------
        rank : int
            Desired rank. Must be at least `self.rank`.

        Returns
        -------
        Shape
            The padded shape (``self`` when already at `rank`).

        Raises
        ------
        ValueError
            If `rank` is smaller than the current rank.
        """
        if rank < len(self):
            raise ValueError(f"Cannot left-pad rank {len(self)} shape to rank {rank}")
        if rank == len(self):
            return self
        return Shape((1,) * (rank - len(self)) + tuple(self))

    def is_broadcastable_to(self, dst: ShapeLike) -> bool:
        """
        Convenience wrapper around :func:`is_broadcastable_to`.
        """
        return is_broadcastable_to(self, dst)


def as_shape(shape: ShapeLike) -> Shape:
    """
    Normalize an int, a sequence of ints or a `Shape` into a `Shape`.
    """
    return Shape(shape)


def is_broadcastable_to(src: ShapeLike, dst: ShapeLike) -> bool:
    """
    Check whether `src` can be expanded to exactly `dst`.

    Comparing from the trailing end, every dimension of `src` must either
    equal the aligned dimension of `dst` or be 1. `src` may have fewer
    dimensions than `dst` (missing leading dimensions are expanded), but
    never more.

    Parameters
    ----------
    src : ShapeLike
        Source shape.
    dst : ShapeLike
        Destination shape.

    Returns
    -------
    bool
        True if `src` broadcasts to `dst`.
    """
    src, dst = Shape(src), Shape(dst)
    if len(src) > len(dst):
        return False
    for sd, dd in zip(reversed(src), reversed(dst)):
        if sd != dd and sd != 1:
            return False
    return True


def broadcast_shape(a: ShapeLike, b: ShapeLike) -> Shape:
    """
    Compute the broadcast result shape of two operands.

    Both shapes are left-padded with ones to a common rank; each output
    dimension is the maximum of the aligned pair, which must either be equal
    or contain a 1.

    Parameters
    ----------
    a : ShapeLike
        First operand shape.
    b : ShapeLike
        Second operand shape.

    Returns
    -------
    Shape
        The common broadcast shape.

    Raises
    ------
    ShapeMismatchError
        If the shapes are not broadcast-compatible.
    """
    a, b = Shape(a), Shape(b)
    if a == b:
        return a

    rank = max(len(a), len(b))
    pa, pb = a.left_pad(rank), b.left_pad(rank)

    out = []
    for i, (da, db) in enumerate(zip(pa, pb)):
        if da == db or db == 1:
            out.append(da)
        elif da == 1:
            out.append(db)
        else:
            raise ShapeMismatchError(
                a, b, op="broadcast", detail=f"axis {i}: {da} vs {db}"
            )
    return Shape(out)


def reduce_axes_for(src: ShapeLike, target: ShapeLike) -> tuple[int, ...]:
    """
    Axes of `src` that must be summed to collapse it onto `target`.

    `target` is left-padded with ones to the rank of `src`; an axis is
    reduced when the padded target dimension is 1 while the source dimension
    is not.

    Parameters
    ----------
    src : ShapeLike
        Source (broadcast) shape.
    target : ShapeLike
        Target (pre-broadcast) shape.

    Returns
    -------
    tuple[int, ...]
        Reduction axes, in increasing order, relative to `src`.

    Raises
    ------
    ShapeMismatchError
        If `target` could not have been broadcast to `src`.
    """
    src, target = Shape(src), Shape(target)
    if not is_broadcastable_to(target, src):
        raise ShapeMismatchError(
            src, target, op="sum_to", detail="target is not broadcastable to source"
        )
    padded = target.left_pad(len(src))
    return tuple(
        i for i, (sd, td) in enumerate(zip(src, padded)) if td == 1 and sd != 1
    )
