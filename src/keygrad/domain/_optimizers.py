"""
Optimizer contract.

An optimizer consumes the gradients left on `IParameter` leaves by a backward
pass and produces their next values. It never touches the graph itself: the
only coupling to the autograd engine is reading and clearing `.grad`.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ._parameter import IParameter


@runtime_checkable
class IOptimizer(Protocol):
    """
    Update rule over a fixed list of trainable leaves.

    Attributes
    ----------
    params : Sequence[IParameter]
        Leaves updated by `step`, in registration order.
    lr : float
        Step size.
    """

    params: Sequence[IParameter]
    lr: float

    def step(self) -> None:
        """
        Rebind each parameter's value from its current gradient.

        Parameters without a gradient, or with ``requires_grad=False``, are
        left unchanged.
        """
        ...

    def zero_grad(self) -> None:
        ...
