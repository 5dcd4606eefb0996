"""
Stochastic Gradient Descent (SGD) optimizer implementation.

The optimizer updates `Parameter` instances using their accumulated gradients
and a fixed learning rate, optionally applying classical L2 regularization
(coupled weight decay).

Design notes
------------
- Optimizers operate on `Parameter` objects and read gradients from `p.grad`.
- Parameters with `grad is None` (or frozen ones) are skipped to support
  partial graphs and frozen weights.
- Updates replace `p.value` with a newly computed tensor; the old buffer is
  left untouched in case a recorded graph still references it.
- Momentum, Nesterov, and other SGD variants are omitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..domain._optimizers import IOptimizer
from ._parameter import Parameter

logger = logging.getLogger(__name__)


@dataclass
class SGD(IOptimizer):
    """
    Stochastic Gradient Descent (SGD) optimizer.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay > 0`` (classical L2 regularization):
        ``g <- g + weight_decay * p``
    - Parameter update:
        ``p <- p - lr * g``

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to be optimized. The iterable is consumed and stored.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    weight_decay : float, optional
        Classical L2 weight decay coefficient (coupled). Must be
        non-negative. Defaults to 0.0.

    Raises
    ------
    ValueError
        If ``lr <= 0`` or ``weight_decay < 0``.
    """

    params: Sequence[Parameter]
    lr: float = 1e-3
    weight_decay: float = 0.0

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        weight_decay: float = 0.0,
    ) -> None:
        self.params = list(params)
        self.lr = float(lr)
        self.weight_decay = float(weight_decay)

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")

    def zero_grad(self) -> None:
        """
        Clear gradients for all managed parameters.
        """
        for p in self.params:
            p.zero_grad()

    def step(self) -> None:
        """
        Apply one SGD update step to all managed parameters.
        """
        updated = 0
        for p in self.params:
            g = p.grad
            if g is None or not p.requires_grad:
                continue

            if self.weight_decay != 0.0:
                g = g + p.value * self.weight_decay

            p.value = p.value - g * self.lr
            updated += 1

        logger.debug(f"SGD step updated {updated}/{len(self.params)} parameters")
