"""
Concrete trainable parameter implementation.

This module defines `Parameter`, an infrastructure-level implementation of the
domain contract `IParameter`. A `Parameter` is a leaf `Variable` intended to
be optimized by training algorithms (e.g., SGD). It differs from a plain
`Variable` only in intent: it always starts as a leaf that requires grad.

Design notes
------------
- `Parameter` subclasses `Variable` to reuse graph participation, operator
  overloads and gradient bookkeeping.
- The gradient is populated by the backward engine and cleared by
  optimizers via `zero_grad()`.
- The `requires_grad` flag enables freezing/unfreezing parameters.
"""

from __future__ import annotations

from typing import Any, Optional

from ..domain._parameter import IParameter
from .autograd._variable import Variable


class Parameter(Variable, IParameter):
    """
    Trainable leaf node.

    Parameters
    ----------
    data : Tensor | array_like
        Initial parameter value.
    requires_grad : bool, optional
        Whether this parameter should accumulate gradients. Defaults to True.
    name : Optional[str], optional
        Label used in graph descriptions.
    """

    def __init__(
        self, data: Any, requires_grad: bool = True, name: Optional[str] = None
    ) -> None:
        super().__init__(data, requires_grad=requires_grad, name=name)

    def __repr__(self) -> str:
        name = f", name={self.name!r}" if self.name else ""
        return f"Parameter(shape={tuple(self.shape)}, requires_grad={self.requires_grad}{name})"
