"""
Autograd function interface definitions.

This module defines the abstract base class for differentiable operations
used in the automatic differentiation system. Concrete subclasses of
`Function` implement both the forward computation and its corresponding
backward gradient computation on raw tensors.

This design is inspired by function-level autograd systems (e.g., PyTorch's
`autograd.Function`) while remaining lightweight and framework-agnostic.
Unlike a stateless static-method design, a `Function` instance is created
fresh for every invocation, so it may cache exactly the facts its own
`backward` needs (pre-broadcast shapes, saved outputs) on itself.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ._tensor import ITensor

ARBITRARY_INPUT_NUM = -1
"""Sentinel returned by `require_input_num()` for variadic functions."""


class Function(ABC):
    """
    Abstract base class for differentiable operations.

    A `Function` represents a single operator node in the computation graph
    and encapsulates both:
    - the forward computation (`forward`)
    - the backward (gradient) computation (`backward`)
    - the exact number of inputs it accepts (`require_input_num`)

    Notes
    -----
    - `forward` must be pure given its inputs; it must not mutate them.
    - `backward` returns one gradient per input, in input order, each with
      exactly the shape of the corresponding input as seen by `forward`.
      Operators whose forward broadcasts must collapse their partials with
      `sum_to` before returning them.
    - Entries of the returned sequence may be None for inputs that are not
      differentiable (e.g., index arguments).
    """

    @abstractmethod
    def forward(self, *xs: ITensor) -> ITensor:
        """
        Perform the forward computation.

        Parameters
        ----------
        *xs : ITensor
            Input tensor(s) to the operation.

        Returns
        -------
        ITensor
            The single output tensor of the operation.
        """
        ...

    @abstractmethod
    def backward(self, grad_out: ITensor) -> Sequence[Optional[ITensor]]:
        """
        Compute gradients with respect to the input tensors.

        Parameters
        ----------
        grad_out : ITensor
            Gradient of the loss with respect to the output tensor.

        Returns
        -------
        Sequence[Optional[ITensor]]
            Gradients with respect to each input, in input order.
        """
        ...

    @abstractmethod
    def require_input_num(self) -> int:
        """
        Declare how many inputs this function accepts.

        Returns
        -------
        int
            The exact input count, or `ARBITRARY_INPUT_NUM` (-1) for
            variadic functions.
        """
        ...
