"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters used
by optimization algorithms. A parameter is a leaf graph node whose gradient
is read (and cleared) by optimizers after a backward pass.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IParameter(Protocol):
    """
    Domain-level interface for trainable parameters.

    Notes
    -----
    - Parameters may be frozen or unfrozen via the `requires_grad` flag.
    - Optimizers replace `value` with a freshly computed tensor instead of
      writing into the existing buffer, so forward values still referenced
      by an old graph are never corrupted.
    """

    @property
    def value(self) -> ITensor:
        """
        Return the current parameter value.
        """
        ...

    @value.setter
    def value(self, new_value: ITensor) -> None:
        """
        Replace the parameter value.
        """
        ...

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this parameter should accumulate gradients.
        """
        ...

    @property
    def grad(self) -> Optional[ITensor]:
        """
        Return the accumulated gradient, or None if no backward pass has
        reached this parameter since the last clear.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear the stored gradient for this parameter.
        """
        ...
