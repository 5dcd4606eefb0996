"""
Arithmetic mixin for Tensor operations.

Provides the broadcasting elementwise binary operations of the concrete
`Tensor`:

- addition           (``add`` / ``__add__`` / ``__radd__``)
- subtraction        (``sub`` / ``__sub__`` / ``__rsub__``)
- multiplication     (``mul`` / ``__mul__`` / ``__rmul__``)
- true division      (``div`` / ``__truediv__`` / ``__rtruediv__``)

Public API
----------
- ``TensorMixinArithmetic``
"""

from ._base import TensorMixinArithmetic

__all__ = [
    TensorMixinArithmetic.__name__,
]
