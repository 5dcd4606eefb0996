"""
Reduction mixin for Tensor operations (sum / mean / max / var).

Public API
----------
- ``TensorMixinReduction``
"""

from ._base import TensorMixinReduction

__all__ = [
    TensorMixinReduction.__name__,
]
