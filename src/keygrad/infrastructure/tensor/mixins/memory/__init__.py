"""
Memory and shape-manipulation mixins for Tensor operations.

This package groups the Tensor primitives that move or reinterpret data
rather than compute on it:

- views               (``reshape``, ``transpose``, ``permute``)
- element access      (``get``, copy-on-write ``set``)
- host interop        (``to_numpy``, ``copy_from_numpy``, ``fill``, ``clone``)
- broadcasting        (``broadcast_to`` and its adjoint ``sum_to``)

Public API
----------
- ``TensorMixinMemory``
- ``TensorMixinBroadcast``
"""

from ._base import TensorMixinMemory
from ._broadcast import TensorMixinBroadcast

__all__ = [
    TensorMixinMemory.__name__,
    TensorMixinBroadcast.__name__,
]
