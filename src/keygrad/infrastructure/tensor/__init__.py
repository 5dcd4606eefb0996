"""
NumPy-backed tensor implementation.

Public API
----------
- ``Tensor``
"""

from ._tensor import Tensor

__all__ = [
    Tensor.__name__,
]
