"""
Autograd-tracked graph node.

A `Variable` wraps a `Tensor` value together with the state needed for
reverse-mode differentiation:

- `grad`: accumulated gradient tensor (None until a backward pass reaches it)
- `creator`: the `GraphFunction` that produced it (None for leaves)
- `generation`: 0 for leaves, ``max(input generations) + 1`` otherwise
- `requires_grad`: whether gradients are accumulated into this node

Variables are composed exclusively through functions (directly or via the
overloaded operators below); `backward()` on a terminal node drives the
engine in ``_engine.py``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np

from ...domain._errors import MissingGradientError
from ...domain._shape import Shape
from ..tensor._tensor import Tensor

Number = Union[int, float]


class Variable:
    """
    Node of the dynamic computation graph.

    Parameters
    ----------
    data : Tensor | np.ndarray | array_like | Number
        Node value. A `Tensor` is held through a shared view (see
        `Tensor.view`); anything else is copied into a new tensor of the
        configured dtype.
    requires_grad : bool, optional
        Whether gradients should be accumulated into this node. Defaults to
        True, since user-constructed leaves are usually the quantities being
        differentiated.
    name : Optional[str], optional
        Label used by `describe_graph` and in reprs.
    """

    __array_ufunc__ = None

    def __init__(
        self,
        data: Any,
        requires_grad: bool = True,
        name: Optional[str] = None,
    ) -> None:
        if isinstance(data, Variable):
            raise TypeError("Variable cannot wrap another Variable; use detach()")
        self._value: Tensor = data.view() if isinstance(data, Tensor) else Tensor.from_numpy(data)
        self._grad: Optional[Tensor] = None
        self._creator = None
        self._generation: int = 0
        self._requires_grad: bool = bool(requires_grad)
        self.name = name

    # ------------------------------------------------------------------
    # Core state
    # ------------------------------------------------------------------
    @property
    def value(self) -> Tensor:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        """
        Replace the value (used by optimizers between iterations).

        Only meant for leaves; rebinding the value of a node that already has
        consumers would invalidate their saved forward state.
        """
        self._value = new_value.view() if isinstance(new_value, Tensor) else Tensor.from_numpy(new_value)

    @property
    def data(self) -> Tensor:
        return self._value

    @property
    def grad(self) -> Optional[Tensor]:
        """
        Accumulated gradient, or None before any backward pass reached it.
        """
        return self._grad

    @grad.setter
    def grad(self, value: Optional[Tensor]) -> None:
        self._grad = value

    def get_grad(self) -> Tensor:
        """
        Return the accumulated gradient.

        Raises
        ------
        MissingGradientError
            If no backward pass has accumulated into this node yet.
        """
        if self._grad is None:
            raise MissingGradientError(
                f"{self._label()} has no gradient; call backward() first"
            )
        return self._grad

    @property
    def creator(self):
        return self._creator

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        self._requires_grad = bool(value)

    @property
    def is_leaf(self) -> bool:
        return self._creator is None

    def set_creator(self, fn) -> None:
        """
        Record `fn` as the producer of this node.

        Sets ``generation = fn.generation + 1`` and marks the node as
        requiring grad. The function keeps only a weak reference back.
        """
        self._creator = fn
        self._generation = fn.generation + 1
        self._requires_grad = True
        fn._bind_output(self)

    # ------------------------------------------------------------------
    # Shape helpers
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._value.shape

    @property
    def ndim(self) -> int:
        return self._value.ndim

    def numel(self) -> int:
        return self._value.numel()

    def size(self, dim: Optional[int] = None):
        return self._value.size(dim)

    def __len__(self) -> int:
        return len(self._value)

    def item(self) -> float:
        return self._value.item()

    def to_numpy(self) -> np.ndarray:
        return self._value.to_numpy()

    def _label(self) -> str:
        return f"Variable({self.name!r})" if self.name else "Variable"

    def __repr__(self) -> str:
        name = f", name={self.name!r}" if self.name else ""
        creator = type(self._creator).__name__ if self._creator is not None else None
        return (
            f"Variable(shape={tuple(self.shape)}, requires_grad={self._requires_grad}, "
            f"creator={creator}, generation={self._generation}{name})"
        )

    # ------------------------------------------------------------------
    # Gradient / graph management
    # ------------------------------------------------------------------
    def backward(self, grad: Optional[Any] = None) -> None:
        """
        Backpropagate from this node through the recorded graph.

        Parameters
        ----------
        grad : Optional[Tensor | Variable | array_like]
            Seed gradient, shaped exactly like this node's value. Defaults to
            ones (see `EngineConfig.strict_scalar_seed`).
        """
        from ._engine import run_backward

        run_backward(self, grad)

    def zero_grad(self) -> None:
        """
        Clear any accumulated gradient.
        """
        self._grad = None

    clear_grad = zero_grad

    def unchain(self) -> None:
        """
        Drop the reference to this node's creator, turning it into a leaf.
        """
        self._creator = None

    def unchain_backward(self) -> None:
        """
        Release the whole graph reachable from this node (idempotent).
        """
        from ._engine import unchain_backward

        unchain_backward(self)

    def detach(self) -> "Variable":
        """
        Return a new leaf sharing this node's value but not its history.

        The two values are views of one buffer; writing through either
        copies first and leaves the other untouched.
        """
        return Variable(self._value, requires_grad=False, name=self.name)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __add__(self, other):
        from ..functions import add

        return add(self, other)

    def __radd__(self, other):
        from ..functions import add

        return add(other, self)

    def __sub__(self, other):
        from ..functions import sub

        return sub(self, other)

    def __rsub__(self, other):
        from ..functions import sub

        return sub(other, self)

    def __mul__(self, other):
        from ..functions import mul

        return mul(self, other)

    def __rmul__(self, other):
        from ..functions import mul

        return mul(other, self)

    def __truediv__(self, other):
        from ..functions import div

        return div(self, other)

    def __rtruediv__(self, other):
        from ..functions import div

        return div(other, self)

    def __neg__(self):
        from ..functions import neg

        return neg(self)

    def __matmul__(self, other):
        from ..functions import matmul

        return matmul(self, other)

    def __rmatmul__(self, other):
        from ..functions import matmul

        return matmul(other, self)


    # ------------------------------------------------------------------
    # Function shortcuts
    # ------------------------------------------------------------------
    def sum(self, axis=None, keepdims: bool = False) -> "Variable":
        from ..functions import sum as _sum

        return _sum(self, axis=axis, keepdims=keepdims)

    def mean(self, axis=None, keepdims: bool = False) -> "Variable":
        from ..functions import mean

        return mean(self, axis=axis, keepdims=keepdims)

    def var(self, axis=None, keepdims: bool = False) -> "Variable":
        from ..functions import variance

        return variance(self, axis=axis, keepdims=keepdims)

    def reshape(self, *shape) -> "Variable":
        from ..functions import reshape

        if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
            shape = tuple(shape[0])
        return reshape(self, shape)

    def transpose(self, *axes: int) -> "Variable":
        from ..functions import transpose

        return transpose(self, *axes)

    @property
    def T(self) -> "Variable":
        return self.transpose()

    def broadcast_to(self, shape: Sequence[int]) -> "Variable":
        from ..functions import broadcast_to

        return broadcast_to(self, shape)

    def sum_to(self, shape: Sequence[int]) -> "Variable":
        from ..functions import sum_to

        return sum_to(self, shape)

    def square(self) -> "Variable":
        from ..functions import square

        return square(self)

    def exp(self) -> "Variable":
        from ..functions import exp

        return exp(self)

    def log(self) -> "Variable":
        from ..functions import log

        return log(self)

    def sqrt(self) -> "Variable":
        from ..functions import sqrt

        return sqrt(self)

    def clip(self, min_value=None, max_value=None) -> "Variable":
        from ..functions import clip

        return clip(self, min_value, max_value)

    def softmax(self, axis: int = -1) -> "Variable":
        from ..functions import softmax

        return softmax(self, axis=axis)

    def matmul(self, other) -> "Variable":
        from ..functions import matmul

        return matmul(self, other)

    def select(self, dim: int, index: int) -> "Variable":
        from ..functions import select

        return select(self, dim, index)

    def slice_range(self, dim: int, start: int, end: int) -> "Variable":
        from ..functions import slice_range

        return slice_range(self, dim, start, end)

    def split(self, size: int, dim: int = 0) -> list:
        from ..functions import split

        return split(self, size, dim)


def as_variable(x: Any) -> Variable:
    """
    Coerce `x` into a `Variable`.

    Variables pass through unchanged. Tensors, arrays and scalars become
    constant leaves (``requires_grad=False``).
    """
    if isinstance(x, Variable):
        return x
    return Variable(x, requires_grad=False)
