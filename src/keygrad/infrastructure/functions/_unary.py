"""
Differentiable elementwise unary functions.

Implements ``square``, ``exp``, ``log``, ``sqrt`` and ``clip`` as
`GraphFunction` subclasses. Functions whose derivative is most cheaply
expressed through their output (``exp``, ``sqrt``) save the output rather
than the input.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ...domain._tensor import ITensor
from ..autograd._function import GraphFunction
from ..tensor._tensor import Tensor


class Square(GraphFunction):
    """
    ``y = x ** 2``; ``dy/dx = 2x``.
    """

    def forward(self, x: ITensor) -> ITensor:
        self.ctx.save_for_backward(x)
        return x.square()

    def backward(self, grad_out: ITensor):
        (x,) = self.ctx.saved_tensors
        return (grad_out.mul(x.mul(2.0)),)


class Exp(GraphFunction):
    """
    ``y = exp(x)``; ``dy/dx = y``.
    """

    def forward(self, x: ITensor) -> ITensor:
        y = x.exp()
        self.ctx.save_for_backward(y)
        return y

    def backward(self, grad_out: ITensor):
        (y,) = self.ctx.saved_tensors
        return (grad_out.mul(y),)


class Log(GraphFunction):
    """
    ``y = log(x)``; ``dy/dx = 1 / x``.
    """

    def forward(self, x: ITensor) -> ITensor:
        self.ctx.save_for_backward(x)
        return x.log()

    def backward(self, grad_out: ITensor):
        (x,) = self.ctx.saved_tensors
        return (grad_out.div(x),)


class Sqrt(GraphFunction):
    """
    ``y = sqrt(x)``; ``dy/dx = 1 / (2y)``.
    """

    def forward(self, x: ITensor) -> ITensor:
        y = x.sqrt()
        self.ctx.save_for_backward(y)
        return y

    def backward(self, grad_out: ITensor):
        (y,) = self.ctx.saved_tensors
        return (grad_out.div(y.mul(2.0)),)


class Clip(GraphFunction):
    """
    Clamp values into ``[min_value, max_value]``.

    The gradient passes through where the input lies inside the closed
    interval and is zero where the input was clamped.
    """

    def __init__(
        self, min_value: Optional[float] = None, max_value: Optional[float] = None
    ) -> None:
        super().__init__()
        self.min_value = min_value
        self.max_value = max_value

    def forward(self, x: ITensor) -> ITensor:
        y = x.clip(self.min_value, self.max_value)

        arr = x.to_numpy()
        mask = np.ones(arr.shape, dtype=bool)
        if self.min_value is not None:
            mask &= arr >= self.min_value
        if self.max_value is not None:
            mask &= arr <= self.max_value
        self.ctx.save_for_backward(Tensor.from_numpy(mask, dtype=arr.dtype))
        return y

    def backward(self, grad_out: ITensor):
        (mask,) = self.ctx.saved_tensors
        return (grad_out.mul(mask),)


def square(x):
    return Square()(x)


def exp(x):
    """
    Differentiable elementwise exponential.
    """
    return Exp()(x)


def log(x):
    """
    Differentiable elementwise natural logarithm.
    """
    return Log()(x)


def sqrt(x):
    return Sqrt()(x)


def clip(x, min_value: Optional[float] = None, max_value: Optional[float] = None):
    """
    Differentiable clamp of `x` into ``[min_value, max_value]``.
    """
    return Clip(min_value, max_value)(x)
