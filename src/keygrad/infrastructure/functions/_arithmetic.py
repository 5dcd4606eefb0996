"""
Differentiable elementwise arithmetic: add, sub, mul, div, neg.

Binary operators broadcast in the forward pass, so their raw partials are
computed at the broadcast (output) shape. Each partial is then collapsed with
`sum_to` onto the pre-broadcast shape of its input, which is recorded during
the forward pass.

Backward rules (``g`` is the output gradient):

======  ==========  =================
op      d/da        d/db
======  ==========  =================
add     g           g
sub     g           -g
mul     g * b       g * a
div     g / b       g * (-a / b**2)
======  ==========  =================
"""

from __future__ import annotations

from typing import Tuple

from ...domain._tensor import ITensor
from ..autograd._function import GraphFunction


class _BinaryFunction(GraphFunction):
    """
    Shared plumbing for broadcasting binary operators.
    """

    def require_input_num(self) -> int:
        return 2

    def _remember_shapes(self, a: ITensor, b: ITensor) -> None:
        self.ctx.saved_meta["a_shape"] = a.shape
        self.ctx.saved_meta["b_shape"] = b.shape

    def _collapse(self, ga: ITensor, gb: ITensor) -> Tuple[ITensor, ITensor]:
        meta = self.ctx.saved_meta
        return ga.sum_to(meta["a_shape"]), gb.sum_to(meta["b_shape"])


class Add(_BinaryFunction):
    def forward(self, a: ITensor, b: ITensor) -> ITensor:
        self._remember_shapes(a, b)
        return a.add(b)

    def backward(self, grad_out: ITensor):
        return self._collapse(grad_out, grad_out)


class Sub(_BinaryFunction):
    def forward(self, a: ITensor, b: ITensor) -> ITensor:
        self._remember_shapes(a, b)
        return a.sub(b)

    def backward(self, grad_out: ITensor):
        return self._collapse(grad_out, grad_out.neg())


class Mul(_BinaryFunction):
    def forward(self, a: ITensor, b: ITensor) -> ITensor:
        self._remember_shapes(a, b)
        self.ctx.save_for_backward(a, b)
        return a.mul(b)

    def backward(self, grad_out: ITensor):
        a, b = self.ctx.saved_tensors
        return self._collapse(grad_out.mul(b), grad_out.mul(a))


class Div(_BinaryFunction):
    """
    Elementwise true division ``a / b``.

    Notes
    -----
    The forward pass raises `DivisionDegenerateError` when `b` has no
    elements while `a` does (see `Tensor.div`).
    """

    def forward(self, a: ITensor, b: ITensor) -> ITensor:
        self._remember_shapes(a, b)
        self.ctx.save_for_backward(a, b)
        return a.div(b)

    def backward(self, grad_out: ITensor):
        a, b = self.ctx.saved_tensors
        ga = grad_out.div(b)
        gb = grad_out.mul(a.neg().div(b.square()))
        return self._collapse(ga, gb)


class Neg(GraphFunction):
    def forward(self, x: ITensor) -> ITensor:
        return x.neg()

    def backward(self, grad_out: ITensor):
        return (grad_out.neg(),)


def add(a, b):
    """
    Differentiable ``a + b`` with broadcasting.
    """
    return Add()(a, b)


def sub(a, b):
    """
    Differentiable ``a - b`` with broadcasting.
    """
    return Sub()(a, b)


def mul(a, b):
    """
    Differentiable ``a * b`` with broadcasting.
    """
    return Mul()(a, b)


def div(a, b):
    """
    Differentiable ``a / b`` with broadcasting.
    """
    return Div()(a, b)


def neg(x):
    return Neg()(x)
