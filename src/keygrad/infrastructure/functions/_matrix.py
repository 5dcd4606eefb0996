"""
Differentiable matrix operations: matrix product and softmax.
"""

from __future__ import annotations

from ...domain._errors import ShapeMismatchError
from ...domain._tensor import ITensor
from ..autograd._function import GraphFunction


def _swap_last_two(t: ITensor) -> ITensor:
    axes = list(range(t.ndim))
    axes[-1], axes[-2] = axes[-2], axes[-1]
    return t.transpose(*axes)


class MatMul(GraphFunction):
    """
    Matrix product ``a @ b`` for operands of rank >= 2.

    Leading (batch) dimensions broadcast as in NumPy; the backward pass
    collapses each partial onto its operand's shape with `sum_to`.

    Backward
    --------
    ``ga = g @ b^T`` and ``gb = a^T @ g``.
    """

    def require_input_num(self) -> int:
        return 2

    def forward(self, a: ITensor, b: ITensor) -> ITensor:
        if a.ndim < 2 or b.ndim < 2:
            raise ShapeMismatchError(
                a.shape, b.shape, op="matmul", detail="operands must have rank >= 2"
            )
        self.ctx.save_for_backward(a, b)
        return a.matmul(b)

    def backward(self, grad_out: ITensor):
        a, b = self.ctx.saved_tensors
        ga = grad_out.matmul(_swap_last_two(b)).sum_to(a.shape)
        gb = _swap_last_two(a).matmul(grad_out).sum_to(b.shape)
        return ga, gb


class Softmax(GraphFunction):
    """
    Numerically stable softmax along `axis`.

    Backward: ``gx = y * (g - sum(y * g, axis))``.
    """

    def __init__(self, axis: int = -1) -> None:
        super().__init__()
        self.axis = axis

    def forward(self, x: ITensor) -> ITensor:
        y = x.softmax(axis=self.axis)
        self.ctx.save_for_backward(y)
        return y

    def backward(self, grad_out: ITensor):
        (y,) = self.ctx.saved_tensors
        gx = y.mul(grad_out)
        total = gx.sum(axis=self.axis, keepdims=True)
        return (gx.sub(y.mul(total)),)


def matmul(a, b):
    """
    Differentiable matrix product.
    """
    return MatMul()(a, b)


def softmax(x, axis: int = -1):
    return Softmax(axis)(x)
