"""
Differentiable function library.

Every operator is a `GraphFunction` subclass paired with a lower-case
functional wrapper that instantiates it and calls it on its inputs.
"""

from ._arithmetic import Add, Sub, Mul, Div, Neg, add, sub, mul, div, neg
from ._unary import Square, Exp, Log, Sqrt, Clip, square, exp, log, sqrt, clip
from ._reduction import (
    Sum,
    Mean,
    Variance,
    SumTo,
    BroadcastTo,
    sum,
    mean,
    variance,
    sum_to,
    broadcast_to,
)
from ._shape import Reshape, Transpose, reshape, transpose
from ._matrix import MatMul, Softmax, matmul, softmax
from ._indexing import Select, SliceRange, select, slice_range, split

__all__ = [
    "Add", "Sub", "Mul", "Div", "Neg",
    "Square", "Exp", "Log", "Sqrt", "Clip",
    "Sum", "Mean", "Variance", "SumTo", "BroadcastTo",
    "Reshape", "Transpose",
    "MatMul", "Softmax",
    "Select", "SliceRange",
    "add", "sub", "mul", "div", "neg",
    "square", "exp", "log", "sqrt", "clip",
    "sum", "mean", "variance", "sum_to", "broadcast_to",
    "reshape", "transpose",
    "matmul", "softmax",
    "select", "slice_range", "split",
]
