"""
Graph-recording base class for differentiable functions.

`GraphFunction` is the infrastructure-level implementation of the domain
`Function` contract. Concrete operators subclass it and implement
`forward` / `backward` on raw tensors; `GraphFunction.__call__` takes care of
everything else:

1. validate the number of inputs (`ArityError`),
2. unwrap each input `Variable` to its tensor value,
3. run `forward`,
4. wrap the result in a new `Variable`,
5. when grad mode is enabled and any input requires grad, record the graph
   edge: the output's `creator` becomes this function and its generation
   becomes ``max(input generations) + 1``.

If no input requires grad (or inside `no_grad()`), no history is recorded and
the output is a detached leaf. This is the only optimization point for
inference-only paths.

A function instance is created fresh for every call and holds strong
references to its inputs but only a weak reference to its output, so the
graph contains no reference cycles.
"""

from __future__ import annotations

import logging
import weakref
from typing import Optional, Tuple

from ...domain._errors import ArityError
from ...domain._function import ARBITRARY_INPUT_NUM, Function
from .._config import is_grad_enabled
from ._context import Context

logger = logging.getLogger(__name__)


class GraphFunction(Function):
    """
    Base class of every differentiable operator.

    Attributes
    ----------
    inputs : tuple[Variable, ...]
        Input nodes recorded by the last call (empty when nothing was
        recorded or after `unchain`).
    generation : int
        ``max(input.generation)`` over the recorded inputs.
    ctx : Context
        Saved tensors/metadata used by `backward`.
    """

    def __init__(self) -> None:
        self.inputs: Tuple["Variable", ...] = ()
        self.generation: int = 0
        self.ctx: Context = Context()
        self._output_ref: Optional[weakref.ref] = None
        self._called = False

    def __call__(self, *inputs) -> "Variable":
        from ._variable import Variable, as_variable

        if self._called:
            raise RuntimeError(
                f"{type(self).__name__} instance was already called; "
                "create a new instance for each invocation"
            )
        expected = self.require_input_num()
        if expected != ARBITRARY_INPUT_NUM and len(inputs) != expected:
            raise ArityError(type(self).__name__, expected, len(inputs))
        if any(x is None for x in inputs):
            raise TypeError(f"{type(self).__name__} received a None input")

        self._called = True
        xs = tuple(as_variable(x) for x in inputs)
        y = self.forward(*(x.value for x in xs))
        output = Variable(y, requires_grad=False)

        if is_grad_enabled() and any(x.requires_grad for x in xs):
            self.generation = max((x.generation for x in xs), default=0)
            self.inputs = xs
            output.set_creator(self)
        else:
            self.ctx.clear()
        return output

    @property
    def output(self) -> Optional["Variable"]:
        """
        The output node, or None if it was released (or never recorded).
        """
        if self._output_ref is None:
            return None
        return self._output_ref()

    def _bind_output(self, output: "Variable") -> None:
        self._output_ref = weakref.ref(output)

    def unchain(self) -> None:
        """
        Release inputs, the output reference and every saved tensor.
        """
        self.inputs = ()
        self._output_ref = None
        self.ctx.clear()

    def require_input_num(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"{type(self).__name__}(generation={self.generation})"
