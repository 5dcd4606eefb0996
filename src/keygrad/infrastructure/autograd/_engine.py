"""
Backward engine: generation-ordered reverse traversal of the graph.

`run_backward` propagates gradients from a terminal `Variable` to every
ancestor that requires grad. Functions are processed from a max-heap keyed
on their generation. Because a function consuming node ``v`` always has a
higher generation than ``v``'s creator, popping in descending generation
order guarantees that every consumer of ``v`` has already accumulated its
contribution into ``v.grad`` by the time ``v``'s creator runs. No separate
topological sort is required.

`unchain_backward` releases the graph reachable from a node so that its
buffers can be freed as soon as the caller drops the node.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Any, Optional

from ...domain._errors import MissingGradientError, ShapeMismatchError
from .._config import get_config
from ..tensor._tensor import Tensor

logger = logging.getLogger(__name__)


def _make_seed(root, grad: Optional[Any], config) -> Tensor:
    """
    Build the seed gradient for `root`.

    Raises
    ------
    MissingGradientError
        If no seed is given for a non-scalar root while
        `strict_scalar_seed` is enabled.
    ShapeMismatchError
        If an explicit seed does not have the root's shape.
    """
    from ._variable import Variable

    if grad is None:
        if config.strict_scalar_seed and root.numel() != 1:
            raise MissingGradientError(
                f"backward() on a non-scalar node of shape {tuple(root.shape)} "
                "requires an explicit seed gradient"
            )
        return Tensor.ones(root.shape, dtype=root.value.dtype)

    if isinstance(grad, Variable):
        grad = grad.value
    seed = grad if isinstance(grad, Tensor) else Tensor.from_numpy(grad, dtype=root.value.dtype)
    if seed.shape != root.shape:
        raise ShapeMismatchError(
            root.shape, seed.shape, op="backward", detail="seed gradient shape"
        )
    return seed


def run_backward(root, grad: Optional[Any] = None) -> None:
    """
    Accumulate d(root)/d(node) into ``node.grad`` for every reachable node.

    Parameters
    ----------
    root : Variable
        Terminal node to differentiate.
    grad : Optional[Tensor | Variable | array_like]
        Seed gradient. Defaults to ones shaped like ``root.value``.

    Raises
    ------
    ShapeMismatchError
        If the seed has the wrong shape, or a function returns a partial
        whose shape differs from its input.
    MissingGradientError
        If a function's output was released or has no gradient when the
        function is popped.
    RuntimeError
        If a function returns a different number of partials than it has
        inputs.

    Notes
    -----
    Gradients are always accumulated out of place. On error the traversal
    stops immediately and gradients accumulated so far are left in place.
    """
    config = get_config()
    seed = _make_seed(root, grad, config)
    root.grad = seed if root.grad is None else root.grad + seed

    if root.creator is None:
        logger.debug("backward on leaf node; seed accumulated only")
        return

    heap: list = []
    seen: set[int] = set()
    counter = itertools.count()

    def push(fn) -> None:
        seen.add(id(fn))
        heapq.heappush(heap, (-fn.generation, next(counter), fn))

    push(root.creator)
    visited = 0

    logger.debug(f"backward start: root generation {root.generation}")

    while heap:
        _, _, fn = heapq.heappop(heap)
        name = type(fn).__name__
        output = fn.output
        if output is None or output.grad is None:
            raise MissingGradientError(
                f"{name} (generation {fn.generation}) has no output gradient; "
                "was the graph unchained during backward?"
            )

        partials = fn.backward(output.grad)
        if isinstance(partials, Tensor):
            partials = (partials,)
        partials = tuple(partials)
        if len(partials) != len(fn.inputs):
            raise RuntimeError(
                f"{name}.backward must return one grad per input. "
                f"Got {len(partials)} grads for {len(fn.inputs)} inputs."
            )

        for x, g in zip(fn.inputs, partials):
            if g is None:
                continue
            if g.shape != x.shape:
                raise ShapeMismatchError(
                    x.shape, g.shape, op=f"{name}.backward", detail="gradient shape"
                )
            # Frozen nodes stop propagation along this edge.
            if not x.requires_grad:
                continue
            x.grad = g if x.grad is None else x.grad + g
            if x.creator is not None and id(x.creator) not in seen:
                push(x.creator)

        visited += 1

    logger.debug(f"backward done: {visited} functions visited")


def unchain_backward(node) -> int:
    """
    Sever every creator link reachable from `node`.

    Each visited function drops its inputs, output reference and saved
    tensors; each visited node (including `node` itself) becomes a leaf.
    Calling this twice is a no-op the second time.

    Returns
    -------
    int
        Number of functions released.
    """
    stack = [node.creator] if node.creator is not None else []
    node.unchain()

    seen: set[int] = set()
    released = 0
    while stack:
        fn = stack.pop()
        if id(fn) in seen:
            continue
        seen.add(id(fn))
        for x in fn.inputs:
            if x.creator is not None:
                stack.append(x.creator)
            x.unchain()
        fn.unchain()
        released += 1

    logger.debug(f"unchain_backward released {released} functions")
    return released
