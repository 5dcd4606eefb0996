"""
Autograd graph: nodes, recording functions and the backward engine.

Public API
----------
- ``Variable``, ``as_variable``
- ``GraphFunction``
- ``Context``
- ``run_backward``, ``unchain_backward``
- ``collect_graph``, ``describe_graph``
"""

from ._context import Context
from ._function import GraphFunction
from ._variable import Variable, as_variable
from ._engine import run_backward, unchain_backward
from ._graph import collect_graph, describe_graph

__all__ = [
    Context.__name__,
    GraphFunction.__name__,
    Variable.__name__,
    as_variable.__name__,
    run_backward.__name__,
    unchain_backward.__name__,
    collect_graph.__name__,
    describe_graph.__name__,
]
