"""
Read-only inspection of a recorded computation graph.

`collect_graph` enumerates the variables and functions reachable from a node;
`describe_graph` renders them as plain text, numbering variables ``V0..`` and
functions ``F0..`` in discovery order (the root is always ``V0``).
"""

from __future__ import annotations

from typing import List, Tuple


def collect_graph(root) -> Tuple[List, List]:
    """
    Collect every variable and function reachable from `root`.

    Returns
    -------
    tuple[list[Variable], list[GraphFunction]]
        Variables and functions in depth-first discovery order, each listed
        once even when shared by several consumers.
    """
    variables: list = []
    functions: list = []
    seen_vars: set[int] = set()
    seen_fns: set[int] = set()

    stack = [root]
    while stack:
        v = stack.pop()
        if id(v) in seen_vars:
            continue
        seen_vars.add(id(v))
        variables.append(v)

        fn = v.creator
        if fn is None:
            continue
        if id(fn) not in seen_fns:
            seen_fns.add(id(fn))
            functions.append(fn)
        stack.extend(reversed(fn.inputs))
    return variables, functions


def _describe_variable(v) -> str:
    name = v.name if v.name else "unnamed"
    flag = " requires_grad" if v.requires_grad else ""
    return f"{name} shape={tuple(v.shape)} generation={v.generation}{flag}"


def describe_graph(root) -> str:
    """
    Render the graph reachable from `root` as text.

    The output has three sections: the variable list, the function list
    (with input/output ids) and a tree drawn from the root toward the
    leaves. Shared subgraphs are expanded once and referenced by id after.
    """
    variables, functions = collect_graph(root)
    vid = {id(v): i for i, v in enumerate(variables)}
    fid = {id(f): i for i, f in enumerate(functions)}

    lines = ["Variables:"]
    for v in variables:
        lines.append(f"  V{vid[id(v)]}: {_describe_variable(v)}")

    lines.append("Functions:")
    for f in functions:
        ins = ", ".join(f"V{vid[id(x)]}" for x in f.inputs)
        out = f.output
        out_s = f"V{vid[id(out)]}" if out is not None and id(out) in vid else "released"
        lines.append(f"  F{fid[id(f)]}: {type(f).__name__} [{ins}] -> {out_s}")

    lines.append("Graph:")
    expanded: set[int] = set()
    # (variable, prefix, is_last)
    stack = [(root, "", True)]
    while stack:
        v, prefix, is_last = stack.pop()
        connector = "`-- " if is_last else "|-- "
        label = v.name if v.name else "unnamed"
        if id(v) in expanded and v.creator is not None:
            lines.append(f"{prefix}{connector}V{vid[id(v)]} ({label}) ...")
            continue
        expanded.add(id(v))
        lines.append(f"{prefix}{connector}V{vid[id(v)]} ({label})")

        fn = v.creator
        if fn is None:
            continue
        child_prefix = prefix + ("    " if is_last else "|   ")
        lines.append(f"{child_prefix}`-- F{fid[id(fn)]} ({type(fn).__name__})")
        input_prefix = child_prefix + "    "
        n = len(fn.inputs)
        for i in reversed(range(n)):
            stack.append((fn.inputs[i], input_prefix, i == n - 1))

    return "\n".join(lines)
