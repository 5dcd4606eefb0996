"""
Per-invocation backward context.

Every `GraphFunction` instance owns a `Context` that records what its
`backward` needs from the forward pass: saved tensors (outputs, masks,
cached intermediates) and non-tensor metadata (input shapes, axes,
indices).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...domain._tensor import ITensor


@dataclass
class Context:
    """
    Backward context of one operator invocation.

    Attributes
    ----------
    saved_tensors : list[ITensor]
        Tensors explicitly saved during the forward pass for use in backward.
        These are distinct from the function inputs: they may include
        transformed values (e.g., outputs, masks).
    saved_meta : dict[str, Any]
        Non-tensor metadata required for backward (e.g., shapes, axes, indices).

    Notes
    -----
    `saved_tensors` and `saved_meta` are intentionally generic to support a
    wide range of operations without coupling the Context type to specific
    kernels.
    """

    saved_tensors: list["ITensor"] = field(default_factory=list)
    saved_meta: dict[str, Any] = field(default_factory=dict)

    def save_for_backward(self, *tensors: "ITensor") -> None:
        """
        Save tensors for use during the backward computation.

        Parameters
        ----------
        *tensors : ITensor
            Any number of tensors to be stored in `saved_tensors`.
        """
        self.saved_tensors.extend(tensors)

    def clear(self) -> None:
        """
        Drop every saved tensor and metadata entry.
        """
        self.saved_tensors.clear()
        self.saved_meta.clear()
