"""
Engine configuration and gradient-mode switches.

All tunables of the autograd engine live in `EngineConfig`. The active
configuration is held in a `contextvars.ContextVar`, not in a module-level
mutable object, so every thread (and every asyncio task) sees its own
settings and independent graphs can be built concurrently without
interfering with one another.

Typical usage
-------------
    from keygrad.infrastructure._config import no_grad, using_config

    with no_grad():
        y = model(x)            # no graph is recorded

    with using_config(strict_scalar_seed=True):
        loss.backward()         # non-scalar roots must be seeded explicitly
"""

from __future__ import annotations

import contextlib
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Iterator

import numpy as np


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for graph recording and backward traversal."""

    # Record creators/generations when at least one input requires grad.
    enable_grad: bool = True

    # Element dtype used for tensors created from Python data.
    dtype: str = "float32"

    # Refuse to seed a non-scalar root with implicit ones.
    strict_scalar_seed: bool = False

    def __post_init__(self) -> None:
        if np.dtype(self.dtype).kind != "f":
            raise ValueError(f"dtype must be a floating point type, got {self.dtype!r}")

    @property
    def np_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)


_config: ContextVar[EngineConfig] = ContextVar("keygrad_config", default=EngineConfig())


def get_config() -> EngineConfig:
    """Return the configuration active in the current context."""
    return _config.get()


def set_config(config: EngineConfig) -> None:
    """
    Replace the configuration for the current context.

    Prefer `using_config` for scoped changes; this is meant for application
    start-up.
    """
    if not isinstance(config, EngineConfig):
        raise TypeError(f"Expected EngineConfig, got {type(config)!r}")
    _config.set(config)


@contextlib.contextmanager
def using_config(**overrides) -> Iterator[EngineConfig]:
    """
    Temporarily override configuration fields for the current context.

    Parameters
    ----------
    **overrides
        Field names of `EngineConfig` and their temporary values.

    Yields
    ------
    EngineConfig
        The configuration active inside the block.
    """
    new_config = replace(_config.get(), **overrides)
    token = _config.set(new_config)
    try:
        yield new_config
    finally:
        _config.reset(token)


def no_grad() -> contextlib.AbstractContextManager:
    """Disable graph recording inside the block (inference-only paths)."""
    return using_config(enable_grad=False)


def enable_grad() -> contextlib.AbstractContextManager:
    """Re-enable graph recording inside a `no_grad()` block."""
    return using_config(enable_grad=True)


def is_grad_enabled() -> bool:
    return _config.get().enable_grad
