"""Configuration helpers for compiler components."""

from __future__ import annotations

import copy
from typing import Optional

from .model import CompileOptions, CompilerConfig

_COMPILER_CONFIG = CompilerConfig()


def get_compiler_config() -> CompilerConfig:
    return copy.deepcopy(_COMPILER_CONFIG)


def set_compiler_config(config: CompilerConfig) -> None:
    global _COMPILER_CONFIG
    _COMPILER_CONFIG = copy.deepcopy(config)


def effective_config(options: Optional[CompileOptions] = None) -> CompilerConfig:
    """Return the per-call override from ``options`` or the process default."""

    if options is not None and options.config is not None:
        return copy.deepcopy(options.config)
    return get_compiler_config()
