"""Exception hierarchy for the rewrite engine.

Callback errors raised by user productions or modules are never wrapped;
these types only cover problems the engine detects itself.
"""

from __future__ import annotations


class LSystemError(Exception):
    pass


class ProductionError(LSystemError):
    """A production is malformed (missing or invalid module types)."""


class DerivationError(LSystemError):
    """A derivation holds something that is not a module or node."""


class StateCopyError(LSystemError):
    """Traversal state cannot be duplicated independently."""


class ConfigError(LSystemError, ValueError):
    pass


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigError(msg)
