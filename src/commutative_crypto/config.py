"""
Configuration for the fixed-base exponentiation engine.

The strategy used by FixedBaseExp is chosen once per instance, at build
time, from a FixedBaseExpConfig. Callers may pass a config explicitly; when
they don't, the process-wide default is used. Tests flip the default with
set_default_config() to exercise both strategies.

Environment variables (read by FixedBaseExpConfig.from_env):
    COMMUTATIVE_CRYPTO_TWO_K_ARY_EXP   "1"/"true"/"yes" enables the windowed strategy
    COMMUTATIVE_CRYPTO_WINDOW_BITS     window width in bits (default 4)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from commutative_crypto.crypto.errors import InvalidArgumentError

_TRUTHY = frozenset({"1", "true", "yes", "on"})

# Wider windows blow up the table as 2^w per position
MAX_WINDOW_BITS = 16


@dataclass(frozen=True)
class FixedBaseExpConfig:
    """
    Build-time options for FixedBaseExp.

    Args:
        two_k_ary_exp: Use the windowed (2^k-ary) precomputation strategy
                       instead of plain modular exponentiation.
        window_bits:   Window width w for the 2^k-ary table.
        max_exp_bits:  Exponent width covered by the table. None means the
                       bit length of the modulus.
    """
    two_k_ary_exp: bool = False
    window_bits: int = 4
    max_exp_bits: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raises InvalidArgumentError if any option is out of range."""
        if not 1 <= self.window_bits <= MAX_WINDOW_BITS:
            raise InvalidArgumentError(
                f"window_bits must be in [1, {MAX_WINDOW_BITS}], got {self.window_bits}"
            )
        if self.max_exp_bits is not None and self.max_exp_bits <= 0:
            raise InvalidArgumentError(
                f"max_exp_bits must be positive, got {self.max_exp_bits}"
            )

    @classmethod
    def from_env(cls) -> FixedBaseExpConfig:
        two_k_ary = os.getenv("COMMUTATIVE_CRYPTO_TWO_K_ARY_EXP", "").strip().lower() in _TRUTHY
        window_raw = os.getenv("COMMUTATIVE_CRYPTO_WINDOW_BITS", "4")
        try:
            window_bits = int(window_raw)
        except ValueError as e:
            raise InvalidArgumentError(
                f"COMMUTATIVE_CRYPTO_WINDOW_BITS must be an integer, got {window_raw!r}"
            ) from e
        return cls(two_k_ary_exp=two_k_ary, window_bits=window_bits)


_default_config: FixedBaseExpConfig | None = None


def get_default_config() -> FixedBaseExpConfig:
    """Process-wide default, loaded from the environment on first use."""
    global _default_config
    if _default_config is None:
        _default_config = FixedBaseExpConfig.from_env()
    return _default_config


def set_default_config(config: FixedBaseExpConfig | None) -> None:
    """Replace the process-wide default. None re-reads the environment on next use."""
    global _default_config
    _default_config = config
