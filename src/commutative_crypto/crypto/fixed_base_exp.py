"""
Fixed-base modular exponentiation: fixed_base^exp mod modulus for many exp.

FixedBaseExp delegates to one of two strategies chosen once at build time
from FixedBaseExpConfig.two_k_ary_exp:

- _SimpleFixedBaseExpImpl: plain modular exponentiation, no precomputation.
  Reference behaviour, also the low-memory choice.
- _TwoKAryFixedBaseExpImpl: windowed (2^k-ary) precomputation.

Windowed algorithm, window width w, W = ceil(max_exp_bits / w) windows:

    table[i][d] = g^(d · 2^(i·w)) mod N      for i < W, d ∈ [0, 2^w)

    exp = Σ d_i · 2^(i·w)   =>   g^exp = Π table[i][d_i] mod N

so a query costs at most W multiplications instead of ~2·bits. The table
holds W · 2^w values. Exponents wider than max_exp_bits are still answered
by raising the cached g^(2^(W·w)) to the overflow part.

Callers never see which strategy was picked.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from commutative_crypto.crypto.context import Context
from commutative_crypto.crypto.errors import InvalidArgumentError
from commutative_crypto.config import FixedBaseExpConfig, get_default_config

logger = logging.getLogger("commutative_crypto.fixed_base_exp")


class _FixedBaseExpImplBase(ABC):
    """Strategy interface: non-negative exponent in, g^exp mod N out."""

    def __init__(self, ctx: Context, fixed_base: int, modulus: int) -> None:
        self._ctx = ctx
        self.fixed_base = fixed_base
        self.modulus = modulus

    @abstractmethod
    def mod_exp(self, exp: int) -> int:
        ...


class _SimpleFixedBaseExpImpl(_FixedBaseExpImplBase):

    def mod_exp(self, exp: int) -> int:
        return self._ctx.mod_exp(self.fixed_base, exp, self.modulus)


class _TwoKAryFixedBaseExpImpl(_FixedBaseExpImplBase):

    def __init__(
        self, ctx: Context, fixed_base: int, modulus: int, window_bits: int, max_exp_bits: int
    ) -> None:
        super().__init__(ctx, fixed_base, modulus)
        self.window_bits = window_bits
        self.num_windows = -(-max_exp_bits // window_bits)
        self._mask = (1 << window_bits) - 1
        self._table: list[list[int]] = []

        # g_i = g^(2^(i·w)); after the loop it is g^(2^(W·w))
        g_i = fixed_base
        for _ in range(self.num_windows):
            row = [1 % modulus]
            for _ in range(self._mask):
                row.append(ctx.mod_mul(row[-1], g_i, modulus))
            self._table.append(row)
            g_i = ctx.mod_mul(row[-1], g_i, modulus)
        self._overflow_base = g_i

    @property
    def table_size(self) -> int:
        return self.num_windows * (self._mask + 1)

    def mod_exp(self, exp: int) -> int:
        result = 1 % self.modulus
        for i, row in enumerate(self._table):
            digit = (exp >> (i * self.window_bits)) & self._mask
            if digit:
                result = self._ctx.mod_mul(result, row[digit], self.modulus)

        overflow = exp >> (self.num_windows * self.window_bits)
        if overflow:
            logger.warning(
                f"Exponent of {exp.bit_length()} bits exceeds the "
                f"{self.num_windows * self.window_bits}-bit precomputed table"
            )
            high = self._ctx.mod_exp(self._overflow_base, overflow, self.modulus)
            result = self._ctx.mod_mul(result, high, self.modulus)
        return result


class FixedBaseExp:
    """
    Repeated exponentiation of one fixed base under one modulus.

    Build with get_fixed_base_exp(); the base and modulus cannot change
    afterwards. Not thread-safe: the owned Context is mutated on each call.
    """

    def __init__(self, impl: _FixedBaseExpImplBase) -> None:
        self._impl = impl

    @classmethod
    def get_fixed_base_exp(
        cls,
        fixed_base: int,
        modulus: int,
        ctx: Context | None = None,
        config: FixedBaseExpConfig | None = None,
    ) -> FixedBaseExp:
        """
        Build the exponentiator and its precomputed state.

        Args:
            fixed_base: The base g (reduced mod modulus).
            modulus: The modulus N, must be > 1.
            ctx: Scratch context to own; a new one is created if omitted.
            config: Strategy options; the process default if omitted.

        Raises:
            InvalidArgumentError: If base or modulus is not an int, or modulus <= 1.
        """
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (fixed_base, modulus)):
            raise InvalidArgumentError("fixed_base and modulus must be integers")
        if modulus <= 1:
            raise InvalidArgumentError(f"modulus must be greater than 1, got {modulus}")

        ctx = ctx if ctx is not None else Context()
        config = config if config is not None else get_default_config()
        base = fixed_base % modulus

        if config.two_k_ary_exp:
            max_exp_bits = config.max_exp_bits or modulus.bit_length()
            impl = _TwoKAryFixedBaseExpImpl(ctx, base, modulus, config.window_bits, max_exp_bits)
            logger.debug(
                f"Built 2^k-ary fixed-base table: w={config.window_bits}, "
                f"{impl.num_windows} windows, {impl.table_size} entries"
            )
        else:
            impl = _SimpleFixedBaseExpImpl(ctx, base, modulus)
            logger.debug("Using simple fixed-base exponentiation")
        return cls(impl)

    @property
    def fixed_base(self) -> int:
        return self._impl.fixed_base

    @property
    def modulus(self) -> int:
        return self._impl.modulus

    def mod_exp(self, exp: int) -> int:
        """
        Compute fixed_base^exp mod modulus.

        Raises:
            InvalidArgumentError: If exp is not an integer or is negative.
        """
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise InvalidArgumentError(f"Exponent must be an integer, got {type(exp).__name__}")
        if exp < 0:
            raise InvalidArgumentError("Exponent must not be negative")
        return self._impl.mod_exp(exp)
