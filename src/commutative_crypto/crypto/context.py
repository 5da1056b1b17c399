"""
Scratch context for repeated big-integer operations.

Each ECCommutativeCipher, CommutativeElGamal and FixedBaseExp instance owns
exactly one Context. The context bundles the secure random source, the
SHA-256 random oracle used by hash-to-curve, and modular helpers, and keeps
a running operation counter.

A Context is mutated on every call and is NOT thread-safe. Never share one
between threads; create one instance per owner instead.
"""

from __future__ import annotations

import hashlib
import secrets

from commutative_crypto.crypto.errors import InternalError, InvalidArgumentError

# Output width of SHA-256 in bits
_HASH_OUTPUT_BITS = 256


def int_to_bytes(value: int, length: int | None = None) -> bytes:
    """
    Big-endian encoding of a non-negative integer.

    Args:
        value: Integer to encode (must be >= 0).
        length: Fixed output width in bytes. When omitted, the minimal width
                is used (zero encodes to the empty string).

    Raises:
        InvalidArgumentError: If value is negative or does not fit in length.
    """
    if value < 0:
        raise InvalidArgumentError(f"Cannot encode negative integer {value}")
    if length is None:
        length = (value.bit_length() + 7) // 8
    try:
        return value.to_bytes(length, "big")
    except OverflowError as e:
        raise InvalidArgumentError(
            f"Integer of {value.bit_length()} bits does not fit in {length} bytes"
        ) from e


def bytes_to_int(data: bytes) -> int:
    """Big-endian decoding of a byte string to a non-negative integer."""
    return int.from_bytes(data, "big")


class Context:
    """
    Per-instance scratch state for modular arithmetic and hashing.

    Attributes:
        op_count: Number of arithmetic/hash operations performed so far.
                  Informational only; results never depend on it.
    """

    def __init__(self) -> None:
        self.op_count = 0
        self._sha256 = hashlib.sha256()

    # ------------------------------------------------------------------
    # Randomness
    # ------------------------------------------------------------------

    def generate_random_less_than(self, max_value: int) -> int:
        """Uniform random integer in [0, max_value)."""
        if max_value <= 0:
            raise InvalidArgumentError(f"max_value must be positive, got {max_value}")
        self.op_count += 1
        return secrets.randbelow(max_value)

    def generate_random_between(self, low: int, high: int) -> int:
        """Uniform random integer in [low, high)."""
        if high <= low:
            raise InvalidArgumentError(f"Empty range [{low}, {high})")
        return low + self.generate_random_less_than(high - low)

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    def sha256(self, data: bytes) -> bytes:
        """SHA-256 digest of data, reusing the context's prototype hasher."""
        hasher = self._sha256.copy()
        hasher.update(data)
        self.op_count += 1
        return hasher.digest()

    def random_oracle_sha256(self, data: bytes, max_value: int) -> int:
        """
        Hash arbitrary bytes to an integer in [0, max_value).

        Expands SHA-256 in counter mode to bit_length(max_value) + 256 bits,
        then drops the excess low bits and reduces mod max_value. The extra
        256 bits keep the reduction bias negligible.

        Block i (starting at 1) is SHA256(minimal_be_bytes(i) || data).
        """
        if max_value <= 0:
            raise InvalidArgumentError(f"max_value must be positive, got {max_value}")
        output_bits = max_value.bit_length() + _HASH_OUTPUT_BITS
        iter_count = -(-output_bits // _HASH_OUTPUT_BITS)
        excess_bits = iter_count * _HASH_OUTPUT_BITS - output_bits

        hash_output = 0
        for i in range(1, iter_count + 1):
            hash_output <<= _HASH_OUTPUT_BITS
            hash_output += bytes_to_int(self.sha256(int_to_bytes(i) + data))
        return (hash_output >> excess_bits) % max_value

    # ------------------------------------------------------------------
    # Modular arithmetic
    # ------------------------------------------------------------------

    def mod_mul(self, a: int, b: int, modulus: int) -> int:
        self.op_count += 1
        return (a * b) % modulus

    def mod_exp(self, base: int, exp: int, modulus: int) -> int:
        self.op_count += 1
        return pow(base, exp, modulus)

    def mod_inverse(self, value: int, modulus: int) -> int:
        """
        Modular inverse of value mod modulus.

        Raises:
            InternalError: If value is not invertible (gcd != 1).
        """
        self.op_count += 1
        try:
            return pow(value, -1, modulus)
        except ValueError as e:
            raise InternalError(f"Value is not invertible modulo {modulus}") from e
