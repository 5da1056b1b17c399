"""
Error types shared by the commutative_crypto primitives.

Two kinds are enough for every primitive in this package:

- InvalidArgumentError: caller-supplied data is wrong (unknown curve, bad key
  bytes, malformed point, negative exponent). Safe to retry with fixed input.
- InternalError: the underlying arithmetic library failed for a reason the
  caller cannot fix.
"""

from __future__ import annotations


class CryptoError(Exception):
    """Base class for all commutative_crypto failures."""
    pass


class InvalidArgumentError(CryptoError, ValueError):
    """Raised when caller input is structurally or semantically invalid."""
    pass


class InternalError(CryptoError, RuntimeError):
    """Raised when the underlying curve or big-integer layer fails."""
    pass
