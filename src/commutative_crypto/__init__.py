"""
commutative-crypto: commutative elliptic-curve cipher and fixed-base
modular exponentiation for secure two-party computation.

Usage:
    from commutative_crypto import ECCommutativeCipher, FixedBaseExp
"""

from commutative_crypto.crypto import (
    CommutativeElGamal,
    CryptoError,
    ECCommutativeCipher,
    FixedBaseExp,
    InternalError,
    InvalidArgumentError,
)
from commutative_crypto.config import FixedBaseExpConfig

__version__ = "0.1.0"
__all__ = [
    "ECCommutativeCipher",
    "CommutativeElGamal",
    "FixedBaseExp",
    "FixedBaseExpConfig",
    "CryptoError",
    "InvalidArgumentError",
    "InternalError",
]
