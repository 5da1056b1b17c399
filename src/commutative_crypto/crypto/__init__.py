"""
commutative_crypto.crypto: Elliptic-curve and modular primitives for
two-party protocols such as private set intersection.

Provides:
- ECCommutativeCipher: K1(K2(a)) == K2(K1(a)) over a named curve
- CommutativeElGamal: EC ElGamal whose ciphertexts the cipher can re-encrypt
- FixedBaseExp: precomputed fixed-base modular exponentiation
- ECGroup / Context: curve codec, hash-to-curve and scratch state
"""

from commutative_crypto.crypto.commutative_cipher import ECCommutativeCipher
from commutative_crypto.crypto.context import Context
from commutative_crypto.crypto.ec_group import (
    NID_X9_62_prime192v1,
    NID_X9_62_prime256v1,
    NID_secp224r1,
    NID_secp256k1,
    NID_secp384r1,
    NID_secp521r1,
    SUPPORTED_CURVE_NAMES,
    ECGroup,
    resolve_curve_id,
)
from commutative_crypto.crypto.elgamal import CommutativeElGamal
from commutative_crypto.crypto.errors import CryptoError, InternalError, InvalidArgumentError
from commutative_crypto.crypto.fixed_base_exp import FixedBaseExp

__all__ = [
    # Cipher
    "ECCommutativeCipher",
    "CommutativeElGamal",
    # Exponentiation
    "FixedBaseExp",
    # Group / scratch
    "ECGroup",
    "Context",
    "resolve_curve_id",
    "SUPPORTED_CURVE_NAMES",
    "NID_X9_62_prime192v1",
    "NID_X9_62_prime256v1",
    "NID_secp224r1",
    "NID_secp256k1",
    "NID_secp384r1",
    "NID_secp521r1",
    # Errors
    "CryptoError",
    "InvalidArgumentError",
    "InternalError",
]
