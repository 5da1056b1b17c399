"""
EC ElGamal over compressed points, companion to ECCommutativeCipher.

    Key pair:   x ∈ [1, n-1],  Y = x·G
    Encrypt m:  r ∈ [1, n-1],  (c1, c2) = (r·G, m + r·Y)
    Decrypt:    m = c2 - x·c1

Ciphertexts produced here are the input to
ECCommutativeCipher.re_encrypt_elgamal_ciphertext(), which maps an
encryption of m to an encryption of k·m.

Not thread-safe: each instance owns a mutable Context.
"""

from __future__ import annotations

import logging

import ecdsa.ellipticcurve as ec

from commutative_crypto.crypto.context import Context
from commutative_crypto.crypto.ec_group import ECGroup
from commutative_crypto.crypto.errors import InvalidArgumentError

logger = logging.getLogger("commutative_crypto.elgamal")


class CommutativeElGamal:
    """
    EC ElGamal key holder. Instances built from a public key alone can
    encrypt but not decrypt.
    """

    def __init__(
        self,
        ctx: Context,
        group: ECGroup,
        public_key: ec.AbstractPoint,
        private_key: int | None = None,
    ) -> None:
        self._ctx = ctx
        self._group = group
        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def create_with_new_key_pair(cls, curve_id: int | str) -> CommutativeElGamal:
        """
        Raises:
            InvalidArgumentError: If curve_id is not a supported curve.
        """
        ctx = Context()
        group = ECGroup.from_curve_id(curve_id, ctx)
        private_key = group.generate_private_key()
        logger.debug(f"Generated ElGamal key pair on {group.name}")
        return cls(ctx, group, group.scalar_base_mul(private_key), private_key)

    @classmethod
    def create_from_public_key(cls, curve_id: int | str, public_key_bytes: bytes) -> CommutativeElGamal:
        """Encryption-only instance from a compressed public key Y."""
        ctx = Context()
        group = ECGroup.from_curve_id(curve_id, ctx)
        return cls(ctx, group, group.decode_point(public_key_bytes))

    @classmethod
    def create_from_key_pair(
        cls, curve_id: int | str, public_key_bytes: bytes, private_key_bytes: bytes
    ) -> CommutativeElGamal:
        """
        Raises:
            InvalidArgumentError: If either key is malformed, or Y != x·G.
        """
        ctx = Context()
        group = ECGroup.from_curve_id(curve_id, ctx)
        public_key = group.decode_point(public_key_bytes)
        private_key = group.decode_scalar(private_key_bytes)
        group.check_private_key(private_key)
        if group.scalar_base_mul(private_key) != public_key:
            raise InvalidArgumentError("Public key does not match the private key")
        return cls(ctx, group, public_key, private_key)

    @property
    def group(self) -> ECGroup:
        return self._group

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    def encrypt(self, message: bytes) -> tuple[bytes, bytes]:
        """
        Encrypt a compressed message point with fresh randomness r.

        Returns:
            (c1, c2) = (r·G, m + r·Y), both compressed.
        """
        m = self._group.decode_point(message)
        r = self._group.generate_private_key()
        c1 = self._group.scalar_base_mul(r)
        c2 = self._group.add(m, self._group.mul(self._public_key, r))
        return self._group.encode_point(c1), self._group.encode_point(c2)

    def encrypt_identity_element(self) -> tuple[bytes, bytes]:
        """
        Encrypt the group identity with fresh randomness r.

        Returns:
            (c1, c2) = (r·G, r·Y), both compressed.
        """
        r = self._group.generate_private_key()
        c1 = self._group.scalar_base_mul(r)
        c2 = self._group.mul(self._public_key, r)
        return self._group.encode_point(c1), self._group.encode_point(c2)

    def decrypt(self, ciphertext: tuple[bytes, bytes]) -> bytes:
        """
        Recover the compressed message point m = c2 - x·c1.

        Raises:
            InvalidArgumentError: If this instance has no private key, the
                ciphertext is malformed, or it decrypts to the identity.
        """
        if self._private_key is None:
            raise InvalidArgumentError("Decryption requires the ElGamal private key")
        try:
            c1_bytes, c2_bytes = ciphertext
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError("ElGamal ciphertext must be a pair (c1, c2)") from e

        c1 = self._group.decode_point(c1_bytes)
        c2 = self._group.decode_point(c2_bytes)
        m = self._group.add(c2, -self._group.mul(c1, self._private_key))
        if m == ec.INFINITY:
            raise InvalidArgumentError("Ciphertext decrypts to the point at infinity")
        return self._group.encode_point(m)

    def get_public_key_bytes(self) -> bytes:
        return self._group.encode_point(self._public_key)

    def get_private_key_bytes(self) -> bytes:
        if self._private_key is None:
            raise InvalidArgumentError("This ElGamal instance has no private key")
        return self._group.encode_scalar(self._private_key)
