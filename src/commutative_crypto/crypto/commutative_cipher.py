"""
Commutative elliptic-curve cipher: K1(K2(a)) == K2(K1(a)).

Lets two parties find out whether they hold the same value without showing
the value to each other (https://eprint.iacr.org/2008/356.pdf):

    1. Alice sends A = encrypt_a(x); Bob sends B = encrypt_b(y).
    2. Each re-encrypts the other's value: re_encrypt_b(A), re_encrypt_a(B).
    3. x == y  iff  the two double-encrypted points are equal.

Mathematical foundation:
    encrypt(m)     = k · HashToCurve(m)
    re_encrypt(P)  = k · P
    decrypt(P)     = k⁻¹ · P            (k⁻¹ taken mod the group order n)
    k1 · (k2 · P)  = k2 · (k1 · P)       scalar multiplication commutes

ElGamal re-encryption:
    For an EC ElGamal pair (c1, c2) = (r·G, m + r·Y), scaling both halves by k
    gives (k·r·G, k·m + k·r·Y): a valid ciphertext of k·m under the same
    public key Y. No fresh randomness is added, so this is only safe when the
    underlying messages m are pseudorandom.

Encryption is deterministic on purpose: equality tests depend on it. Use a
fresh key per session and make every value in one session unique.

Security: bit security is half the curve size (secp224r1 -> 112 bits).

Not thread-safe: each instance owns a mutable Context.

Example:
    cipher = ECCommutativeCipher.create_with_new_key("secp224r1")
    key_bytes = cipher.get_private_key_bytes()
    ct = cipher.encrypt(b"secret")
    same = ECCommutativeCipher.create_from_key("secp224r1", key_bytes)
    assert same.encrypt(b"secret") == ct
"""

from __future__ import annotations

import logging

import ecdsa.ellipticcurve as ec

from commutative_crypto.crypto.context import Context
from commutative_crypto.crypto.ec_group import ECGroup
from commutative_crypto.crypto.errors import InvalidArgumentError

logger = logging.getLogger("commutative_crypto.cipher")


def _as_bytes(data: bytes | str, label: str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    raise InvalidArgumentError(f"{label} must be bytes, got {type(data).__name__}")


class ECCommutativeCipher:
    """
    Commutative cipher bound to one curve and one private key.

    Create instances with create_with_new_key() or create_from_key(); the
    constructor rejects keys outside [1, n-1].
    """

    def __init__(self, ctx: Context, group: ECGroup, private_key: int) -> None:
        group.check_private_key(private_key)
        self._ctx = ctx
        self._group = group
        self._private_key = private_key
        self._private_key_inverse = ctx.mod_inverse(private_key, group.order)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create_with_new_key(cls, curve_id: int | str) -> ECCommutativeCipher:
        """
        Create a cipher with a fresh random private key in [1, n-1].

        Raises:
            InvalidArgumentError: If curve_id is not a supported curve.
            InternalError: If the key inverse cannot be computed.
        """
        ctx = Context()
        group = ECGroup.from_curve_id(curve_id, ctx)
        cipher = cls(ctx, group, group.generate_private_key())
        logger.debug(f"Created commutative cipher with new key on {group.name}")
        return cipher

    @classmethod
    def create_from_key(cls, curve_id: int | str, key_bytes: bytes) -> ECCommutativeCipher:
        """
        Create a cipher from stored private key bytes.

        Args:
            curve_id: Curve NID or name.
            key_bytes: Big-endian scalar, exactly order_byte_length bytes,
                       as returned by get_private_key_bytes().

        Raises:
            InvalidArgumentError: If the curve is unknown, the key has the
                wrong length, or the key is 0 or >= n.
        """
        ctx = Context()
        group = ECGroup.from_curve_id(curve_id, ctx)
        private_key = group.decode_scalar(key_bytes)
        cipher = cls(ctx, group, private_key)
        logger.debug(f"Created commutative cipher from stored key on {group.name}")
        return cipher

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def curve_id(self) -> int:
        """OpenSSL NID of the bound curve."""
        return self._group.nid

    @property
    def group(self) -> ECGroup:
        return self._group

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _encrypt_point(self, point: ec.AbstractPoint) -> ec.AbstractPoint:
        return self._group.mul(point, self._private_key)

    def encrypt(self, plaintext: bytes | str) -> bytes:
        """
        Hash plaintext to the curve and multiply by the private key.

        Returns:
            Compressed encoding of k · HashToCurve(plaintext).
        """
        message = _as_bytes(plaintext, "plaintext")
        point = self._group.hash_to_curve_sha256(message)
        return self._group.encode_point(self._encrypt_point(point))

    def re_encrypt(self, ciphertext: bytes) -> bytes:
        """
        Multiply an encoded point by the private key.

        Also works on a value that has already been hashed to the curve.

        Raises:
            InvalidArgumentError: If ciphertext is not a valid compressed point.
        """
        point = self._group.decode_point(ciphertext)
        return self._group.encode_point(self._encrypt_point(point))

    def re_encrypt_elgamal_ciphertext(
        self, elgamal_ciphertext: tuple[bytes, bytes]
    ) -> tuple[bytes, bytes]:
        """
        Homomorphically re-encrypt an ElGamal ciphertext (c1, c2) with k.

        The result decrypts, under the original ElGamal key, to k · m.
        Does not re-randomise the ciphertext.

        Raises:
            InvalidArgumentError: If the input is not a pair or either half is
                not a valid compressed point. Nothing is returned partially.
        """
        try:
            c1_bytes, c2_bytes = elgamal_ciphertext
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError("ElGamal ciphertext must be a pair (c1, c2)") from e

        c1 = self._group.decode_point(c1_bytes)
        c2 = self._group.decode_point(c2_bytes)
        return (
            self._group.encode_point(self._encrypt_point(c1)),
            self._group.encode_point(self._encrypt_point(c2)),
        )

    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Multiply an encoded point by the inverse private key.

        Single-encrypted under this key: returns the hashed-to-curve point
        (hashing is not reversed). Double-encrypted under this key and
        another: returns the point encrypted under the other key only.

        Raises:
            InvalidArgumentError: If ciphertext is not a valid compressed point.
        """
        point = self._group.decode_point(ciphertext)
        return self._group.encode_point(self._group.mul(point, self._private_key_inverse))

    def get_private_key_bytes(self) -> bytes:
        """Private key as fixed-width big-endian bytes, for create_from_key()."""
        return self._group.encode_scalar(self._private_key)

    def __repr__(self) -> str:
        return f"ECCommutativeCipher(curve={self._group.name})"
