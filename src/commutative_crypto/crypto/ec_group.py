"""
Elliptic curve group wrapper over the ecdsa library.

Provides:
- Curve lookup by OpenSSL NID or by curve name
- Compressed SEC1 / ANSI X9.62 point encode/decode with strict validation
- Deterministic hash-to-curve (SHA-256 random oracle, try-and-rehash)
- Scalar multiplication and point addition helpers

Supported curves (all prime order, cofactor 1):
    secp192r1, secp224r1, secp256r1 (prime256v1), secp384r1, secp521r1,
    secp256k1

Compressed encoding:
    prefix (0x02 even y / 0x03 odd y) || x as fixed-width big-endian bytes
"""

from __future__ import annotations

from dataclasses import dataclass

import ecdsa
import ecdsa.ellipticcurve as ec
from ecdsa import numbertheory

from commutative_crypto.crypto.context import Context, bytes_to_int, int_to_bytes
from commutative_crypto.crypto.errors import InternalError, InvalidArgumentError

# ==============================================================================
# Curve registry
# ==============================================================================

# OpenSSL NIDs for the supported named curves
NID_X9_62_prime192v1 = 409
NID_X9_62_prime256v1 = 415
NID_secp224r1 = 713
NID_secp256k1 = 714
NID_secp384r1 = 715
NID_secp521r1 = 716


@dataclass(frozen=True)
class _NamedCurve:
    nid: int
    name: str
    curve: ecdsa.curves.Curve


_CURVES_BY_NID: dict[int, _NamedCurve] = {
    named.nid: named
    for named in (
        _NamedCurve(NID_X9_62_prime192v1, "secp192r1", ecdsa.NIST192p),
        _NamedCurve(NID_secp224r1, "secp224r1", ecdsa.NIST224p),
        _NamedCurve(NID_X9_62_prime256v1, "secp256r1", ecdsa.NIST256p),
        _NamedCurve(NID_secp384r1, "secp384r1", ecdsa.NIST384p),
        _NamedCurve(NID_secp521r1, "secp521r1", ecdsa.NIST521p),
        _NamedCurve(NID_secp256k1, "secp256k1", ecdsa.SECP256k1),
    )
}

_NID_BY_NAME: dict[str, int] = {
    "secp192r1": NID_X9_62_prime192v1,
    "prime192v1": NID_X9_62_prime192v1,
    "p-192": NID_X9_62_prime192v1,
    "nist192p": NID_X9_62_prime192v1,
    "secp224r1": NID_secp224r1,
    "p-224": NID_secp224r1,
    "nist224p": NID_secp224r1,
    "secp256r1": NID_X9_62_prime256v1,
    "prime256v1": NID_X9_62_prime256v1,
    "p-256": NID_X9_62_prime256v1,
    "nist256p": NID_X9_62_prime256v1,
    "secp384r1": NID_secp384r1,
    "p-384": NID_secp384r1,
    "nist384p": NID_secp384r1,
    "secp521r1": NID_secp521r1,
    "p-521": NID_secp521r1,
    "nist521p": NID_secp521r1,
    "secp256k1": NID_secp256k1,
}

SUPPORTED_CURVE_NAMES = tuple(named.name for named in _CURVES_BY_NID.values())


def resolve_curve_id(curve_id: int | str) -> int:
    """
    Resolve a curve identifier (NID int or case-insensitive name) to its NID.

    Raises:
        InvalidArgumentError: If the identifier is not a supported curve.
    """
    if isinstance(curve_id, bool):
        raise InvalidArgumentError(f"Invalid curve id: {curve_id!r}")
    if isinstance(curve_id, int):
        if curve_id in _CURVES_BY_NID:
            return curve_id
    elif isinstance(curve_id, str):
        nid = _NID_BY_NAME.get(curve_id.strip().lower())
        if nid is not None:
            return nid
    raise InvalidArgumentError(
        f"Unsupported curve id {curve_id!r}; expected one of {', '.join(SUPPORTED_CURVE_NAMES)}"
    )


# ==============================================================================
# ECGroup
# ==============================================================================


class ECGroup:
    """
    A named prime-order elliptic curve group.

    Points are ecdsa PointJacobi values; they are immutable and only leave
    this layer as compressed byte strings.
    """

    def __init__(self, named: _NamedCurve, ctx: Context) -> None:
        self._named = named
        self._ctx = ctx
        self._curve_fp = named.curve.curve
        self._generator = named.curve.generator
        self._order = named.curve.order
        self._p = self._curve_fp.p()
        self._a = self._curve_fp.a()
        self._b = self._curve_fp.b()

    @classmethod
    def from_curve_id(cls, curve_id: int | str, ctx: Context) -> ECGroup:
        """
        Build the group for a curve identifier.

        Raises:
            InvalidArgumentError: If the curve id is unknown.
        """
        return cls(_CURVES_BY_NID[resolve_curve_id(curve_id)], ctx)

    # ------------------------------------------------------------------
    # Curve parameters
    # ------------------------------------------------------------------

    @property
    def nid(self) -> int:
        return self._named.nid

    @property
    def name(self) -> str:
        return self._named.name

    @property
    def order(self) -> int:
        return self._order

    @property
    def field_prime(self) -> int:
        return self._p

    @property
    def generator(self) -> ec.PointJacobi:
        return self._generator

    @property
    def order_byte_length(self) -> int:
        return (self._order.bit_length() + 7) // 8

    @property
    def field_byte_length(self) -> int:
        return (self._p.bit_length() + 7) // 8

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def generate_private_key(self) -> int:
        """Uniform random scalar in [1, n-1]."""
        return self._ctx.generate_random_between(1, self._order)

    def check_private_key(self, key: int) -> None:
        """
        Raises:
            InvalidArgumentError: Unless 0 < key < n.
        """
        if key <= 0 or key >= self._order:
            raise InvalidArgumentError("Private key must be in the range [1, n-1]")

    def encode_scalar(self, value: int) -> bytes:
        """Fixed-width big-endian encoding, width = byte length of n."""
        return int_to_bytes(value, self.order_byte_length)

    def decode_scalar(self, data: bytes) -> int:
        """
        Decode a fixed-width big-endian scalar.

        Raises:
            InvalidArgumentError: If data is not bytes or has the wrong length.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidArgumentError(f"Scalar must be bytes, got {type(data).__name__}")
        if len(data) != self.order_byte_length:
            raise InvalidArgumentError(
                f"Expected {self.order_byte_length} scalar bytes, got {len(data)}"
            )
        return bytes_to_int(data)

    # ------------------------------------------------------------------
    # Point codec
    # ------------------------------------------------------------------

    def _y_squared(self, x: int) -> int:
        return (pow(x, 3, self._p) + self._a * x + self._b) % self._p

    def _is_square(self, value: int) -> bool:
        return numbertheory.jacobi(value, self._p) == 1

    def _sqrt(self, value: int) -> int:
        try:
            return numbertheory.square_root_mod_prime(value, self._p)
        except numbertheory.Error as e:
            raise InternalError(f"Square root mod p failed on {self.name}") from e

    def _point(self, x: int, y: int) -> ec.PointJacobi:
        return ec.PointJacobi(self._curve_fp, x, y, 1, self._order)

    def encode_point(self, point: ec.AbstractPoint) -> bytes:
        """
        Encode a point in compressed SEC1 form.

        Raises:
            InternalError: If the point is the identity (point at infinity).
        """
        if point == ec.INFINITY:
            raise InternalError("Cannot encode the point at infinity")
        x, y = point.x(), point.y()
        prefix = b"\x03" if y % 2 else b"\x02"
        return prefix + int_to_bytes(x, self.field_byte_length)

    def decode_point(self, data: bytes) -> ec.PointJacobi:
        """
        Decode a compressed SEC1 point and check it lies on this curve.

        Raises:
            InvalidArgumentError: If data is not bytes, has the wrong length or
                prefix, or its x coordinate has no matching curve point.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidArgumentError(f"Point must be bytes, got {type(data).__name__}")
        expected_len = 1 + self.field_byte_length
        if len(data) != expected_len:
            raise InvalidArgumentError(
                f"Expected {expected_len} bytes for a compressed {self.name} point, got {len(data)}"
            )
        prefix = data[0]
        if prefix not in (0x02, 0x03):
            raise InvalidArgumentError(f"Invalid prefix byte: 0x{prefix:02x}")

        x = bytes_to_int(data[1:])
        if x >= self._p:
            raise InvalidArgumentError("X coordinate is not a field element")
        y_sq = self._y_squared(x)
        if not self._is_square(y_sq):
            raise InvalidArgumentError(
                f"X coordinate does not correspond to a {self.name} point"
            )
        y = self._sqrt(y_sq)
        if (y % 2 == 1) != (prefix == 0x03):
            y = self._p - y
        return self._point(x, y)

    # ------------------------------------------------------------------
    # Hash-to-curve
    # ------------------------------------------------------------------

    def hash_to_curve_sha256(self, message: bytes) -> ec.PointJacobi:
        """
        Deterministically map arbitrary bytes to a curve point.

        Algorithm (try-and-rehash):
            1. x = RO_sha256(message) mod p
            2. While x³ + ax + b is not a square mod p:
                   x = RO_sha256(minimal_be_bytes(x)) mod p
            3. y = sqrt(x³ + ax + b), normalised to the even root

        The same message always yields the same point on a given curve.
        """
        x = self._ctx.random_oracle_sha256(bytes(message), self._p)
        while True:
            y_sq = self._y_squared(x)
            if self._is_square(y_sq):
                y = self._sqrt(y_sq)
                if y % 2 == 1:
                    y = self._p - y
                return self._point(x, y)
            x = self._ctx.random_oracle_sha256(int_to_bytes(x), self._p)

    # ------------------------------------------------------------------
    # Group operations
    # ------------------------------------------------------------------

    def mul(self, point: ec.AbstractPoint, scalar: int) -> ec.PointJacobi:
        """scalar · point"""
        self._ctx.op_count += 1
        try:
            return point * scalar
        except (ArithmeticError, ValueError) as e:
            raise InternalError(f"Scalar multiplication failed on {self.name}") from e

    def scalar_base_mul(self, scalar: int) -> ec.PointJacobi:
        """scalar · G"""
        return self.mul(self._generator, scalar)

    def add(self, p1: ec.AbstractPoint, p2: ec.AbstractPoint) -> ec.AbstractPoint:
        self._ctx.op_count += 1
        try:
            return p1 + p2
        except (ArithmeticError, ValueError) as e:
            raise InternalError(f"Point addition failed on {self.name}") from e
