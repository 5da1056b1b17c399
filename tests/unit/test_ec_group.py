"""
Unit tests for commutative_crypto.crypto.ec_group: curve lookup, point
codec and hash-to-curve.
"""

import secrets

import ecdsa
import pytest
from ecdsa import numbertheory

from commutative_crypto.crypto.context import Context
from commutative_crypto.crypto.ec_group import (
    NID_X9_62_prime256v1,
    NID_secp224r1,
    NID_secp256k1,
    SUPPORTED_CURVE_NAMES,
    ECGroup,
    resolve_curve_id,
)
from commutative_crypto.crypto.errors import InternalError, InvalidArgumentError


# ==============================================================================
# Curve lookup
# ==============================================================================


class TestCurveLookup:

    def test_nid_and_names_agree(self):
        assert resolve_curve_id(NID_secp224r1) == NID_secp224r1
        assert resolve_curve_id("secp224r1") == NID_secp224r1
        assert resolve_curve_id("P-224") == NID_secp224r1
        assert resolve_curve_id("prime256v1") == NID_X9_62_prime256v1
        assert resolve_curve_id("SECP256K1") == NID_secp256k1

    @pytest.mark.parametrize("bad", [0, -1, 999, "p-999", "", None, True, 1.5])
    def test_unknown_rejected(self, bad):
        with pytest.raises(InvalidArgumentError):
            resolve_curve_id(bad)

    def test_parameters_match_ecdsa(self, p224_group):
        assert p224_group.name == "secp224r1"
        assert p224_group.order == ecdsa.NIST224p.order
        assert p224_group.field_prime == ecdsa.NIST224p.curve.p()
        assert p224_group.order_byte_length == 28
        assert p224_group.field_byte_length == 28

    @pytest.mark.parametrize("name", SUPPORTED_CURVE_NAMES)
    def test_every_supported_curve_builds(self, name):
        group = ECGroup.from_curve_id(name, Context())
        assert group.name == name
        assert group.encode_point(group.generator)[0] in (0x02, 0x03)

    def test_p521_widths(self):
        group = ECGroup.from_curve_id("secp521r1", Context())
        assert group.field_byte_length == 66
        assert group.order_byte_length == 66


# ==============================================================================
# Point codec
# ==============================================================================


class TestPointCodec:

    @pytest.mark.parametrize("name", ["secp224r1", "secp256r1", "secp384r1", "secp521r1"])
    def test_roundtrip_random_point(self, name):
        group = ECGroup.from_curve_id(name, Context())
        pt = group.scalar_base_mul(group.generate_private_key())
        encoded = group.encode_point(pt)
        assert len(encoded) == 1 + group.field_byte_length
        assert group.decode_point(encoded) == pt

    def test_generator_matches_ecdsa_compressed_encoding(self, p224_group):
        expected = ecdsa.NIST224p.generator.to_bytes("compressed")
        assert p224_group.encode_point(p224_group.generator) == expected

    def test_prefix_tracks_y_parity(self, p224_group):
        pt = p224_group.scalar_base_mul(secrets.randbelow(p224_group.order - 1) + 1)
        encoded = p224_group.encode_point(pt)
        assert encoded[0] == (0x03 if pt.y() % 2 else 0x02)
        flipped = bytes([encoded[0] ^ 0x01]) + encoded[1:]
        assert p224_group.decode_point(flipped) == -pt

    def test_encode_infinity_fails(self, p224_group):
        with pytest.raises(InternalError, match="infinity"):
            p224_group.encode_point(ecdsa.ellipticcurve.INFINITY)

    def test_decode_invalid_prefix(self, p224_group):
        with pytest.raises(InvalidArgumentError, match="Invalid prefix"):
            p224_group.decode_point(b"\x04" + b"\xaa" * 28)

    def test_decode_wrong_length(self, p224_group):
        with pytest.raises(InvalidArgumentError, match="Expected 29 bytes"):
            p224_group.decode_point(b"\x02\xaa\xbb")

    def test_decode_x_out_of_field(self, p224_group):
        with pytest.raises(InvalidArgumentError, match="field element"):
            p224_group.decode_point(b"\x02" + b"\xff" * 28)

    def test_decode_x_not_on_curve(self, p224_group):
        p = p224_group.field_prime
        a = ecdsa.NIST224p.curve.a()
        b = ecdsa.NIST224p.curve.b()
        x = 1
        while numbertheory.jacobi((x ** 3 + a * x + b) % p, p) == 1:
            x += 1
        with pytest.raises(InvalidArgumentError, match="does not correspond"):
            p224_group.decode_point(b"\x02" + x.to_bytes(28, "big"))

    def test_decode_rejects_str(self, p224_group):
        with pytest.raises(InvalidArgumentError, match="must be bytes"):
            p224_group.decode_point("02" + "aa" * 28)


# ==============================================================================
# Scalars
# ==============================================================================


class TestScalars:

    def test_private_key_range(self, p224_group):
        for _ in range(20):
            k = p224_group.generate_private_key()
            assert 1 <= k < p224_group.order

    def test_check_private_key(self, p224_group):
        p224_group.check_private_key(1)
        p224_group.check_private_key(p224_group.order - 1)
        for bad in (0, -5, p224_group.order, p224_group.order + 1):
            with pytest.raises(InvalidArgumentError):
                p224_group.check_private_key(bad)

    def test_scalar_codec_fixed_width(self, p224_group):
        assert p224_group.encode_scalar(1) == b"\x00" * 27 + b"\x01"
        assert p224_group.decode_scalar(b"\x00" * 27 + b"\x01") == 1


# ==============================================================================
# hash_to_curve_sha256
# ==============================================================================


class TestHashToCurve:

    def test_deterministic(self, p224_group):
        assert p224_group.hash_to_curve_sha256(b"hello") == p224_group.hash_to_curve_sha256(b"hello")

    def test_deterministic_across_instances(self):
        g1 = ECGroup.from_curve_id("secp224r1", Context())
        g2 = ECGroup.from_curve_id("secp224r1", Context())
        assert g1.encode_point(g1.hash_to_curve_sha256(b"x")) == g2.encode_point(g2.hash_to_curve_sha256(b"x"))

    @pytest.mark.parametrize("name", ["secp224r1", "secp256r1", "secp256k1", "secp521r1"])
    def test_on_curve_with_even_y(self, name):
        group = ECGroup.from_curve_id(name, Context())
        curve = group.generator.curve()
        pt = group.hash_to_curve_sha256(b"some message")
        x, y = pt.x(), pt.y()
        assert curve.contains_point(x, y)
        assert y % 2 == 0
        assert group.encode_point(pt)[0] == 0x02

    def test_distinct_messages_distinct_points(self, p224_group):
        points = {p224_group.encode_point(p224_group.hash_to_curve_sha256(bytes([i]))) for i in range(32)}
        assert len(points) == 32

    def test_empty_message(self, p224_group):
        p224_group.encode_point(p224_group.hash_to_curve_sha256(b""))
