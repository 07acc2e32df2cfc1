"""
Tests for secp256k1 point arithmetic, checked against the ecdsa package.
"""
import pytest
from ecdsa import SECP256k1
from hypothesis import given, settings, strategies as st

from hd_keygen.errors import DivisionByZero
from hd_keygen.secp256k1 import (
    G,
    INFINITY,
    N,
    P,
    Point,
    decode_point,
    is_on_curve,
    point_add,
    scalar_multiply,
    serialize_point,
)

G2 = Point.from_ints(
    0xC6047F9441ED7D6D3045406E95C07CD85C778E4B8CEF3CA7ABAC09B95C709EE5,
    0x1AE168FEA63DC339A3C58419466CEAEEF7F632653266D0E1236431A950CFE52A,
)
G3 = Point.from_ints(
    0xF9308A019258C31049344F85F89D5229B531C845836F99B08601F113BCE036F9,
    0x388F7B0F632DE8140FE337E62A37F3566500A99934C2231B6CB9FD7584B8E672,
)
G7 = Point.from_ints(
    0x5CBDF0646E5DB4EAA398F365F2EA7A0E3D419B7E0330E39CE92BDDEDCAC4F9BC,
    0x6AEBCA40BA255960A3178D6D861A54DBA813D0B813FDE7B5A5082628087264DA,
)


def _reference(k):
    pt = SECP256k1.generator * k
    return Point.from_ints(pt.x(), pt.y())


def _negate(point):
    return Point(point.x, -point.y)


def test_constants():
    assert P == 2**256 - 2**32 - 977
    assert N == SECP256k1.order
    assert is_on_curve(G)


def test_one_times_g_is_g():
    assert scalar_multiply(1, G) == G


def test_small_multiples():
    assert scalar_multiply(2, G) == G2
    assert point_add(G, G) == G2
    assert point_add(G2, G) == G3
    assert scalar_multiply(7, G) == G7
    assert _reference(7) == G7


def test_zero_scalar_is_infinity():
    assert scalar_multiply(0, G) is INFINITY


def test_negative_scalar_rejected():
    with pytest.raises(ValueError):
        scalar_multiply(-1, G)


def test_order_times_g_is_infinity():
    assert scalar_multiply(N, G) is INFINITY
    assert scalar_multiply(N + 1, G) == G


def test_identity():
    assert point_add(INFINITY, G) == G
    assert point_add(G, INFINITY) == G
    assert point_add(INFINITY, INFINITY) is INFINITY


def test_point_plus_its_reflection_is_infinity():
    assert point_add(G, _negate(G)) is INFINITY
    assert point_add(G7, _negate(G7)) is INFINITY


def test_reflection_not_reached_through_fp_division():
    # The slope denominator x2 - x1 is zero for P + (-P).
    with pytest.raises(DivisionByZero):
        G.y / (G.x - G.x)


def test_addition_is_commutative():
    assert point_add(G2, G7) == point_add(G7, G2)
    assert point_add(G2, G7) == scalar_multiply(9, G)


@settings(max_examples=25, deadline=None)
@given(st.integers(min_value=1, max_value=N - 1))
def test_scalar_multiply_matches_reference(k):
    result = scalar_multiply(k, G)
    assert result == _reference(k)
    assert is_on_curve(result)


def test_serialize_compressed_prefix_tracks_parity():
    for point in (G, G2, G3, G7):
        data = serialize_point(point, compressed=True)
        assert len(data) == 33
        assert data[0] == (0x02 if point.y.value % 2 == 0 else 0x03)
        assert data[1:] == point.x.value.to_bytes(32, "big")


def test_serialize_uncompressed():
    data = serialize_point(G, compressed=False)
    assert len(data) == 65
    assert data[0] == 0x04
    assert data[1:33] == G.x.value.to_bytes(32, "big")
    assert data[33:] == G.y.value.to_bytes(32, "big")


def test_serialize_infinity_rejected():
    with pytest.raises(ValueError):
        serialize_point(INFINITY)


@pytest.mark.parametrize("point", [G, G2, G3, G7])
@pytest.mark.parametrize("compressed", [True, False])
def test_decode_point(point, compressed):
    assert decode_point(serialize_point(point, compressed)) == point


def test_decode_rejects_garbage():
    with pytest.raises(ValueError):
        decode_point(b"\x05" + bytes(32))
    with pytest.raises(ValueError):
        decode_point(b"\x04" + bytes(64))  # (0, 0) is not on the curve


def test_points_are_immutable():
    with pytest.raises(AttributeError):
        G.x = G2.x
