"""
secp256k1 point arithmetic over F_p.

A curve point is either a finite ``Point`` or the identity ``INFINITY``.
"""

from typing import Union

from hd_keygen import finite_field as fp
from hd_keygen.errors import MismatchedModulus
from hd_keygen.finite_field import FieldElement

P = 2**256 - 2**32 - 977
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
A = 0
B = 7

_fp = fp.make(P)


class _Infinity:
    """The point at infinity (group identity)."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INFINITY"

    def __reduce__(self):
        return (_Infinity, ())


INFINITY = _Infinity()


class Point:
    """A finite point (x, y) on secp256k1."""

    __slots__ = ("x", "y")

    def __init__(self, x: FieldElement, y: FieldElement):
        if x.modulus != P or y.modulus != P:
            raise MismatchedModulus("point coordinates must be elements of F_P")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __setattr__(self, name, value):
        raise AttributeError("Point is immutable")

    @classmethod
    def from_ints(cls, x: int, y: int) -> "Point":
        return cls(_fp(x), _fp(y))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x.value, self.y.value))

    def __repr__(self) -> str:
        return f"Point(0x{self.x.value:064x}, 0x{self.y.value:064x})"

    def __reduce__(self):
        return (Point.from_ints, (self.x.value, self.y.value))


CurvePoint = Union[Point, _Infinity]

G = Point.from_ints(
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)


def is_on_curve(point: CurvePoint) -> bool:
    if point is INFINITY:
        return True
    x, y = point.x, point.y
    return y * y == x * x * x + _fp(B)


def point_add(p1: CurvePoint, p2: CurvePoint) -> CurvePoint:
    """Add two curve points (handles doubling and the identity)."""
    if p1 is INFINITY:
        return p2
    if p2 is INFINITY:
        return p1

    x1, y1 = p1.x, p1.y
    x2, y2 = p2.x, p2.y

    # Vertical line: P + (-P), or doubling a point with y == 0.
    if x1 == x2 and (y1 != y2 or y1.value == 0):
        return INFINITY

    if x1 == x2:
        lam = (_fp(3) * x1 * x1) / (_fp(2) * y1)
    else:
        lam = (y2 - y1) / (x2 - x1)

    x3 = lam * lam - x1 - x2
    y3 = lam * (x1 - x3) - y1
    return Point(x3, y3)


def scalar_multiply(k: int, point: CurvePoint) -> CurvePoint:
    """Double-and-add, least significant bit first. Not constant-time."""
    if k < 0:
        raise ValueError("scalar must be non-negative")
    result = INFINITY
    addend = point
    while k:
        if k & 1:
            result = addend if result is INFINITY else point_add(result, addend)
        addend = point_add(addend, addend)
        k >>= 1
    return result


def serialize_point(point: CurvePoint, compressed: bool = True) -> bytes:
    if point is INFINITY:
        raise ValueError("cannot serialize the point at infinity")
    x = point.x.value.to_bytes(32, "big")
    if compressed:
        prefix = b"\x02" if point.y.value % 2 == 0 else b"\x03"
        return prefix + x
    return b"\x04" + x + point.y.value.to_bytes(32, "big")


def decode_point(data: bytes) -> Point:
    """Parse a SEC1 compressed (33 byte) or uncompressed (65 byte) point."""
    if len(data) == 33 and data[0] in (2, 3):
        x = _fp(int.from_bytes(data[1:], "big"))
        if x.value != int.from_bytes(data[1:], "big"):
            raise ValueError("x coordinate is not below the field prime")
        y_sq = x * x * x + _fp(B)
        y = _fp(pow(y_sq.value, (P + 1) // 4, P))
        if y * y != y_sq:
            raise ValueError("x coordinate is not on the curve")
        if y.value % 2 != data[0] % 2:
            y = -y
        return Point(x, y)
    if len(data) == 65 and data[0] == 4:
        x_int = int.from_bytes(data[1:33], "big")
        y_int = int.from_bytes(data[33:], "big")
        if x_int >= P or y_int >= P:
            raise ValueError("coordinate is not below the field prime")
        point = Point.from_ints(x_int, y_int)
        if not is_on_curve(point):
            raise ValueError("point is not on the curve")
        return point
    raise ValueError(f"unsupported point encoding ({len(data)} bytes)")
