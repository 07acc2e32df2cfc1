"""
Arithmetic in the prime field F_p.

Elements are immutable and always hold the canonical representative
0 <= value < modulus.
"""

from typing import Callable

from hd_keygen.errors import (
    DivisionByZero,
    InvalidModulus,
    MismatchedModulus,
    NoInverseExists,
)


class FieldElement:
    """An element of F_p."""

    __slots__ = ("_value", "_modulus")

    def __init__(self, value: int, modulus: int):
        if modulus <= 1:
            raise InvalidModulus(f"modulus must be greater than 1, got {modulus}")
        object.__setattr__(self, "_modulus", modulus)
        object.__setattr__(self, "_value", ((value % modulus) + modulus) % modulus)

    def __setattr__(self, name, value):
        raise AttributeError("FieldElement is immutable")

    @property
    def value(self) -> int:
        return self._value

    @property
    def modulus(self) -> int:
        return self._modulus

    def __eq__(self, other) -> bool:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self._value == other._value and self._modulus == other._modulus

    def __hash__(self) -> int:
        return hash((self._value, self._modulus))

    def __repr__(self) -> str:
        return f"FieldElement({self._value}, {self._modulus})"

    def __reduce__(self):
        return (FieldElement, (self._value, self._modulus))

    def __add__(self, other: "FieldElement") -> "FieldElement":
        return add(self, other)

    def __sub__(self, other: "FieldElement") -> "FieldElement":
        return sub(self, other)

    def __mul__(self, other: "FieldElement") -> "FieldElement":
        return mul(self, other)

    def __truediv__(self, other: "FieldElement") -> "FieldElement":
        return div(self, other)

    def __neg__(self) -> "FieldElement":
        return FieldElement(-self._value, self._modulus)


def make(modulus: int) -> Callable[[int], FieldElement]:
    """Return a constructor for elements of F_modulus."""
    if modulus <= 1:
        raise InvalidModulus(f"modulus must be greater than 1, got {modulus}")

    def _make(value: int) -> FieldElement:
        return FieldElement(value, modulus)

    return _make


def _common_modulus(elements) -> int:
    if len(elements) < 2:
        raise MismatchedModulus(f"expected at least 2 operands, got {len(elements)}")
    modulus = elements[0].modulus
    for e in elements[1:]:
        if e.modulus != modulus:
            raise MismatchedModulus(f"modulus mismatch: {modulus} != {e.modulus}")
    return modulus


def add(*elements: FieldElement) -> FieldElement:
    modulus = _common_modulus(elements)
    return FieldElement(sum(e.value for e in elements), modulus)


def mul(*elements: FieldElement) -> FieldElement:
    modulus = _common_modulus(elements)
    acc = 1
    for e in elements:
        acc = (acc * e.value) % modulus
    return FieldElement(acc, modulus)


def sub(a: FieldElement, b: FieldElement) -> FieldElement:
    modulus = _common_modulus((a, b))
    return FieldElement(a.value - b.value, modulus)


def inverse(a: FieldElement) -> FieldElement:
    """Multiplicative inverse via the extended Euclidean algorithm."""
    t, new_t = 0, 1
    r, new_r = a.modulus, a.value
    while new_r != 0:
        q = r // new_r
        t, new_t = new_t, t - q * new_t
        r, new_r = new_r, r - q * new_r
    if r != 1:
        raise NoInverseExists(f"{a.value} has no inverse modulo {a.modulus}")
    return FieldElement(t, a.modulus)


def div(a: FieldElement, b: FieldElement) -> FieldElement:
    _common_modulus((a, b))
    if b.value == 0:
        raise DivisionByZero(f"division by zero in F_{b.modulus}")
    return mul(a, inverse(b))
