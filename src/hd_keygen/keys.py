"""
secp256k1 private and public key types.
"""

from typing import Union

from hd_keygen.errors import InvalidPrivateKeyRange, InvalidPublicKey
from hd_keygen.secp256k1 import G, N, Point, decode_point, scalar_multiply, serialize_point


class PrivateKey:
    """A secp256k1 private scalar in [1, n-1]."""

    __slots__ = ("_value",)

    def __init__(self, value: int):
        if not 0 < value < N:
            raise InvalidPrivateKeyRange("private key must be in [1, n-1]")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError("PrivateKey is immutable")

    def __reduce__(self):
        return (PrivateKey, (self._value,))

    @classmethod
    def from_bytes(cls, data: bytes) -> "PrivateKey":
        if len(data) != 32:
            raise InvalidPrivateKeyRange(f"private key must be 32 bytes, got {len(data)}")
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_hex(cls, hex_str: str) -> "PrivateKey":
        if hex_str.startswith(("0x", "0X")):
            hex_str = hex_str[2:]
        try:
            data = bytes.fromhex(hex_str)
        except ValueError as e:
            raise InvalidPrivateKeyRange(f"invalid private key hex: {e}") from e
        return cls.from_bytes(data)

    def __int__(self) -> int:
        return self._value

    def to_bytes(self) -> bytes:
        return self._value.to_bytes(32, "big")

    def hex(self, prefix: bool = True) -> str:
        return ("0x" if prefix else "") + self.to_bytes().hex()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        # Never render the scalar.
        return "PrivateKey(<redacted>)"


class PublicKey:
    """A SEC1-encoded secp256k1 public key (33 or 65 bytes)."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        data = bytes(data)
        if not (
            (len(data) == 33 and data[0] in (2, 3))
            or (len(data) == 65 and data[0] == 4)
        ):
            raise InvalidPublicKey(
                f"expected 33-byte compressed or 65-byte uncompressed key, got {len(data)} bytes"
            )
        object.__setattr__(self, "_data", data)

    def __setattr__(self, name, value):
        raise AttributeError("PublicKey is immutable")

    def __reduce__(self):
        return (PublicKey, (self._data,))

    @property
    def compressed(self) -> bool:
        return len(self._data) == 33

    @property
    def point(self) -> Point:
        try:
            return decode_point(self._data)
        except ValueError as e:
            raise InvalidPublicKey(str(e)) from e

    def to_bytes(self) -> bytes:
        return self._data

    def hex(self, prefix: bool = True) -> str:
        return ("0x" if prefix else "") + self._data.hex()

    def to_uncompressed(self) -> "PublicKey":
        if not self.compressed:
            return self
        return PublicKey(serialize_point(self.point, compressed=False))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"PublicKey({self.hex()})"


def public_key_from_private(
    key: Union[PrivateKey, int], compressed: bool = True
) -> PublicKey:
    """Compute key*G and serialize it."""
    if not isinstance(key, PrivateKey):
        key = PrivateKey(key)
    point = scalar_multiply(int(key), G)
    return PublicKey(serialize_point(point, compressed))
