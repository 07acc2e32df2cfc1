"""
BIP39 mnemonic to seed conversion.

Seed stretching is done here; wordlist encoding and checksum validation are
delegated to the ``mnemonic`` package.
"""

import hashlib
import secrets
import unicodedata
from typing import Callable, Optional

from mnemonic import Mnemonic

from hd_keygen.errors import InsecureEntropySize, InvalidSeedLength

PBKDF2_ROUNDS = 2048
SEED_BYTES = 64
MIN_SEED_BYTES = 16
MAX_SEED_BYTES = 64
MIN_ENTROPY_BYTES = 31

_MNEMO: Optional[Mnemonic] = None


def get_mnemo() -> Mnemonic:
    global _MNEMO
    if _MNEMO is None:
        _MNEMO = Mnemonic("english")
    return _MNEMO


class Seed:
    """BIP32 seed bytes, 16 to 64 bytes long."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        data = bytes(data)
        if not MIN_SEED_BYTES <= len(data) <= MAX_SEED_BYTES:
            raise InvalidSeedLength(
                f"seed must be {MIN_SEED_BYTES}-{MAX_SEED_BYTES} bytes, got {len(data)}"
            )
        object.__setattr__(self, "_data", data)

    def __setattr__(self, name, value):
        raise AttributeError("Seed is immutable")

    def __reduce__(self):
        return (Seed, (self._data,))

    @classmethod
    def from_hex(cls, hex_str: str) -> "Seed":
        if hex_str.startswith(("0x", "0X")):
            hex_str = hex_str[2:]
        return cls(bytes.fromhex(hex_str))

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def hex(self) -> str:
        return self._data.hex()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Seed):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"Seed(<{len(self._data)} bytes>)"


def _normalize(text: str) -> str:
    return unicodedata.normalize("NFKD", text)


def to_seed(mnemonic: str, passphrase: str = "") -> Seed:
    """PBKDF2-HMAC-SHA512(NFKD(mnemonic), "mnemonic" + NFKD(passphrase))."""
    seed = hashlib.pbkdf2_hmac(
        "sha512",
        _normalize(mnemonic).encode("utf-8"),
        ("mnemonic" + _normalize(passphrase)).encode("utf-8"),
        PBKDF2_ROUNDS,
        SEED_BYTES,
    )
    return Seed(seed)


def create_mnemonic(
    entropy_byte_size: int = 32,
    randbytes: Callable[[int], bytes] = secrets.token_bytes,
) -> str:
    """
    Create a new English mnemonic from fresh entropy.

    Sizes below 31 bytes are refused. The wordlist encoder itself only
    accepts 16/20/24/28/32 bytes and raises ValueError otherwise.
    """
    if entropy_byte_size < MIN_ENTROPY_BYTES:
        raise InsecureEntropySize(
            f"entropy must be at least {MIN_ENTROPY_BYTES} bytes, got {entropy_byte_size}"
        )
    entropy = randbytes(entropy_byte_size)
    return get_mnemo().to_mnemonic(entropy)


def validate_mnemonic(mnemonic: str) -> bool:
    """Check words and checksum against the English wordlist."""
    return get_mnemo().check(_normalize(mnemonic))
