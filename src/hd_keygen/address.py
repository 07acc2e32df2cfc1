"""
Ethereum address derivation (keccak-256 of the uncompressed public key).
"""

import re
from typing import Union

from Crypto.Hash import keccak

from hd_keygen.keys import PrivateKey, PublicKey, public_key_from_private

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")


def keccak_256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


class EthereumAddress(str):
    """Lowercase, 0x-prefixed 20-byte address."""

    def __new__(cls, value: str):
        if not _ADDRESS_RE.match(value):
            raise ValueError(f"not a lowercase 0x-prefixed address: {value!r}")
        return super().__new__(cls, value)

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self[2:])


def ethereum_address(key: Union[PrivateKey, PublicKey]) -> EthereumAddress:
    if isinstance(key, PrivateKey):
        pubkey = public_key_from_private(key, compressed=False)
    else:
        pubkey = key.to_uncompressed()
    # Drop the 0x04 prefix, keep the low 20 bytes of the digest.
    digest = keccak_256(pubkey.to_bytes()[1:])
    return EthereumAddress("0x" + digest[-20:].hex())


def to_checksum_address(address: str) -> str:
    """EIP-55 mixed-case rendering."""
    hex_addr = EthereumAddress(address.lower())[2:]
    h = keccak_256(hex_addr.encode("ascii")).hex()
    out = ""
    for c, hv in zip(hex_addr, h):
        if c in "0123456789":
            out += c
        else:
            out += c.upper() if int(hv, 16) >= 8 else c.lower()
    return "0x" + out
