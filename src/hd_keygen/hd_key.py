"""
BIP32 HD key derivation (private derivation only) on the built-in
secp256k1 implementation.
"""

import hashlib
import hmac
import logging
import struct
from typing import Dict, List, Tuple, Union

from hd_keygen.address import EthereumAddress, ethereum_address
from hd_keygen.errors import DerivedKeyInvalid, InvalidPathComponent, InvalidPathFormat
from hd_keygen.keys import PrivateKey, PublicKey, public_key_from_private
from hd_keygen.mnemonic_seed import Seed, to_seed
from hd_keygen.secp256k1 import N

HARDENED_OFFSET = 0x80000000
MAX_INDEX = 0xFFFFFFFF

PURPOSE_BIP44 = 44
COIN_TYPE_ETHEREUM = 60
CHANGE_EXTERNAL = 0
CHANGE_INTERNAL = 1

logger = logging.getLogger(__name__)


def _hmac_sha512(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha512).digest()


def format_index(index: int) -> str:
    """Render a child index, hardened ones with a trailing apostrophe."""
    if index >= HARDENED_OFFSET:
        return f"{index - HARDENED_OFFSET}'"
    return str(index)


def parse_derivation_path(path: str) -> List[int]:
    """m/44'/60'/0'/0/0 -> [2**31+44, 2**31+60, 2**31, 0, 0]"""
    if not path.startswith("m/"):
        raise InvalidPathFormat(f"path must start with 'm/': {path!r}")

    indices = []
    for part in path[2:].split("/"):
        hardened = part.endswith("'")
        digits = part[:-1] if hardened else part
        if not digits.isdigit() or not digits.isascii():
            raise InvalidPathComponent(f"invalid path component: {part!r}", part)
        idx = int(digits)
        if idx >= HARDENED_OFFSET:
            raise InvalidPathComponent(f"path component out of range: {part!r}", part)
        indices.append(idx + HARDENED_OFFSET if hardened else idx)
    return indices


def bip44_path(
    account: int = 0,
    change: int = CHANGE_EXTERNAL,
    index: int = 0,
    coin_type: int = COIN_TYPE_ETHEREUM,
    purpose: int = PURPOSE_BIP44,
) -> str:
    """Build m/purpose'/coin_type'/account'/change/index."""
    return f"m/{purpose}'/{coin_type}'/{account}'/{change}/{index}"


def ckd_priv(
    parent_key: PrivateKey, parent_chaincode: bytes, index: int
) -> Tuple[PrivateKey, bytes]:
    """BIP32 CKDpriv: child private key and chain code at ``index``."""
    if not 0 <= index <= MAX_INDEX:
        raise InvalidPathComponent(f"child index out of range: {index}")
    if index >= HARDENED_OFFSET:
        data = b"\x00" + parent_key.to_bytes() + struct.pack(">I", index)
    else:
        data = public_key_from_private(parent_key).to_bytes() + struct.pack(">I", index)
    I = _hmac_sha512(parent_chaincode, data)
    il = int.from_bytes(I[:32], "big")
    if il >= N:
        raise DerivedKeyInvalid(f"IL >= n at index {index}", index)
    child_int = (il + int(parent_key)) % N
    if child_int == 0:
        raise DerivedKeyInvalid(f"derived key is zero at index {index}", index)
    return PrivateKey(child_int), I[32:]


def master_key(seed: Union[Seed, bytes]) -> Tuple[PrivateKey, bytes]:
    if not isinstance(seed, Seed):
        seed = Seed(seed)
    I = _hmac_sha512(b"Bitcoin seed", bytes(seed))
    k = int.from_bytes(I[:32], "big")
    if not 0 < k < N:
        raise DerivedKeyInvalid("master key is outside [1, n-1]")
    return PrivateKey(k), I[32:]


class HDKey:
    """BIP32 Hierarchical Deterministic Key."""

    __slots__ = ("privkey", "chaincode", "depth", "index", "path", "_pubkey", "_address")

    def __init__(
        self,
        privkey: PrivateKey,
        chaincode: bytes,
        depth: int = 0,
        index: int = 0,
        path: str = "m",
    ):
        if len(chaincode) != 32:
            raise ValueError(f"chain code must be 32 bytes, got {len(chaincode)}")
        object.__setattr__(self, "privkey", privkey)
        object.__setattr__(self, "chaincode", bytes(chaincode))
        object.__setattr__(self, "depth", depth)
        object.__setattr__(self, "index", index)
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "_pubkey", None)
        object.__setattr__(self, "_address", None)

    def __setattr__(self, name, value):
        raise AttributeError("HDKey is immutable")

    def __reduce__(self):
        return (HDKey, (self.privkey, self.chaincode, self.depth, self.index, self.path))

    @classmethod
    def from_seed(cls, seed: Union[Seed, bytes]) -> "HDKey":
        privkey, chaincode = master_key(seed)
        return cls(privkey, chaincode)

    @property
    def pubkey(self) -> PublicKey:
        if self._pubkey is None:
            object.__setattr__(self, "_pubkey", public_key_from_private(self.privkey))
        return self._pubkey

    @property
    def address(self) -> EthereumAddress:
        if self._address is None:
            # Decompressing the cached pubkey avoids a second scalar multiply.
            object.__setattr__(self, "_address", ethereum_address(self.pubkey))
        return self._address

    def derive_child(self, index: int) -> "HDKey":
        privkey, chaincode = ckd_priv(self.privkey, self.chaincode, index)
        return HDKey(
            privkey,
            chaincode,
            depth=self.depth + 1,
            index=index,
            path=f"{self.path}/{format_index(index)}",
        )

    def derive_path(self, path: str) -> "HDKey":
        """Derive from path like m/44'/60'/0'/0/0"""
        indices = parse_derivation_path(path)
        logger.debug("Deriving %d levels below %s", len(indices), self.path)
        key = self
        for idx in indices:
            key = key.derive_child(idx)
        return key

    def to_dict(self, include_private: bool = True) -> Dict[str, str]:
        out = {
            "path": self.path,
            "address": str(self.address),
            "public_key": self.pubkey.hex(),
        }
        if include_private:
            out["private_key"] = self.privkey.hex()
            out["chain_code"] = "0x" + self.chaincode.hex()
        return out

    def __repr__(self) -> str:
        return f"HDKey(path={self.path!r})"


def derive_extended_key(seed: Union[Seed, bytes], path: str) -> HDKey:
    """Master key from ``seed``, then CKDpriv along ``path``."""
    return HDKey.from_seed(seed).derive_path(path)


def derive_key_from_mnemonic(mnemonic: str, passphrase: str, path: str) -> HDKey:
    return derive_extended_key(to_seed(mnemonic, passphrase), path)
