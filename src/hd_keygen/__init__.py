"""
Deterministic secp256k1 key hierarchies (BIP32/BIP39/BIP44) and Ethereum
addresses, with the field and curve arithmetic implemented in-package.
"""

from hd_keygen.address import EthereumAddress, ethereum_address, to_checksum_address
from hd_keygen.hd_key import (
    HARDENED_OFFSET,
    HDKey,
    bip44_path,
    ckd_priv,
    derive_extended_key,
    derive_key_from_mnemonic,
    master_key,
    parse_derivation_path,
)
from hd_keygen.keys import PrivateKey, PublicKey, public_key_from_private
from hd_keygen.mnemonic_seed import Seed, create_mnemonic, to_seed, validate_mnemonic

__version__ = "0.1.0"

__all__ = [
    "EthereumAddress",
    "HARDENED_OFFSET",
    "HDKey",
    "PrivateKey",
    "PublicKey",
    "Seed",
    "bip44_path",
    "ckd_priv",
    "create_mnemonic",
    "derive_extended_key",
    "derive_key_from_mnemonic",
    "ethereum_address",
    "master_key",
    "parse_derivation_path",
    "public_key_from_private",
    "to_checksum_address",
    "to_seed",
    "validate_mnemonic",
]
