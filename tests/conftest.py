import pytest

from hd_keygen.mnemonic_seed import Seed

# BIP32 test vector 1
TV1_SEED = "000102030405060708090a0b0c0d0e0f"

BREEZE_MNEMONIC = (
    "breeze tackle yellow jazz lion east prison multiply senior struggle celery galaxy"
)
BREEZE_PASSPHRASE = "passphrase"

ABANDON_MNEMONIC = " ".join(["abandon"] * 11 + ["about"])


@pytest.fixture
def tv1_seed():
    return Seed.from_hex(TV1_SEED)
