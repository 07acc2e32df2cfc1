"""
Exceptions raised by the key derivation engine.
"""
from typing import Optional


class HDKeygenError(ValueError):
    """Base exception for all derivation errors."""
    pass


class InvalidModulus(HDKeygenError):
    """Raised when a field modulus is not greater than 1."""
    pass


class MismatchedModulus(HDKeygenError):
    """Raised when field elements from different fields are combined."""
    pass


class DivisionByZero(HDKeygenError, ZeroDivisionError):
    """Raised when dividing by the zero element of a field."""
    pass


class NoInverseExists(HDKeygenError):
    """Raised when an element shares a factor with the modulus."""
    pass


class InvalidPrivateKeyRange(HDKeygenError):
    """Raised when a private key is outside [1, n-1] or not 32 bytes."""
    pass


class InvalidPublicKey(HDKeygenError):
    """Raised when public key bytes are malformed or not on the curve."""
    pass


class InvalidSeedLength(HDKeygenError):
    """Raised when a seed is shorter than 16 or longer than 64 bytes."""
    pass


class InvalidPathFormat(HDKeygenError):
    """Raised when a derivation path does not start with 'm/'."""
    pass


class InvalidPathComponent(HDKeygenError):
    """Raised when a derivation path component is not a valid index."""

    def __init__(self, message: str, component: Optional[str] = None):
        self.component = component
        super().__init__(message)


class DerivedKeyInvalid(HDKeygenError):
    """
    Raised when HMAC output does not yield a usable key.

    Per BIP32 the caller may skip to the next index; ``index`` is None for
    the master key.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class InsecureEntropySize(HDKeygenError):
    """Raised when too few entropy bytes are requested for a mnemonic."""
    pass
