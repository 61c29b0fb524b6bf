"""
Chaostego Key Derivation Module

Password-based key derivation for the encryption envelope. Keys are derived
with PBKDF2-HMAC-SHA256 (RFC 2898 / NIST SP 800-132) through the
``cryptography`` library. The envelope format fixes the parameters to
100,000 iterations and a 256-bit key; the hasher keeps the iteration count
configurable so tests can run with fewer iterations.

Example Usage:
    >>> from chaostego.crypto.kdf import PBKDF2Hasher
    >>> hasher = PBKDF2Hasher()
    >>> result = hasher.hash("my_password", salt=b"\\x00" * 16)
    >>> len(result.derived_key)
    32
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


@dataclass
class KdfResult:
    """
    Result of a key derivation.

    Attributes:
        derived_key: The derived key bytes
        salt: Salt used for the derivation
        iterations: Number of PBKDF2 iterations performed
    """

    derived_key: bytes
    salt: bytes
    iterations: int


class PBKDF2Hasher:
    """
    PBKDF2-HMAC-SHA256 key derivation.

    PBKDF2 applies HMAC to the password and salt ``iterations`` times; the cost
    of each guess grows linearly with the iteration count, which is what makes
    offline password guessing expensive.

    Usage:
        >>> hasher = PBKDF2Hasher(iterations=100000)
        >>> result = hasher.hash("my_password")
    """

    DEFAULT_ITERATIONS = 100000
    DEFAULT_SALT_LENGTH = 16
    DEFAULT_KEY_LENGTH = 32

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        """
        Initialize PBKDF2 hasher.

        Args:
            iterations: Number of PBKDF2 iterations (default: 100000)

        Raises:
            ValueError: If iterations are not positive
        """
        if iterations < 1:
            raise ValueError(f"Iterations must be positive, got {iterations}")

        self._iterations = iterations

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash(
        self,
        password: str,
        salt: Optional[bytes] = None,
        key_length: int = DEFAULT_KEY_LENGTH
    ) -> KdfResult:
        """
        Derive a key from a password.

        Args:
            password: Password string, encoded as UTF-8
            salt: Salt bytes; a random 16-byte salt is drawn if None
            key_length: Length of the derived key in bytes

        Returns:
            KdfResult with the derived key and the parameters used
        """
        if salt is None:
            salt = secrets.token_bytes(self.DEFAULT_SALT_LENGTH)

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=key_length,
            salt=salt,
            iterations=self._iterations,
        )
        derived_key = kdf.derive(password.encode("utf-8"))

        return KdfResult(
            derived_key=derived_key,
            salt=salt,
            iterations=self._iterations
        )
