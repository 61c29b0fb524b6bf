"""
Chaostego Cryptographic Engine.

Thin wrapper around the ``cryptography`` library providing the primitives the
encryption envelope needs: random salt and nonce generation, PBKDF2 key
derivation and AES-256-GCM authenticated encryption.

Example Usage:
    >>> from chaostego.crypto.engine import CryptoEngine
    >>> engine = CryptoEngine()
    >>> key = engine.derive_key(b"password", engine.generate_salt())
    >>> nonce = engine.generate_nonce()
    >>> result = engine.encrypt(b"Secret message", key, nonce)
    >>> engine.decrypt(result.ciphertext, result.tag, key, nonce).plaintext
    b'Secret message'
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .kdf import PBKDF2Hasher

logger = logging.getLogger(__name__)

AES_256_KEY_SIZE = 32
GCM_NONCE_SIZE = 12
GCM_TAG_SIZE = 16
SALT_SIZE = 16


class CryptoError(Exception):
    """
    Base exception for cryptographic errors.

    Raised when cryptographic operations fail due to invalid inputs,
    authentication failures, or backend errors.
    """

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class AuthenticationError(CryptoError):
    """
    The authentication tag did not verify.

    Either the password is wrong or the data is corrupted or foreign; the two
    cannot be told apart. No plaintext is ever returned in this case.
    """

    def __init__(self, message: str = "Wrong password or corrupted data", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=4002, details=details)


@dataclass
class EncryptionResult:
    """
    Result of an encryption operation.

    Attributes:
        ciphertext: The encrypted data
        tag: GCM authentication tag
        nonce: The nonce used
    """

    ciphertext: bytes
    tag: bytes
    nonce: bytes


@dataclass
class DecryptionResult:
    """Result of a decryption operation."""

    plaintext: bytes


class CryptoEngine:
    """
    AES-256-GCM and PBKDF2 primitives.

    Attributes:
        kdf_iterations: PBKDF2 iteration count used by :meth:`derive_key`
    """

    def __init__(self, kdf_iterations: int = PBKDF2Hasher.DEFAULT_ITERATIONS):
        self._hasher = PBKDF2Hasher(iterations=kdf_iterations)

    @property
    def kdf_iterations(self) -> int:
        return self._hasher.iterations

    def generate_salt(self, length: int = SALT_SIZE) -> bytes:
        return os.urandom(length)

    def generate_nonce(self) -> bytes:
        """Random 96-bit GCM nonce."""
        return os.urandom(GCM_NONCE_SIZE)

    def derive_key(self, password: str, salt: bytes, length: int = AES_256_KEY_SIZE) -> bytes:
        """
        Derive a symmetric key with PBKDF2-HMAC-SHA256.

        Raises:
            CryptoError: If the derivation fails
        """
        try:
            return self._hasher.hash(password, salt, length).derived_key
        except (TypeError, ValueError) as e:
            logger.error(f"Key derivation failed: {e}")
            raise CryptoError(f"Key derivation failed: {e}", code=2001) from e

    def encrypt(
        self,
        plaintext: bytes,
        key: bytes,
        nonce: Optional[bytes] = None,
        associated_data: Optional[bytes] = None,
    ) -> EncryptionResult:
        """
        Encrypt with AES-GCM.

        Args:
            plaintext: Data to encrypt
            key: 256-bit key
            nonce: 96-bit nonce, generated if not provided
            associated_data: Additional authenticated data

        Returns:
            EncryptionResult with ciphertext, tag and nonce

        Raises:
            CryptoError: If encryption fails
        """
        if nonce is None:
            nonce = self.generate_nonce()

        try:
            encryptor = Cipher(algorithms.AES(key), modes.GCM(nonce)).encryptor()
            if associated_data:
                encryptor.authenticate_additional_data(associated_data)
            ciphertext = encryptor.update(plaintext) + encryptor.finalize()
        except (TypeError, ValueError) as e:
            logger.error(f"Encryption failed: {e}")
            raise CryptoError(f"Encryption operation failed: {e}", code=3002) from e

        return EncryptionResult(ciphertext=ciphertext, tag=encryptor.tag, nonce=nonce)

    def decrypt(
        self,
        ciphertext: bytes,
        tag: bytes,
        key: bytes,
        nonce: bytes,
        associated_data: Optional[bytes] = None,
    ) -> DecryptionResult:
        """
        Decrypt and authenticate with AES-GCM.

        Raises:
            AuthenticationError: If the tag does not verify
            CryptoError: If the inputs are malformed
        """
        try:
            decryptor = Cipher(algorithms.AES(key), modes.GCM(nonce, tag)).decryptor()
            if associated_data:
                decryptor.authenticate_additional_data(associated_data)
            plaintext = decryptor.update(ciphertext) + decryptor.finalize()
        except InvalidTag as e:
            logger.warning("AES-GCM authentication tag mismatch")
            raise AuthenticationError() from e
        except (TypeError, ValueError) as e:
            logger.error(f"Decryption failed: {e}")
            raise CryptoError(f"Decryption operation failed: {e}", code=4001) from e

        return DecryptionResult(plaintext=plaintext)
