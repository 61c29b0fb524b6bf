"""
Chaostego Cryptographic Package.

Modules:
    engine: AES-256-GCM encryption and PBKDF2 key derivation primitives
    kdf: PBKDF2 password hashing
    compression: gzip compression with pass-through decompression
    envelope: The ``flag || salt || nonce || ciphertext`` payload envelope

Usage:
    >>> from chaostego.crypto import seal, open_envelope
    >>> envelope = seal(b"secret", "password")
    >>> open_envelope(envelope, "password").data
    b'secret'
"""

from .compression import compress, decompress
from .engine import (
    AuthenticationError,
    CryptoEngine,
    CryptoError,
    DecryptionResult,
    EncryptionResult,
)
from .envelope import (
    EnvelopeFormatError,
    OpenedPayload,
    is_probably_text,
    open_envelope,
    open_envelope_async,
    seal,
    seal_async,
)
from .kdf import KdfResult, PBKDF2Hasher

__all__ = [
    # Engine
    "CryptoEngine",
    "CryptoError",
    "AuthenticationError",
    "EncryptionResult",
    "DecryptionResult",
    # Key derivation
    "PBKDF2Hasher",
    "KdfResult",
    # Compression
    "compress",
    "decompress",
    # Envelope
    "seal",
    "seal_async",
    "open_envelope",
    "open_envelope_async",
    "OpenedPayload",
    "EnvelopeFormatError",
    "is_probably_text",
]
