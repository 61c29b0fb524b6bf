"""
Encryption Envelope.

Seals a payload into a single self-describing byte sequence before it is
embedded, and opens it again after extraction::

    offset  size  field
    0       1     compression flag (0 or 1)
    1       16    PBKDF2 salt
    17      12    AES-GCM nonce
    29      n+16  ciphertext followed by the 16-byte GCM tag

The key is PBKDF2-HMAC-SHA256(password, salt, 100,000 iterations, 32 bytes).
Salt and nonce are fresh for every call, so sealing the same payload twice
gives different envelopes. The flag byte is not authenticated; it only selects
whether the opened plaintext is decompressed.

Example:
    >>> from chaostego.crypto.envelope import seal, open_envelope
    >>> envelope = seal(b"attack at dawn", "hunter2")
    >>> opened = open_envelope(envelope, "hunter2")
    >>> opened.data, opened.is_text
    (b'attack at dawn', True)
"""

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..config import StegoConfig
from .compression import compress as compress_bytes
from .compression import decompress as decompress_bytes
from .engine import GCM_NONCE_SIZE, GCM_TAG_SIZE, SALT_SIZE, AuthenticationError, CryptoEngine, CryptoError

logger = logging.getLogger(__name__)

FLAG_SIZE = 1
FLAG_OFFSET = 0
SALT_OFFSET = FLAG_OFFSET + FLAG_SIZE
NONCE_OFFSET = SALT_OFFSET + SALT_SIZE
CIPHERTEXT_OFFSET = NONCE_OFFSET + GCM_NONCE_SIZE
MIN_ENVELOPE_SIZE = CIPHERTEXT_OFFSET

FLAG_UNCOMPRESSED = 0
FLAG_COMPRESSED = 1


class EnvelopeFormatError(CryptoError):
    """The envelope header is not one this module writes."""

    def __init__(self, message: str, details=None):
        super().__init__(message, code=4003, details=details)


@dataclass
class OpenedPayload:
    """
    Plaintext recovered from an envelope.

    Attributes:
        data: Recovered bytes (decompressed if the flag asked for it)
        is_text: Whether ``data`` is valid UTF-8; a guess, not a stored type
        compressed: Value of the envelope's compression flag
    """

    data: bytes
    is_text: bool
    compressed: bool = False

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


def is_probably_text(data: bytes) -> bool:
    """Strict UTF-8 decode as a best-effort text/binary classification."""
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def _resolve(config: Optional[StegoConfig], password: Optional[str]):
    config = config or StegoConfig.default()
    return config, password or config.default_password


def seal(
    payload: Union[bytes, str],
    password: Optional[str] = None,
    compress: Optional[bool] = None,
    config: Optional[StegoConfig] = None,
) -> bytes:
    """
    Compress (optionally) and encrypt ``payload`` into an envelope.

    Args:
        payload: Bytes, or a string encoded as UTF-8
        password: Password; falls back to ``config.default_password``
        compress: Compress before encrypting; falls back to ``config.compress``
        config: Configuration supplying defaults and the KDF iteration count

    Returns:
        ``flag || salt || nonce || ciphertext || tag``
    """
    config, password = _resolve(config, password)
    if compress is None:
        compress = config.compress

    data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    plaintext = compress_bytes(data) if compress else data

    engine = CryptoEngine(kdf_iterations=config.kdf_iterations)
    salt = engine.generate_salt()
    nonce = engine.generate_nonce()
    key = engine.derive_key(password, salt)
    result = engine.encrypt(plaintext, key, nonce)

    flag = FLAG_COMPRESSED if compress else FLAG_UNCOMPRESSED
    envelope = bytes([flag]) + salt + nonce + result.ciphertext + result.tag

    logger.info(
        f"Sealed {len(data)} bytes into a {len(envelope)}-byte envelope (compressed={bool(compress)})"
    )
    return envelope


def open_envelope(
    envelope: bytes,
    password: Optional[str] = None,
    config: Optional[StegoConfig] = None,
) -> OpenedPayload:
    """
    Authenticate, decrypt and (if flagged) decompress an envelope.

    Raises:
        AuthenticationError: Wrong password, corrupted or foreign data; no
            plaintext is released
        EnvelopeFormatError: Unknown compression flag
    """
    config, password = _resolve(config, password)
    envelope = bytes(envelope)

    if len(envelope) < MIN_ENVELOPE_SIZE + GCM_TAG_SIZE:
        logger.warning(f"Envelope of {len(envelope)} bytes is too short to authenticate")
        raise AuthenticationError(
            details={"size": len(envelope), "minimum": MIN_ENVELOPE_SIZE + GCM_TAG_SIZE}
        )

    flag = envelope[FLAG_OFFSET]
    if flag not in (FLAG_UNCOMPRESSED, FLAG_COMPRESSED):
        raise EnvelopeFormatError(f"Unknown compression flag {flag}", details={"flag": flag})

    salt = envelope[SALT_OFFSET:NONCE_OFFSET]
    nonce = envelope[NONCE_OFFSET:CIPHERTEXT_OFFSET]
    sealed = envelope[CIPHERTEXT_OFFSET:]
    ciphertext, tag = sealed[:-GCM_TAG_SIZE], sealed[-GCM_TAG_SIZE:]

    engine = CryptoEngine(kdf_iterations=config.kdf_iterations)
    key = engine.derive_key(password, salt)
    plaintext = engine.decrypt(ciphertext, tag, key, nonce).plaintext

    compressed = flag == FLAG_COMPRESSED
    data = decompress_bytes(plaintext) if compressed else plaintext
    text = is_probably_text(data)

    logger.info(f"Opened envelope: {len(data)} bytes (compressed={compressed}, text={text})")
    return OpenedPayload(data=data, is_text=text, compressed=compressed)


async def seal_async(
    payload: Union[bytes, str],
    password: Optional[str] = None,
    compress: Optional[bool] = None,
    config: Optional[StegoConfig] = None,
) -> bytes:
    """:func:`seal` run in the default executor so the KDF does not block the loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(seal, payload, password, compress, config))


async def open_envelope_async(
    envelope: bytes,
    password: Optional[str] = None,
    config: Optional[StegoConfig] = None,
) -> OpenedPayload:
    """:func:`open_envelope` run in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(open_envelope, envelope, password, config))


# Short name used by callers of the envelope API; shadows the builtin only here.
open = open_envelope
