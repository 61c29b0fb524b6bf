"""
Payload compression.

gzip framing, so payloads stay readable by any gzip implementation. The
timestamp field is zeroed to keep the output deterministic.
"""

import gzip
import logging
import zlib

logger = logging.getLogger(__name__)


def compress(data: bytes, level: int = 9) -> bytes:
    """Compress ``data`` with gzip."""
    return gzip.compress(bytes(data), compresslevel=level, mtime=0)


def decompress(data: bytes) -> bytes:
    """
    Decompress gzip ``data``.

    Input that is not a valid gzip stream is returned unchanged, so this can be
    called on data that may never have been compressed.
    """
    data = bytes(data)
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        logger.debug(f"Input is not gzip data, returning it unchanged: {e}")
        return data
