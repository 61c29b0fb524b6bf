"""
Chaostego Package

Chaotic least-significant-bit steganography for pixel and audio carriers,
with an optional compressed, password-sealed AES-256-GCM payload envelope.

Subpackages:
    crypto: Compression, key derivation and the encryption envelope
    stego: Seeded permutation, capacity planning and the LSB codecs

Modules:
    config: Overridable defaults
    pipeline: Envelope plus codec in one call
    cli: Command line interface for image carriers
"""

from . import crypto
from . import stego
from .config import StegoConfig
from .pipeline import RevealedPayload, StegoPipeline

__all__ = ["crypto", "stego", "StegoConfig", "StegoPipeline", "RevealedPayload"]

__version__ = "1.0.0"
