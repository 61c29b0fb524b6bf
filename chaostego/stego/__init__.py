"""
Chaostego Steganography Package.

Hides byte payloads in the least significant bits of pixel or audio carriers,
visiting carrier slots in a seed-derived shuffled order.

Modules:
    permutation: Seeded shuffle shared by encoder and decoder
    capacity: Usable slot planning per carrier shape
    base: Bitstream framing, shared codec and errors
    image: RGBA pixel buffer codec
    audio: Multi-channel float sample codec

Usage:
    >>> from chaostego.stego import PixelCarrier, embed_in_image, extract_from_image
    >>> stego = embed_in_image(carrier, b"secret", seed="seed")
    >>> extract_from_image(stego, seed="seed")
    b'secret'
"""

from .audio import AudioCarrier, AudioStego, audio_capacity, embed_in_audio, extract_from_audio
from .base import (
    CapacityExceededError,
    CarrierError,
    ChaoticLsbCodec,
    InvalidHeaderError,
    NoPayloadError,
    StegoError,
)
from .capacity import HEADER_BITS, capacity_in_bytes, plan_audio_slots, plan_pixel_slots
from .image import ImageStego, PixelCarrier, embed_in_image, extract_from_image, image_capacity
from .permutation import SeededRandom, generate_permutation, shuffle_in_place

__all__ = [
    "PixelCarrier",
    "ImageStego",
    "embed_in_image",
    "extract_from_image",
    "image_capacity",
    "AudioCarrier",
    "AudioStego",
    "embed_in_audio",
    "extract_from_audio",
    "audio_capacity",
    "ChaoticLsbCodec",
    "StegoError",
    "CarrierError",
    "CapacityExceededError",
    "NoPayloadError",
    "InvalidHeaderError",
    "SeededRandom",
    "generate_permutation",
    "shuffle_in_place",
    "plan_pixel_slots",
    "plan_audio_slots",
    "capacity_in_bytes",
    "HEADER_BITS",
]
