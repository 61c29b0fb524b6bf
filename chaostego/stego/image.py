"""
Image Steganography Module.

Pixel variant of the chaotic LSB codec. The carrier is a flat, interleaved RGBA
byte buffer (the layout of a canvas ``ImageData`` or of
``numpy.asarray(image.convert("RGBA")).ravel()``). Every red, green and blue
byte is a usable slot; alpha bytes are never touched, so fully transparent or
premultiplied pixels cannot disturb the hidden bits.

Features:
    - Seeded shuffle of the RGB byte positions
    - 32-bit bit-count header, MSB first
    - Loading and saving carriers through Pillow (PNG recommended; lossy
      formats destroy the embedded bits)

Example:
    >>> from chaostego.stego.image import PixelCarrier, embed_in_image, extract_from_image
    >>> carrier = PixelCarrier.open("cover.png")
    >>> stego = embed_in_image(carrier, b"Secret message", seed="my seed")
    >>> stego.save("stego.png")
    >>> extract_from_image(PixelCarrier.open("stego.png"), seed="my seed")
    b'Secret message'
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from .base import CarrierError, ChaoticLsbCodec
from .capacity import RGBA_COMPONENTS, plan_pixel_slots

logger = logging.getLogger(__name__)


@dataclass
class PixelCarrier:
    """
    Flat RGBA pixel buffer with its dimensions.

    Attributes:
        data: ``uint8`` array of length ``width * height * 4``
        width: Image width in pixels
        height: Image height in pixels
    """

    data: np.ndarray
    width: int
    height: int

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data)
        if self.data.dtype != np.uint8:
            raise CarrierError(
                f"Pixel data must be uint8, got {self.data.dtype}",
                details={"dtype": str(self.data.dtype)},
            )
        self.data = self.data.reshape(-1)
        expected = self.width * self.height * RGBA_COMPONENTS
        if self.width < 0 or self.height < 0 or self.data.size != expected:
            raise CarrierError(
                f"Pixel buffer holds {self.data.size} bytes, expected {expected} "
                f"for a {self.width}x{self.height} RGBA image",
                details={"size": int(self.data.size), "expected": expected},
            )

    @property
    def component_count(self) -> int:
        return int(self.data.size)

    def copy(self) -> "PixelCarrier":
        return PixelCarrier(self.data.copy(), self.width, self.height)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelCarrier":
        """Convert any Pillow image to an RGBA carrier."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        data = np.array(image, dtype=np.uint8).reshape(-1)
        return cls(data, width, height)

    @classmethod
    def open(cls, path: Union[str, Path]) -> "PixelCarrier":
        with Image.open(path) as image:
            image.load()
            return cls.from_image(image)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data.reshape(self.height, self.width, RGBA_COMPONENTS), "RGBA")

    def save(self, path: Union[str, Path], format: Optional[str] = "PNG") -> None:
        """Save losslessly; PNG unless another format is requested."""
        self.to_image().save(path, format=format)


class ImageStego(ChaoticLsbCodec[PixelCarrier]):
    """
    Chaotic LSB codec for RGBA pixel buffers.

    Example:
        >>> stego = ImageStego()
        >>> stego.calculate_capacity(carrier)
        3746
        >>> result = stego.embed(carrier, b"data", seed="seed")
        >>> stego.extract(result, seed="seed")
        b'data'
    """

    carrier_kind = "image"

    def plan_slots(self, carrier: PixelCarrier) -> np.ndarray:
        return plan_pixel_slots(carrier.component_count)

    def _clone(self, carrier: PixelCarrier) -> PixelCarrier:
        return carrier.copy()

    def _read_bits(self, carrier: PixelCarrier, slots: np.ndarray) -> np.ndarray:
        return carrier.data[slots] & 1

    def _write_bits(self, carrier: PixelCarrier, slots: np.ndarray, bits: np.ndarray) -> None:
        carrier.data[slots] = (carrier.data[slots] & 0xFE) | bits.astype(np.uint8)


_codec = ImageStego()


def embed_in_image(carrier: PixelCarrier, payload: bytes, seed: Optional[str] = None) -> PixelCarrier:
    """
    Hide ``payload`` in a copy of ``carrier``.

    Raises:
        CapacityExceededError: If the payload does not fit
    """
    return _codec.embed(carrier, payload, seed)


def extract_from_image(carrier: PixelCarrier, seed: Optional[str] = None) -> bytes:
    """
    Recover a payload hidden with :func:`embed_in_image`.

    Raises:
        NoPayloadError: If no valid length header is found
    """
    return _codec.extract(carrier, seed)


def image_capacity(carrier: PixelCarrier) -> int:
    """Maximum payload size in bytes."""
    return _codec.calculate_capacity(carrier)
