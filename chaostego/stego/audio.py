"""
Audio Steganography Module.

Sample variant of the chaotic LSB codec. The carrier holds one floating point
array per channel with samples nominally in ``[-1, 1]``. A slot is a
``(channel, sample)`` pair flattened as ``sample_index * channel_count +
channel``, so consecutive slots before shuffling interleave the channels.

Quantisation:
    A bit lives in the lowest bit of the 16-bit integer approximation
    ``floor(sample * 32767)``. Embedding rewrites that integer and stores
    ``int_sample / 32767`` back. Extraction repeats the same forward
    quantisation. Both directions must use ``floor``; rounding to nearest in
    either one breaks the round-trip for samples near a quantisation boundary.

    When the carrier stores samples at lower precision (``float32``, as audio
    APIs usually do) the stored quotient can land one ulp below the integer it
    represents, which would make ``floor`` read the neighbouring integer. Such
    values are stepped by one ulp until the forward quantisation gives back the
    written integer.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .base import CarrierError, ChaoticLsbCodec
from .capacity import plan_audio_slots

logger = logging.getLogger(__name__)

PCM16_SCALE = 32767
_MAX_ULP_STEPS = 8


def quantize_samples(samples: np.ndarray) -> np.ndarray:
    """Forward quantisation ``floor(sample * 32767)`` as ``int64``."""
    return np.floor(np.asarray(samples, dtype=np.float64) * PCM16_SCALE).astype(np.int64)


def dequantize_samples(int_samples: np.ndarray, dtype: np.dtype = np.float32) -> np.ndarray:
    """
    Store ``int_samples / 32767`` in ``dtype`` so that quantising again is exact.

    Raises:
        CarrierError: If no representable value quantises back to the integer
    """
    target = np.asarray(int_samples, dtype=np.int64)
    values = (target / PCM16_SCALE).astype(dtype)

    for _ in range(_MAX_ULP_STEPS):
        readback = quantize_samples(values)
        low = readback < target
        high = readback > target
        if not (low.any() or high.any()):
            return values
        logger.debug(f"Adjusting {int(low.sum() + high.sum())} samples by one ulp after quantisation")
        values[low] = np.nextafter(values[low], np.array(np.inf, dtype=dtype))
        values[high] = np.nextafter(values[high], np.array(-np.inf, dtype=dtype))

    raise CarrierError(
        f"Sample type {np.dtype(dtype)} cannot hold 16-bit quantised values exactly",
        details={"dtype": str(np.dtype(dtype))},
    )


@dataclass
class AudioCarrier:
    """
    Multi-channel floating point sample buffer.

    Attributes:
        samples: Array of shape ``(channel_count, sample_count)``
        sample_rate: Samples per second per channel
    """

    samples: np.ndarray
    sample_rate: int = 44100

    def __post_init__(self) -> None:
        self.samples = np.asarray(self.samples)
        if self.samples.ndim == 1:
            self.samples = self.samples.reshape(1, -1)
        if self.samples.ndim != 2:
            raise CarrierError(
                f"Audio samples must be shaped (channels, samples), got {self.samples.shape}",
                details={"shape": self.samples.shape},
            )
        if not np.issubdtype(self.samples.dtype, np.floating):
            raise CarrierError(
                f"Audio samples must be floating point, got {self.samples.dtype}",
                details={"dtype": str(self.samples.dtype)},
            )
        if self.sample_rate <= 0:
            raise CarrierError(f"Sample rate must be positive, got {self.sample_rate}")

    @classmethod
    def from_channels(cls, channels: Sequence[np.ndarray], sample_rate: int = 44100) -> "AudioCarrier":
        """Stack equally long per-channel arrays into a carrier."""
        if not channels:
            raise CarrierError("At least one channel is required")
        lengths = {len(ch) for ch in channels}
        if len(lengths) != 1:
            raise CarrierError(
                "All channels must have the same length",
                details={"lengths": sorted(lengths)},
            )
        return cls(np.stack([np.asarray(ch) for ch in channels]), sample_rate)

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def sample_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        return self.sample_count / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        return self.samples[index]

    def copy(self) -> "AudioCarrier":
        return AudioCarrier(self.samples.copy(), self.sample_rate)


class AudioStego(ChaoticLsbCodec[AudioCarrier]):
    """Chaotic LSB codec for multi-channel sample buffers."""

    carrier_kind = "audio"

    def plan_slots(self, carrier: AudioCarrier) -> np.ndarray:
        return plan_audio_slots(carrier.channel_count, carrier.sample_count)

    def _clone(self, carrier: AudioCarrier) -> AudioCarrier:
        return carrier.copy()

    @staticmethod
    def _locate(carrier: AudioCarrier, slots: np.ndarray):
        return slots % carrier.channel_count, slots // carrier.channel_count

    def _read_bits(self, carrier: AudioCarrier, slots: np.ndarray) -> np.ndarray:
        channels, positions = self._locate(carrier, slots)
        return (quantize_samples(carrier.samples[channels, positions]) & 1).astype(np.uint8)

    def _write_bits(self, carrier: AudioCarrier, slots: np.ndarray, bits: np.ndarray) -> None:
        channels, positions = self._locate(carrier, slots)
        int_samples = quantize_samples(carrier.samples[channels, positions])
        int_samples = (int_samples & ~1) | bits.astype(np.int64)
        carrier.samples[channels, positions] = dequantize_samples(int_samples, carrier.samples.dtype)


_codec = AudioStego()


def embed_in_audio(carrier: AudioCarrier, payload: bytes, seed: Optional[str] = None) -> AudioCarrier:
    """
    Hide ``payload`` in a copy of ``carrier``.

    Raises:
        CapacityExceededError: If the payload does not fit
    """
    return _codec.embed(carrier, payload, seed)


def extract_from_audio(carrier: AudioCarrier, seed: Optional[str] = None) -> bytes:
    """
    Recover a payload hidden with :func:`embed_in_audio`.

    Raises:
        NoPayloadError: If no valid length header is found
    """
    return _codec.extract(carrier, seed)


def audio_capacity(carrier: AudioCarrier) -> int:
    """Maximum payload size in bytes."""
    return _codec.calculate_capacity(carrier)
