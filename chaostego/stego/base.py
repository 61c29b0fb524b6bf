"""
Shared framing for the chaotic LSB codecs.

Both carrier variants store the same bitstream::

    [32-bit payload bit count, MSB first][payload bits, MSB first per byte]

at the least significant bit of each usable slot, visiting slots in the order
given by the seeded shuffle of the carrier's slot sequence. The variants only
differ in how a slot maps to storage and how a bit is read or written there,
which is what subclasses of :class:`ChaoticLsbCodec` provide.

Errors:
    CapacityExceededError: payload does not fit the carrier
    NoPayloadError: header is zero or the carrier is too small to hold one
    InvalidHeaderError: header claims more bits than the carrier holds
    CarrierError: carrier buffer is malformed
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

import numpy as np

from .capacity import HEADER_BITS, capacity_in_bytes
from .permutation import shuffle_in_place

logger = logging.getLogger(__name__)

CarrierT = TypeVar("CarrierT")

MAX_PAYLOAD_BITS = 2 ** HEADER_BITS - 1

# Above this many slots the seeded shuffle takes several seconds.
LARGE_SHUFFLE_SLOTS = 5_000_000


class StegoError(Exception):
    """Base exception for embedding and extraction errors."""

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


class CarrierError(StegoError):
    """The carrier buffer does not have the expected shape or type."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=1001, details=details)


class CapacityExceededError(StegoError):
    """The framed payload needs more bits than the carrier has slots."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=1002, details=details)


class NoPayloadError(StegoError):
    """
    No payload could be read.

    Raised for an empty header. A wrong seed or a carrier that never held a
    payload look the same from here, so callers get one signal for all three.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, code: int = 1020):
        super().__init__(message, code=code, details=details)


class InvalidHeaderError(NoPayloadError):
    """The decoded length header is larger than the remaining capacity."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details, code=1021)


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Expand bytes to a ``uint8`` array of bits, MSB first."""
    return np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))


def bits_to_bytes(bits: np.ndarray) -> bytes:
    """
    Pack bits (MSB first) into bytes.

    Trailing bits that do not fill a whole byte are dropped.
    """
    bits = np.asarray(bits, dtype=np.uint8)
    whole = len(bits) - len(bits) % 8
    return np.packbits(bits[:whole]).tobytes()


def encode_length_header(bit_count: int) -> np.ndarray:
    """32 header bits holding ``bit_count``, MSB first."""
    if not 0 <= bit_count <= MAX_PAYLOAD_BITS:
        raise ValueError(f"Bit count {bit_count} does not fit a {HEADER_BITS}-bit header")
    return bytes_to_bits(bit_count.to_bytes(HEADER_BITS // 8, "big"))


def decode_length_header(bits: np.ndarray) -> int:
    """Inverse of :func:`encode_length_header`."""
    return int.from_bytes(bits_to_bytes(np.asarray(bits)[:HEADER_BITS]), "big")


def build_bitstream(payload: bytes) -> np.ndarray:
    """Length header followed by the payload bits."""
    payload_bits = bytes_to_bits(payload)
    if len(payload_bits) > MAX_PAYLOAD_BITS:
        raise CapacityExceededError(
            f"Payload of {len(payload)} bytes cannot be described by a {HEADER_BITS}-bit header",
            details={"payload_bits": len(payload_bits)},
        )
    return np.concatenate([encode_length_header(len(payload_bits)), payload_bits])


class ChaoticLsbCodec(ABC, Generic[CarrierT]):
    """
    Embeds and extracts a length-prefixed bitstream in shuffled carrier slots.

    Subclasses describe the carrier: which slots exist, how to clone it, and how
    to read or write the lowest bit of a batch of slots.
    """

    carrier_kind = "carrier"

    @abstractmethod
    def plan_slots(self, carrier: CarrierT) -> np.ndarray:
        """Ordered usable slots of ``carrier`` before shuffling."""

    @abstractmethod
    def _clone(self, carrier: CarrierT) -> CarrierT:
        """Independent copy of ``carrier``."""

    @abstractmethod
    def _read_bits(self, carrier: CarrierT, slots: np.ndarray) -> np.ndarray:
        """Lowest bit of each slot, in slot order."""

    @abstractmethod
    def _write_bits(self, carrier: CarrierT, slots: np.ndarray, bits: np.ndarray) -> None:
        """Overwrite the lowest bit of each slot in place."""

    def slot_order(self, carrier: CarrierT, seed: Optional[str] = None) -> np.ndarray:
        """Usable slots in the order bits are written for ``seed``."""
        return self._shuffle(self.plan_slots(carrier), seed)

    @staticmethod
    def _shuffle(slots: np.ndarray, seed: Optional[str]) -> np.ndarray:
        """
        Seeded shuffle of every slot, whatever the payload size.

        The decoder needs the full traversal to find the header, so the cost
        is one LCG step per slot in pure Python: roughly a second per million
        slots, and about 36 million slots (tens of seconds, over a gigabyte
        of list storage) for a 12-megapixel photo. Unseeded calls skip it.
        """
        if not seed:
            return slots
        if len(slots) > LARGE_SHUFFLE_SLOTS:
            logger.warning(
                f"Shuffling {len(slots)} slots; large carriers take seconds to embed or extract"
            )
        return np.asarray(shuffle_in_place(slots.tolist(), seed), dtype=np.int64)

    def calculate_capacity(self, carrier: CarrierT) -> int:
        """Maximum payload size in bytes."""
        return capacity_in_bytes(len(self.plan_slots(carrier)))

    def embed(self, carrier: CarrierT, payload: bytes, seed: Optional[str] = None) -> CarrierT:
        """
        Hide ``payload`` in a copy of ``carrier``.

        Args:
            carrier: Carrier to copy; never modified
            payload: Bytes to hide
            seed: Shuffle seed; ``None`` or ``""`` writes slots in natural order

        Returns:
            The modified copy

        Raises:
            CapacityExceededError: If header plus payload bits exceed the slot count
        """
        payload = bytes(payload)
        slots = self.plan_slots(carrier)
        bitstream = build_bitstream(payload)

        if len(bitstream) > len(slots):
            raise CapacityExceededError(
                f"Payload ({len(payload)} bytes) exceeds {self.carrier_kind} capacity "
                f"({capacity_in_bytes(len(slots))} bytes)",
                details={
                    "required_bits": len(bitstream),
                    "available_bits": len(slots),
                },
            )

        order = self._shuffle(slots, seed)
        result = self._clone(carrier)
        self._write_bits(result, order[: len(bitstream)], bitstream)

        logger.info(
            f"Embedded {len(payload)} bytes into {self.carrier_kind} "
            f"({len(bitstream)}/{len(slots)} slots, shuffled={bool(seed)})"
        )
        return result

    def extract(self, carrier: CarrierT, seed: Optional[str] = None) -> bytes:
        """
        Recover the payload hidden with :meth:`embed`.

        Raises:
            NoPayloadError: If the header is zero or the carrier is too small
            InvalidHeaderError: If the header exceeds the remaining capacity
        """
        slots = self.plan_slots(carrier)
        if len(slots) < HEADER_BITS:
            raise NoPayloadError(
                f"{self.carrier_kind.capitalize()} has {len(slots)} slots, too few for a length header",
                details={"available_bits": len(slots)},
            )

        order = self._shuffle(slots, seed)
        bit_count = decode_length_header(self._read_bits(carrier, order[:HEADER_BITS]))

        if bit_count <= 0:
            raise NoPayloadError(
                f"No hidden payload found in {self.carrier_kind}",
                details={"header": bit_count},
            )
        if bit_count > len(slots) - HEADER_BITS:
            raise InvalidHeaderError(
                f"Length header ({bit_count} bits) exceeds {self.carrier_kind} capacity",
                details={"header": bit_count, "available_bits": len(slots) - HEADER_BITS},
            )

        bits = self._read_bits(carrier, order[HEADER_BITS:HEADER_BITS + bit_count])
        payload = bits_to_bytes(bits)

        logger.info(f"Extracted {len(payload)} bytes from {self.carrier_kind}")
        return payload
