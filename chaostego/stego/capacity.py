"""
Capacity Planner.

Computes the ordered sequence of usable embedding slots for a carrier shape,
before any shuffling. Both functions are pure: the slot list depends only on
the carrier dimensions, so encoder and decoder always agree on it.
"""

import numpy as np

HEADER_BITS = 32
RGBA_COMPONENTS = 4


def plan_pixel_slots(component_count: int) -> np.ndarray:
    """
    Usable byte indices of a flat RGBA buffer.

    Every fourth byte (the alpha channel) is excluded; the remaining indices are
    returned in ascending order.

    Args:
        component_count: Length of the flat RGBA byte buffer

    Returns:
        ``int64`` array of byte indices
    """
    if component_count < 0:
        raise ValueError(f"Component count must be non-negative, got {component_count}")
    indices = np.arange(component_count, dtype=np.int64)
    return indices[(indices + 1) % RGBA_COMPONENTS != 0]


def plan_audio_slots(channel_count: int, sample_count: int) -> np.ndarray:
    """
    Global sample indices of an interleaved multi-channel buffer.

    Slot ``g`` addresses channel ``g % channel_count`` at sample
    ``g // channel_count``.
    """
    if channel_count < 0 or sample_count < 0:
        raise ValueError(
            f"Channel and sample counts must be non-negative, got {channel_count}x{sample_count}"
        )
    return np.arange(channel_count * sample_count, dtype=np.int64)


def capacity_in_bits(slot_count: int) -> int:
    """One bit per usable slot."""
    return slot_count


def capacity_in_bytes(slot_count: int) -> int:
    """Payload bytes that fit once the 32-bit length header is reserved."""
    return max(0, slot_count // 8 - HEADER_BITS // 8)
