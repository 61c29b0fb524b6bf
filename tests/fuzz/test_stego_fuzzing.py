"""
Fuzz Tests for Chaostego Steganography Codecs

Property-based round trips for both carrier variants, permutation
properties, and the behaviour of mismatched seeds on random carriers.
"""

import hypothesis.strategies as st
from hypothesis import given, settings, Verbosity
import numpy as np

from chaostego.stego.audio import AudioCarrier, embed_in_audio, extract_from_audio
from chaostego.stego.base import NoPayloadError
from chaostego.stego.image import PixelCarrier, embed_in_image, extract_from_image
from chaostego.stego.permutation import generate_permutation

seeds = st.one_of(st.none(), st.text(max_size=32))
payloads = st.binary(min_size=1, max_size=64)


def _random_pixels(seed, width=16, height=16):
    data = np.random.default_rng(seed).integers(0, 256, size=width * height * 4, dtype=np.uint8)
    return PixelCarrier(data, width, height)


def _random_audio(seed, channels=2, samples=400):
    data = np.random.default_rng(seed).uniform(-1, 1, size=(channels, samples)).astype(np.float32)
    return AudioCarrier(data)


class TestPermutationFuzzing:
    """Fuzz tests for the seeded permutation."""

    @given(n=st.integers(min_value=0, max_value=2000), seed=st.text(max_size=40))
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_is_permutation_and_deterministic(self, n, seed):
        first = generate_permutation(n, seed)
        assert sorted(first) == list(range(n))
        assert generate_permutation(n, seed) == first


class TestCodecFuzzing:
    """Round trips on random carriers."""

    @given(payload=payloads, seed=seeds, carrier_seed=st.integers(0, 2 ** 32 - 1))
    @settings(verbosity=Verbosity.quiet, max_examples=60, deadline=None)
    def test_pixel_round_trip(self, payload, seed, carrier_seed):
        carrier = _random_pixels(carrier_seed)
        assert extract_from_image(embed_in_image(carrier, payload, seed), seed) == payload

    @given(payload=payloads, seed=seeds, carrier_seed=st.integers(0, 2 ** 32 - 1))
    @settings(verbosity=Verbosity.quiet, max_examples=60, deadline=None)
    def test_audio_round_trip(self, payload, seed, carrier_seed):
        carrier = _random_audio(carrier_seed)
        assert extract_from_audio(embed_in_audio(carrier, payload, seed), seed) == payload


class TestSeedMismatch:
    """Decoding with the wrong seed must not yield the payload."""

    TRIALS = 50

    def _mismatched_seeds(self):
        for i in range(self.TRIALS):
            right, wrong = f"encode-{i}", f"decode-{i * 7 + 3}"
            # Seeds with equal code point sums share a permutation.
            if sum(map(ord, right)) != sum(map(ord, wrong)):
                yield i, right, wrong

    def test_pixel_wrong_seed(self):
        rejected = leaked = total = 0
        for i, right, wrong in self._mismatched_seeds():
            total += 1
            payload = f"message number {i}".encode()
            stego = embed_in_image(_random_pixels(i), payload, right)
            try:
                recovered = extract_from_image(stego, wrong)
            except NoPayloadError:
                rejected += 1
                continue
            leaked += recovered == payload

        assert total >= self.TRIALS * 0.8
        assert leaked == 0
        assert rejected >= total * 0.9

    def test_audio_wrong_seed(self):
        rejected = leaked = total = 0
        for i, right, wrong in self._mismatched_seeds():
            total += 1
            payload = f"audio number {i}".encode()
            stego = embed_in_audio(_random_audio(i), payload, right)
            try:
                recovered = extract_from_audio(stego, wrong)
            except NoPayloadError:
                rejected += 1
                continue
            leaked += recovered == payload

        assert total >= self.TRIALS * 0.8
        assert leaked == 0
        assert rejected >= total * 0.9
