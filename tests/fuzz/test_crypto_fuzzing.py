"""
Fuzz Tests for Chaostego Crypto Components

This module contains property-based tests for the compression stage and the
encryption envelope using hypothesis.
"""

import hypothesis.strategies as st
from hypothesis import given, settings, Verbosity
import pytest

from chaostego.config import StegoConfig
from chaostego.crypto.compression import compress, decompress
from chaostego.crypto.engine import AuthenticationError
from chaostego.crypto.envelope import open_envelope, seal

# Hypothesis strategies for fuzz testing
binary_data = st.binary(min_size=0, max_size=1024)
passwords = st.text(min_size=1, max_size=64)

FAST_CONFIG = StegoConfig(kdf_iterations=1000)


class TestCompressionFuzzing:
    """Fuzz tests for the compression stage."""

    @given(data=binary_data)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_compress_round_trip(self, data):
        assert decompress(compress(data)) == data

    @given(data=binary_data)
    @settings(verbosity=Verbosity.quiet, max_examples=100)
    def test_decompress_never_raises(self, data):
        """Arbitrary input either decompresses or passes through."""
        result = decompress(data)
        assert isinstance(result, bytes)


class TestEnvelopeFuzzing:
    """Fuzz tests for seal/open."""

    @given(payload=binary_data, password=passwords, use_compression=st.booleans())
    @settings(verbosity=Verbosity.quiet, max_examples=30, deadline=None)
    def test_envelope_round_trip(self, payload, password, use_compression):
        envelope = seal(payload, password, compress=use_compression, config=FAST_CONFIG)
        assert len(envelope) >= 29
        assert envelope[0] == int(use_compression)
        assert open_envelope(envelope, password, config=FAST_CONFIG).data == payload

    @given(payload=binary_data, first=passwords, second=passwords)
    @settings(verbosity=Verbosity.quiet, max_examples=20, deadline=None)
    def test_wrong_password_rejected(self, payload, first, second):
        if first == second:
            return
        envelope = seal(payload, first, config=FAST_CONFIG)
        with pytest.raises(AuthenticationError):
            open_envelope(envelope, second, config=FAST_CONFIG)

    @given(data=st.binary(min_size=0, max_size=200))
    @settings(verbosity=Verbosity.quiet, max_examples=50, deadline=None)
    def test_random_bytes_never_open(self, data):
        """Foreign data is rejected, never returned as plaintext."""
        with pytest.raises(AuthenticationError):
            open_envelope(b"\x00" + data, "pw", config=FAST_CONFIG)
