# Chaostego Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from chaostego.config import StegoConfig
from chaostego.stego.audio import AudioCarrier
from chaostego.stego.image import PixelCarrier

# Low iteration count keeps envelope tests fast; the wire default is
# exercised separately.
FAST_KDF_ITERATIONS = 1000


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture
def fast_config():
    """Configuration with a cheap KDF."""
    return StegoConfig(kdf_iterations=FAST_KDF_ITERATIONS)


@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(20260417)


@pytest.fixture
def make_pixel_carrier(rng):
    """Factory for random RGBA carriers."""
    def _make(width=10, height=10):
        data = rng.integers(0, 256, size=width * height * 4, dtype=np.uint8)
        return PixelCarrier(data, width, height)
    return _make


@pytest.fixture
def make_audio_carrier(rng):
    """Factory for random float32 audio carriers."""
    def _make(channels=2, samples=200, sample_rate=44100):
        data = rng.uniform(-1.0, 1.0, size=(channels, samples)).astype(np.float32)
        return AudioCarrier(data, sample_rate)
    return _make


@pytest.fixture
def pixel_carrier(make_pixel_carrier):
    """100-pixel (400-component) RGBA carrier."""
    return make_pixel_carrier(10, 10)


@pytest.fixture
def audio_carrier(make_audio_carrier):
    """Stereo carrier with 200 samples per channel."""
    return make_audio_carrier(2, 200)


@pytest.fixture
def temp_directory(tmp_path):
    """Provide a temporary directory for test operations."""
    return tmp_path
