"""
Chaostego Configuration.

Holds the overridable defaults used when a caller does not supply a password
or a shuffle seed. The literal values below are *defaults*, not secrets: they
are published with the package and anyone who knows them can open a payload
sealed with them. Callers that need confidentiality must pass their own
password.

Example:
    >>> from chaostego.config import StegoConfig
    >>> config = StegoConfig.default()
    >>> config.kdf_iterations
    100000
    >>> config = StegoConfig.from_env()
"""

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_PASSWORD = "steganopro-internal-system-key-2026"
DEFAULT_IMAGE_SEED = "steganopro-default-chaotic-seed"
DEFAULT_AUDIO_SEED = "steganopro-audio-chaotic-seed"
DEFAULT_KDF_ITERATIONS = 100000

ENV_PREFIX = "CHAOSTEGO_"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class StegoConfig:
    """
    Configuration for the embedding pipeline and the encryption envelope.

    Attributes:
        default_password: Password used when the caller supplies none
        default_image_seed: Shuffle seed for pixel carriers in secure mode
        default_audio_seed: Shuffle seed for audio carriers in secure mode
        kdf_iterations: PBKDF2 iteration count (100,000 on the wire)
        compress: Compress payloads before sealing
        secure: Seal payloads before embedding
    """

    default_password: str = DEFAULT_PASSWORD
    default_image_seed: str = DEFAULT_IMAGE_SEED
    default_audio_seed: str = DEFAULT_AUDIO_SEED
    kdf_iterations: int = DEFAULT_KDF_ITERATIONS
    compress: bool = True
    secure: bool = True

    def __post_init__(self) -> None:
        for name in ("default_password", "default_image_seed", "default_audio_seed"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {value!r}")
        for name in ("compress", "secure"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a boolean, got {value!r}")
        if (
            isinstance(self.kdf_iterations, bool)
            or not isinstance(self.kdf_iterations, int)
            or self.kdf_iterations < 1
        ):
            raise ValueError(f"kdf_iterations must be a positive integer, got {self.kdf_iterations!r}")
        if not self.default_password:
            raise ValueError("default_password must not be empty")

    @classmethod
    def default(cls) -> "StegoConfig":
        """Get default configuration."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StegoConfig":
        """
        Build a configuration from a mapping, ignoring unknown keys.

        Raises:
            ValueError: If a known key carries an invalid value
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StegoConfig":
        """Load configuration from a JSON file."""
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "StegoConfig":
        """
        Build a configuration from ``CHAOSTEGO_*`` environment variables.

        Recognised variables: ``CHAOSTEGO_PASSWORD``, ``CHAOSTEGO_IMAGE_SEED``,
        ``CHAOSTEGO_AUDIO_SEED``, ``CHAOSTEGO_KDF_ITERATIONS``,
        ``CHAOSTEGO_COMPRESS`` and ``CHAOSTEGO_SECURE``. Unset variables keep
        their defaults.
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        mapping = {
            "PASSWORD": "default_password",
            "IMAGE_SEED": "default_image_seed",
            "AUDIO_SEED": "default_audio_seed",
        }
        for suffix, field_name in mapping.items():
            value = env.get(ENV_PREFIX + suffix)
            if value is not None:
                data[field_name] = value

        iterations = env.get(ENV_PREFIX + "KDF_ITERATIONS")
        if iterations is not None:
            try:
                data["kdf_iterations"] = int(iterations)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}KDF_ITERATIONS must be an integer, got {iterations!r}")

        for suffix, field_name in (("COMPRESS", "compress"), ("SECURE", "secure")):
            value = env.get(ENV_PREFIX + suffix)
            if value is not None:
                data[field_name] = _parse_bool(ENV_PREFIX + suffix, value)

        return cls.from_dict(data)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {value!r}")
