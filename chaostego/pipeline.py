"""
Steganography Pipeline.

Runs the full encode path (compression, encryption envelope, chaotic LSB
embedding) and its inverse in one call, resolving passwords and seeds from
:class:`~chaostego.config.StegoConfig` when the caller leaves them out.

Seed resolution:
    - an explicit, non-empty seed is always used;
    - otherwise secure mode uses the configured default seed for the carrier
      kind;
    - otherwise slots are visited in natural order.

Example:
    >>> from chaostego import StegoPipeline
    >>> pipeline = StegoPipeline()
    >>> stego = pipeline.hide_in_image(carrier, "meet at noon", password="pw")
    >>> pipeline.reveal_from_image(stego, password="pw").text
    'meet at noon'
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .config import StegoConfig
from .crypto.envelope import is_probably_text, open_envelope, seal
from .stego.audio import AudioCarrier, AudioStego
from .stego.base import ChaoticLsbCodec
from .stego.image import ImageStego, PixelCarrier

logger = logging.getLogger(__name__)


@dataclass
class RevealedPayload:
    """
    Payload recovered by the pipeline.

    Attributes:
        data: Recovered bytes
        is_text: Whether ``data`` decodes as UTF-8
    """

    data: bytes
    is_text: bool

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


class StegoPipeline:
    """
    Envelope and codec composed for pixel and audio carriers.

    Attributes:
        config: Defaults for password, seeds, compression and secure mode
    """

    def __init__(self, config: Optional[StegoConfig] = None):
        self.config = config or StegoConfig.default()
        self._image = ImageStego()
        self._audio = AudioStego()

    def _resolve_seed(self, seed: Optional[str], secure: bool, default_seed: str) -> str:
        if seed:
            return seed
        return default_seed if secure else ""

    def _hide(
        self,
        codec: ChaoticLsbCodec,
        default_seed: str,
        carrier,
        data: Union[bytes, str],
        password: Optional[str],
        seed: Optional[str],
        secure: Optional[bool],
        compress: Optional[bool],
    ):
        secure = self.config.secure if secure is None else secure
        logger.debug(f"Hiding payload in {codec.carrier_kind} (secure={secure}, explicit_seed={bool(seed)})")
        if secure:
            payload = seal(data, password, compress=compress, config=self.config)
        else:
            payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return codec.embed(carrier, payload, self._resolve_seed(seed, secure, default_seed))

    def _reveal(
        self,
        codec: ChaoticLsbCodec,
        default_seed: str,
        carrier,
        password: Optional[str],
        seed: Optional[str],
        secure: Optional[bool],
    ) -> RevealedPayload:
        secure = self.config.secure if secure is None else secure
        payload = codec.extract(carrier, self._resolve_seed(seed, secure, default_seed))
        if not secure:
            return RevealedPayload(data=payload, is_text=is_probably_text(payload))

        opened = open_envelope(payload, password, config=self.config)
        return RevealedPayload(data=opened.data, is_text=opened.is_text)

    def hide_in_image(
        self,
        carrier: PixelCarrier,
        data: Union[bytes, str],
        password: Optional[str] = None,
        seed: Optional[str] = None,
        secure: Optional[bool] = None,
        compress: Optional[bool] = None,
    ) -> PixelCarrier:
        """
        Seal (in secure mode) and embed ``data`` into a copy of ``carrier``.

        Args:
            carrier: Cover image
            data: Message or file contents; strings are UTF-8 encoded
            password: Envelope password, defaults to ``config.default_password``
            seed: Shuffle seed, see module documentation for defaults
            secure: Seal the payload; defaults to ``config.secure``
            compress: Compress before sealing; defaults to ``config.compress``

        Raises:
            CapacityExceededError: If the sealed payload does not fit
        """
        return self._hide(
            self._image, self.config.default_image_seed, carrier, data, password, seed, secure, compress
        )

    def reveal_from_image(
        self,
        carrier: PixelCarrier,
        password: Optional[str] = None,
        seed: Optional[str] = None,
        secure: Optional[bool] = None,
    ) -> RevealedPayload:
        """
        Extract and (in secure mode) open a payload hidden with :meth:`hide_in_image`.

        Raises:
            NoPayloadError: If no payload is found for this seed
            AuthenticationError: If the password is wrong or the data corrupted
        """
        return self._reveal(self._image, self.config.default_image_seed, carrier, password, seed, secure)

    def hide_in_audio(
        self,
        carrier: AudioCarrier,
        data: Union[bytes, str],
        password: Optional[str] = None,
        seed: Optional[str] = None,
        secure: Optional[bool] = None,
        compress: Optional[bool] = None,
    ) -> AudioCarrier:
        """Audio counterpart of :meth:`hide_in_image`."""
        return self._hide(
            self._audio, self.config.default_audio_seed, carrier, data, password, seed, secure, compress
        )

    def reveal_from_audio(
        self,
        carrier: AudioCarrier,
        password: Optional[str] = None,
        seed: Optional[str] = None,
        secure: Optional[bool] = None,
    ) -> RevealedPayload:
        """Audio counterpart of :meth:`reveal_from_image`."""
        return self._reveal(self._audio, self.config.default_audio_seed, carrier, password, seed, secure)

    def image_capacity(self, carrier: PixelCarrier) -> int:
        """Raw payload capacity in bytes; the envelope adds 45 bytes before compression."""
        return self._image.calculate_capacity(carrier)

    def audio_capacity(self, carrier: AudioCarrier) -> int:
        return self._audio.calculate_capacity(carrier)
