# fs2utf8/transcode.py

from __future__ import annotations
import codecs
import logging

from .errors import ConverterUnavailable, ErrorKind
from .model import TranscodeResult

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "ISO8859-1"
TARGET_CHARSET = "UTF-8"
DEFAULT_MAX_BYTES = 10240


class Transcoder:
    """Converts names from one source charset to UTF-8.

    Built once per run and used for every entry in turn. The decoder is
    reset before each call, so no state leaks from one name to the next.
    """

    def __init__(self, charset: str = DEFAULT_CHARSET, max_bytes: int = DEFAULT_MAX_BYTES,
                 hex_dump: bool = False) -> None:
        try:
            info = codecs.lookup(charset)
        except LookupError as exc:
            raise ConverterUnavailable(charset, str(exc)) from exc
        # binary transforms like base64 or rot13 are not charsets
        if not getattr(info, "_is_text_encoding", True) or info.incrementaldecoder is None:
            raise ConverterUnavailable(charset, "not a text encoding")

        self.charset = charset
        self.max_bytes = max_bytes
        self.hex_dump = hex_dump
        self._decoder = info.incrementaldecoder(errors="strict")

    def transcode(self, name: bytes) -> TranscodeResult:
        """Convert ``name`` to UTF-8.

        Args:
            name (bytes): Raw name in the source charset.

        Returns:
            TranscodeResult: The UTF-8 bytes, or ``TRANSCODE_FAILURE`` when
            the input cannot be decoded, or ``OUTPUT_TOO_LARGE`` when the
            result is over ``max_bytes``.
        """
        if self.hex_dump:
            logger.debug("%s in: %s", self.charset, name.hex(" "))
        self._decoder.reset()
        try:
            text = self._decoder.decode(name, final=True)
            out = text.encode("utf-8")
        except UnicodeError as exc:
            return TranscodeResult(None, ErrorKind.TRANSCODE_FAILURE, str(exc))

        if len(out) > self.max_bytes:
            return TranscodeResult(
                None,
                ErrorKind.OUTPUT_TOO_LARGE,
                f"{len(out)} bytes exceeds limit of {self.max_bytes}",
            )

        if self.hex_dump:
            logger.debug("%s -> %s", name.hex(" "), out.hex(" "))
        return TranscodeResult(out)
