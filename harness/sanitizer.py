"""Secret scrubbing for everything the acceptance suite writes.

The suite knows the literal values of its credentials (API token, AWS keys),
so unlike pattern-based redaction this replaces exact strings with fixed
placeholders.

Usage:
    Streams: wrap the real sink in a `Sanitizer` and write through it.
    Structlog: add `sanitize_event(sanitizer)` to the processor chain.
    Stdlib: attach `SanitizingFilter(sanitizer)` with `install_sanitizer`.

Each write is scrubbed on its own. A secret split across two writes is not
caught; there is no buffering between calls.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Mapping, MutableMapping
from typing import IO, Any, AnyStr


class Sanitizer:
    """File-like sink that replaces known secrets before forwarding.

    The secret mapping is fixed at construction. Empty keys are ignored,
    so an empty mapping turns the sanitizer into a pass-through.
    """

    def __init__(self, secrets: Mapping[str, str], sink: IO[Any]) -> None:
        self._secrets: dict[str, str] = {key: value for key, value in secrets.items() if key}
        self._sink = sink
        self._lock = threading.Lock()
        self._text_pattern = self._compile(list(self._secrets))
        self._bytes_secrets = {key.encode(): value.encode() for key, value in self._secrets.items()}
        self._bytes_pattern = self._compile(list(self._bytes_secrets))

    @staticmethod
    def _compile(keys: list[AnyStr]) -> re.Pattern[AnyStr] | None:
        if not keys:
            return None
        # Longest first so a secret that contains another secret wins.
        ordered = sorted(keys, key=len, reverse=True)
        separator = b"|" if isinstance(ordered[0], bytes) else "|"
        return re.compile(separator.join(re.escape(key) for key in ordered))

    @property
    def secrets(self) -> Mapping[str, str]:
        return dict(self._secrets)

    def sanitize(self, chunk: Any) -> Any:
        """Return `chunk` with every secret replaced.

        Text stays text; any other buffer (bytes, bytearray, memoryview...) comes
        back as bytes. Anything that is neither is returned unchanged.
        """
        if isinstance(chunk, str):
            if self._text_pattern is None:
                return chunk
            return self._text_pattern.sub(lambda match: self._secrets[match.group(0)], chunk)
        try:
            data = memoryview(chunk).tobytes()
        except TypeError:
            return chunk
        if self._bytes_pattern is None:
            return data
        return self._bytes_pattern.sub(lambda match: self._bytes_secrets[match.group(0)], data)

    def write(self, chunk: Any) -> int:
        """Scrub `chunk`, forward it, and report the length of the input."""
        sanitized = self.sanitize(chunk)
        with self._lock:
            self._sink.write(sanitized)
        if isinstance(chunk, str):
            return len(chunk)
        return memoryview(chunk).nbytes

    def writelines(self, lines: Any) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is not None:
            with self._lock:
                flush()

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False


def _sanitize_value(sanitizer: Sanitizer, value: Any) -> Any:
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        return sanitizer.sanitize(value)
    if isinstance(value, dict):
        return {k: _sanitize_value(sanitizer, v) for k, v in value.items()}
    if isinstance(value, list):
        return [_sanitize_value(sanitizer, item) for item in value]
    if isinstance(value, tuple):
        return tuple(_sanitize_value(sanitizer, item) for item in value)
    return value


def sanitize_event(
    sanitizer: Sanitizer,
) -> Callable[[Any, str, MutableMapping[str, Any]], MutableMapping[str, Any]]:
    """Build a structlog processor that scrubs every value of an event dict.

    Place it before the final renderer so that secrets never reach the
    rendered line, even if the rendered line is split across writes.
    """

    def processor(
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        return {key: _sanitize_value(sanitizer, value) for key, value in event_dict.items()}

    return processor


class SanitizingFilter(logging.Filter):
    """Stdlib logging filter that scrubs messages, arguments and tracebacks."""

    def __init__(self, sanitizer: Sanitizer) -> None:
        super().__init__()
        self.sanitizer = sanitizer

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.sanitizer.sanitize(record.msg)

        if record.args:
            record.args = _sanitize_value(self.sanitizer, record.args)

        if record.exc_text:
            record.exc_text = self.sanitizer.sanitize(record.exc_text)

        return True


def install_sanitizer(sanitizer: Sanitizer, logger_name: str | None = None) -> None:
    """Attach a `SanitizingFilter` to a stdlib logger (root when None).

    A filter already installed on the logger is replaced rather than stacked.
    """
    target_logger = logging.getLogger(logger_name)
    for f in list(target_logger.filters):
        if isinstance(f, SanitizingFilter):
            target_logger.removeFilter(f)
    target_logger.addFilter(SanitizingFilter(sanitizer))
