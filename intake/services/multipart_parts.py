"""Multipart Parts: turns a raw request body into a lazy sequence of UploadPart.

Invariants:
    - Parts are yielded in arrival order, as soon as their headers are complete
    - Part bodies are read to the end and discarded (nothing is stored)
    - Byte limit checked before a chunk reaches the parser (never silently truncated)
    - Every framing/transport failure surfaces as MalformedStreamError
    - Input ending before the closing boundary is a framing failure

Design Decisions:
    - python-multipart push parser, callbacks confined to this module: callers
      iterate parts with `async for`, suspending only while awaiting body chunks
    - Header names lower-cased: clients vary in Content-Disposition casing
"""

import logging
from collections import deque
from typing import AsyncIterable, AsyncIterator

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import ClientDisconnect

from intake.core.errors import (
    MalformedStreamError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)
from intake.core.upload_tracker import UploadPart

logger = logging.getLogger(__name__)

MULTIPART_FORM_DATA = b"multipart/form-data"


def boundary_from_content_type(content_type: str | None) -> bytes:
    """Extract the multipart boundary, rejecting anything but multipart/form-data."""
    media_type, options = parse_options_header(content_type)
    if media_type.lower() != MULTIPART_FORM_DATA:
        raise UnsupportedMediaTypeError(media_type.decode("latin-1"))
    boundary = options.get(b"boundary")
    if not boundary:
        raise MalformedStreamError("Missing multipart boundary")
    return boundary


def _decode(value: bytes | None) -> str | None:
    if value is None:
        return None
    return value.decode("utf-8", errors="replace")


class _PartCollector:
    """Callback sink for MultipartParser: buffers finished part headers."""

    def __init__(self) -> None:
        self.ready: deque[UploadPart] = deque()
        self.ended = False
        self._headers: dict[bytes, bytes] = {}
        self._header_name: list[bytes] = []
        self._header_value: list[bytes] = []

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self._on_part_begin,
            "on_header_field": self._on_header_field,
            "on_header_value": self._on_header_value,
            "on_header_end": self._on_header_end,
            "on_headers_finished": self._on_headers_finished,
            "on_end": self._on_end,
        }

    def _on_part_begin(self) -> None:
        self._headers = {}

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name.append(data[start:end])

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value.append(data[start:end])

    def _on_header_end(self) -> None:
        name = b"".join(self._header_name).lower()
        self._headers[name] = b"".join(self._header_value)
        self._header_name.clear()
        self._header_value.clear()

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition"))
        self.ready.append(UploadPart(
            field_name=_decode(options.get(b"name")),
            filename=_decode(options.get(b"filename")),
        ))

    def _on_end(self) -> None:
        self.ended = True


async def iter_multipart_parts(
    chunks: AsyncIterable[bytes], boundary: bytes, max_bytes: int,
) -> AsyncIterator[UploadPart]:
    """Yield each part of a multipart body; raise MalformedStreamError on bad input."""
    collector = _PartCollector()
    parser = MultipartParser(boundary, callbacks=collector.callbacks())
    received = 0
    try:
        async for chunk in chunks:
            if not chunk:
                continue
            received += len(chunk)
            if received > max_bytes:
                raise PayloadTooLargeError(max_bytes)
            try:
                parser.write(chunk)
            except (MultipartParseError, ValueError) as e:
                raise MalformedStreamError(f"Malformed multipart body: {e}") from e
            while collector.ready:
                yield collector.ready.popleft()
    except ClientDisconnect as e:
        raise MalformedStreamError("Client disconnected") from e

    parser.finalize()
    if not collector.ended:
        raise MalformedStreamError("Stream ended unexpectedly")
    logger.debug(f"Multipart body complete ({received} bytes)")
