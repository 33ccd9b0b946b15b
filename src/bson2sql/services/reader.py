"""Document stream reader for BSON export files.

A ``mongodump`` collection file is a plain concatenation of BSON documents,
each prefixed by its own little-endian int32 byte length.
"""

import struct
from datetime import timezone
from typing import NamedTuple

import bson
import structlog
from bson.codec_options import CodecOptions
from bson.errors import BSONError

from bson2sql.errors import DecodeFailure
from bson2sql.models.value import Document

MIN_DOCUMENT_SIZE = 5
_LENGTH_PREFIX = struct.Struct("<i")

CODEC_OPTIONS = CodecOptions(tz_aware=True, tzinfo=timezone.utc)


class DecodedDocument(NamedTuple):
    """One decoded document and the number of bytes it occupied."""

    document: Document
    length: int


def decode_one(buffer: bytes, offset: int) -> DecodedDocument:
    """Decode the document starting at ``offset``.

    Args:
        buffer: The full BSON stream.
        offset: Byte offset of the document's length prefix.

    Returns:
        The decoded document and its declared byte length.

    Raises:
        DecodeFailure: If the length prefix is truncated or out of range, or
            the document bytes are not valid BSON.
    """
    remaining = len(buffer) - offset
    if remaining < _LENGTH_PREFIX.size:
        raise DecodeFailure(offset, f"truncated length prefix ({remaining} trailing bytes)")

    (length,) = _LENGTH_PREFIX.unpack_from(buffer, offset)
    if length < MIN_DOCUMENT_SIZE:
        raise DecodeFailure(offset, f"declared length {length} is below the minimum document size")
    if length > remaining:
        raise DecodeFailure(offset, f"declared length {length} exceeds the {remaining} remaining bytes")

    try:
        document = bson.decode(buffer[offset : offset + length], codec_options=CODEC_OPTIONS)
    except BSONError as e:
        raise DecodeFailure(offset, str(e)) from e

    return DecodedDocument(document=document, length=length)


class DocumentStreamReader:
    """Decodes every document from a BSON stream held in memory.

    A decode failure ends the walk without raising: the documents decoded
    before the failing offset are returned and the failure is logged and kept
    on ``last_failure``.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger(__name__)
        self._last_failure: DecodeFailure | None = None

    @property
    def last_failure(self) -> DecodeFailure | None:
        """The failure that truncated the most recent ``read_all``, if any."""
        return self._last_failure

    def read_all(self, buffer: bytes) -> list[Document]:
        """Decode documents from ``buffer`` in input order.

        Args:
            buffer: Concatenated BSON documents.

        Returns:
            All documents decoded before the end of the buffer or the first
            decode failure.
        """
        self._last_failure = None
        documents: list[Document] = []
        offset = 0

        while offset < len(buffer):
            try:
                decoded = decode_one(buffer, offset)
            except DecodeFailure as e:
                self._last_failure = e
                self._logger.warning(
                    "document_decode_failed",
                    offset=e.offset,
                    reason=e.reason,
                    documents_decoded=len(documents),
                )
                break
            documents.append(decoded.document)
            offset += decoded.length

        self._logger.info(
            "documents_decoded",
            document_count=len(documents),
            byte_length=len(buffer),
            truncated=self._last_failure is not None,
        )

        return documents
