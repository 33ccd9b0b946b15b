"""Exceptions raised by the conversion pipeline."""


class ConversionError(Exception):
    """Base class for bson2sql errors."""


class DecodeFailure(ConversionError):
    """A BSON document could not be decoded at a given byte offset.

    Non-fatal: the stream reader stops at the failing offset and keeps the
    documents decoded before it.
    """

    def __init__(self, offset: int, reason: str) -> None:
        super().__init__(f"failed to decode document at offset {offset}: {reason}")
        self.offset = offset
        self.reason = reason


class SchemaLoadError(ConversionError):
    """The schema file could not be read, parsed, or validated."""
