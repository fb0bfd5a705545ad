"""Exceptions raised by the I/O layers around the extractor."""


class IdCardOcrError(Exception):
    """Base class for application errors."""


class OcrError(IdCardOcrError):
    """Text recognition failed or the image could not be read."""


class StorageError(IdCardOcrError):
    """The local key-value store could not be read or written."""
