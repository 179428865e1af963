from __future__ import annotations


class TagError(Exception):
    """Raised when a tag cannot be buffered or rebuilt and the file has to be abandoned."""


class RedundantWriteError(TagError):
    """Raised when bytes are fed to a TagBuffer that has already resolved."""


class EmptyTagError(TagError):
    """Raised when a tag without any frames is asked to serialize itself."""


class TagTooLargeError(TagError):
    """Raised when a declared or computed length does not fit its field or the configured limit."""


class IncompleteTagError(TagError):
    """Raised when a stream ends before the tag at its head could be resolved."""
