"""Error types raised throughout rsachunk.

Every error derives from RSAChunkError and from the builtin exception that best describes it, so callers may catch
either the specific type or the familiar builtin.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAChunkError(Exception):
    """Base class for all rsachunk errors."""


class FormatError(RSAChunkError, ValueError):
    """Malformed PEM, base64 or DER input.

    Attributes:
        offset: Byte offset at which the input was rejected, if applicable.
        value: The byte observed at that offset, None if the offset is past the end of the input.
    """

    def __init__(self, message: str, offset: int | None = None, value: int | None = None) -> None:
        if offset is not None:
            shown = "EOF" if value is None else f"0x{value:02x}"
            message = f"{message} (offset {offset}: {shown})"
        super().__init__(message)
        self.offset = offset
        self.value = value


class StoreError(RSAChunkError, IOError):
    """The key-store refused to register a key or to hand back its reference.

    Attributes:
        tag: The tag identifier involved.
        status: The registration status reported by the store, if any.
    """

    def __init__(self, message: str, tag: str | None = None, status=None) -> None:
        super().__init__(message)
        self.tag = tag
        self.status = status


class CipherError(RSAChunkError, RuntimeError):
    """A block-level encryption or decryption failed.

    Attributes:
        offset: Start offset of the failing chunk within the input.
    """

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at index {offset}")
        self.offset = offset


class PrimitiveError(RSAChunkError, RuntimeError):
    """Raised by key-store implementations when a single-block RSA operation fails."""
