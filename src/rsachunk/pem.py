"""PEM envelope handling for RSA key material.

Decoding is deliberately permissive: any line framed as a `-----BEGIN` or `-----END` marker is dropped regardless of
its label. ASCII characters outside the base64 alphabet are skipped, as are whitespace and invisible format characters
such as zero-width spaces or a byte order mark. This lets keys copied out of mail bodies, config files or terminal
output be used without cleanup. Any other non-ASCII character is rejected.

Typical usage example:

    der = decode_pem(pem_text)
    pem_text = encode_pem(der, "PUBLIC KEY")
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import logging
import pathlib
import unicodedata

from rsachunk.errors import FormatError

_logger = logging.getLogger(__name__)

BEGIN_MARKER = "-----BEGIN"
END_MARKER = "-----END"
LINE_WIDTH = 64


def _visible(line: str) -> str:
    """Drops whitespace and invisible format characters (NBSP, zero-width space, BOM) picked up by copy-pasting."""
    return "".join(ch for ch in line if not ch.isspace() and unicodedata.category(ch) != "Cf")


def decode_pem(text: str) -> bytes:
    """Strips the PEM envelope and decodes the base64 body.

    Args:
        text: The PEM encoded text.

    Returns:
        The raw DER bytes.

    Raises:
        FormatError: If no body remains after stripping, or the body is not valid base64.
    """
    body = [
        line for line in map(_visible, text.splitlines())
        if not line.startswith(BEGIN_MARKER) and not line.startswith(END_MARKER)
    ]
    joined = "".join(body)
    if not joined:
        raise FormatError("Couldn't get data from PEM key: no data available after stripping headers")
    try:
        data = base64.b64decode(joined, validate=False)
    except ValueError as exc:
        raise FormatError("Couldn't decode PEM key data (base64)") from exc
    if not data:
        raise FormatError("Couldn't decode PEM key data (base64)")
    _logger.debug("Decoded %d PEM body lines into %d bytes", len(body), len(data))
    return data


def encode_pem(data: bytes, label: str) -> str:
    """Wraps DER bytes in a PEM envelope.

    Args:
        data: The bytes to encode.
        label: The PEM label, e.g. "PUBLIC KEY" or "RSA PRIVATE KEY".

    Returns:
        The PEM text, newline terminated.
    """
    payload = base64.b64encode(data).decode("ascii")
    res = "\n".join(payload[i:i + LINE_WIDTH] for i in range(0, len(payload), LINE_WIDTH))
    res += "\n" if res else ""
    return f"{BEGIN_MARKER} {label}-----\n{res}{END_MARKER} {label}-----\n"


def read_pem(file: pathlib.Path) -> bytes:
    """Reads and decodes a PEM file.

    Args:
        file: The file to read.

    Returns:
        The decoded DER bytes.
    """
    with open(file, "r", encoding="utf-8") as f:
        return decode_pem(f.read())
