"""DER handling for RSA public keys.

Public keys arrive in one of two shapes. The headerless PKCS#1 form:

    SEQUENCE
        INTEGER -- modulus
        INTEGER -- public exponent

And the X.509 SubjectPublicKeyInfo form, which wraps the former:

    SEQUENCE
        SEQUENCE
            OBJECT IDENTIFIER 1.2.840.113549.1.1.1
            NULL
        BIT STRING
            SEQUENCE
                INTEGER -- modulus
                INTEGER -- public exponent

Key-stores only accept the headerless form, so the X.509 header is stripped by a fixed byte-offset walk. The walk only
understands the rsaEncryption AlgorithmIdentifier with NULL parameters, which is the encoding every mainstream
toolchain emits; any other AlgorithmIdentifier length is rejected rather than parsed.

Typical usage example:

    der = encode_public_key(n, e, x509=True)
    pkcs1 = strip_public_key_header(der)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_modules import rfc5280
from pyasn1_modules import rfc8017

from rsachunk.errors import FormatError

_logger = logging.getLogger(__name__)

TAG_INTEGER = 0x02
TAG_BIT_STRING = 0x03
TAG_SEQUENCE = 0x30
LONG_FORM_LENGTH = 0x80
# 0x30 0x0d 0x06 0x09 <rsaEncryption OID, 9 bytes> 0x05 0x00
ALGORITHM_IDENTIFIER_SIZE = 15


def _byte_at(data: bytes, index: int) -> int:
    """Reads a single byte, treating reads past the end as a format error."""
    if index >= len(data):
        raise FormatError("Public key ended unexpectedly", index)
    return data[index]


def _skip_length(data: bytes, index: int) -> int:
    """Skips a DER length field starting at `index`, returning the offset just past it."""
    length = _byte_at(data, index)
    if length > LONG_FORM_LENGTH:
        return index + (length - LONG_FORM_LENGTH) + 1
    return index + 1


def strip_public_key_header(data: bytes) -> bytes:
    """Strips the X.509 header from a DER encoded RSA public key.

    If the key is already headerless it is returned as is.

    Args:
        data: The DER encoded public key.

    Returns:
        The headerless SEQUENCE{modulus, exponent} encoding.

    Raises:
        FormatError: If the key is empty or does not match either supported shape.
    """
    if not data:
        raise FormatError("Provided public key is empty")
    index = 0
    if data[index] != TAG_SEQUENCE:
        raise FormatError("Provided key doesn't have a valid ASN.1 structure (first byte should be 0x30 == SEQUENCE)",
                          index, data[index])
    index = _skip_length(data, index + 1)
    tag = _byte_at(data, index)
    if tag == TAG_INTEGER:
        _logger.debug("Public key is headerless (%d bytes)", len(data))
        return data
    if tag != TAG_SEQUENCE:
        raise FormatError("Provided key doesn't have a valid X509 header", index, tag)
    index += ALGORITHM_IDENTIFIER_SIZE
    tag = _byte_at(data, index)
    if tag != TAG_BIT_STRING:
        raise FormatError("Invalid byte for public key header, expected BIT STRING", index, tag)
    index = _skip_length(data, index + 1)
    unused = _byte_at(data, index)
    if unused != 0x00:
        raise FormatError("Invalid byte for public key header, expected no unused bits", index, unused)
    index += 1
    if index >= len(data):
        raise FormatError("Public key has no content after its X509 header", index)
    _logger.debug("Stripped %d byte X509 header from public key", index)
    return data[index:]


def encode_public_key(modulus: int, exponent: int, x509: bool = False) -> bytes:
    """Encodes an RSA public key to DER.

    Args:
        modulus: The modulus of the key.
        exponent: The public exponent of the key.
        x509: Whether to wrap the key in a SubjectPublicKeyInfo header.

    Returns:
        The DER encoded key.
    """
    keydata = rfc8017.RSAPublicKey()
    keydata["modulus"] = modulus
    keydata["publicExponent"] = exponent
    encoded = encoder.encode(keydata)
    if not x509:
        return encoded
    algo = rfc5280.AlgorithmIdentifier()
    algo["algorithm"] = rfc8017.rsaEncryption
    algo["parameters"] = univ.Null("")
    spki = rfc5280.SubjectPublicKeyInfo()
    spki["algorithm"] = algo
    spki["subjectPublicKey"] = univ.BitString.fromOctetString(encoded)
    return encoder.encode(spki)
