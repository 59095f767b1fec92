# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from cryptography.hazmat.primitives import serialization
import pytest

from keyhelpers import get_key
from keyhelpers import public_der
from rsachunk import der
from rsachunk.errors import FormatError

# 1024 bit key with an X509 header, and the offset at which its headerless encoding starts.
known_x509 = bytes.fromhex(
    "30819F300D06092A864886F70D010101050003818D0030818902818100D0674615A252ED3D75D2A3073A0A8A445F3188FD3BEB8BA8584F"
    "7299E391BDEC3427F287327414174997D147DD8CA62647427D73C9DA5504E0A3EED5274A1D50A1237D688486FADB8B82061675ABFA5E55"
    "B624095DB8790C6DBCAE83D6A8588C9A6635D7CF257ED1EDE18F04217D37908FD0CBB86B2C58D5F762E6207FF7B92D0203010001")
known_offset = 22


def test_strip_known_key():
    stripped = der.strip_public_key_header(known_x509)
    assert stripped == known_x509[known_offset:]
    assert stripped[:7] == b"\x30\x81\x89\x02\x81\x81\x00"


def test_strip_headerless_identity(keyset):
    pkcs1 = public_der(keyset, serialization.PublicFormat.PKCS1)
    assert der.strip_public_key_header(pkcs1) is pkcs1


def test_strip_x509(keyset):
    spki = public_der(keyset)
    assert der.strip_public_key_header(spki) == public_der(keyset, serialization.PublicFormat.PKCS1)


@pytest.mark.parametrize("mod, expo", [(3233, 17), (2**127 - 1, 3), (2**1023 + 1, 65537)])
def test_strip_encoded(mod, expo):
    headerless = der.encode_public_key(mod, expo)
    assert der.strip_public_key_header(der.encode_public_key(mod, expo, x509=True)) == headerless
    assert der.strip_public_key_header(headerless) == headerless


def test_encode_matches_cryptography(keyset):
    pubs = keyset.public_key().public_numbers()
    assert der.encode_public_key(pubs.n, pubs.e) == public_der(keyset, serialization.PublicFormat.PKCS1)
    assert der.encode_public_key(pubs.n, pubs.e, x509=True) == public_der(keyset)


def test_strip_empty():
    with pytest.raises(FormatError, match="empty"):
        der.strip_public_key_header(b"")


@pytest.mark.parametrize("payload", [b"\x02\x01\x00", b"\xff", b"\x31\x00", known_x509[1:]])
def test_strip_not_sequence(payload):
    with pytest.raises(FormatError, match="ASN.1") as exc:
        der.strip_public_key_header(payload)
    assert exc.value.offset == 0
    assert exc.value.value == payload[0]


def test_strip_invalid_x509_header():
    with pytest.raises(FormatError, match="X509") as exc:
        der.strip_public_key_header(b"\x30\x03\x04\x01\x00")
    assert exc.value.offset == 2
    assert exc.value.value == 0x04


def test_strip_invalid_bit_string():
    broken = bytearray(known_x509)
    broken[18] = 0x04
    with pytest.raises(FormatError, match="BIT STRING") as exc:
        der.strip_public_key_header(bytes(broken))
    assert exc.value.offset == 18
    assert exc.value.value == 0x04


def test_strip_unused_bits():
    broken = bytearray(known_x509)
    broken[21] = 0x01
    with pytest.raises(FormatError, match="unused bits") as exc:
        der.strip_public_key_header(bytes(broken))
    assert exc.value.offset == 21
    assert exc.value.value == 0x01


@pytest.mark.parametrize("size", [1024, 2048])
def test_strip_truncated(size):
    spki = public_der(get_key(size))
    header = len(spki) - len(public_der(get_key(size), serialization.PublicFormat.PKCS1))
    for cut in range(1, header + 1):
        with pytest.raises(FormatError) as exc:
            der.strip_public_key_header(spki[:cut])
        assert exc.value.offset >= cut
        assert exc.value.value is None


def test_strip_truncated_headerless():
    with pytest.raises(FormatError, match="ended unexpectedly") as exc:
        der.strip_public_key_header(b"\x30\x82\x01")
    assert exc.value.offset == 4
    assert exc.value.value is None


def test_format_error_message():
    err = FormatError("Broken", 3, 0xAB)
    assert str(err) == "Broken (offset 3: 0xab)"
    assert str(FormatError("Broken", 5)) == "Broken (offset 5: EOF)"
    assert str(FormatError("Broken")) == "Broken"
    assert isinstance(err, ValueError)
