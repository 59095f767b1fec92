# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from cryptography.hazmat.primitives import serialization
import pytest

from keyhelpers import public_der
from keyhelpers import public_pem
from rsachunk import pem
from rsachunk.errors import FormatError

standard_payload = "The quick brown fox jumps over the lazy dog1234567890!@#$%^&*()-_=+[{}];:\\|<>,./?~`'\""


@pytest.mark.parametrize("payload", [b"\x00", b"Quick!", b"A" * 64, b"B" * 200, standard_payload.encode("utf-8")])
def test_pem_encode_decode(payload):
    res = pem.decode_pem(pem.encode_pem(payload, "PUBLIC KEY"))
    assert res == payload


def test_pem_encode_wraps_lines():
    text = pem.encode_pem(b"A" * 200, "RSA PUBLIC KEY")
    lines = text.splitlines()
    assert lines[0] == "-----BEGIN RSA PUBLIC KEY-----"
    assert lines[-1] == "-----END RSA PUBLIC KEY-----"
    assert all(len(line) <= 64 for line in lines[1:-1])
    assert text.endswith("\n")


@pytest.mark.parametrize("fmt", [serialization.PublicFormat.SubjectPublicKeyInfo, serialization.PublicFormat.PKCS1])
def test_pem_matches_der(keyset, fmt):
    assert pem.decode_pem(public_pem(keyset, fmt)) == public_der(keyset, fmt)


def test_pem_ignores_envelope_labels():
    body = pem.encode_pem(b"Quick!", "ANYTHING").splitlines()[1:-1]
    text = "\n".join(["  -----BEGIN GARBAGE DATA-----", *body, "\t-----END SOMETHING ELSE-----  "])
    assert pem.decode_pem(text) == b"Quick!"


def test_pem_tolerates_whitespace():
    text = pem.encode_pem(standard_payload.encode("utf-8"), "PUBLIC KEY").replace("\n", "\r\n")
    lines = text.splitlines()
    lines[1] = " ".join(lines[1][i:i + 4] for i in range(0, len(lines[1]), 4))
    assert pem.decode_pem("\r\n".join(lines)) == standard_payload.encode("utf-8")


@pytest.mark.parametrize("text", [
    "",
    "-----BEGIN PUBLIC KEY-----\n-----END PUBLIC KEY-----\n",
    "-----BEGIN PUBLIC KEY-----\n   \n\n-----END PUBLIC KEY-----\n",
])
def test_pem_empty_body(text):
    with pytest.raises(FormatError, match="no data available after stripping headers"):
        pem.decode_pem(text)


def test_pem_nonbase64():
    with pytest.raises(FormatError, match="base64"):
        pem.decode_pem("-----BEGIN RSA PUBLIC KEY-----\nabcde\n-----END RSA PUBLIC KEY-----\n")


def test_pem_decodes_to_nothing():
    with pytest.raises(FormatError, match="base64"):
        pem.decode_pem("-----BEGIN RSA PUBLIC KEY-----\n====\n-----END RSA PUBLIC KEY-----\n")


def test_pem_read(tmp_path):
    pld = tmp_path / "testpem.pem"
    with open(pld, "w", encoding="ascii") as fi:
        fi.write(pem.encode_pem(b"Quick!", "PRIVATE KEY"))
    assert pem.read_pem(pld) == b"Quick!"


@pytest.mark.parametrize("junk", ["\u200b", " \u200b", "\u00a0", "\ufeff", "\u2009"])
def test_pem_skips_invisible_characters(junk):
    lines = pem.encode_pem(standard_payload.encode("utf-8"), "PUBLIC KEY").splitlines()
    lines[1] = lines[1][:10] + junk + lines[1][10:]
    assert pem.decode_pem("\n".join(lines)) == standard_payload.encode("utf-8")


def test_pem_byte_order_mark(keyset):
    text = "\ufeff" + public_pem(keyset)
    assert pem.decode_pem(text) == public_der(keyset)


@pytest.mark.parametrize("body", ["MIIBé", "éééé", "MIIBЖAAAA"])
def test_pem_rejects_non_ascii(body):
    with pytest.raises(FormatError, match="base64"):
        pem.decode_pem(f"-----BEGIN PUBLIC KEY-----\n{body}\n-----END PUBLIC KEY-----\n")
