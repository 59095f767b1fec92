"""RSA key ingestion from PEM/DER and block-chunked encryption against a pluggable key-store.

Provides PEM decoding, X.509 header stripping for DER public keys, a keyring that registers keys with a key-store and
cleans up after itself, and chunked PKCS#1 v1.5 encryption/decryption for payloads of any length.

Typical usage example:

    c = encrypt_with_public_key_pem(b"Hi there!", public_pem)
    r = decrypt_with_private_key_pem(c, private_pem)

    with RSAKeyring(my_store) as ring:
        pub = ring.import_public_key_der(der)
        c = ring.encrypt(pub, b"Hi there!")
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsachunk.cipher import decrypt_blocks
from rsachunk.cipher import encrypt_blocks
from rsachunk.der import encode_public_key
from rsachunk.der import strip_public_key_header
from rsachunk.errors import CipherError
from rsachunk.errors import FormatError
from rsachunk.errors import PrimitiveError
from rsachunk.errors import RSAChunkError
from rsachunk.errors import StoreError
from rsachunk.keyring import decrypt_with_private_key_pem
from rsachunk.keyring import encrypt_with_public_key_pem
from rsachunk.keyring import RSAKeyring
from rsachunk.keystore import KeyClass
from rsachunk.keystore import KeyStore
from rsachunk.keystore import SoftKeyStore
from rsachunk.keystore import Status
from rsachunk.pem import decode_pem
from rsachunk.pem import encode_pem

__version__ = "0.1.0"
__all__ = [
    "RSAKeyring",
    "encrypt_with_public_key_pem",
    "decrypt_with_private_key_pem",
    "KeyStore",
    "SoftKeyStore",
    "KeyClass",
    "Status",
    "decode_pem",
    "encode_pem",
    "strip_public_key_header",
    "encode_public_key",
    "encrypt_blocks",
    "decrypt_blocks",
    "RSAChunkError",
    "FormatError",
    "StoreError",
    "CipherError",
    "PrimitiveError",
]
