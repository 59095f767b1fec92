"""Block-chunked RSA encryption and decryption.

RSA can only process one modulus-sized block at a time, so arbitrary-length payloads are split into chunks, each chunk
is handed to the key-store primitive and the resulting blocks are concatenated. With PKCS#1 v1.5 padding every
encrypted chunk carries 11 bytes of overhead, so a plaintext chunk holds at most `block_size - 11` bytes and every
ciphertext chunk is exactly `block_size` bytes.

Typical usage example:

    c = encrypt_blocks(store, pub_handle, b"A" * 300)
    r = decrypt_blocks(store, priv_handle, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from math import ceil
import typing
import warnings

from rsachunk.errors import CipherError
from rsachunk.errors import PrimitiveError
from rsachunk.keystore import KeyStore

_logger = logging.getLogger(__name__)

PADDING_OVERHEAD = 11


def max_chunk_size(block_size: int) -> int:
    """Largest plaintext chunk that fits a single padded block."""
    return block_size - PADDING_OVERHEAD


def encrypted_size(length: int, block_size: int) -> int:
    """Returns the ciphertext length produced for a plaintext of `length` bytes."""
    return ceil(length / max_chunk_size(block_size)) * block_size


def encrypt_blocks(store: KeyStore, handle: typing.Any, plaintext: bytes) -> bytes:
    """Encrypts a payload of any length, one padded block at a time.

    Args:
        store: The key-store holding the key.
        handle: Handle of a public key, as issued by `store`.
        plaintext: The payload to encrypt.

    Returns:
        The concatenated ciphertext blocks.

    Raises:
        CipherError: If the block size leaves no room for data, or a chunk fails to encrypt.
    """
    block_size = store.block_size(handle)
    max_chunk = max_chunk_size(block_size)
    if max_chunk <= 0:
        raise CipherError(f"Block size {block_size} leaves no room for padded data", 0)
    encrypted = []
    for idx in range(0, len(plaintext), max_chunk):
        chunk = plaintext[idx:idx + max_chunk]
        try:
            block = store.primitive_encrypt(handle, chunk)
        except PrimitiveError as exc:
            raise CipherError("Couldn't encrypt chunk", idx) from exc
        if len(block) != block_size:
            raise CipherError(f"Encrypted chunk is {len(block)} bytes instead of {block_size}", idx)
        encrypted.append(block)
    _logger.debug("Encrypted %d bytes into %d blocks of %d bytes", len(plaintext), len(encrypted), block_size)
    return b"".join(encrypted)


def decrypt_blocks(store: KeyStore, handle: typing.Any, ciphertext: bytes) -> bytes:
    """Decrypts a payload produced by `encrypt_blocks`.

    A ciphertext whose length is not a multiple of the block size is still processed, its short final chunk being
    passed to the primitive as is. A RuntimeWarning is issued in that case.

    Args:
        store: The key-store holding the key.
        handle: Handle of a private key, as issued by `store`.
        ciphertext: The payload to decrypt.

    Returns:
        The concatenated cleartext.

    Raises:
        CipherError: If a chunk fails to decrypt, or the key-store reports a cleartext length outside the returned
            buffer.
    """
    block_size = store.block_size(handle)
    if block_size <= 0:
        raise CipherError(f"Invalid block size {block_size}", 0)
    if len(ciphertext) % block_size:
        warnings.warn(f"Ciphertext length {len(ciphertext)} is not a multiple of block size {block_size}.",
                      RuntimeWarning)
    decrypted = []
    for idx in range(0, len(ciphertext), block_size):
        chunk = ciphertext[idx:idx + block_size]
        try:
            buffer, length = store.primitive_decrypt(handle, chunk)
        except PrimitiveError as exc:
            raise CipherError("Couldn't decrypt chunk", idx) from exc
        if not 0 <= length <= min(len(buffer), block_size):
            raise CipherError(f"Decrypted chunk reports invalid length {length}", idx)
        decrypted.append(buffer[:length])
    _logger.debug("Decrypted %d blocks of %d bytes", len(decrypted), block_size)
    return b"".join(decrypted)
