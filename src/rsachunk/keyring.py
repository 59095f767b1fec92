"""Key import and chunked RSA operations scoped to a keyring.

An RSAKeyring registers every key it imports with its key-store under a fresh tag and removes all of those tags again
when it is closed. Use it as a context manager so the key-store is cleaned up on every exit path.

Typical usage example:

    with RSAKeyring() as ring:
        pub = ring.import_public_key_pem(public_pem)
        c = ring.encrypt(pub, b"Hi there!")

    c = encrypt_with_public_key_pem(b"Hi there!", public_pem)
    r = decrypt_with_private_key_pem(c, private_pem)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import typing
import uuid

from rsachunk import cipher
from rsachunk import der
from rsachunk import pem
from rsachunk.errors import StoreError
from rsachunk.keystore import KeyClass
from rsachunk.keystore import KeyStore
from rsachunk.keystore import SoftKeyStore
from rsachunk.keystore import Status

_logger = logging.getLogger(__name__)


class RSAKeyring:
    """Imports keys into a key-store and owns their registrations.

    Attributes:
        store: The key-store the keys are registered with.
    """

    def __init__(self, store: KeyStore | None = None) -> None:
        """Initialize the keyring.

        Args:
            store: The key-store to use. Defaults to a fresh SoftKeyStore.
        """
        self.store: KeyStore = store if store is not None else SoftKeyStore()
        self._tags: dict[str, None] = {}

    def __enter__(self) -> "RSAKeyring":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def tags(self) -> tuple[str, ...]:
        """Tags currently registered by this keyring, in import order."""
        return tuple(self._tags)

    def import_key(self, data: bytes, is_public: bool) -> typing.Any:
        """Registers DER key bytes with the key-store.

        Public keys have their X.509 header stripped first; private keys are passed through unmodified.

        Args:
            data: The DER encoded key.
            is_public: Whether the key is a public key.

        Returns:
            The key-store handle for the key.

        Raises:
            FormatError: If a public key has a malformed header.
            StoreError: If the key-store rejects the key or returns no handle for it.
        """
        if is_public:
            data = der.strip_public_key_header(data)
        key_class = KeyClass.PUBLIC if is_public else KeyClass.PRIVATE
        tag = str(uuid.uuid4())
        self.store.remove(tag)
        status = self.store.register(tag, data, key_class)
        if status is Status.DUPLICATE:
            _logger.warning("Key-store already holds tag %s, reusing it", tag)
        elif status is not Status.SUCCESS:
            raise StoreError("Provided key couldn't be added to the key-store", tag, status)
        self._tags[tag] = None
        handle = self.store.lookup(tag, key_class)
        if handle is None:
            raise StoreError("Couldn't get key reference from the key-store", tag)
        _logger.debug("Imported %s key under tag %s", key_class.value, tag)
        return handle

    def import_public_key_der(self, data: bytes) -> typing.Any:
        """Imports a DER public key, headerless or X.509 wrapped."""
        return self.import_key(data, True)

    def import_public_key_pem(self, text: str) -> typing.Any:
        """Imports a PEM public key, headerless or X.509 wrapped."""
        return self.import_key(pem.decode_pem(text), True)

    def import_private_key_pem(self, text: str) -> typing.Any:
        """Imports a PEM private key."""
        return self.import_key(pem.decode_pem(text), False)

    def encrypt(self, handle: typing.Any, plaintext: bytes) -> bytes:
        """Encrypts a payload of any length, one padded block per chunk.

        Args:
            handle: A public (or private) key handle returned by one of the import methods.
            plaintext: The payload to encrypt.

        Returns:
            The concatenated ciphertext blocks.

        Raises:
            CipherError: If a chunk fails to encrypt. Its `offset` is the start of that chunk in `plaintext`.
        """
        return cipher.encrypt_blocks(self.store, handle, plaintext)

    def decrypt(self, handle: typing.Any, ciphertext: bytes) -> bytes:
        """Decrypts a payload produced by `encrypt`.

        Args:
            handle: A private key handle returned by `import_private_key_pem` or `import_key`.
            ciphertext: The payload to decrypt.

        Returns:
            The concatenated cleartext.

        Raises:
            CipherError: If a block fails to decrypt. Its `offset` is the start of that block in `ciphertext`.
        """
        return cipher.decrypt_blocks(self.store, handle, ciphertext)

    def close(self) -> None:
        """Removes every key this keyring registered. Safe to call more than once."""
        while self._tags:
            tag = next(iter(self._tags))
            self.store.remove(tag)
            del self._tags[tag]
            _logger.debug("Removed tag %s", tag)


def encrypt_with_public_key_pem(plaintext: bytes, public_key: str, store: KeyStore | None = None) -> bytes:
    """Encrypts a payload of any length with a PEM public key.

    Args:
        plaintext: The payload to encrypt.
        public_key: The PEM encoded public key.
        store: The key-store to use. Defaults to a fresh SoftKeyStore.

    Returns:
        The ciphertext.
    """
    with RSAKeyring(store) as ring:
        handle = ring.import_public_key_pem(public_key)
        return ring.encrypt(handle, plaintext)


def decrypt_with_private_key_pem(ciphertext: bytes, private_key: str, store: KeyStore | None = None) -> bytes:
    """Decrypts a payload produced by `encrypt_with_public_key_pem`.

    Args:
        ciphertext: The payload to decrypt.
        private_key: The PEM encoded private key.
        store: The key-store to use. Defaults to a fresh SoftKeyStore.

    Returns:
        The cleartext.
    """
    with RSAKeyring(store) as ring:
        handle = ring.import_private_key_pem(private_key)
        return ring.decrypt(handle, ciphertext)
