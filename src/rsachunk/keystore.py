"""The key-store capability that owns RSA key material and performs the RSA primitive.

rsachunk never performs modular exponentiation or padding itself. Instead, keys are registered with a KeyStore under
a tag and referenced through the opaque handle the store gives back. Any platform keychain, HSM or remote KMS can be
plugged in by implementing KeyStore; SoftKeyStore is the in-process default backed by the `cryptography` library.

Typical usage example:

    store = SoftKeyStore()
    store.register("tag", der, KeyClass.PUBLIC)
    handle = store.lookup("tag", KeyClass.PUBLIC)
    block = store.primitive_encrypt(handle, b"Hi there!")
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import abc
import enum
import logging
import typing

from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.native import encoder as localize
from pyasn1_modules import rfc5208
from pyasn1_modules import rfc8017

from rsachunk.errors import PrimitiveError

_logger = logging.getLogger(__name__)


class KeyClass(enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Status(enum.Enum):
    """Outcome of a key registration."""
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    ERROR = "error"


class KeyStore(abc.ABC):
    """Interface of an RSA key-store.

    Handles are opaque to callers; only the store that issued a handle may interpret it. Primitive operations signal
    failure by raising PrimitiveError.
    """

    @abc.abstractmethod
    def block_size(self, handle: typing.Any) -> int:
        """Returns the block size of the key, in bytes."""

    @abc.abstractmethod
    def register(self, tag: str, key_bytes: bytes, key_class: KeyClass) -> Status:
        """Registers DER key bytes under `tag`."""

    @abc.abstractmethod
    def lookup(self, tag: str, key_class: KeyClass) -> typing.Any | None:
        """Returns a handle for the key registered under `tag`, or None if there is none."""

    @abc.abstractmethod
    def remove(self, tag: str) -> None:
        """Removes the key registered under `tag`. Missing tags are ignored."""

    @abc.abstractmethod
    def primitive_encrypt(self, handle: typing.Any, block: bytes) -> bytes:
        """Encrypts a single block, returning exactly `block_size(handle)` bytes."""

    @abc.abstractmethod
    def primitive_decrypt(self, handle: typing.Any, block: bytes) -> tuple[bytes, int]:
        """Decrypts a single block, returning a buffer and the number of meaningful bytes in it."""


class SoftKeyHandle(typing.NamedTuple):
    tag: str
    key_class: KeyClass
    key: rsa.RSAPublicKey | rsa.RSAPrivateKey


def load_public_key(key_bytes: bytes) -> rsa.RSAPublicKey:
    """Builds a public key from headerless PKCS#1 DER.

    Args:
        key_bytes: DER encoded RSAPublicKey.

    Returns:
        The cryptography public key.

    Raises:
        ValueError: If the bytes are not a valid RSAPublicKey.
    """
    keydata, rest = decoder.decode(key_bytes, asn1Spec=rfc8017.RSAPublicKey())
    if rest:
        raise ValueError("Trailing data after RSAPublicKey")
    pykeyd = localize.encode(keydata)
    return rsa.RSAPublicNumbers(pykeyd["publicExponent"], pykeyd["modulus"]).public_key()


def load_private_key(key_bytes: bytes) -> rsa.RSAPrivateKey:
    """Builds a private key from PKCS#1 DER, or from PKCS#8 DER wrapping it.

    Args:
        key_bytes: DER encoded RSAPrivateKey or PrivateKeyInfo.

    Returns:
        The cryptography private key.

    Raises:
        ValueError: If the bytes are neither structure, or describe an unsupported key.
    """
    try:
        keydata, rest = decoder.decode(key_bytes, asn1Spec=rfc8017.RSAPrivateKey())
    except error.PyAsn1Error:
        wrapper, rest = decoder.decode(key_bytes, asn1Spec=rfc5208.PrivateKeyInfo())
        if wrapper["version"] != 0:
            raise ValueError("Unsupported version of private key information wrapper")
        if wrapper["privateKeyAlgorithm"]["algorithm"] != rfc8017.rsaEncryption:
            raise ValueError("Private Key Algorithm not supported.")
        keydata, _ = decoder.decode(wrapper["privateKey"], asn1Spec=rfc8017.RSAPrivateKey())
    if rest:
        raise ValueError("Trailing data after private key")
    if keydata["version"] != 0:
        raise ValueError("Multi-prime keys are not supported.")
    pykeyd = localize.encode(keydata)
    pubpart = rsa.RSAPublicNumbers(pykeyd["publicExponent"], pykeyd["modulus"])
    numbers = rsa.RSAPrivateNumbers(pykeyd["prime1"], pykeyd["prime2"], pykeyd["privateExponent"],
                                    pykeyd["exponent1"], pykeyd["exponent2"], pykeyd["coefficient"], pubpart)
    return numbers.private_key()


class SoftKeyStore(KeyStore):
    """In-memory key-store performing RSA through `cryptography`.

    Keys are held per instance, so independent stores never see each other's tags.

    Attributes:
        padding: The padding scheme both primitives use. PKCS#1 v1.5 unless another is given. The chunk engine
            reserves 11 bytes per block, so a scheme with a larger overhead, such as OAEP, only works for payloads
            short enough to fit its own limit. Longer ones fail with `PrimitiveError`.
    """

    def __init__(self, padding: asym_padding.AsymmetricPadding | None = None) -> None:
        self._keys: dict[str, SoftKeyHandle] = {}
        self.padding = padding if padding is not None else asym_padding.PKCS1v15()

    def __contains__(self, tag: str) -> bool:
        return tag in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def block_size(self, handle: SoftKeyHandle) -> int:
        return (handle.key.key_size + 7) // 8

    def register(self, tag: str, key_bytes: bytes, key_class: KeyClass) -> Status:
        if tag in self._keys:
            return Status.DUPLICATE
        try:
            if key_class is KeyClass.PUBLIC:
                key = load_public_key(key_bytes)
            else:
                key = load_private_key(key_bytes)
        except (error.PyAsn1Error, ValueError, TypeError) as exc:
            _logger.debug("Rejected %s key for tag %s: %s", key_class.value, tag, exc)
            return Status.ERROR
        self._keys[tag] = SoftKeyHandle(tag, key_class, key)
        return Status.SUCCESS

    def lookup(self, tag: str, key_class: KeyClass) -> SoftKeyHandle | None:
        handle = self._keys.get(tag)
        if handle is None or handle.key_class is not key_class:
            return None
        return handle

    def remove(self, tag: str) -> None:
        self._keys.pop(tag, None)

    def primitive_encrypt(self, handle: SoftKeyHandle, block: bytes) -> bytes:
        key = handle.key
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.public_key()
        try:
            return key.encrypt(block, self.padding)
        except ValueError as exc:
            raise PrimitiveError(f"Couldn't encrypt block of {len(block)} bytes") from exc

    def primitive_decrypt(self, handle: SoftKeyHandle, block: bytes) -> tuple[bytes, int]:
        if not isinstance(handle.key, rsa.RSAPrivateKey):
            raise PrimitiveError("Public keys cannot decrypt")
        try:
            clear = handle.key.decrypt(block, self.padding)
        except ValueError as exc:
            raise PrimitiveError(f"Couldn't decrypt block of {len(block)} bytes") from exc
        return clear, len(clear)
