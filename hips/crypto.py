"""Cryptographic operations for secrets encryption/decryption."""

from __future__ import annotations

import base64
import binascii
import os
from abc import ABC, abstractmethod

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import AuthenticationFailure, DecodingError
from .schema import Encrypted, Secret

ITERATIONS = 100_000
KEY_LEN = 32  # AES-256
SALT_SIZE = 32
NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16


class Encrypter(ABC):
    """Turns plaintext secrets into encrypted records and back."""

    @abstractmethod
    def encrypt(self, secret: Secret) -> Encrypted:
        """Encrypt a secret. Fails only if the random source fails."""

    @abstractmethod
    def decrypt(self, record: Encrypted) -> Secret:
        """
        Decrypt a record.

        Raises:
            AuthenticationFailure: wrong password, tampering or corruption
            DecodingError: malformed base64 or non UTF-8 plaintext
        """


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a 32-byte key from password using PBKDF2-HMAC-SHA256."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LEN,
        salt=salt,
        iterations=ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def pack(nonce: bytes, tag: bytes, ciphertext: bytes) -> str:
    """Bundle nonce, tag and ciphertext, in that order, as base64."""
    return base64.b64encode(nonce + tag + ciphertext).decode("ascii")


def unpack(blob: str) -> tuple[bytes, bytes, bytes]:
    """Split a packed base64 bundle into (nonce, tag, ciphertext)."""
    data = _b64decode(blob, "ciphertext")
    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise DecodingError(
            f"ciphertext too short: {len(data)} bytes "
            f"(minimum {NONCE_SIZE + TAG_SIZE})"
        )
    nonce = data[:NONCE_SIZE]
    tag = data[NONCE_SIZE : NONCE_SIZE + TAG_SIZE]
    return nonce, tag, data[NONCE_SIZE + TAG_SIZE :]


def _b64decode(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodingError(f"decoding {what}: {e}") from e


class AESGCMEncrypter(Encrypter):
    """
    AES-256-GCM with a PBKDF2 key derived per secret.

    Every call to encrypt draws a fresh salt and nonce, so the same
    plaintext never yields the same record twice.
    """

    def __init__(self, password: str):
        self.password = password

    def __repr__(self) -> str:
        return f"{type(self).__name__}(password=***)"

    def encrypt(self, secret: Secret) -> Encrypted:
        salt = os.urandom(SALT_SIZE)
        nonce = os.urandom(NONCE_SIZE)

        key = derive_key(self.password, salt)
        sealed = AESGCM(key).encrypt(nonce, secret.secret.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

        return Encrypted(
            name=secret.name,
            secret=pack(nonce, tag, ciphertext),
            salt=base64.b64encode(salt).decode("ascii"),
        )

    def decrypt(self, record: Encrypted) -> Secret:
        nonce, tag, ciphertext = unpack(record.secret)
        salt = _b64decode(record.salt, "salt")

        key = derive_key(self.password, salt)
        try:
            plaintext = AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as e:
            raise AuthenticationFailure(
                "authentication failed (wrong password or corrupted data)"
            ) from e

        try:
            value = plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"loading as utf8: {e}") from e
        return Secret(name=record.name, secret=value)
