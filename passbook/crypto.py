"""
Cryptographic operations for the password vault.

Every secret is encrypted on its own under the password supplied with it:

    scrypt(password, salt) -> 32-byte key -> AES-256-CBC + PKCS7 padding

The result is stored as ``hex(salt):hex(iv):hex(ciphertext)``. There is no
vault-wide key, so nothing here keeps state between calls.

Security Note:
    Never log plaintext, passwords or derived keys.
"""

import os
import binascii
from typing import Tuple, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from cryptography.hazmat.backends import default_backend

from . import config
from .exceptions import AuthenticationError, FormatError


class SecretCodec:
    """Encodes and decodes individual account secrets."""

    # Constants
    SALT_SIZE = config.SALT_SIZE
    IV_SIZE = config.IV_SIZE
    KEY_SIZE = config.KEY_SIZE
    BLOCK_SIZE = config.BLOCK_SIZE
    DELIMITER = config.SECRET_FIELD_DELIMITER

    # KDF parameters
    SCRYPT_N = config.SCRYPT_N
    SCRYPT_R = config.SCRYPT_R
    SCRYPT_P = config.SCRYPT_P

    def __init__(self):
        """Initialize the codec."""
        self.backend = default_backend()

    def generate_salt(self) -> bytes:
        """Generate a cryptographically secure random salt."""
        return os.urandom(self.SALT_SIZE)

    def generate_iv(self) -> bytes:
        """Generate a cryptographically secure random IV."""
        return os.urandom(self.IV_SIZE)

    def derive_key(self, password: str, salt: bytes) -> bytes:
        """
        Derive an encryption key from a password using scrypt.

        Args:
            password: The password supplied for this secret
            salt: Random salt for key derivation

        Returns:
            32-byte encryption key
        """
        kdf = Scrypt(
            salt=salt,
            length=self.KEY_SIZE,
            n=self.SCRYPT_N,
            r=self.SCRYPT_R,
            p=self.SCRYPT_P,
            backend=self.backend
        )
        return kdf.derive(password.encode('utf-8'))

    def encrypt(self, plaintext: bytes, key: bytes, iv: bytes) -> bytes:
        """
        Encrypt data using AES-256-CBC with PKCS7 padding.

        Args:
            plaintext: Data to encrypt
            key: 32-byte encryption key
            iv: 16-byte initialization vector

        Returns:
            Ciphertext, a multiple of the block size
        """
        padder = padding.PKCS7(self.BLOCK_SIZE * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()
        cipher = Cipher(algorithms.AES(key), modes.CBC(iv), backend=self.backend)
        encryptor = cipher.encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
        """
        Decrypt data using AES-256-CBC and strip the PKCS7 padding.

        Raises:
            AuthenticationError: If the padding is invalid
        """
        cipher = Cipher(algorithms.AES(key), modes.CBC(iv), backend=self.backend)
        decryptor = cipher.decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(self.BLOCK_SIZE * 8).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            raise AuthenticationError("Invalid padding after decryption") from e

    def encode(self, plaintext: Union[str, bytes], password: str) -> str:
        """
        Encrypt a secret under ``password``.

        Salt and IV are fresh for every call, so encoding the same input
        twice never gives the same string.

        Args:
            plaintext: Secret text, or its UTF-8 bytes
            password: Password protecting this secret

        Returns:
            ``hex(salt):hex(iv):hex(ciphertext)``
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode('utf-8')
        salt = self.generate_salt()
        key = self.derive_key(password, salt)
        iv = self.generate_iv()
        ciphertext = self.encrypt(plaintext, key, iv)
        return self.DELIMITER.join(part.hex() for part in (salt, iv, ciphertext))

    def decode(self, encoded: str, password: str) -> str:
        """
        Decrypt a secret produced by :meth:`encode`.

        Args:
            encoded: ``hex(salt):hex(iv):hex(ciphertext)``
            password: Password the secret was encoded with

        Returns:
            The original secret text

        Raises:
            FormatError: If ``encoded`` is structurally invalid
            AuthenticationError: If the password is wrong or the data was altered
        """
        salt, iv, ciphertext = self.parse(encoded)
        key = self.derive_key(password, salt)
        plaintext = self.decrypt(ciphertext, key, iv)
        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError as e:
            raise AuthenticationError("Decrypted data is not valid UTF-8") from e

    def parse(self, encoded: str) -> Tuple[bytes, bytes, bytes]:
        """
        Split an encoded secret into salt, IV and ciphertext bytes.

        Raises:
            FormatError: On a wrong field count, bad hex or bad lengths
        """
        parts = encoded.split(self.DELIMITER)
        if len(parts) != 3:
            raise FormatError(
                f"Expected 3 '{self.DELIMITER}'-separated fields, got {len(parts)}"
            )

        salt = _unhex(parts[0], "salt")
        if len(salt) != self.SALT_SIZE:
            raise FormatError(f"Invalid salt length: {len(salt)} bytes (expected {self.SALT_SIZE})")

        iv = _unhex(parts[1], "iv")
        if len(iv) != self.IV_SIZE:
            raise FormatError(f"Invalid iv length: {len(iv)} bytes (expected {self.IV_SIZE})")

        ciphertext = _unhex(parts[2], "ciphertext")
        if not ciphertext or len(ciphertext) % self.BLOCK_SIZE:
            raise FormatError(
                f"Invalid ciphertext length: {len(ciphertext)} bytes "
                f"(must be a positive multiple of {self.BLOCK_SIZE})"
            )
        return salt, iv, ciphertext


def _unhex(field: str, label: str) -> bytes:
    try:
        return binascii.unhexlify(field)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"Field '{label}' is not valid hex") from e


_default_codec = SecretCodec()


def encode(plaintext: Union[str, bytes], password: str) -> str:
    """Encrypt ``plaintext`` under ``password`` with the shared codec."""
    return _default_codec.encode(plaintext, password)


def decode(encoded: str, password: str) -> str:
    """Decrypt ``encoded`` with ``password`` using the shared codec."""
    return _default_codec.decode(encoded, password)
