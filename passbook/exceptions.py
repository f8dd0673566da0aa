"""
Exception types raised by the Passbook codec and vault store.

None of these are fatal; callers display the message and let the user retry.
I/O failures are left as the OSError raised by the filesystem.
"""

from . import config


class VaultError(Exception):
    """Base class for every error raised by Passbook."""


class CodecError(VaultError):
    """A secret could not be decoded.

    Subclasses keep the precise reason for logs and tests, while
    ``public_message`` is the same for all of them.
    """

    public_message = config.DECRYPT_FAILED_MESSAGE


class FormatError(CodecError, ValueError):
    """The encoded secret is structurally invalid (fields, hex, lengths)."""


class AuthenticationError(CodecError):
    """Wrong password or tampered ciphertext."""


class ValidationError(VaultError, ValueError):
    """Caller input was rejected (empty or duplicate name, missing password)."""


class NotFoundError(VaultError, LookupError):
    """No account with the requested name exists."""


class NoSecretError(VaultError):
    """The account exists but has no stored secret."""


class RangeError(VaultError, IndexError):
    """A reorder index is outside the vault."""
