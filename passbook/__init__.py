"""
Passbook Password Vault

THREAT MODEL:
Protects account secrets at rest inside a local file. Every secret is
encrypted on its own under the password the user supplied for it; there is
no vault-wide master key. Decrypted values exist in process memory while in
use, and nothing here defends against code running inside the same process.
"""

from .crypto import SecretCodec, encode, decode
from .storage import AccountRecord, VaultStore
from .session import RevealedSecret, VaultSession
from .exceptions import (
    VaultError,
    CodecError,
    FormatError,
    AuthenticationError,
    ValidationError,
    NotFoundError,
    NoSecretError,
    RangeError,
)

__version__ = "1.0"
