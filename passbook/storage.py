"""
In-memory account vault for the password manager.

The vault is an ordered list of named accounts. Each account holds at most
one encoded secret, encrypted under whatever password the user gave for it,
so the store never holds a key. Persisting the serialized text is left to
the caller (see ``vault_manager`` and ``session``).
"""

import threading
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Any

from . import config
from .crypto import SecretCodec
from .exceptions import NoSecretError, NotFoundError, RangeError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountRecord:
    """Represents a single account in the vault."""
    name: str
    secret: Optional[str] = None

    @property
    def has_secret(self) -> bool:
        return bool(self.secret)

    def to_line(self) -> str:
        """Render as one persisted line: ``name,encodedSecretOrEmpty``."""
        return f"{self.name}{config.RECORD_FIELD_DELIMITER}{self.secret or ''}"

    @classmethod
    def from_line(cls, line: str) -> Optional['AccountRecord']:
        """Parse one persisted line, or return None if it has no comma."""
        name, sep, remainder = line.partition(config.RECORD_FIELD_DELIMITER)
        if not sep:
            return None
        return cls(name=name.strip(), secret=remainder.strip() or None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display or export."""
        return asdict(self)


def parse_records(text: str) -> List[AccountRecord]:
    """Parse persisted text into records, skipping lines without a comma."""
    records = []
    if not text.strip():
        return records
    # Only "\n" ends a record; other Unicode line breaks may appear in names.
    for lineno, line in enumerate(text.split(config.RECORD_LINE_SEPARATOR), start=1):
        line = line[:-1] if line.endswith("\r") else line
        if not line.strip():
            continue
        record = AccountRecord.from_line(line)
        if record is None:
            logger.debug(f"Skipping malformed vault line {lineno}: no field delimiter")
            continue
        records.append(record)
    return records


def serialize_records(records: Iterable[AccountRecord]) -> str:
    """Render records as newline-joined ``name,secret`` lines, in order."""
    return config.RECORD_LINE_SEPARATOR.join(r.to_line() for r in records)


class VaultStore:
    """Manages the ordered account list of one vault session."""

    def __init__(self, records: Optional[Iterable[AccountRecord]] = None,
                 codec: Optional[SecretCodec] = None):
        """
        Initialize the store.
        Args:
            records: Initial accounts, in order
            codec: Codec used for secrets (a fresh SecretCodec by default)
        """
        self.codec = codec or SecretCodec()
        self._lock = threading.Lock()
        self._records: List[AccountRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: str) -> bool:
        return self._index_of(name) is not None

    @property
    def records(self) -> List[AccountRecord]:
        """A copy of the accounts, in order."""
        with self._lock:
            return self._records.copy()

    def names(self) -> List[str]:
        return [r.name for r in self.records]

    def get(self, name: str) -> AccountRecord:
        """
        Look up an account by name.
        Raises:
            NotFoundError: If there is no such account
        """
        with self._lock:
            index = self._index_of(name)
            if index is None:
                raise NotFoundError(f"No account named '{name}'")
            return self._records[index]

    def copy(self) -> 'VaultStore':
        """Return an independent store with the same accounts and codec."""
        return VaultStore(self.records, codec=self.codec)

    def load(self, persisted_text: str) -> List[AccountRecord]:
        """
        Rebuild the vault from persisted text.
        Args:
            persisted_text: Text produced by :meth:`serialize`
        Returns:
            The loaded accounts
        """
        records = parse_records(persisted_text)
        self.replace_all(records)
        logger.info(f"Loaded {len(records)} account(s)")
        return records

    def replace_all(self, records: Iterable[AccountRecord]) -> None:
        """Replace every account at once."""
        with self._lock:
            self._records = list(records)

    def serialize(self, records: Optional[Iterable[AccountRecord]] = None) -> str:
        """Serialize ``records`` (the current accounts by default)."""
        return serialize_records(self.records if records is None else records)

    def create(self, name: str, plaintext: Optional[str] = None,
               password: Optional[str] = None) -> List[AccountRecord]:
        """
        Append a new account.
        Args:
            name: Unique account name
            plaintext: Optional secret to encrypt; empty means no secret
            password: Password for the secret, required with ``plaintext``
        Returns:
            The updated accounts
        Raises:
            ValidationError: On a bad or duplicate name or a missing password
        """
        name = self._clean_name(name)
        secret = self._encode_secret(plaintext, password)
        with self._lock:
            if self._index_of(name) is not None:
                raise ValidationError(f"An account named '{name}' already exists")
            self._records.append(AccountRecord(name=name, secret=secret))
            logger.info(f"Account created: {name}")
            return self._records.copy()

    def update(self, old_name: str, new_name: str, plaintext: Optional[str] = None,
               password: Optional[str] = None) -> List[AccountRecord]:
        """
        Rename an account and optionally replace its secret, in place.

        Without a new ``plaintext`` the stored secret is kept unchanged.

        Raises:
            NotFoundError: If ``old_name`` does not exist
            ValidationError: On a bad or colliding name or a missing password
        """
        new_name = self._clean_name(new_name)
        secret = self._encode_secret(plaintext, password)
        with self._lock:
            index = self._index_of(old_name)
            if index is None:
                raise NotFoundError(f"No account named '{old_name}'")
            other = self._index_of(new_name)
            if other is not None and other != index:
                raise ValidationError(f"An account named '{new_name}' already exists")
            if secret is None:
                secret = self._records[index].secret
            self._records[index] = AccountRecord(name=new_name, secret=secret)
            logger.info(f"Account updated: {old_name} -> {new_name}")
            return self._records.copy()

    def remove(self, name: str) -> List[AccountRecord]:
        """Delete an account. Does nothing if it does not exist."""
        with self._lock:
            index = self._index_of(name)
            if index is not None:
                del self._records[index]
                logger.info(f"Account removed: {name}")
            return self._records.copy()

    def reorder(self, from_index: int, to_index: int) -> List[AccountRecord]:
        """
        Move one account to a new position, shifting the ones in between.
        Raises:
            RangeError: If either index is out of bounds
        """
        with self._lock:
            size = len(self._records)
            for index in (from_index, to_index):
                if not 0 <= index < size:
                    raise RangeError(f"Index {index} out of range for {size} account(s)")
            if from_index != to_index:
                record = self._records.pop(from_index)
                self._records.insert(to_index, record)
            return self._records.copy()

    def reveal(self, name: str, password: str) -> str:
        """
        Decrypt the secret of one account.
        Raises:
            NotFoundError: If there is no such account
            NoSecretError: If the account has no stored secret
            FormatError, AuthenticationError: From the codec, unchanged
        """
        record = self.get(name)
        if not record.has_secret:
            raise NoSecretError(f"Account '{name}' has no stored secret")
        return self.codec.decode(record.secret, password)

    def _index_of(self, name: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.name == name:
                return i
        return None

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        if any(c in name for c in config.FORBIDDEN_NAME_CHARS):
            raise ValidationError("Account name may not contain commas or line breaks")
        return name

    def _encode_secret(self, plaintext: Optional[str], password: Optional[str]) -> Optional[str]:
        # Encoding runs outside the lock; the KDF is slow.
        if not plaintext:
            return None
        if not password:
            raise ValidationError("A password is required to encrypt the secret")
        return self.codec.encode(plaintext, password)
