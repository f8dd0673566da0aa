"""
Vault session: the store, its persisted file, and the revealed secret.

Each mutation runs against a staged copy of the vault. The copy is written
to disk and only then becomes the session's vault, so a failed write never
leaves memory ahead of the file.
"""

import threading
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from . import vault_manager
from .crypto import SecretCodec
from .exceptions import CodecError, NotFoundError
from .storage import AccountRecord, VaultStore

logger = logging.getLogger(__name__)


@dataclass
class RevealedSecret:
    """Plaintext of one account, held only until the user navigates away."""
    name: str
    plaintext: str

    def __repr__(self) -> str:
        return f"RevealedSecret(name={self.name!r}, plaintext=<hidden>)"


class VaultSession:
    """One user's view of a vault stored under a config directory."""

    def __init__(self, config_dir: Optional[str] = None, codec: Optional[SecretCodec] = None):
        self.config_dir = config_dir
        self.codec = codec or SecretCodec()
        self.store = VaultStore(codec=self.codec)
        self.selected: Optional[str] = None
        self.revealed: Optional[RevealedSecret] = None
        self._lock = threading.Lock()

    @property
    def records(self) -> List[AccountRecord]:
        return self.store.records

    def reload(self) -> List[AccountRecord]:
        """
        Re-read the accounts file into a fresh store.
        Read errors propagate; the current vault is kept in that case.
        """
        with self._lock:
            text = vault_manager.read_accounts_file(self.config_dir)
            store = VaultStore(codec=self.codec)
            store.load(text)
            self.store = store
            self.selected = None
            self.clear_revealed()
            return store.records

    def change_storage_path(self, storage_path: str) -> List[AccountRecord]:
        """Point the session at a new storage directory and reload from it."""
        settings = vault_manager.get_settings(self.config_dir)
        settings.storage_path = storage_path
        vault_manager.save_settings(settings, self.config_dir)
        logger.info(f"Storage path changed to {storage_path}")
        return self.reload()

    def create(self, name: str, plaintext: Optional[str] = None,
               password: Optional[str] = None) -> List[AccountRecord]:
        return self._commit(lambda store: store.create(name, plaintext, password))

    def update(self, old_name: str, new_name: str, plaintext: Optional[str] = None,
               password: Optional[str] = None) -> List[AccountRecord]:
        records = self._commit(lambda store: store.update(old_name, new_name, plaintext, password))
        if self.selected == old_name:
            self.select(new_name.strip())
        return records

    def remove(self, name: str) -> List[AccountRecord]:
        records = self._commit(lambda store: store.remove(name))
        if self.selected == name:
            self.back()
        return records

    def reorder(self, from_index: int, to_index: int) -> List[AccountRecord]:
        return self._commit(lambda store: store.reorder(from_index, to_index))

    def select(self, name: str) -> AccountRecord:
        """Open one account; any previously revealed secret is dropped."""
        record = self.store.get(name)
        self.clear_revealed()
        self.selected = record.name
        return record

    def back(self) -> None:
        """Leave the selected account."""
        self.clear_revealed()
        self.selected = None

    def reveal(self, password: str) -> RevealedSecret:
        """
        Decrypt the selected account's secret and keep it on the session.
        Raises:
            NotFoundError: If no account is selected
            NoSecretError, FormatError, AuthenticationError: From the store
        """
        if self.selected is None:
            raise NotFoundError("No account selected")
        self.clear_revealed()
        try:
            plaintext = self.store.reveal(self.selected, password)
        except CodecError as e:
            logger.debug(f"Reveal failed for {self.selected}: {type(e).__name__}")
            raise
        self.revealed = RevealedSecret(name=self.selected, plaintext=plaintext)
        return self.revealed

    def clear_revealed(self) -> None:
        self.revealed = None

    def _commit(self, mutate: Callable[[VaultStore], List[AccountRecord]]) -> List[AccountRecord]:
        with self._lock:
            staged = self.store.copy()
            records = mutate(staged)
            vault_manager.write_accounts_file(staged.serialize(), self.config_dir)
            self.store = staged
            return records
