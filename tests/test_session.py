# Tests for VaultSession: staged writes, reload, navigation and reveal

import pytest

from passbook import vault_manager
from passbook.exceptions import (
    AuthenticationError,
    NoSecretError,
    NotFoundError,
    ValidationError,
)
from passbook.session import VaultSession


class TestPersistence:
    def test_every_mutation_is_written(self, session, config_dir):
        session.create("alpha")
        session.create("beta", "s3cret", "pw")
        session.reorder(1, 0)
        session.update("alpha", "alpha2")
        session.remove("beta")
        assert vault_manager.read_accounts_file(config_dir) == "alpha2,"

    def test_reload_restores_order_and_secrets(self, session, config_dir, codec):
        session.create("one", "first", "pw1")
        session.create("two")
        session.create("three", "third", "pw3")
        session.reorder(2, 0)

        fresh = VaultSession(config_dir=config_dir, codec=codec)
        fresh.reload()
        assert [r.name for r in fresh.records] == ["three", "one", "two"]
        assert fresh.store.reveal("one", "pw1") == "first"
        assert fresh.store.reveal("three", "pw3") == "third"

    def test_failed_write_leaves_memory_unchanged(self, session, monkeypatch):
        session.create("alpha")

        def fail(content, config_dir=None):
            raise OSError("read-only filesystem")

        monkeypatch.setattr(vault_manager, "write_accounts_file", fail)
        with pytest.raises(OSError):
            session.create("beta")
        with pytest.raises(OSError):
            session.remove("alpha")
        assert [r.name for r in session.records] == ["alpha"]

    def test_validation_error_skips_write(self, session, config_dir):
        session.create("alpha")
        with pytest.raises(ValidationError):
            session.create("alpha")
        assert vault_manager.read_accounts_file(config_dir) == "alpha,"

    def test_reload_propagates_read_errors(self, session, monkeypatch):
        session.create("alpha")

        def fail(config_dir=None):
            raise OSError("permission denied")

        monkeypatch.setattr(vault_manager, "read_accounts_file", fail)
        with pytest.raises(OSError):
            session.reload()
        assert [r.name for r in session.records] == ["alpha"]

    def test_change_storage_path_reloads(self, session, config_dir, tmp_path):
        session.create("old-location")
        records = session.change_storage_path(str(tmp_path / "new"))
        assert records == []
        assert vault_manager.get_settings(config_dir).storage_path == str(tmp_path / "new")
        session.create("new-location")
        assert (tmp_path / "new" / "accounts.csv").read_text(encoding="utf-8") == "new-location,"


class TestReveal:
    def test_reveal_selected(self, session):
        session.create("mail", "hunter2", "master")
        session.select("mail")
        revealed = session.reveal("master")
        assert revealed.plaintext == "hunter2"
        assert session.revealed is revealed
        assert "hunter2" not in repr(revealed)

    def test_navigation_clears_revealed(self, session):
        session.create("mail", "hunter2", "master")
        session.create("bank", "1234", "master")
        session.select("mail")
        session.reveal("master")
        session.select("bank")
        assert session.revealed is None
        session.reveal("master")
        session.back()
        assert session.revealed is None
        assert session.selected is None

    def test_wrong_password_keeps_nothing(self, session):
        session.create("mail", "hunter2", "master")
        session.select("mail")
        with pytest.raises(AuthenticationError):
            session.reveal("wrong_password")
        assert session.revealed is None

    def test_reveal_requires_selection(self, session):
        with pytest.raises(NotFoundError):
            session.reveal("pw")

    def test_no_secret(self, session):
        session.create("bare")
        session.select("bare")
        with pytest.raises(NoSecretError):
            session.reveal("pw")

    def test_select_missing(self, session):
        with pytest.raises(NotFoundError):
            session.select("nope")

    def test_rename_follows_selection(self, session):
        session.create("mail", "hunter2", "master")
        session.select("mail")
        session.update("mail", "email")
        assert session.selected == "email"

    def test_rename_selected_to_padded_name(self, session, config_dir):
        session.create("mail")
        session.select("mail")
        session.update("mail", "  email  ")
        assert session.selected == "email"
        assert vault_manager.read_accounts_file(config_dir) == "email,"

    def test_remove_selected_goes_back(self, session):
        session.create("mail")
        session.select("mail")
        session.remove("mail")
        assert session.selected is None
