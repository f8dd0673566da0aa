"""
Shared pytest fixtures for the Passbook test suite.

Every test that touches the filesystem gets its own config directory under
``tmp_path`` so nothing is written to the real ``~/.passbook``.
"""

import pytest

from passbook.crypto import SecretCodec
from passbook.session import VaultSession
from passbook.storage import VaultStore


@pytest.fixture
def codec():
    return SecretCodec()


@pytest.fixture
def store(codec):
    """An empty vault store."""
    return VaultStore(codec=codec)


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / "config"
    return str(path)


@pytest.fixture
def session(config_dir, codec):
    """A session whose settings and accounts live under tmp_path."""
    s = VaultSession(config_dir=config_dir, codec=codec)
    s.reload()
    return s
