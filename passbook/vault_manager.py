import os
import json
import shutil
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from . import config
from .utils import set_owner_only_permissions

logger = logging.getLogger(__name__)


@dataclass
class AppSettings:
    """User settings stored in ``settings.json``."""
    storage_path: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config_dir: Optional[str] = None) -> 'AppSettings':
        storage_path = data.get("storage_path") or config.default_storage_path(config_dir)
        return cls(storage_path=storage_path)

    @classmethod
    def default(cls, config_dir: Optional[str] = None) -> 'AppSettings':
        return cls(storage_path=config.default_storage_path(config_dir))


def _settings_file(config_dir: Optional[str]) -> str:
    return os.path.join(config_dir or config.default_config_dir(), config.SETTINGS_FILE)


def get_settings(config_dir: Optional[str] = None) -> AppSettings:
    """
    Loads the settings from the configuration directory.
    Falls back to defaults if the file is missing or cannot be parsed.
    """
    settings_file = _settings_file(config_dir)
    if not os.path.exists(settings_file):
        return AppSettings.default(config_dir)

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings must be a JSON object")
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read settings from {settings_file}, using defaults: {e}")
        return AppSettings.default(config_dir)
    return AppSettings.from_dict(data, config_dir)


def save_settings(settings: AppSettings, config_dir: Optional[str] = None) -> None:
    """
    Saves the settings to the configuration directory, creating it if needed.
    """
    settings_file = _settings_file(config_dir)
    os.makedirs(os.path.dirname(settings_file), exist_ok=True)
    with open(settings_file, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)
    logger.info(f"Settings saved to {settings_file}")


def get_accounts_path(config_dir: Optional[str] = None) -> str:
    """Path of the accounts file under the configured storage directory."""
    return os.path.join(get_settings(config_dir).storage_path, config.ACCOUNTS_FILE)


def read_accounts_file(config_dir: Optional[str] = None) -> str:
    """
    Reads the persisted account list.
    Returns an empty string if the file does not exist yet; any other
    failure is raised to the caller.
    """
    accounts_file = get_accounts_path(config_dir)
    if not os.path.exists(accounts_file):
        return ""
    with open(accounts_file, 'r', encoding='utf-8') as f:
        return f.read()


def write_accounts_file(content: str, config_dir: Optional[str] = None) -> None:
    """
    Replaces the persisted account list with ``content``.
    The text is written to a temporary sibling first and then moved over the
    target, so a failed write never leaves a partial file behind.
    """
    accounts_file = get_accounts_path(config_dir)
    os.makedirs(os.path.dirname(accounts_file), exist_ok=True)
    tmp_file = accounts_file + config.TEMP_FILE_SUFFIX

    try:
        with open(tmp_file, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        shutil.move(tmp_file, accounts_file)
    except OSError as e:
        logger.error(f"Error saving accounts file {accounts_file}: {e}", exc_info=True)
        if os.path.exists(tmp_file):
            os.remove(tmp_file)
        raise

    if not set_owner_only_permissions(accounts_file):
        logger.warning(f"Failed to set secure file permissions for accounts file: {accounts_file}")
