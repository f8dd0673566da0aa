"""
Configuration constants for the Passbook password vault.
"""

import os

# Application Metadata
APP_VERSION = "1.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "Passbook"  # Use: Full name of the application. Type: str. Range: Any valid string.
APP_DESCRIPTION = "Local password vault with per-secret encryption"  # Use: One-line description shown in command-line help. Type: str. Range: Any valid string.

# Security Settings
SALT_SIZE = 16  # Use: Size of the random scrypt salt in bytes. Type: int. Range: Fixed at 16; part of the encoded secret format.
IV_SIZE = 16  # Use: Size of the AES-CBC initialization vector in bytes. Type: int. Range: Fixed at 16 (one AES block).
KEY_SIZE = 32  # Use: Size of the derived encryption key in bytes. Corresponds to AES-256. Type: int. Range: 32 bytes.
BLOCK_SIZE = 16  # Use: AES block size in bytes; ciphertext length must be a positive multiple of it. Type: int. Range: 16.
SCRYPT_N = 16384  # Use: scrypt CPU/memory cost parameter. Type: int. Range: Power of two; lowering it weakens every stored secret.
SCRYPT_R = 8  # Use: scrypt block size parameter. Type: int. Range: 8.
SCRYPT_P = 1  # Use: scrypt parallelization parameter. Type: int. Range: 1.
SECRET_FIELD_DELIMITER = ":"  # Use: Separator between the hex salt, IV and ciphertext of an encoded secret. Type: str. Range: ":" only; "_" joined values are rejected.
DECRYPT_FAILED_MESSAGE = "Failed to decrypt. Wrong password?"  # Use: Generic message shown for any decode failure, so callers never learn which check failed. Type: str. Range: Any descriptive string.

# Persisted Vault Format
RECORD_FIELD_DELIMITER = ","  # Use: Separator between the account name and its encoded secret on one persisted line. Type: str. Range: ",".
RECORD_LINE_SEPARATOR = "\n"  # Use: Separator between persisted account lines. Type: str. Range: "\n".
FORBIDDEN_NAME_CHARS = ",\r\n"  # Use: Characters an account name may not contain because they would break the line format. Type: str. Range: Any string of characters.

# File and Directory Names
CONFIG_DIR_NAME = ".passbook"  # Use: Name of the hidden directory within the user's home directory where Passbook stores its settings. Type: str. Range: Any valid directory name.
SETTINGS_FILE = "settings.json"  # Use: Filename for the JSON settings file inside the config directory. Type: str. Range: Any valid filename.
ACCOUNTS_FILE = "accounts.csv"  # Use: Filename for the persisted account list inside the storage directory. Type: str. Range: Any valid filename.
DEFAULT_STORAGE_DIR_NAME = "password"  # Use: Name of the default storage directory inside the config directory. Type: str. Range: Any valid directory name.
TEMP_FILE_SUFFIX = ".tmp"  # Use: Suffix of the sibling file written before atomically replacing a persisted file. Type: str. Range: Any valid filename suffix.

# Logging
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'  # Use: Format string passed to logging.basicConfig by the entry point. Type: str. Range: Any valid logging format string.


def default_config_dir() -> str:
    """Return the per-user config directory, e.g. ``~/.passbook``."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def default_storage_path(config_dir: str = None) -> str:
    """Return the default storage directory holding the accounts file."""
    return os.path.join(config_dir or default_config_dir(), DEFAULT_STORAGE_DIR_NAME)
