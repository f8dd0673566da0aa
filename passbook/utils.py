import os
import stat
import platform
import logging

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

if IS_WINDOWS:
    try:
        import ntsecuritycon
        import win32api
        import win32con
        import win32security
        WINDOWS_SECURITY_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not fully installed, cannot set Windows file permissions securely.")
        WINDOWS_SECURITY_AVAILABLE = False
else:
    WINDOWS_SECURITY_AVAILABLE = False


def set_owner_only_permissions(filepath: str) -> bool:
    """
    Restrict the accounts file to the current user.

    On POSIX this is mode 600. On Windows the file gets a protected DACL
    with one read/write entry for the process owner, so inherited entries
    from the storage directory no longer apply.

    Returns:
        False if the restriction could not be applied
    """
    if IS_WINDOWS:
        return _restrict_windows_dacl(filepath)
    try:
        os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        logger.error(f"Failed to chmod {filepath}: {e}")
        return False
    return True


def _restrict_windows_dacl(filepath: str) -> bool:
    if not WINDOWS_SECURITY_AVAILABLE:
        logger.warning(f"Skipping Windows file permission setting for {filepath}: pywin32 not available.")
        return False
    try:
        token = win32security.OpenProcessToken(win32api.GetCurrentProcess(), win32con.TOKEN_QUERY)
        owner_sid = win32security.GetTokenInformation(token, win32security.TokenUser)[0]
        dacl = win32security.ACL()
        dacl.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            ntsecuritycon.FILE_GENERIC_READ | ntsecuritycon.FILE_GENERIC_WRITE,
            owner_sid
        )
        win32security.SetNamedSecurityInfo(
            filepath,
            win32security.SE_FILE_OBJECT,
            win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
            None, None, dacl, None
        )
    except win32api.error as e:
        logger.error(f"Failed to set Windows file permissions for {filepath}: {e}")
        return False
    return True
