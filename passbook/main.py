"""
Main entry point for the Passbook password vault.

A thin command-line front end over ``VaultSession``. Every command loads the
vault from the configured storage directory, applies one operation and,
for mutations, writes the whole account list back.
"""

import sys
import getpass
import argparse
import logging
from typing import List, Optional

from . import config
from . import crypto
from . import vault_manager
from .exceptions import CodecError, VaultError
from .session import VaultSession


def _prompt(value: Optional[str], label: str, confirm: bool = False) -> str:
    if value is not None:
        return value
    entered = getpass.getpass(f"{label}: ")
    if confirm and entered and getpass.getpass(f"Confirm {label.lower()}: ") != entered:
        raise VaultError(f"{label} entries do not match")
    return entered


def _secret_and_password(args: argparse.Namespace):
    secret = _prompt(args.secret, "Secret", confirm=True)
    if not secret:
        return None, None
    return secret, _prompt(args.password, "Master password", confirm=True)


def cmd_list(session: VaultSession, args: argparse.Namespace) -> int:
    records = session.records
    if not records:
        print("No passwords saved yet.")
    for index, record in enumerate(records):
        marker = "" if record.has_secret else "  (no password set)"
        print(f"{index:>3}  {record.name}{marker}")
    return 0


def cmd_add(session: VaultSession, args: argparse.Namespace) -> int:
    if args.no_secret:
        secret, password = None, None
    else:
        secret, password = _secret_and_password(args)
    session.create(args.name, secret, password)
    print(f"Added '{args.name.strip()}'")
    return 0


def cmd_edit(session: VaultSession, args: argparse.Namespace) -> int:
    new_name = args.rename if args.rename is not None else args.name
    secret, password = (None, None)
    if args.change_secret:
        secret, password = _secret_and_password(args)
    session.update(args.name, new_name, secret, password)
    print(f"Updated '{new_name.strip()}'")
    return 0


def cmd_rm(session: VaultSession, args: argparse.Namespace) -> int:
    session.remove(args.name)
    print(f"Removed '{args.name}'")
    return 0


def cmd_move(session: VaultSession, args: argparse.Namespace) -> int:
    session.reorder(args.from_index, args.to_index)
    return cmd_list(session, args)


def cmd_show(session: VaultSession, args: argparse.Namespace) -> int:
    session.select(args.name)
    try:
        revealed = session.reveal(_prompt(args.password, "Master password"))
        print(revealed.plaintext)
    finally:
        session.back()
    return 0


def cmd_encrypt(session: VaultSession, args: argparse.Namespace) -> int:
    message = _prompt(args.message, "Message")
    print(crypto.encode(message, _prompt(args.password, "Password", confirm=True)))
    return 0


def cmd_decrypt(session: VaultSession, args: argparse.Namespace) -> int:
    print(crypto.decode(args.encoded.strip(), _prompt(args.password, "Password")))
    return 0


def cmd_settings(session: VaultSession, args: argparse.Namespace) -> int:
    if args.storage_path:
        session.change_storage_path(args.storage_path)
    settings = vault_manager.get_settings(session.config_dir)
    print(f"storage_path: {settings.storage_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="passbook", description=config.APP_DESCRIPTION)
    p.add_argument("--config-dir", help=f"Settings directory (default: ~/{config.CONFIG_DIR_NAME})")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ls = sub.add_parser("list", help="List accounts in order")
    p_ls.set_defaults(func=cmd_list)

    p_add = sub.add_parser("add", help="Add an account")
    p_add.add_argument("name", help="Account name")
    p_add.add_argument("--secret", help="Secret to store (prompted if omitted)")
    p_add.add_argument("--password", help="Master password for this secret (prompted if omitted)")
    p_add.add_argument("--no-secret", action="store_true", help="Create the account without a secret")
    p_add.set_defaults(func=cmd_add)

    p_edit = sub.add_parser("edit", help="Rename an account and/or replace its secret")
    p_edit.add_argument("name", help="Current account name")
    p_edit.add_argument("--rename", help="New account name")
    p_edit.add_argument("--change-secret", action="store_true", help="Replace the stored secret")
    p_edit.add_argument("--secret", help="New secret (prompted if omitted)")
    p_edit.add_argument("--password", help="Master password for the new secret (prompted if omitted)")
    p_edit.set_defaults(func=cmd_edit)

    p_rm = sub.add_parser("rm", help="Delete an account")
    p_rm.add_argument("name", help="Account name")
    p_rm.set_defaults(func=cmd_rm)

    p_mv = sub.add_parser("move", help="Move an account to another position")
    p_mv.add_argument("from_index", type=int, help="Current position (0-based)")
    p_mv.add_argument("to_index", type=int, help="New position (0-based)")
    p_mv.set_defaults(func=cmd_move)

    p_show = sub.add_parser("show", help="Decrypt and print an account's secret")
    p_show.add_argument("name", help="Account name")
    p_show.add_argument("--password", help="Master password (prompted if omitted)")
    p_show.set_defaults(func=cmd_show)

    p_enc = sub.add_parser("encrypt", help="Encrypt a message to salt:iv:ciphertext")
    p_enc.add_argument("--message", help="Message to encrypt (prompted if omitted)")
    p_enc.add_argument("--password", help="Password (prompted if omitted)")
    p_enc.set_defaults(func=cmd_encrypt)

    p_dec = sub.add_parser("decrypt", help="Decrypt a salt:iv:ciphertext string")
    p_dec.add_argument("encoded", help="Encoded secret")
    p_dec.add_argument("--password", help="Password (prompted if omitted)")
    p_dec.set_defaults(func=cmd_decrypt)

    p_set = sub.add_parser("settings", help="Show or change settings")
    p_set.add_argument("--storage-path", help="Directory holding the accounts file")
    p_set.set_defaults(func=cmd_settings)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=config.LOG_FORMAT
    )

    session = VaultSession(config_dir=args.config_dir)
    try:
        if args.func not in (cmd_encrypt, cmd_decrypt, cmd_settings):
            session.reload()
        return args.func(session, args)
    except CodecError as e:
        print(e.public_message, file=sys.stderr)
        return 1
    except VaultError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Vault unavailable: {e}", file=sys.stderr)
        return 1
    finally:
        session.clear_revealed()


if __name__ == "__main__":
    sys.exit(main())
