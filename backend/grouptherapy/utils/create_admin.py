#!/usr/bin/env python3
"""
Admin Account Utility for the GroupTherapy backend

Usage:
    python -m grouptherapy.utils.create_admin <username> [--role editor]
    python -m grouptherapy.utils.create_admin <username> --reset-password
    python -m grouptherapy.utils.create_admin <username> --deactivate

Passwords are prompted for interactively and never logged. The database is
taken from DATABASE_URL, exactly as the server does.
"""
import argparse
import asyncio
import getpass
import sys
from typing import Optional

from loguru import logger

from grouptherapy.config import settings
from grouptherapy.schemas.auth import AdminUserCreate, AdminUserUpdate
from grouptherapy.services.auth_service import hash_password
from grouptherapy.storage import DatabaseStorage, DuplicateRecordError, RecordNotFoundError

MIN_PASSWORD_LENGTH = 8


async def create_admin(storage: DatabaseStorage, username: str, password: str, role: str) -> None:
    await storage.create_admin_user(
        AdminUserCreate(
            username=username,
            password_hash=hash_password(password, rounds=settings.auth.bcrypt_rounds),
            role=role,
            is_active=True,
        )
    )


async def update_admin(storage: DatabaseStorage, username: str, changes: AdminUserUpdate) -> None:
    await storage.update_admin_user(username, changes)


async def run(args: argparse.Namespace, password: Optional[str]) -> None:
    storage = DatabaseStorage(settings.database_url)
    try:
        await storage.initialize()
        if args.deactivate:
            await update_admin(storage, args.username, AdminUserUpdate(is_active=False))
        elif args.activate:
            await update_admin(storage, args.username, AdminUserUpdate(is_active=True))
        elif args.reset_password:
            await update_admin(
                storage,
                args.username,
                AdminUserUpdate(password_hash=hash_password(password, rounds=settings.auth.bcrypt_rounds)),
            )
        else:
            await create_admin(storage, args.username, password, args.role)
    finally:
        await storage.close()


def prompt_password() -> str:
    try:
        new_password = getpass.getpass("Enter password: ")
        confirm_password = getpass.getpass("Confirm password: ")
    except KeyboardInterrupt:
        print("\n\nCancelled.")
        sys.exit(1)

    if new_password != confirm_password:
        print("\nError: Passwords do not match.")
        sys.exit(1)

    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"\nError: Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        sys.exit(1)

    return new_password


def main():
    parser = argparse.ArgumentParser(description="Create or manage GroupTherapy admin accounts")
    parser.add_argument("username")
    parser.add_argument("--role", choices=["admin", "editor", "contributor"], default="admin")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--reset-password", action="store_true", help="Set a new password for an existing admin")
    action.add_argument("--deactivate", action="store_true", help="Block logins for an existing admin")
    action.add_argument("--activate", action="store_true", help="Re-enable a deactivated admin")
    args = parser.parse_args()

    # Keep storage logging out of the interactive session
    logger.remove()

    password = None
    if not (args.deactivate or args.activate):
        print(f"\nGroupTherapy admin account: {args.username}\n")
        password = prompt_password()

    try:
        asyncio.run(run(args, password))
    except DuplicateRecordError:
        print(f"\nError: User '{args.username}' already exists. Use --reset-password to change it.")
        sys.exit(1)
    except RecordNotFoundError:
        print(f"\nError: User '{args.username}' not found.")
        sys.exit(1)

    print(f"\nAdmin account '{args.username}' updated successfully.")


if __name__ == "__main__":
    main()
