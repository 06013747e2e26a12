import argparse
import os
import shutil
import tempfile
import unittest
from unittest import mock

from grouptherapy.config import AuthConfig, Settings
from grouptherapy.services.auth_service import verify_password
from grouptherapy.storage import DatabaseStorage, DuplicateRecordError, RecordNotFoundError
from grouptherapy.utils import create_admin


def cli_args(username: str, role: str = "admin", reset_password: bool = False,
             deactivate: bool = False, activate: bool = False) -> argparse.Namespace:
    return argparse.Namespace(
        username=username,
        role=role,
        reset_password=reset_password,
        deactivate=deactivate,
        activate=activate,
    )


class TestCreateAdmin(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.tmp_dir = tempfile.mkdtemp()
        self.database_url = f"sqlite+aiosqlite:///{os.path.join(self.tmp_dir, 'admin.db')}"
        settings = Settings(database_url=self.database_url, auth=AuthConfig(bcrypt_rounds=4))
        patcher = mock.patch.object(create_admin, "settings", settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def asyncTearDown(self) -> None:
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    async def fetch_admin(self, username: str):
        storage = DatabaseStorage(self.database_url)
        try:
            await storage.initialize()
            return await storage.get_admin_user_by_username(username)
        finally:
            await storage.close()

    async def test_create_then_reset_password(self) -> None:
        await create_admin.run(cli_args("editor", role="editor"), "first-password")

        user = await self.fetch_admin("editor")
        self.assertEqual(user.role, "editor")
        self.assertTrue(user.is_active)
        self.assertTrue(verify_password("first-password", user.password_hash))

        await create_admin.run(cli_args("editor", reset_password=True), "second-password")

        user = await self.fetch_admin("editor")
        self.assertTrue(verify_password("second-password", user.password_hash))
        self.assertFalse(verify_password("first-password", user.password_hash))
        self.assertEqual(user.role, "editor")

    async def test_deactivate_and_activate(self) -> None:
        await create_admin.run(cli_args("admin"), "label-password")

        await create_admin.run(cli_args("admin", deactivate=True), None)
        self.assertFalse((await self.fetch_admin("admin")).is_active)

        await create_admin.run(cli_args("admin", activate=True), None)
        self.assertTrue((await self.fetch_admin("admin")).is_active)

    async def test_create_existing_user_fails(self) -> None:
        await create_admin.run(cli_args("admin"), "label-password")

        with self.assertRaises(DuplicateRecordError):
            await create_admin.run(cli_args("admin"), "other-password")

    async def test_reset_unknown_user_fails(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            await create_admin.run(cli_args("ghost", reset_password=True), "new-password")

        self.assertIsNone(await self.fetch_admin("ghost"))


if __name__ == "__main__":
    unittest.main()
