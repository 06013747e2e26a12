import unittest
from datetime import datetime, timedelta, timezone

from grouptherapy.schemas.auth import AdminUserCreate, SessionRecord
from grouptherapy.services.auth_service import (
    ACCOUNT_INACTIVE,
    INVALID_CREDENTIALS,
    LOCKED_OUT,
    AuthService,
    generate_session_id,
    hash_password,
    verify_password,
)
from grouptherapy.storage import MemoryStorage


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class TestPasswordHashing(unittest.TestCase):
    def test_hash_is_salted_and_verifiable(self) -> None:
        first = hash_password("hunter22", rounds=4)
        second = hash_password("hunter22", rounds=4)

        self.assertNotEqual(first, "hunter22")
        self.assertNotEqual(first, second)
        self.assertTrue(first.startswith("$2b$04$"))
        self.assertTrue(verify_password("hunter22", first))
        self.assertTrue(verify_password("hunter22", second))
        self.assertFalse(verify_password("hunter23", first))

    def test_malformed_hash_never_matches(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))

    def test_session_ids_are_long_and_unique(self) -> None:
        ids = {generate_session_id() for _ in range(50)}
        self.assertEqual(len(ids), 50)
        for session_id in ids:
            self.assertEqual(len(session_id), 64)
            int(session_id, 16)


class TestAuthService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.storage = MemoryStorage()
        self.clock = FakeClock()
        self.auth = AuthService(self.storage, bcrypt_rounds=4, clock=self.clock)
        await self.storage.create_admin_user(
            AdminUserCreate(username="admin", password_hash=self.auth.hash_password("correct-horse"))
        )

    async def attempts_for(self, username: str):
        return await self.storage.get_recent_login_attempts(username, self.clock.now - timedelta(days=1))

    async def test_valid_login_sets_last_login(self) -> None:
        result = await self.auth.validate_credentials("admin", "correct-horse", "10.0.0.1")

        self.assertTrue(result.valid)
        self.assertIsNone(result.message)
        user = await self.storage.get_admin_user_by_username("admin")
        self.assertEqual(user.last_login_at, self.clock.now)

        attempts = await self.attempts_for("admin")
        self.assertEqual(len(attempts), 1)
        self.assertTrue(attempts[0].successful)
        self.assertEqual(attempts[0].ip_address, "10.0.0.1")

    async def test_last_login_strictly_increases_without_clock_tick(self) -> None:
        await self.auth.validate_credentials("admin", "correct-horse")
        first = (await self.storage.get_admin_user_by_username("admin")).last_login_at

        await self.auth.validate_credentials("admin", "correct-horse")
        second = (await self.storage.get_admin_user_by_username("admin")).last_login_at

        self.assertGreater(second, first)

    async def test_unknown_user_and_wrong_password_look_the_same(self) -> None:
        wrong_password = await self.auth.validate_credentials("admin", "nope")
        unknown_user = await self.auth.validate_credentials("ghost", "nope")

        self.assertFalse(wrong_password.valid)
        self.assertFalse(unknown_user.valid)
        self.assertEqual(wrong_password.message, INVALID_CREDENTIALS)
        self.assertEqual(unknown_user.message, INVALID_CREDENTIALS)
        self.assertEqual(len(await self.attempts_for("ghost")), 1)

    async def test_inactive_account_is_refused(self) -> None:
        await self.storage.create_admin_user(
            AdminUserCreate(
                username="retired",
                password_hash=self.auth.hash_password("still-valid"),
                is_active=False,
            )
        )

        result = await self.auth.validate_credentials("retired", "still-valid")

        self.assertFalse(result.valid)
        self.assertEqual(result.message, ACCOUNT_INACTIVE)
        attempts = await self.attempts_for("retired")
        self.assertEqual([a.successful for a in attempts], [False])

    async def test_lockout_after_five_failures_even_with_correct_password(self) -> None:
        for _ in range(5):
            result = await self.auth.validate_credentials("admin", "wrong")
            self.assertEqual(result.message, INVALID_CREDENTIALS)

        locked = await self.auth.validate_credentials("admin", "correct-horse")

        self.assertFalse(locked.valid)
        self.assertEqual(locked.message, LOCKED_OUT)
        attempts = await self.attempts_for("admin")
        self.assertEqual(len(attempts), 6)
        self.assertFalse(any(a.successful for a in attempts))
        user = await self.storage.get_admin_user_by_username("admin")
        self.assertIsNone(user.last_login_at)

    async def test_lockout_is_per_username(self) -> None:
        for _ in range(5):
            await self.auth.validate_credentials("someone-else", "wrong")

        result = await self.auth.validate_credentials("admin", "correct-horse")

        self.assertTrue(result.valid)

    async def test_failures_outside_window_are_ignored(self) -> None:
        for _ in range(5):
            await self.auth.validate_credentials("admin", "wrong")
        self.clock.advance(minutes=15, seconds=1)

        result = await self.auth.validate_credentials("admin", "correct-horse")

        self.assertTrue(result.valid)

    async def test_successful_attempts_do_not_count_towards_limit(self) -> None:
        for _ in range(4):
            await self.auth.validate_credentials("admin", "wrong")
        for _ in range(3):
            self.assertTrue((await self.auth.validate_credentials("admin", "correct-horse")).valid)

        self.assertEqual(await self.auth.rate_limiter.failed_attempts("admin"), 4)
        self.assertFalse(await self.auth.rate_limiter.is_limited("admin"))

    async def test_session_lifecycle(self) -> None:
        session_id = await self.auth.create_session("admin")

        self.assertEqual(await self.auth.validate_session(session_id), "admin")
        stored = await self.storage.get_session(session_id)
        self.assertEqual(stored.expires_at, self.clock.now + timedelta(hours=24))

        await self.auth.delete_session(session_id)
        self.assertIsNone(await self.auth.validate_session(session_id))

        # Deleting again is a no-op
        await self.auth.delete_session(session_id)

    async def test_expired_session_is_removed_on_validation(self) -> None:
        session_id = await self.auth.create_session("admin")
        self.clock.advance(hours=24)

        self.assertIsNone(await self.auth.validate_session(session_id))
        self.assertIsNone(await self.storage.get_session(session_id))

    async def test_session_with_past_expiry_is_rejected(self) -> None:
        await self.storage.create_session(
            SessionRecord(id="stale", username="admin", expires_at=self.clock.now - timedelta(seconds=1))
        )

        self.assertIsNone(await self.auth.validate_session("stale"))

    async def test_unknown_session(self) -> None:
        self.assertIsNone(await self.auth.validate_session("does-not-exist"))

    async def test_full_login_flow(self) -> None:
        self.assertFalse((await self.auth.validate_credentials("admin", "guess-1")).valid)
        self.assertFalse((await self.auth.validate_credentials("admin", "guess-2")).valid)
        self.assertTrue((await self.auth.validate_credentials("admin", "correct-horse")).valid)

        session_id = await self.auth.create_session("admin")
        self.assertEqual(await self.auth.validate_session(session_id), "admin")

        attempts = await self.attempts_for("admin")
        self.assertEqual([a.successful for a in attempts], [False, False, True])


if __name__ == "__main__":
    unittest.main()
