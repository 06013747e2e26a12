import unittest

from fastapi.testclient import TestClient

from grouptherapy.config import AuthConfig, Settings
from grouptherapy.main import create_app
from grouptherapy.storage import MemoryStorage

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "label-admin-pass"


def make_settings(**overrides) -> Settings:
    values = dict(
        storage_backend="memory",
        environment="development",
        auth=AuthConfig(bcrypt_rounds=4),
        initial_admin_username=ADMIN_USERNAME,
        initial_admin_password=ADMIN_PASSWORD,
        cors_origins=["http://localhost:5173"],
    )
    values.update(overrides)
    return Settings(**values)


class ApiTestCase(unittest.TestCase):
    """Runs the app (including its lifespan) against a fresh memory store."""

    def setUp(self) -> None:
        self.storage = MemoryStorage()
        self.app = create_app(make_settings(), self.storage)
        self.client = TestClient(self.app)
        self.client.__enter__()

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)

    def login(self) -> dict:
        response = self.client.post(
            "/api/auth/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['sessionId']}"}


class TestAuthRoutes(ApiTestCase):
    def test_login_requires_both_fields(self) -> None:
        response = self.client.post("/api/auth/login", json={"username": ADMIN_USERNAME})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "Username and password are required"})

    def test_login_with_bad_password(self) -> None:
        response = self.client.post(
            "/api/auth/login",
            json={"username": ADMIN_USERNAME, "password": "wrong"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Invalid credentials"})

    def test_login_lockout(self) -> None:
        for _ in range(5):
            self.client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": "wrong"})

        response = self.client.post(
            "/api/auth/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )

        self.assertEqual(response.status_code, 401)
        self.assertIn("Too many failed login attempts", response.json()["message"])

    def test_login_me_logout(self) -> None:
        response = self.client.post(
            "/api/auth/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["username"], ADMIN_USERNAME)
        self.assertEqual(len(body["sessionId"]), 64)
        headers = {"Authorization": f"Bearer {body['sessionId']}"}

        me = self.client.get("/api/auth/me", headers=headers)
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json(), {"username": ADMIN_USERNAME})

        logout = self.client.post("/api/auth/logout", headers=headers)
        self.assertEqual(logout.json(), {"message": "Logged out successfully"})

        after = self.client.get("/api/auth/me", headers=headers)
        self.assertEqual(after.status_code, 401)
        self.assertEqual(after.json(), {"message": "Invalid or expired session"})

    def test_me_without_token(self) -> None:
        response = self.client.get("/api/auth/me")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Authentication required"})

    def test_logout_without_session_still_succeeds(self) -> None:
        response = self.client.post("/api/auth/logout")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Logged out successfully"})


class TestContentRoutes(ApiTestCase):
    release = {
        "title": "Deep Waters",
        "slug": "deep-waters",
        "artist_name": "Aqua Dreams",
        "type": "ep",
        "published": True,
    }

    def test_public_read_and_authenticated_write(self) -> None:
        self.assertEqual(self.client.get("/api/releases").json(), [])

        denied = self.client.post("/api/releases", json=self.release)
        self.assertEqual(denied.status_code, 401)

        headers = self.login()
        created = self.client.post("/api/releases", json=self.release, headers=headers)
        self.assertEqual(created.status_code, 200)
        release_id = created.json()["id"]

        listing = self.client.get("/api/releases")
        self.assertEqual([r["id"] for r in listing.json()], [release_id])
        self.assertEqual(self.client.get(f"/api/releases/{release_id}").json()["title"], "Deep Waters")

        patched = self.client.patch(f"/api/releases/{release_id}", json={"featured": True}, headers=headers)
        self.assertEqual(patched.status_code, 200)
        self.assertTrue(patched.json()["featured"])
        self.assertEqual(patched.json()["title"], "Deep Waters")

        deleted = self.client.delete(f"/api/releases/{release_id}", headers=headers)
        self.assertEqual(deleted.json(), {"message": "Release deleted"})
        self.assertEqual(self.client.get(f"/api/releases/{release_id}").status_code, 404)

    def test_not_found_messages(self) -> None:
        headers = self.login()

        missing = self.client.get("/api/events/nope")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json(), {"message": "Event not found"})

        patch = self.client.patch("/api/videos/nope", json={"title": "x"}, headers=headers)
        self.assertEqual(patch.status_code, 404)
        self.assertEqual(patch.json(), {"message": "Video not found"})

    def test_validation_error_is_400(self) -> None:
        headers = self.login()

        response = self.client.post("/api/releases", json={"title": "No slug"}, headers=headers)

        self.assertEqual(response.status_code, 400)
        self.assertIn("slug", response.json()["message"])

    def test_patch_validation_error_is_400(self) -> None:
        headers = self.login()
        release_id = self.client.post(
            "/api/releases",
            json={"title": "Deep Waters", "slug": "deep-waters", "artist_name": "Aqua Dreams"},
            headers=headers,
        ).json()["id"]

        for body in ({"title": None}, {"title": ""}, {"artist_name": None}):
            response = self.client.patch(f"/api/releases/{release_id}", json=body, headers=headers)
            self.assertEqual(response.status_code, 400, body)
            self.assertIn(next(iter(body)), response.json()["message"])

        # Nullable fields may still be cleared
        cleared = self.client.patch(f"/api/releases/{release_id}", json={"description": None}, headers=headers)
        self.assertEqual(cleared.status_code, 200)

        unchanged = self.client.get(f"/api/releases/{release_id}").json()
        self.assertEqual(unchanged["title"], "Deep Waters")
        self.assertEqual(unchanged["artist_name"], "Aqua Dreams")

    def test_radio_settings_patch_rejects_null_station_name(self) -> None:
        headers = self.login()

        response = self.client.patch("/api/radio/settings", json={"station_name": None}, headers=headers)

        self.assertEqual(response.status_code, 400)
        self.assertIn("station_name", response.json()["message"])

    def test_contact_form_is_public_but_inbox_is_not(self) -> None:
        submitted = self.client.post(
            "/api/contacts",
            json={"name": "Sam", "email": "sam@example.com", "message": "Listen to my demo"},
        )
        self.assertEqual(submitted.status_code, 200)
        self.assertEqual(submitted.json()["status"], "new")

        self.assertEqual(self.client.get("/api/contacts").status_code, 401)

        headers = self.login()
        inbox = self.client.get("/api/contacts", headers=headers)
        self.assertEqual(len(inbox.json()), 1)

    def test_featured_artists(self) -> None:
        headers = self.login()
        for name, featured in (("Luna Wave", True), ("Aqua Dreams", False)):
            self.client.post(
                "/api/artists",
                json={"name": name, "slug": name.lower().replace(" ", "-"), "featured": featured},
                headers=headers,
            )

        featured = self.client.get("/api/artists/featured")

        self.assertEqual([a["name"] for a in featured.json()], ["Luna Wave"])

    def test_radio_shows_route(self) -> None:
        headers = self.login()
        created = self.client.post(
            "/api/radio/shows",
            json={"title": "Morning Therapy", "slug": "morning-therapy", "host_name": "DJ Luna", "day_of_week": 1},
            headers=headers,
        )

        self.assertEqual(created.status_code, 200)
        self.assertEqual(len(self.client.get("/api/radio/shows").json()), 1)


class TestRadioAndAnalyticsRoutes(ApiTestCase):
    def test_metadata_defaults(self) -> None:
        response = self.client.get("/api/radio/metadata")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["title"], "GroupTherapy Radio")
        self.assertEqual(body["artist"], "Various Artists")
        self.assertEqual(body["listener_count"], 0)
        self.assertFalse(body["is_live"])

    def test_settings_update_shows_in_metadata(self) -> None:
        self.assertEqual(self.client.patch("/api/radio/settings", json={"is_live": True}).status_code, 401)

        headers = self.login()
        updated = self.client.patch(
            "/api/radio/settings",
            json={"is_live": True, "current_track": "Echoes of Tomorrow", "current_artist": "Neon Pulse"},
            headers=headers,
        )
        self.assertEqual(updated.status_code, 200)

        body = self.client.get("/api/radio/metadata").json()
        self.assertEqual(body["title"], "Echoes of Tomorrow")
        self.assertEqual(body["artist"], "Neon Pulse")
        self.assertTrue(body["is_live"])

    def test_listener_session(self) -> None:
        started = self.client.post("/api/radio/listeners", json={"session_id": "browser-1"})
        self.assertEqual(started.status_code, 200)
        listener_id = started.json()["id"]

        ended = self.client.post(f"/api/radio/listeners/{listener_id}/end")
        self.assertEqual(ended.status_code, 200)
        self.assertIsNotNone(ended.json()["ended_at"])

        self.assertEqual(self.client.post("/api/radio/listeners/unknown/end").status_code, 404)

    def test_overview(self) -> None:
        headers = self.login()
        release = self.client.post(
            "/api/releases",
            json={"title": "Deep Waters", "slug": "deep-waters", "artist_name": "Aqua Dreams", "published": True},
            headers=headers,
        ).json()
        self.client.post("/api/analytics/page-view", json={"path": "/releases"})
        self.client.post("/api/analytics/play", json={"release_id": release["id"]})
        self.client.post("/api/analytics/play", json={"release_id": release["id"]})

        self.assertEqual(self.client.get("/api/analytics/overview").status_code, 401)

        overview = self.client.get("/api/analytics/overview", headers=headers).json()
        self.assertEqual(overview["total_streams"], 2)
        self.assertEqual(overview["active_users"], 1)
        self.assertEqual(
            overview["engagement"]["releases"],
            [{"id": release["id"], "title": "Deep Waters", "streams": 2}],
        )


class TestStatusRoutes(ApiTestCase):
    def test_probes(self) -> None:
        health = self.client.get("/api/status/health")
        self.assertEqual(health.json()["status"], "healthy")

        self.assertEqual(self.client.get("/api/status/live").json(), {"status": "alive"})

        ready = self.client.get("/api/status/ready")
        self.assertEqual(ready.status_code, 200)
        self.assertEqual(ready.json()["checks"], {"storage": True})

    def test_api_responses_are_not_cached(self) -> None:
        response = self.client.get("/api/status/live")

        self.assertEqual(response.headers["Cache-Control"], "no-cache, no-store, must-revalidate")
        self.assertIn("X-Correlation-ID", response.headers)

    def test_correlation_id_is_echoed(self) -> None:
        response = self.client.get("/api/status/health", headers={"X-Correlation-ID": "abc12345"})

        self.assertEqual(response.headers["X-Correlation-ID"], "abc12345")


if __name__ == "__main__":
    unittest.main()
