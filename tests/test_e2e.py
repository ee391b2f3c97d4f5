import pytest

from app.models.user import Role
from app.stores import UserStore
from conftest import bearer


def _login(client, email, password):
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return r.json()


class TestE2E:
    def test_user_sees_only_own_tasks(self, client, make_user, make_task, db):
        r = client.post("/auth/register", json={"name": "Alice", "email": "alice@example.com", "password": "pw1"})
        assert r.json() == {"message": "User registered successfully"}

        alice = UserStore(db).get_by_email("alice@example.com")
        bob = make_user("bob@example.com")
        make_task(alice, "alice one", "first")
        make_task(alice, "alice two")
        make_task(bob, "bob only")

        data = _login(client, "alice@example.com", "pw1")
        assert data["role"] == "user"

        r = client.get("/dashboard/user", headers=bearer(data["token"]))
        assert r.status_code == 200
        tasks = r.json()["tasks"]
        assert [t["title"] for t in tasks] == ["alice one", "alice two"]
        assert {t["owner_id"] for t in tasks} == {alice.id}
        assert tasks[0]["description"] == "first"
        assert "owner_email" not in tasks[0]

    def test_admin_sees_all_tasks_with_owner_email(self, client, make_user, make_task):
        admin = make_user("root@example.com", password="admin123", role=Role.admin)
        alice = make_user("alice@example.com")
        bob = make_user("bob@example.com")
        make_task(admin, "admin task")
        make_task(alice, "alice task")
        make_task(bob, "bob task")

        data = _login(client, "root@example.com", "admin123")
        assert data["role"] == "admin"

        r = client.get("/dashboard/admin", headers=bearer(data["token"]))
        assert r.status_code == 200
        owners = {t["title"]: t["owner_email"] for t in r.json()["tasks"]}
        assert owners == {
            "admin task": "root@example.com",
            "alice task": "alice@example.com",
            "bob task": "bob@example.com",
        }

    def test_roles_cannot_cross_dashboards(self, client, make_user):
        make_user("root@example.com", password="admin123", role=Role.admin)
        make_user("alice@example.com")
        admin = _login(client, "root@example.com", "admin123")["token"]
        user = _login(client, "alice@example.com", "pw1")["token"]

        assert client.get("/dashboard/admin", headers=bearer(user)).status_code == 403
        assert client.get("/dashboard/user", headers=bearer(admin)).status_code == 403

    def test_logout_clears_cookie_carrier(self, client, make_user):
        make_user("alice@example.com")
        _login(client, "alice@example.com", "pw1")

        # the login cookie is now in the client's jar
        assert client.get("/dashboard/user").status_code == 200

        r = client.get("/auth/logout", follow_redirects=False)
        assert r.status_code == 302

        r = client.get("/dashboard/user")
        assert r.status_code == 401
        assert r.json() == {"message": "Authorization header missing"}

    @pytest.mark.parametrize("accept", ["application/json", "*/*"])
    def test_api_clients_get_json_errors(self, client, accept):
        r = client.get("/dashboard/admin", headers={"Accept": accept})
        assert r.status_code == 401
        assert r.headers["content-type"].startswith("application/json")

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
