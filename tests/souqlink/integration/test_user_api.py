"""Integration tests for the auth, user and courier endpoints."""


def _login(client, **payload):
    return client.post("/auth/login", json=payload)


class TestLogin:
    def test_login_creates_account(self, client):
        response = _login(client, email="Amina@Example.com", name="Amina", role="customer")
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "amina@example.com"
        assert body["role"] == "customer"
        assert "passwordHash" not in body
        assert body["createdAt"] is not None

    def test_login_returns_existing_account(self, client):
        first = _login(client, email="amina@example.com", name="Amina").json()
        second = _login(client, email="AMINA@example.com").json()
        assert second["id"] == first["id"]

    def test_login_unknown_without_name_rejected(self, client):
        assert _login(client, email="nobody@example.com").status_code == 400

    def test_role_mismatch_rejected(self, client):
        _login(client, email="karim@example.com", name="Karim", role="courier")
        response = _login(client, email="karim@example.com", role="customer")
        assert response.status_code == 400
        assert "courier" in response.json()["error"]

    def test_admin_email_gets_admin_role(self, client):
        response = _login(client, email="admin@souqlink.com", name="Admin", role="customer")
        assert response.json()["role"] == "admin"

    def test_invalid_email_rejected(self, client):
        assert _login(client, email="not-an-email", name="X").status_code == 400


class TestRegister:
    def test_register(self, client):
        response = client.post(
            "/auth/register",
            json={"email": "zineb@example.com", "name": "Zineb", "password": "s3cret!", "role": "courier"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "courier"

    def test_duplicate_email_is_409(self, client):
        payload = {"email": "zineb@example.com", "name": "Zineb", "password": "s3cret!"}
        client.post("/auth/register", json=payload)

        response = client.post("/auth/register", json={**payload, "email": "Zineb@Example.com"})
        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}

    def test_short_password_rejected(self, client):
        response = client.post("/auth/register", json={"email": "zineb@example.com", "name": "Zineb", "password": "abc"})
        assert response.status_code == 400

    def test_login_with_password(self, client):
        client.post("/auth/register", json={"email": "zineb@example.com", "name": "Zineb", "password": "s3cret!"})

        assert _login(client, email="zineb@example.com", password="s3cret!").status_code == 200

    def test_wrong_password_is_401(self, client):
        client.post("/auth/register", json={"email": "zineb@example.com", "name": "Zineb", "password": "s3cret!"})

        response = _login(client, email="zineb@example.com", password="wrong-password")
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_missing_password_for_protected_account_is_401(self, client):
        client.post("/auth/register", json={"email": "zineb@example.com", "name": "Zineb", "password": "s3cret!"})

        assert _login(client, email="zineb@example.com").status_code == 401


class TestCurrentUser:
    def test_me(self, client):
        _login(client, email="amina@example.com", name="Amina")
        response = client.get("/auth/me", params={"email": "AMINA@example.com"})
        assert response.status_code == 200
        assert response.json()["name"] == "Amina"

    def test_me_unknown_is_404(self, client):
        response = client.get("/auth/me", params={"email": "ghost@example.com"})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestUsers:
    def test_list_users(self, client):
        _login(client, email="zineb@example.com", name="Zineb")
        _login(client, email="amina@example.com", name="Amina")

        names = [user["name"] for user in client.get("/users").json()]
        assert names == ["Amina", "Zineb"]

    def test_update_profile(self, client):
        user = _login(client, email="amina@example.com", name="Amina").json()

        response = client.put(f"/users/{user['id']}", json={"name": "Amina B.", "phone": "+212611111111"})
        assert response.status_code == 200
        assert response.json()["name"] == "Amina B."
        assert response.json()["phone"] == "+212611111111"
        assert response.json()["email"] == "amina@example.com"

    def test_update_unknown_user_is_404(self, client):
        response = client.put("/users/does-not-exist", json={"name": "X"})
        assert response.status_code == 404
        assert "does-not-exist" in response.json()["error"]

    def test_list_couriers(self, client):
        _login(client, email="karim@example.com", name="Karim", role="courier")
        _login(client, email="amina@example.com", name="Amina", role="customer")

        couriers = client.get("/couriers").json()
        assert [courier["email"] for courier in couriers] == ["karim@example.com"]
