"""Tests for the user management, company and health routes."""

from __future__ import annotations

from unittest.mock import patch

import pytest

NEW_USER = {
    "username": "paula.pm",
    "email": "paula@abcconstruction.com",
    "password": "s3cret-pass",
    "firstName": "Paula",
    "lastName": "Manager",
    "role": "employee",
}


class TestListUsers:
    def test_company_members(self, login, demo, cast):
        response = login("erin.employee").get("/api/users")

        usernames = {u["username"] for u in response.json()}
        assert usernames == {"admin", "erin.employee", "sam.sub"}
        assert all("passwordHash" not in u for u in response.json())

    def test_client_sees_only_self(self, maria_client):
        (me,) = maria_client.get("/api/users").json()

        assert me["username"] == "maria.johnson"


class TestCreateUser:
    @patch("fieldflow.web.routes.users.log_action")
    def test_admin_creates_employee(self, mock_log_action, admin_client, client, demo):
        response = admin_client.post("/api/users", json=NEW_USER)

        assert response.status_code == 201
        assert response.json()["companyId"] == demo.company.id
        assert mock_log_action.call_args.args[1] == "USER_CREATE"
        assert NEW_USER["password"] not in repr(mock_log_action.call_args)

        login = client.post(
            "/api/auth/login", json={"username": "paula.pm", "password": "s3cret-pass"}
        )
        assert login.status_code == 200

    def test_clients_are_created_without_company(self, admin_client):
        response = admin_client.post(
            "/api/users",
            json={**NEW_USER, "username": "new.client", "email": "nc@example.com", "role": "client"},
        )

        assert response.status_code == 201
        assert response.json()["companyId"] is None

    def test_duplicate_username(self, admin_client):
        response = admin_client.post("/api/users", json={**NEW_USER, "username": "admin"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "User already exists"
        assert body["errors"] == [{"field": "username", "message": "Username already exists"}]

    def test_short_password(self, admin_client):
        response = admin_client.post("/api/users", json={**NEW_USER, "password": "123"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    @pytest.mark.parametrize("password", ["a" * 80, "\u00e9" * 37])
    def test_password_over_bcrypt_limit(self, admin_client, password):
        response = admin_client.post("/api/users", json={**NEW_USER, "password": password})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"
        assert admin_client.get("/api/users").json()[-1]["username"] != "paula.pm"

    def test_employee_cannot_create(self, login, cast):
        response = login("erin.employee").post("/api/users", json=NEW_USER)

        assert response.status_code == 403


class TestUpdateUser:
    def test_self_profile_update(self, login, cast):
        erin = login("erin.employee")

        response = erin.put(f"/api/users/{cast.employee.id}", json={"phone": "555-0199"})

        assert response.status_code == 200
        assert response.json()["phone"] == "555-0199"

    def test_self_cannot_change_role(self, login, cast):
        erin = login("erin.employee")

        response = erin.put(f"/api/users/{cast.employee.id}", json={"role": "admin"})

        assert response.status_code == 403
        assert erin.get("/api/auth/me").json()["role"] == "employee"

    def test_cannot_edit_colleague(self, login, demo, cast):
        response = login("erin.employee").put(f"/api/users/{demo.admin.id}", json={"phone": "x"})

        assert response.status_code == 403

    def test_password_change(self, admin_client, login, cast):
        response = admin_client.put(f"/api/users/{cast.employee.id}", json={"password": "fresh-pass"})

        assert response.status_code == 200
        assert login("erin.employee", "fresh-pass").get("/api/auth/me").status_code == 200

    def test_password_over_bcrypt_limit(self, admin_client, login, cast):
        response = admin_client.put(f"/api/users/{cast.employee.id}", json={"password": "x" * 73})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"
        assert login("erin.employee").get("/api/auth/me").status_code == 200

    def test_deactivated_user_cannot_log_in(self, admin_client, client, cast):
        admin_client.put(f"/api/users/{cast.employee.id}", json={"isActive": False})

        response = client.post(
            "/api/auth/login", json={"username": "erin.employee", "password": "password1"}
        )

        assert response.status_code == 401

    def test_email_taken(self, admin_client, demo, cast):
        response = admin_client.put(
            f"/api/users/{cast.employee.id}", json={"email": demo.admin.email}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    def test_missing_user(self, admin_client):
        assert admin_client.put("/api/users/9999", json={"phone": "1"}).status_code == 404


class TestCompany:
    def test_own_company(self, login, demo, cast):
        response = login("sam.sub").get("/api/company")

        assert response.status_code == 200
        assert response.json()["name"] == "ABC Construction"
        assert response.json()["licenseNumber"] == demo.company.license_number

    def test_client_has_no_company(self, maria_client):
        response = maria_client.get("/api/company")

        assert response.status_code == 404
        assert response.json() == {"message": "Company not found"}


class TestHealth:
    def test_counts_sessions(self, client, login):
        assert client.get("/health").json() == {"status": "ok", "sessions": 0}

        login("admin", "admin123")

        assert client.get("/health").json() == {"status": "ok", "sessions": 1}
