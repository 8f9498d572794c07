import pytest

from conftest import bearer, create_user, login


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, email="admin@example.com")["accessToken"])


@pytest.fixture
def readers(session_local, seeded_users):
    return [
        create_user(session_local, f"reader{index}@example.com", name=f"Reader {index}")
        for index in range(3)
    ]


def test_list_users_is_paginated(client, admin_headers, readers):
    response = client.get("/admin/users", params={"page": 0, "size": 2}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == 0
    assert data["size"] == 2
    assert data["totalElements"] == 5
    assert data["totalPages"] == 3
    assert data["sort"] == "createdAt,DESC"
    assert len(data["content"]) == 2

    last_page = client.get("/admin/users", params={"page": 2, "size": 2}, headers=admin_headers).json()
    assert len(last_page["content"]) == 1


def test_list_users_clamps_bad_paging_values(client, admin_headers, readers):
    data = client.get(
        "/admin/users", params={"page": "-1", "size": "500"}, headers=admin_headers
    ).json()

    assert data["page"] == 0
    assert data["size"] == 50

    data = client.get("/admin/users", params={"size": "abc"}, headers=admin_headers).json()
    assert data["size"] == 10


def test_list_users_with_huge_page_is_empty(client, admin_headers, readers):
    response = client.get(
        "/admin/users", params={"page": "99999999999999999999"}, headers=admin_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["content"] == []
    assert data["page"] == 10_000


def test_list_users_keyword_and_sort(client, admin_headers, readers):
    data = client.get(
        "/admin/users",
        params={"keyword": "reader", "sort": "email,ASC"},
        headers=admin_headers,
    ).json()

    assert [user["email"] for user in data["content"]] == [
        "reader0@example.com",
        "reader1@example.com",
        "reader2@example.com",
    ]
    assert data["totalElements"] == 3


def test_list_users_ignores_unknown_sort_field(client, admin_headers, readers):
    response = client.get("/admin/users", params={"sort": "passwordHash,ASC"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["totalElements"] == 5


def test_deactivate_and_reactivate_user(client, admin_headers, seeded_users):
    user_access = login(client)["accessToken"]

    deactivated = client.patch(f"/admin/users/{seeded_users['user']}/deactivate", headers=admin_headers)
    assert deactivated.status_code == 200
    assert deactivated.json()["status"] == "INACTIVE"
    assert client.get("/users/me", headers=bearer(user_access)).status_code == 403

    activated = client.patch(f"/admin/users/{seeded_users['user']}/activate", headers=admin_headers)
    assert activated.status_code == 200
    assert activated.json()["status"] == "ACTIVE"
    assert client.get("/users/me", headers=bearer(user_access)).status_code == 200


def test_admin_cannot_deactivate_self(client, admin_headers, seeded_users):
    response = client.patch(f"/admin/users/{seeded_users['admin']}/deactivate", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_unknown_user_is_not_found(client, admin_headers):
    for action in ("deactivate", "activate"):
        response = client.patch(f"/admin/users/9999/{action}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    response = client.patch("/admin/users/9999/role", json={"role": "ADMIN"}, headers=admin_headers)
    assert response.status_code == 404


def test_change_role_grants_admin_access(client, admin_headers, seeded_users):
    user_access = login(client)["accessToken"]
    assert client.get("/admin/users", headers=bearer(user_access)).status_code == 403

    response = client.patch(
        f"/admin/users/{seeded_users['user']}/role", json={"role": "ADMIN"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"

    # The same access token now passes the admin gate.
    assert client.get("/admin/users", headers=bearer(user_access)).status_code == 200


def test_change_role_rejects_unknown_role(client, admin_headers, seeded_users):
    response = client.patch(
        f"/admin/users/{seeded_users['user']}/role", json={"role": "OWNER"}, headers=admin_headers
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_FAILED"
