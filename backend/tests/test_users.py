from conftest import bearer, login


def test_update_profile_name(client):
    access = login(client)["accessToken"]

    response = client.patch("/users/me", json={"name": "Renamed"}, headers=bearer(access))

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["email"] == "user1@example.com"
    assert "createdAt" in data and "updatedAt" in data

    assert client.get("/users/me", headers=bearer(access)).json()["name"] == "Renamed"


def test_update_profile_validates_name(client):
    access = login(client)["accessToken"]

    for body in ({"name": ""}, {"name": "x" * 51}, {}):
        response = client.patch("/users/me", json=body, headers=bearer(access))
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_FAILED"


def test_update_profile_requires_authentication(client):
    response = client.patch("/users/me", json={"name": "Nobody"})

    assert response.status_code == 401
