def test_profile_created_on_first_request(client, alice):
    response = client.get("/api/profile", headers=alice)
    assert response.status_code == 200
    profile = response.json()
    assert profile["email"] == "alice@example.com"
    assert profile["full_name"] == "Alice"
    assert profile["role"] == "blogger"
    assert profile["username"] == "alice"

    again = client.get("/api/profile", headers=alice).json()
    assert again["id"] == profile["id"]


def test_username_derived_from_email_is_unique(client, alice):
    client.put("/api/profile", json={"username": "carol"}, headers=alice)

    profile = client.get("/api/profile", headers={"Authorization": "Bearer carol"}).json()
    assert profile["username"] == "carol2"
    assert client.get("/api/profiles/carol2").status_code == 200


def test_update_profile(client, alice):
    response = client.put("/api/profile", json={
        "username": "alice",
        "bio": "Writes about Python",
        "avatar_url": "https://example.com/a.png",
    }, headers=alice)

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["username"] == "alice"
    assert profile["bio"] == "Writes about Python"
    assert profile["full_name"] == "Alice"


def test_role_cannot_be_set_by_client(client, alice):
    client.put("/api/profile", json={"role": "admin"}, headers=alice)
    assert client.get("/api/profile", headers=alice).json()["role"] == "blogger"


def test_username_must_be_unique(client, alice, bob):
    client.put("/api/profile", json={"username": "writer"}, headers=alice)
    response = client.put("/api/profile", json={"username": "writer"}, headers=bob)
    assert response.status_code == 400

    assert client.put("/api/profile", json={"username": "  "}, headers=bob).status_code == 400


def test_public_profile_lists_approved_blogs(client, approved_blog, make_blog, alice):
    client.put("/api/profile", json={"username": "alice"}, headers=alice)
    live = approved_blog(title="Live")
    make_blog(title="Draft")

    response = client.get("/api/profiles/alice")
    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["username"] == "alice"
    assert "email" not in data["profile"]
    assert [b["id"] for b in data["blogs"]] == [live["id"]]


def test_unknown_public_profile(client):
    assert client.get("/api/profiles/ghost").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
