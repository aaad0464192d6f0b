import pytest
from bson import ObjectId

from scholarstream.domain.roles import Role


def test_create_user_starts_as_student(client, auth, store):
    resp = client.post(
        "/users",
        json={"name": "Grace", "photo": "https://img.test/grace.png", "role": "Admin"},
        headers=auth("grace@example.com"),
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["created"] is True
    assert body["data"]["role"] == "Student"
    assert body["data"]["name"] == "Grace"
    stored = store.users.find_one({"email": "grace@example.com"})
    assert stored["role"] == "Student"


def test_create_user_uses_principal_email_not_body(client, auth, store):
    client.post("/users", json={"email": "spoof@example.com"}, headers=auth("real@example.com"))

    assert store.users.find_one({"email": "spoof@example.com"}) is None
    assert store.users.find_one({"email": "real@example.com"}) is not None


def test_create_user_twice_returns_existing(client, auth, store):
    first = client.post("/users", json={"name": "First"}, headers=auth("twice@example.com"))
    second = client.post("/users", json={"name": "Second"}, headers=auth("twice@example.com"))

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.get_json()["created"] is False
    assert second.get_json()["data"]["name"] == "First"
    assert store.users.count_documents({"email": "twice@example.com"}) == 1


def test_get_user_by_email_returns_bare_document(client, student):
    resp = client.get(f"/users/{student['email']}")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["email"] == student["email"]
    assert body["id"] == str(student["_id"])
    assert "_id" not in body


def test_get_unknown_user_returns_null(client):
    resp = client.get("/users/nonexistent@example.com")

    assert resp.status_code == 200
    assert resp.get_json() is None
    assert resp.data.strip() == b"null"


def test_get_role_defaults_to_student(client, auth, student):
    resp = client.get("/users/unknown@example.com/role", headers=auth(student["email"]))

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"role": "Student"}


def test_get_role_of_moderator(client, auth, moderator):
    resp = client.get(f"/users/{moderator['email']}/role", headers=auth(moderator["email"]))

    assert resp.get_json()["data"]["role"] == "Moderator"


def test_admin_updates_role(client, auth, admin, student, store):
    resp = client.patch(
        f"/users/{student['_id']}/role",
        json={"role": "Moderator"},
        headers=auth(admin["email"]),
    )

    assert resp.status_code == 200
    assert resp.get_json()["data"]["role"] == "Moderator"
    assert store.users.find_one({"_id": student["_id"]})["role"] == "Moderator"


def test_non_admin_cannot_update_role(client, auth, moderator, student, store):
    resp = client.patch(
        f"/users/{student['_id']}/role",
        json={"role": "Admin"},
        headers=auth(moderator["email"]),
    )

    assert resp.status_code == 403
    assert store.users.find_one({"_id": student["_id"]})["role"] == "Student"


def test_update_role_rejects_unknown_role(client, auth, admin, student):
    resp = client.patch(
        f"/users/{student['_id']}/role",
        json={"role": "Overlord"},
        headers=auth(admin["email"]),
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_update_role_of_missing_user(client, auth, admin):
    resp = client.patch(f"/users/{ObjectId()}/role", json={"role": "Admin"}, headers=auth(admin["email"]))

    assert resp.status_code == 404


def test_update_profile_sets_only_provided_fields(client, auth, student, store):
    resp = client.patch(
        "/users/update",
        json={"photo": "https://img.test/new.png", "name": "", "cover": None},
        headers=auth(student["email"]),
    )

    assert resp.status_code == 200
    assert resp.get_json()["updatedFields"] == {"photo": "https://img.test/new.png"}
    stored = store.users.find_one({"_id": student["_id"]})
    assert stored["photo"] == "https://img.test/new.png"
    assert stored["name"] == student["name"]


def test_update_profile_of_unregistered_principal(client, auth):
    resp = client.patch("/users/update", json={"name": "Ghost"}, headers=auth("ghost@example.com"))

    assert resp.status_code == 404


def test_admin_deletes_user(client, auth, admin, student, store):
    resp = client.delete(f"/users/{student['_id']}", headers=auth(admin["email"]))

    assert resp.status_code == 200
    assert store.users.find_one({"_id": student["_id"]}) is None


def test_delete_missing_user_returns_404(client, auth, admin):
    resp = client.delete(f"/users/{ObjectId()}", headers=auth(admin["email"]))

    assert resp.status_code == 404


@pytest.mark.db
def test_delete_user_with_invalid_id(client, auth, admin):
    resp = client.delete("/users/not-an-object-id", headers=auth(admin["email"]))

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_list_users_for_admin(client, auth, admin, make_user):
    make_user(role=Role.STUDENT)
    make_user(role=Role.MODERATOR)

    resp = client.get("/users", headers=auth(admin["email"]))

    assert resp.status_code == 200
    assert len(resp.get_json()["data"]) == 3
