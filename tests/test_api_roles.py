# tests/test_api_roles.py
"""
Role endpoints, validation and the "at least one role" invariant.
"""
from database import queries

VALID_ROLE = {
    "title": "Closer",
    "description": "Finalizes deals with qualified leads.",
    "permissions": ["view", "edit"],
}


def test_create_role_returns_201_in_camel_case(client):
    res = client.post("/api/roles", json=VALID_ROLE)

    assert res.status_code == 201
    body = res.json()
    assert body["title"] == "Closer"
    assert body["permissions"] == ["view", "edit"]
    assert body["isDefault"] is True  # first role


def test_create_role_without_permissions_stores_empty_list(client):
    res = client.post("/api/roles", json={"title": "Setter", "description": "Books appointments for closers."})

    assert res.status_code == 201
    assert res.json()["permissions"] == []


def test_validation_reports_one_error_per_field(client):
    res = client.post("/api/roles", json={"title": "Ab", "description": "too short", "permissions": []})

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation error"
    fields = sorted(err["field"] for err in body["errors"])
    assert fields == ["description", "permissions"]
    assert queries.get_role_count() == 0


def test_short_title_and_description_are_two_errors(client):
    res = client.post("/api/roles", json={"title": "A", "description": "short"})

    assert res.status_code == 400
    assert sorted(err["field"] for err in res.json()["errors"]) == ["description", "title"]
    assert queries.get_role_count() == 0


def test_list_count_and_get(client):
    client.post("/api/roles", json=VALID_ROLE)
    client.post("/api/roles", json={**VALID_ROLE, "title": "Setter"})

    roles = client.get("/api/roles").json()
    assert [r["title"] for r in roles] == ["Closer", "Setter"]
    assert client.get("/api/roles/count").json() == 2
    assert client.get(f"/api/roles/{roles[1]['id']}").json()["title"] == "Setter"


def test_get_unknown_role_is_404(client):
    res = client.get("/api/roles/999")
    assert res.status_code == 404
    assert res.json()["detail"] == "Role not found"


def test_invalid_role_id_is_400(client):
    assert client.get("/api/roles/abc").status_code == 400


def test_update_role(client):
    role_id = client.post("/api/roles", json=VALID_ROLE).json()["id"]

    res = client.put(f"/api/roles/{role_id}", json={**VALID_ROLE, "title": "Lead Closer"})

    assert res.status_code == 200
    assert res.json()["title"] == "Lead Closer"


def test_update_validation_and_not_found(client):
    role_id = client.post("/api/roles", json=VALID_ROLE).json()["id"]

    assert client.put(f"/api/roles/{role_id}", json={**VALID_ROLE, "description": "short"}).status_code == 400
    assert client.put("/api/roles/999", json=VALID_ROLE).status_code == 404


def test_delete_last_role_is_rejected(client):
    role_id = client.post("/api/roles", json=VALID_ROLE).json()["id"]

    res = client.delete(f"/api/roles/{role_id}")

    assert res.status_code == 409
    assert "last" in res.json()["detail"]
    assert client.get("/api/roles/count").json() == 1


def test_delete_role(client):
    first = client.post("/api/roles", json=VALID_ROLE).json()["id"]
    second = client.post("/api/roles", json={**VALID_ROLE, "title": "Setter"}).json()["id"]

    assert client.delete(f"/api/roles/{first}").status_code == 204
    assert client.get(f"/api/roles/{second}").json()["isDefault"] is True
    assert client.delete("/api/roles/999").status_code == 404


def test_set_default_role(client):
    first = client.post("/api/roles", json=VALID_ROLE).json()["id"]
    second = client.post("/api/roles", json={**VALID_ROLE, "title": "Setter"}).json()["id"]

    res = client.put(f"/api/roles/{second}/default")

    assert res.status_code == 200
    assert res.json()["isDefault"] is True
    assert client.get(f"/api/roles/{first}").json()["isDefault"] is False
    assert client.put("/api/roles/999/default").status_code == 404


def test_role_products_roundtrip(client, make_product):
    role_id = client.post("/api/roles", json=VALID_ROLE).json()["id"]
    make_product(id="p1", name="Alpha")
    make_product(id="p2", name="Beta")

    assert client.get(f"/api/roles/{role_id}/products").json() == []

    res = client.put(f"/api/roles/{role_id}/products", json={"productIds": ["p2", "p1"]})
    assert res.status_code == 200
    assert [p["id"] for p in res.json()] == ["p1", "p2"]

    res = client.put(f"/api/roles/{role_id}/products", json={"productIds": ["p2"]})
    assert [p["id"] for p in res.json()] == ["p2"]


def test_role_products_errors(client, make_product):
    role_id = client.post("/api/roles", json=VALID_ROLE).json()["id"]
    make_product(id="p1")

    assert client.get("/api/roles/999/products").status_code == 404
    assert client.put("/api/roles/999/products", json={"productIds": []}).status_code == 404

    missing = client.put(f"/api/roles/{role_id}/products", json={"productIds": ["p1", "nope"]})
    assert missing.status_code == 404
    assert "nope" in missing.json()["detail"]

    not_array = client.put(f"/api/roles/{role_id}/products", json={"productIds": "p1"})
    assert not_array.status_code == 400
