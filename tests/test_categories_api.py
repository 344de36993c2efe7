"""API tests for category management."""

CATEGORIES_URL = "/api/v1/categories"


def test_system_categories_are_listed_first(client, auth_headers, create_category):
    create_category("Cameras")

    response = client.get(CATEGORIES_URL, headers=auth_headers)

    categories = response.json()["data"]
    assert response.status_code == 200
    assert len(categories) == 7
    assert all(category["isSystem"] for category in categories[:6])
    assert categories[-1]["name"] == "Cameras"
    assert categories[-1]["isSystem"] is False
    assert {category["id"] for category in categories[:6]} >= {"sys-electronics", "sys-other"}


def test_item_counts_skip_deleted_items(client, auth_headers, create_item):
    create_item(categoryId="sys-books")
    deleted = create_item(categoryId="sys-books")
    client.delete(f"/api/v1/items/{deleted['id']}", headers=auth_headers)

    categories = client.get(CATEGORIES_URL, headers=auth_headers).json()["data"]

    counts = {category["id"]: category["itemCount"] for category in categories}
    assert counts["sys-books"] == 1
    assert counts["sys-electronics"] == 0


def test_item_counts_only_include_own_items(client, auth_headers, other_auth_headers, create_item):
    create_item(categoryId="sys-books")
    client.post(
        "/api/v1/items",
        json={"name": "Novel", "purchasePrice": 20, "purchaseDate": "2024-01-01", "categoryId": "sys-books"},
        headers=other_auth_headers,
    )

    mine = client.get(CATEGORIES_URL, headers=auth_headers).json()["data"]
    theirs = client.get(CATEGORIES_URL, headers=other_auth_headers).json()["data"]

    assert {c["id"]: c["itemCount"] for c in mine}["sys-books"] == 1
    assert {c["id"]: c["itemCount"] for c in theirs}["sys-books"] == 1
    detail = client.get(f"{CATEGORIES_URL}/sys-books/stats", headers=auth_headers).json()["data"]
    assert detail["itemCount"] == 1


def test_other_users_categories_are_hidden(client, other_auth_headers, create_category):
    create_category("Mine only")

    categories = client.get(CATEGORIES_URL, headers=other_auth_headers).json()["data"]

    assert "Mine only" not in [category["name"] for category in categories]


def test_create_category(client, auth_headers):
    response = client.post(CATEGORIES_URL, json={"name": "  Tools ", "icon": "wrench"}, headers=auth_headers)

    body = response.json()
    assert response.status_code == 201
    assert body["message"] == "Category created successfully"
    assert body["data"]["name"] == "Tools"
    assert body["data"]["icon"] == "wrench"
    assert body["data"]["isSystem"] is False


def test_duplicate_name_is_rejected(client, auth_headers, create_category):
    create_category("Tools")

    response = client.post(CATEGORIES_URL, json={"name": "Tools"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"] == 'Category "Tools" already exists'


def test_same_name_for_different_users(client, other_auth_headers, create_category):
    create_category("Tools")

    response = client.post(CATEGORIES_URL, json={"name": "Tools"}, headers=other_auth_headers)

    assert response.status_code == 201


def test_name_length_is_validated(client, auth_headers):
    response = client.post(CATEGORIES_URL, json={"name": "x" * 51}, headers=auth_headers)

    assert response.status_code == 422


def test_delete_own_empty_category(client, auth_headers, create_category):
    category = create_category()

    response = client.delete(f"{CATEGORIES_URL}/{category['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get(f"{CATEGORIES_URL}/{category['id']}/stats", headers=auth_headers).status_code == 404


def test_delete_missing_category(client, auth_headers):
    response = client.delete(f"{CATEGORIES_URL}/does-not-exist", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Category not found"


def test_system_category_cannot_be_deleted(client, auth_headers):
    response = client.delete(f"{CATEGORIES_URL}/sys-other", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "System categories cannot be deleted"


def test_foreign_category_cannot_be_deleted(client, other_auth_headers, create_category):
    category = create_category()

    response = client.delete(f"{CATEGORIES_URL}/{category['id']}", headers=other_auth_headers)

    assert response.status_code == 403


def test_category_with_items_cannot_be_deleted(client, auth_headers, create_category, create_item):
    category = create_category()
    create_item(categoryId=category["id"])
    create_item(categoryId=category["id"])

    response = client.delete(f"{CATEGORIES_URL}/{category['id']}", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Category still has 2 items and cannot be deleted"


def test_category_with_only_deleted_items_can_be_deleted(client, auth_headers, create_category, create_item):
    category = create_category()
    item = create_item(categoryId=category["id"])
    client.delete(f"/api/v1/items/{item['id']}", headers=auth_headers)

    response = client.delete(f"{CATEGORIES_URL}/{category['id']}", headers=auth_headers)

    assert response.status_code == 200


def test_category_stats(client, auth_headers, create_category, create_item):
    category = create_category()
    create_item(categoryId=category["id"])

    response = client.get(f"{CATEGORIES_URL}/{category['id']}/stats", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["itemCount"] == 1


def test_foreign_category_stats_are_hidden(client, other_auth_headers, create_category):
    category = create_category()

    response = client.get(f"{CATEGORIES_URL}/{category['id']}/stats", headers=other_auth_headers)

    assert response.status_code == 404
