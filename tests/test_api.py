def test_login_returns_token_in_envelope(client):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "12345"})

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "Success"
    assert body["data"]["user"]["role"] == "admin"
    assert body["data"]["access_token"]


def test_wrong_password_is_rejected(client):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["status"] == "Failure"


def test_protected_routes_need_a_token(client):
    response = client.get("/api/inventory-items/")
    assert response.status_code in (401, 403)


def test_me(client, admin_headers):
    response = client.get("/api/auth/me", headers=admin_headers)
    assert response.json()["data"]["username"] == "admin"


def test_item_and_transaction_flow(client, admin_headers):
    created = client.post("/api/inventory-items/", headers=admin_headers, json={
        "sku": "CEM-50", "name": "Cement 50kg", "unit": "Sak", "price": 65000,
        "stock": 10, "conversion_unit": "Pallet", "conversion_ratio": 40,
    })
    assert created.status_code == 200, created.text
    item = created.json()["data"]
    assert created.json()["status_code"] == "101"

    tx = client.post("/api/transactions/", headers=admin_headers, json={
        "type": "inbound",
        "supplier": "PT Semen",
        "items": [{"item_id": item["id"], "qty": 1, "uom": "Pallet"}],
    })
    assert tx.status_code == 200, tx.text
    tx_id = tx.json()["data"]["id"]
    assert tx.json()["data"]["items"][0]["qty"] == 40

    stock = client.get(f"/api/inventory-items/{item['id']}", headers=admin_headers)
    assert stock.json()["data"]["stock"] == 50

    listing = client.get("/api/transactions/", headers=admin_headers,
                         params={"search": "semen", "type": "all"})
    assert listing.json()["data"]["total"] == 1

    deleted = client.delete(f"/api/transactions/{tx_id}", headers=admin_headers)
    assert deleted.status_code == 200
    stock = client.get(f"/api/inventory-items/{item['id']}", headers=admin_headers)
    assert stock.json()["data"]["stock"] == 10

    missing = client.delete(f"/api/transactions/{tx_id}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["status_code"] == "203"


def test_insufficient_stock_is_a_conflict(client, admin_headers):
    item = client.post("/api/inventory-items/", headers=admin_headers, json={
        "sku": "A", "name": "A", "stock": 1,
    }).json()["data"]

    response = client.post("/api/transactions/", headers=admin_headers, json={
        "type": "outbound", "items": [{"item_id": item["id"], "qty": 5}],
    })
    assert response.status_code == 409
    assert response.json()["status_code"] == "204"


def test_resolve_conversion_endpoint(client, admin_headers):
    item = client.post("/api/inventory-items/", headers=admin_headers, json={
        "sku": "EGG", "name": "Egg", "price": 2, "conversion_unit": "Tray", "conversion_ratio": 30,
    }).json()["data"]

    response = client.post("/api/conversions/resolve", headers=admin_headers, json={
        "item_id": item["id"], "qty": 2, "unit": "Tray",
    })
    data = response.json()["data"]
    assert data["base_qty"] == 60
    assert data["unit_price"] == 60
    assert data["total"] == 120

    bad = client.post("/api/conversions/resolve", headers=admin_headers, json={
        "item_id": item["id"], "qty": 2, "unit": "Crate",
    })
    assert bad.status_code == 400

    units = client.get(f"/api/conversions/units/{item['id']}", headers=admin_headers)
    assert units.json()["data"] == ["Pcs", "Tray"]


def test_viewer_can_read_but_not_write(client, user_headers):
    viewer = user_headers("viewer")

    assert client.get("/api/dashboard/stats", headers=viewer).status_code == 200
    response = client.post("/api/transactions/", headers=viewer, json={
        "type": "inbound", "items": [{"item_id": "x", "qty": 1}],
    })
    assert response.status_code == 403


def test_staff_cannot_manage_items_or_users(client, user_headers):
    staff = user_headers("staff")

    assert client.post("/api/inventory-items/", headers=staff,
                       json={"sku": "A", "name": "A"}).status_code == 403
    assert client.get("/api/users/", headers=staff).status_code == 403


def test_admin_manages_users(client, admin_headers):
    created = client.post("/api/users/", headers=admin_headers, json={
        "username": "gudang1", "name": "Gudang", "role": "staff", "password": "secret",
    })
    assert created.status_code == 200, created.text
    user_id = created.json()["data"]["id"]

    listing = client.get("/api/users/", headers=admin_headers)
    assert listing.json()["data"]["total"] == 2

    client.put("/api/users/", headers=admin_headers, json={"id": user_id, "active": False})
    login = client.post("/api/auth/login", json={"username": "gudang1", "password": "secret"})
    assert login.status_code == 403


def test_request_validation_is_enveloped(client, admin_headers):
    response = client.post("/api/transactions/", headers=admin_headers, json={
        "type": "inbound", "items": [{"item_id": "x", "qty": -1}],
    })
    assert response.status_code == 422
    assert response.json()["status"] == "Failure"


def test_resolve_rejects_nan_quantity(client, admin_headers):
    response = client.post(
        "/api/conversions/resolve",
        headers={**admin_headers, "Content-Type": "application/json"},
        content='{"item_id": "x", "qty": NaN}',
    )
    assert response.status_code == 422
    assert response.json()["status"] == "Failure"
