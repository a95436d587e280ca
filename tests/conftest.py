import os

# must be set before shared.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from shared.core.database import Base, WarehouseSessionLocal, warehouse_engine
from shared.core.schemas import UserToken
from shared.data.admin_seed import seed_admin
from shared.models.users import Users
import warehouse_service.app.models  # noqa: F401
from warehouse_service.app.crud.inventory import inventory_items_crud
from warehouse_service.app.schemas.inventory.inventory_items_schemas import InventoryItemCreate


@pytest.fixture
def db():
    Base.metadata.create_all(bind=warehouse_engine)
    session = WarehouseSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=warehouse_engine)


@pytest.fixture
def staff_user():
    return UserToken(user_id="user-staff", username="staff", name="Staff", role="staff")


@pytest.fixture
def make_item(db):
    def _make(sku="SKU-1", **kwargs):
        data = {"sku": sku, "name": f"Item {sku}", "price": 10, "stock": 0}
        data.update(kwargs)
        return inventory_items_crud.create_item(db, InventoryItemCreate(**data))
    return _make


@pytest.fixture
def client(db):
    from warehouse_service.app.main import app
    seed_admin(db)
    return TestClient(app)


def _login(client, username, password):
    response = client.post(
        "/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]["access_token"]


@pytest.fixture
def admin_headers(client):
    token = _login(client, "admin", "12345")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client, db):
    def _headers(role):
        user = Users(username=f"{role}-user", name=role.title(), role=role)
        user.set_password("secret")
        db.add(user)
        db.commit()
        token = _login(client, user.username, "secret")
        return {"Authorization": f"Bearer {token}"}
    return _headers
