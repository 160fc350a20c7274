"""
HTTP API tests
"""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from main import app
from app.api.deps import get_dev_state, get_record_store
from app.core.config import settings
from app.services.dev_state import DevStateStore, MemoryStorage
from app.services.record_store import MemoryRecordStore

@pytest.fixture
def dev_state():
    return DevStateStore(MemoryStorage())

@pytest.fixture
def store():
    return MemoryRecordStore()

@pytest.fixture
def client(dev_state, store):
    """Test client backed by in-memory state"""
    app.dependency_overrides[get_dev_state] = lambda: dev_state
    app.dependency_overrides[get_record_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()

def enable_generator(client):
    assert client.post("/dev/state/enabled", json={"enabled": True}).status_code == 200
    assert client.post("/dev/state/toggle/show_all_features").status_code == 200

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["version"] == "1.0.0"

def test_dev_state_defaults(client):
    response = client.get("/dev/state")
    data = response.json()["data"]
    assert data["enabled"] is False
    assert data["should_show_all_features"] is False

def test_generator_requires_dev_features(client, dev_state):
    dev_state.set_enabled(True)

    response = client.post("/dev/generate/guests")

    assert response.status_code == 403
    assert response.json()["error_code"] == "dev_mode_disabled"

def test_toggle_unknown_flag(client):
    assert client.post("/dev/state/toggle/turbo").status_code == 422

def test_generate_guests_as_dev_super_user(client, store):
    enable_generator(client)

    response = client.post("/dev/generate/guests", json={"guest_count": 12, "batch_size": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["result"]["generated"] == 12
    assert body["data"]["state"]["success"] is True
    assert len(store.select("guests", {"user_id": settings.DEV_SUPER_USER_ID})) == 12

def test_generate_rejects_out_of_range_counts(client):
    enable_generator(client)
    response = client.post("/dev/generate/tables", json={"table_count": settings.MAX_TABLE_COUNT + 1})
    assert response.status_code == 422

def test_generate_relationships_without_guests(client):
    enable_generator(client)

    response = client.post("/dev/generate/relationships")

    assert response.status_code == 400
    assert "at least 2 guests" in response.json()["message"]

def test_requests_without_token_need_dev_mode(client):
    response = client.get("/guests")
    assert response.status_code == 401
    assert response.json()["message"] == "User not authenticated"

def test_unknown_token_is_rejected(client, dev_state):
    dev_state.set_enabled(True)
    response = client.get("/guests", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401

def test_guest_list_search_filter_and_page_clamp(client, store):
    user_id = settings.DEV_SUPER_USER_ID
    store.insert("guests", [
        {"name": f"Guest {i:02d}", "email": f"guest{i}@example.com",
         "rsvp_status": "confirmed" if i % 2 else "pending", "user_id": user_id}
        for i in range(23)
    ])
    client.post("/dev/state/enabled", json={"enabled": True})

    data = client.get("/guests", params={"page": 9}).json()["data"]
    assert (data["page"], data["total_pages"], data["total_items"]) == (3, 3, 23)
    assert len(data["items"]) == 3

    data = client.get("/guests", params={"filter": "attending"}).json()["data"]
    assert data["total_items"] == 11

    data = client.get("/guests", params={"search": "guest 07"}).json()["data"]
    assert [g["name"] for g in data["items"]] == ["Guest 07"]

def test_guest_crud_and_table_assignment(client):
    client.post("/dev/state/enabled", json={"enabled": True})

    created = client.post("/guests", json={"name": "Anna Smith", "email": "anna@example.com"})
    assert created.status_code == 201
    guest_id = created.json()["data"]["id"]

    assigned = client.put(f"/guests/{guest_id}/table", json={"table_name": "Rose 1"})
    assert assigned.json()["data"]["table_assignment"] == "Rose 1"

    stats = client.get("/guests/stats").json()["data"]
    assert stats["pending"] == 1 and stats["total"] == 1

    assert client.delete(f"/guests/{guest_id}").status_code == 200
    assert client.get(f"/guests/{guest_id}").status_code == 404

def test_guest_csv_export(client, store):
    client.post("/dev/state/enabled", json={"enabled": True})
    assert client.get("/guests/export.csv").status_code == 404

    store.insert("guests", [{
        "name": "Smith, Anna", "email": "anna@example.com", "rsvp_status": "confirmed",
        "user_id": settings.DEV_SUPER_USER_ID,
    }])
    response = client.get("/guests/export.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "guest_list.csv" in response.headers["content-disposition"]
    assert '"Smith, Anna"' in response.text

def test_debug_view_requires_flag(client):
    client.post("/dev/state/enabled", json={"enabled": True})
    assert client.get("/dev/debug").status_code == 403

    client.post("/dev/state/toggle/show_debug_info")
    data = client.get("/dev/debug").json()["data"]
    assert data["user_id"] == settings.DEV_SUPER_USER_ID
    assert data["store"] == "memory"
    assert data["record_counts"]["guests"] == 0

def test_table_create_update_delete(client):
    client.post("/dev/state/enabled", json={"enabled": True})

    created = client.post("/tables", json={"name": "Rose 1", "shape": "oval", "capacity": 6})
    assert created.status_code == 201
    table_id = created.json()["data"]["id"]

    guest_id = client.post("/guests", json={"name": "Anna Smith"}).json()["data"]["id"]
    client.put(f"/guests/{guest_id}/table", json={"table_name": "Rose 1"})

    updated = client.put(f"/tables/{table_id}", json={"capacity": 10, "position_x": 300, "position_y": 150})
    data = updated.json()["data"]
    assert (data["name"], data["shape"], data["capacity"]) == ("Rose 1", "oval", 10)
    assert (data["position_x"], data["position_y"]) == (300, 150)
    assert data["guests"] == [guest_id]

    assert client.put(f"/tables/{table_id}", json={"shape": "square"}).status_code == 422

    assert client.delete(f"/tables/{table_id}").status_code == 200
    assert client.get("/tables").json()["data"] == []
    assert client.delete(f"/tables/{table_id}").status_code == 404

def test_tables_are_owner_scoped(client, store):
    store.insert("tables", [{"id": "t1", "name": "Other", "shape": "round", "capacity": 8, "user_id": "someone-else"}])
    client.post("/dev/state/enabled", json={"enabled": True})

    assert client.put("/tables/t1", json={"capacity": 2}).status_code == 404
    assert client.delete("/tables/t1").status_code == 404
    assert store.select("tables", {"id": "t1"})[0]["capacity"] == 8

def test_manual_relationships_allow_duplicate_pairs(client):
    client.post("/dev/state/enabled", json={"enabled": True})
    anna = client.post("/guests", json={"name": "Anna"}).json()["data"]["id"]
    ben = client.post("/guests", json={"name": "Ben"}).json()["data"]["id"]

    first = client.post("/relationships", json={
        "guest_id": anna, "related_guest_id": ben, "relationship_type": "preference",
    })
    second = client.post("/relationships", json={
        "guest_id": ben, "related_guest_id": anna, "relationship_type": "conflict",
    })
    assert first.status_code == 201 and second.status_code == 201
    assert len(client.get("/relationships").json()["data"]) == 2

    relationship_id = first.json()["data"]["id"]
    assert client.delete(f"/relationships/{relationship_id}").status_code == 200
    assert [r["relationship_type"] for r in client.get("/relationships").json()["data"]] == ["conflict"]
    assert client.delete(f"/relationships/{relationship_id}").status_code == 404

def test_relationship_requires_two_own_guests(client, store):
    store.insert("guests", [{"id": "foreign", "name": "Zed", "user_id": "someone-else"}])
    client.post("/dev/state/enabled", json={"enabled": True})
    anna = client.post("/guests", json={"name": "Anna"}).json()["data"]["id"]

    same = client.post("/relationships", json={
        "guest_id": anna, "related_guest_id": anna, "relationship_type": "preference",
    })
    assert same.status_code == 400

    foreign = client.post("/relationships", json={
        "guest_id": anna, "related_guest_id": "foreign", "relationship_type": "conflict",
    })
    assert foreign.status_code == 404

def test_guest_list_pagination_params(client, store):
    store.insert("guests", [
        {"name": f"Guest {i:02d}", "user_id": settings.DEV_SUPER_USER_ID} for i in range(7)
    ])
    client.post("/dev/state/enabled", json={"enabled": True})

    data = client.get("/guests", params={"page": 2, "per_page": 5}).json()["data"]
    assert (data["page"], data["per_page"], data["total_pages"]) == (2, 5, 2)
    assert [g["name"] for g in data["items"]] == ["Guest 05", "Guest 06"]

    assert client.get("/guests", params={"page": 0}).status_code == 400
    assert client.get("/guests", params={"per_page": 500}).status_code == 400

def test_progress_socket_rejects_anonymous_clients(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/progress"):
            pass

def test_progress_socket_rejects_unknown_token(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_TOKENS", {"good-token": "user-7"})
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/progress?token=bad-token"):
            pass

def test_progress_socket_subscribes_token_owner(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_TOKENS", {"good-token": "user-7"})

    with client.websocket_connect("/ws/progress?token=good-token") as websocket:
        hello = websocket.receive_json()
        assert hello == {"type": "connection", "message": "Subscribed to progress for user-7"}

        websocket.send_json({"type": "ping", "timestamp": 1})
        assert websocket.receive_json() == {"type": "pong", "timestamp": 1}
