from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from rotation_proxy.api.app import create_app
from rotation_proxy.reset_keys import ResetType, build_reset_key_table


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    # Reset-key checks never touch the upstream; no credential needed.
    monkeypatch.delenv("REPLICATE_API_KEY", raising=False)
    return TestClient(create_app())


def test_default_reset_key_is_accepted(client: TestClient) -> None:
    resp = client.post("/validate-reset-key", json={"resetKey": "ALETO_RESET_DEFAULT_2024"})
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "resetType": "default",
        "creditsGranted": 0,
        "message": "Credits reset to default (2 credits)",
    }


def test_zero_reset_key_is_accepted(client: TestClient) -> None:
    resp = client.post("/validate-reset-key", json={"resetKey": "ALETO_RESET_ZERO_2024"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["resetType"] == "zero"
    assert body["message"] == "Credits reset to zero"


def test_unknown_reset_key_is_semantic_failure_with_200(client: TestClient) -> None:
    resp = client.post("/validate-reset-key", json={"resetKey": "nonexistent"})
    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "Invalid reset key"}


def test_lookup_is_case_sensitive(client: TestClient) -> None:
    resp = client.post("/validate-reset-key", json={"resetKey": "aleto_reset_default_2024"})
    assert resp.status_code == 200
    assert resp.json()["success"] is False


def test_non_string_reset_key_is_invalid_not_400(client: TestClient) -> None:
    resp = client.post("/validate-reset-key", json={"resetKey": 2024})
    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "Invalid reset key"}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"resetKey": ""},
        {"resetKey": None},
        {"other": "x"},
        {"resetKey": 0},
        {"resetKey": 0.0},
        {"resetKey": False},
    ],
)
def test_missing_reset_key_is_400(client: TestClient, body: dict) -> None:
    resp = client.post("/validate-reset-key", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Reset key is required"}


def test_no_body_is_400(client: TestClient) -> None:
    resp = client.post("/validate-reset-key")
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.parametrize("body", [[], ["ALETO_RESET_DEFAULT_2024"], "ALETO_RESET_DEFAULT_2024", 42])
def test_non_object_body_is_missing_key_400(client: TestClient, body: object) -> None:
    resp = client.post("/validate-reset-key", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Reset key is required"}


def test_table_is_read_only_and_exact_match() -> None:
    table = build_reset_key_table()
    assert len(table) == 4
    hit = table.lookup("DEV_RESET_CREDITS_2024")
    assert hit is not None
    assert hit.reset_type is ResetType.default
    assert hit.credits_granted == 0
    assert table.lookup(" DEV_RESET_CREDITS_2024") is None
    assert table.lookup(None) is None
    assert "ALETO_ADMIN_RESET_2024" in table
    with pytest.raises(TypeError):
        table._entries["NEW_KEY"] = hit  # type: ignore[index]
