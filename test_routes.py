"""Tests for the Flask block host endpoints."""

import pytest

from blockchat import routes
from blockchat.app import create_app
from blockchat.plugin_registry import PluginRegistry


@pytest.fixture
def registry(monkeypatch, plugin, conversations):
    monkeypatch.delenv("PLUGIN_CALENDLY_ENABLED", raising=False)
    registry = PluginRegistry(conversations=conversations)
    registry.register(plugin)
    monkeypatch.setattr(routes, "get_plugin_registry", lambda: registry)
    return registry


@pytest.fixture
def client(registry):
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_process_block(client, block):
    response = client.post(
        "/blocks/calendly-plugin/process",
        json={"block": block, "context": {}, "conversation_id": "conv-1"},
    )

    assert response.status_code == 200
    assert response.get_json() == {
        "format": "text",
        "message": {"text": 'Available times for event "Demo Call":\n2024-12-30\n2024-12-31'},
    }

    conversation = client.get("/conversations/conv-1")
    assert conversation.status_code == 200
    assert conversation.get_json()["context"]["vars"]["typeuri"] == "U1"


def test_process_block_unknown_plugin(client, block):
    response = client.post("/blocks/nope/process", json={"block": block})
    assert response.status_code == 404


def test_process_block_requires_json(client):
    response = client.post("/blocks/calendly-plugin/process", data="hello")
    assert response.status_code == 400


@pytest.mark.parametrize("payload", [[1], "block", 42])
def test_process_block_rejects_non_object_json(client, payload):
    response = client.post("/blocks/calendly-plugin/process", json=payload)
    assert response.status_code == 400
    assert response.get_json() == {"error": "No JSON data provided"}


def test_missing_conversation(client):
    assert client.get("/conversations/unknown").status_code == 404


def test_list_plugins(client):
    response = client.get("/plugins")
    assert response.status_code == 200
    assert [p["name"] for p in response.get_json()] == ["calendly-plugin"]


def test_plugins_health(client):
    response = client.get("/plugins/health")
    assert response.get_json() == {"calendly-plugin": True}


def test_health(client):
    assert client.get("/health").get_json() == {"status": "healthy", "service": "blockchat"}
