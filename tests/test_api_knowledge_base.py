"""
Tests for kbchat.api.knowledge_base: the REST surface over the store.
"""

import pytest

CHATS = "/api/kb/chats"
TAGS = "/api/kb/tags"


def _payload(title="Intro", tags=None, highlighted=0):
    return {
        "title": title,
        "messages": [
            {"id": "m1", "role": "user", "content": f"What is {title}?"},
            {"id": "m2", "role": "assistant", "content": f"{title} is a chat."},
        ],
        "highlightedQAIndex": highlighted,
        "tags": tags or [],
    }


def _save(client, title="Intro", tags=None):
    resp = client.post(CHATS, json=_payload(title, tags))
    assert resp.status_code == 200, resp.text
    return resp.json()


def _tag_counts(client):
    return {t["name"]: t["count"] for t in client.get(TAGS).json()}


# ── Save / get / list ──────────────────────────────────────────────

def test_save_chat_returns_stored_record(client):
    chat = _save(client, tags=["a", "b"])
    assert chat["isPinned"] is False
    assert chat["isFlagged"] is False
    assert chat["createdAt"] == chat["updatedAt"]
    assert chat["tags"] == ["a", "b"]

    fetched = client.get(f"{CHATS}/{chat['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == chat


def test_save_chat_rejects_malformed_body(client):
    resp = client.post(CHATS, json={"title": "No messages"})
    assert resp.status_code == 422


def test_list_chats_query_options(client):
    first = _save(client, "Alpha", tags=["python"])
    second = _save(client, "Beta")
    client.post(f"{CHATS}/{second['id']}/pin")

    assert [c["id"] for c in client.get(CHATS).json()] == [second["id"], first["id"]]
    assert [c["id"] for c in client.get(CHATS, params={"tag": "python"}).json()] == [first["id"]]
    assert [c["id"] for c in client.get(CHATS, params={"search": "ALPHA"}).json()] == [first["id"]]
    assert [c["id"] for c in client.get(CHATS, params={"sort": "oldest"}).json()] == [first["id"], second["id"]]
    assert [c["id"] for c in client.get(CHATS, params={"filter": "unpinned"}).json()] == [first["id"]]
    assert len(client.get(CHATS, params={"limit": 1}).json()) == 1


@pytest.mark.parametrize("params", [
    {"sort": "random"},
    {"filter": "flagged"},
    {"limit": 0},
    {"limit": "many"},
])
def test_list_chats_rejects_invalid_options(client, params):
    assert client.get(CHATS, params=params).status_code == 422


# ── Mutations ──────────────────────────────────────────────────────

def test_toggle_pin(client):
    chat = _save(client)
    pinned = client.post(f"{CHATS}/{chat['id']}/pin").json()
    assert pinned["isPinned"] is True
    assert pinned["updatedAt"] > chat["updatedAt"]
    assert client.post(f"{CHATS}/{chat['id']}/pin").json()["isPinned"] is False


def test_flag_hides_chat_from_listing(client):
    chat = _save(client)
    resp = client.post(f"{CHATS}/{chat['id']}/flag", json={"reason": "incorrect"})
    assert resp.status_code == 200
    assert resp.json()["flagReason"] == "incorrect"
    assert client.get(CHATS).json() == []
    # Still retrievable directly
    assert client.get(f"{CHATS}/{chat['id']}").json()["isFlagged"] is True


def test_add_tag_twice_counts_once(client):
    chat = _save(client)
    for _ in range(2):
        resp = client.post(f"{CHATS}/{chat['id']}/tags", json={"tag": "python"})
        assert resp.status_code == 200
    assert resp.json()["tags"] == ["python"]
    assert _tag_counts(client) == {"python": 1}


@pytest.mark.parametrize("body, status", [({"tag": ""}, 422), ({"tag": "   "}, 400), ({}, 422)])
def test_add_tag_rejects_blank(client, body, status):
    chat = _save(client)
    resp = client.post(f"{CHATS}/{chat['id']}/tags", json=body)
    assert resp.status_code == status


def test_delete_chat_releases_tags(client):
    chat = _save(client, tags=["solo", "shared"])
    _save(client, "Other", tags=["shared"])

    resp = client.delete(f"{CHATS}/{chat['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == chat["id"]
    assert _tag_counts(client) == {"shared": 1}
    assert client.get(f"{CHATS}/{chat['id']}").status_code == 404


def test_intro_scenario(client):
    chat = _save(client, "Intro", tags=["a", "b"])
    assert _tag_counts(client) == {"a": 1, "b": 1}

    resp = client.delete(f"{CHATS}/{chat['id']}/tags/a")
    assert resp.status_code == 200
    assert resp.json()["tags"] == ["b"]
    assert [t["name"] for t in client.get(TAGS).json()] == ["b"]


# ── Not found ──────────────────────────────────────────────────────

@pytest.mark.parametrize("method, suffix, body", [
    ("get", "", None),
    ("delete", "", None),
    ("post", "/pin", None),
    ("post", "/flag", {"reason": "x"}),
    ("post", "/tags", {"tag": "x"}),
    ("delete", "/tags/x", None),
])
def test_unknown_chat_is_not_found(client, method, suffix, body):
    missing = "00000000-0000-4000-8000-000000000000"
    kwargs = {"json": body} if body is not None else {}
    resp = client.request(method.upper(), f"{CHATS}/{missing}{suffix}", **kwargs)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Chat not found", "details": missing}
    assert client.get(TAGS).json() == []


@pytest.mark.parametrize("tag", ["ci/cd", "team/backend/api"])
def test_tag_containing_slash_can_be_removed(client, tag):
    chat = _save(client)
    added = client.post(f"{CHATS}/{chat['id']}/tags", json={"tag": tag})
    assert added.json()["tags"] == [tag]

    resp = client.delete(f"{CHATS}/{chat['id']}/tags/{tag}")
    assert resp.status_code == 200
    assert resp.json()["tags"] == []
    assert client.get(TAGS).json() == []


def test_unknown_keys_in_stored_chat_are_not_returned(client, store):
    import json

    chat = _save(client)
    path = store.chats._chat_file(chat["id"])
    doc = json.loads(path.read_text())
    doc["legacyField"] = "leftover"
    path.write_text(json.dumps(doc))

    assert "legacyField" not in client.get(f"{CHATS}/{chat['id']}").json()
    assert "legacyField" not in client.get(CHATS).json()[0]


def test_corrupt_store_is_structured_server_error(client, store):
    store.tags.tags_file.write_text("{not json")
    resp = client.get(TAGS)
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Knowledge base storage error"
    assert "tags.json" in body["details"]
