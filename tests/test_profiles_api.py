# tests/test_profiles_api.py
"""
Endpoint tests over httpx's ASGI transport.

Background tasks run inside the same ASGI call, so by the time a POST
returns here the enrichment task has already finished.
"""
from __future__ import annotations

import json
import uuid

import pytest

from api.app.dependencies import get_media_storage
from api.app.main import app
from services.media_storage import LocalMediaStorage


class DiskFullStorage(LocalMediaStorage):
    async def save(self, content, filename, content_type):
        raise OSError("disk full")


class UndeletableStorage(LocalMediaStorage):
    async def delete(self, locator):
        raise PermissionError("read-only bucket")


async def _submit(client, raw_text="", user_name="user_1", files=None, **extra):
    data = {"rawText": raw_text, "userName": user_name, **extra}
    return await client.post("/api/profiles", data=data, files=files or None)


def _images(count):
    return [("media", (f"photo{i}.jpg", b"\xff\xd8" + bytes([i]) * 32, "image/jpeg")) for i in range(count)]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_text_submission_is_enriched_after_response(client, fake_llm):
    fake_llm.return_value = json.dumps({"name": "Маша", "age": 21, "height": 177, "about": "Маша, студентка"})

    response = await _submit(client, "Маша, 21, рост 177", chatId="12345")

    assert response.status_code == 201
    body = response.json()
    assert body["rawText"] == "Маша, 21, рост 177"
    assert body["about"] == "Маша, 21, рост 177"
    assert body["name"] is None and body["age"] is None
    assert body["userName"] == "user_1"
    assert body["chatId"] == 12345
    assert body["media"] == []
    uuid.UUID(body["id"])

    listed = (await client.get("/api/profiles")).json()
    assert len(listed) == 1
    assert listed[0]["name"] == "Маша"
    assert listed[0]["age"] == 21
    assert listed[0]["height"] == 177
    assert listed[0]["about"] == "Маша, студентка"
    fake_llm.assert_awaited_once()


@pytest.mark.asyncio
async def test_media_only_submission_skips_enrichment(client, fake_llm, storage):
    response = await _submit(client, "", files=_images(2))

    assert response.status_code == 201
    body = response.json()
    assert body["about"] == ""
    assert [m["type"] for m in body["media"]] == ["image", "image"]
    assert all(m["url"].startswith("/uploads/media-") for m in body["media"])
    assert len(list(storage.root.iterdir())) == 2
    fake_llm.assert_not_called()


@pytest.mark.asyncio
async def test_video_upload_is_typed_video(client):
    files = [("media", ("clip.mp4", b"\x00\x00\x00\x18ftyp", "video/mp4"))]
    response = await _submit(client, "", files=files)
    assert response.json()["media"][0]["type"] == "video"


@pytest.mark.asyncio
async def test_enrichment_failure_lands_in_notes(client, fake_llm):
    fake_llm.side_effect = RuntimeError("quota exceeded")

    await _submit(client, "Аня, 24")

    profile = (await client.get("/api/profiles")).json()[0]
    assert profile["notes"].startswith("AI enrichment failed: ")
    assert "quota exceeded" in profile["notes"]
    assert profile["about"] == "Аня, 24"
    assert profile["name"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw_text, user_name, message",
    [
        ("", "user_1", "Provide the profile text or attach at least one media file."),
        ("   ", "user_1", "Provide the profile text or attach at least one media file."),
        ("Маша", "", "Missing required field: userName"),
    ],
)
async def test_invalid_submissions_are_rejected(client, raw_text, user_name, message):
    response = await _submit(client, raw_text, user_name=user_name)
    assert response.status_code == 400
    assert response.json() == {"message": message}
    assert (await client.get("/api/profiles")).json() == []


@pytest.mark.asyncio
async def test_non_numeric_chat_id_is_rejected(client):
    response = await _submit(client, "Маша", chatId="abc")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_storage_failure_leaves_nothing_behind(client, tmp_path, fake_llm):
    app.dependency_overrides[get_media_storage] = lambda: DiskFullStorage(tmp_path / "full")

    response = await _submit(client, "Маша", files=_images(1))

    assert response.status_code == 500
    assert response.json() == {"message": "Server error while creating the profile"}
    assert (await client.get("/api/profiles")).json() == []
    fake_llm.assert_not_called()


@pytest.mark.asyncio
async def test_put_replaces_editable_fields(client):
    created = (await _submit(client, "Маша, 21")).json()

    update = {"name": "Мария", "age": 22, "height": 175, "weight": 55,
              "measurements": "90-60-90", "about": "edited", "notes": "checked"}
    response = await client.put(f"/api/profiles/{created['id']}", json=update)

    assert response.status_code == 200
    body = response.json()
    for key, value in update.items():
        assert body[key] == value
    assert body["rawText"] == "Маша, 21"


@pytest.mark.asyncio
async def test_put_with_partial_body_clears_missing_fields(client, fake_llm):
    fake_llm.return_value = json.dumps({"name": "Маша", "age": 21})
    created = (await _submit(client, "Маша, 21")).json()

    response = await client.put(f"/api/profiles/{created['id']}", json={"name": "Маша"})

    body = response.json()
    assert body["name"] == "Маша"
    assert body["age"] is None
    assert body["about"] is None


@pytest.mark.asyncio
async def test_put_unknown_profile_is_404(client):
    response = await client.put(f"/api/profiles/{uuid.uuid4()}", json={"name": "x"})
    assert response.status_code == 404
    assert response.json() == {"message": "Profile not found"}


@pytest.mark.asyncio
async def test_delete_removes_rows_and_files(client, storage):
    created = (await _submit(client, "Маша", files=_images(2))).json()
    assert len(list(storage.root.iterdir())) == 2

    response = await client.delete(f"/api/profiles/{created['id']}")

    assert response.status_code == 204
    assert (await client.get("/api/profiles")).json() == []
    assert list(storage.root.iterdir()) == []


@pytest.mark.asyncio
async def test_delete_succeeds_when_blob_removal_fails(client, tmp_path):
    app.dependency_overrides[get_media_storage] = lambda: UndeletableStorage(tmp_path / "ro")
    created = (await _submit(client, "Маша", files=_images(1))).json()

    response = await client.delete(f"/api/profiles/{created['id']}")

    assert response.status_code == 204
    assert (await client.get("/api/profiles")).json() == []


@pytest.mark.asyncio
async def test_delete_unknown_profile_is_404(client):
    response = await client.delete(f"/api/profiles/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_malformed_id_is_rejected(client):
    response = await client.delete("/api/profiles/not-a-uuid")
    assert response.status_code == 422
    assert "profile_id" in response.json()["message"]


@pytest.mark.asyncio
async def test_list_search_and_sort(client, fake_llm):
    for name, age in [("Masha", 21), ("Anya", 30), ("Olya", 25)]:
        fake_llm.return_value = json.dumps({"name": name, "age": age})
        await _submit(client, f"{name}, {age}")

    by_age = (await client.get("/api/profiles", params={"sort": "age", "order": "asc"})).json()
    assert [p["age"] for p in by_age] == [21, 25, 30]

    found = (await client.get("/api/profiles", params={"q": "ANYA"})).json()
    assert [p["name"] for p in found] == ["Anya"]

    newest_first = (await client.get("/api/profiles")).json()
    assert newest_first[0]["name"] == "Olya"


@pytest.mark.asyncio
async def test_unknown_sort_key_is_rejected(client):
    response = await client.get("/api/profiles", params={"sort": "notes"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_stats(client):
    await _submit(client, "Маша")
    await _submit(client, "Аня")

    response = await client.get("/api/profiles/stats")

    assert response.status_code == 200
    assert response.json() == {"total": 2, "today": 2, "lastWeek": 2}


@pytest.mark.asyncio
async def test_malformed_put_body_uses_message_envelope(client):
    created = (await _submit(client, "Маша, 21")).json()

    response = await client.put(f"/api/profiles/{created['id']}", json={"age": "twenty"})

    assert response.status_code == 422
    body = response.json()
    assert set(body) == {"message"}
    assert body["message"].startswith("Invalid request: ")
    assert "age" in body["message"]


@pytest.mark.asyncio
async def test_malformed_query_uses_message_envelope(client):
    response = await client.get("/api/profiles", params={"order": "sideways"})
    assert response.status_code == 422
    assert "order" in response.json()["message"]
