import re

from fastapi.testclient import TestClient

from imagepost.settings import Settings

KEY_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}(/[A-Za-z0-9_-]+)?$"
)

IMAGE = b"\xff\xd8\xff\xe0 not really a jpeg \x00\x01\x02"


def upload(client, *, caption="a caption", filename="cat.jpg", data=IMAGE, include_image=True):
    files = {"image": (filename, data, "image/jpeg")} if include_image else None
    form = {"caption": caption} if caption is not None else {}
    return client.post("/v1/list", data=form, files=files)


def test_create_post_returns_key_and_stores_image(client, storage):
    resp = upload(client, caption="hello")

    assert resp.status_code == 200
    key = resp.json()["id"]
    assert KEY_PATTERN.match(key)
    assert key.endswith("/aGVsbG8")
    assert storage.objects[f"{key}/image.jpg"] == IMAGE
    assert storage.content_types[f"{key}/image.jpg"] == "image/jpeg"


def test_create_post_with_deterministic_key(make_client, settings, fixed_key_builder):
    client = make_client(settings, key_builder=fixed_key_builder)

    resp = upload(client, caption="hi", filename="Photo.PNG")

    assert resp.json() == {"id": "2024-03-09/00000000-0000-0000-0000-000000000001/aGk"}


def test_identical_uploads_produce_distinct_keys(client, storage):
    first = upload(client).json()["id"]
    second = upload(client).json()["id"]

    assert first != second
    assert len(storage.objects) == 2


def test_caption_is_optional(client, storage):
    resp = upload(client, caption=None)

    assert resp.status_code == 200
    key = resp.json()["id"]
    assert key.count("/") == 1
    assert f"{key}/image.jpg" in storage.objects


def test_caption_of_256_characters_succeeds(client):
    resp = upload(client, caption="c" * 256)

    assert resp.status_code == 200


def test_caption_of_257_characters_is_rejected(client, storage):
    resp = upload(client, caption="c" * 257)

    assert resp.status_code == 400
    assert "256" in resp.json()["detail"]
    assert storage.calls == []


def test_missing_image_is_rejected_without_writes(client, storage):
    resp = upload(client, include_image=False)

    assert resp.status_code == 400
    assert resp.json() == {"detail": "image form field is required"}
    assert storage.calls == []


def test_text_image_field_is_treated_as_missing(client, storage):
    resp = client.post("/v1/list", data={"caption": "hi", "image": "notafile"})

    assert resp.status_code == 400
    assert resp.json() == {"detail": "image form field is required"}
    assert storage.calls == []


def test_required_caption(make_client, storage):
    client = make_client(Settings(bucket="b", require_caption=True, metrics_enabled=False))

    resp = upload(client, caption="")

    assert resp.status_code == 400
    assert storage.calls == []


def test_storage_failure_is_500_with_empty_body(client, storage):
    storage.fail_all = True

    resp = upload(client)

    assert resp.status_code == 500
    assert resp.content == b""


def test_unexpected_storage_error_is_500_with_empty_body(make_client, settings, storage, monkeypatch):
    def broken_put(key, data, content_type=None):
        raise RuntimeError("backend exploded")

    monkeypatch.setattr(storage, "put_object", broken_put)
    app = make_client(settings).app
    client = TestClient(app, raise_server_exceptions=False)

    resp = upload(client)

    assert resp.status_code == 500
    assert resp.content == b""


def test_sibling_layout_stores_caption_object(sibling_client, storage):
    resp = upload(sibling_client, caption="x" * 1000, filename="dog.webp")

    assert resp.status_code == 200
    key = resp.json()["id"]
    assert key.count("/") == 1
    assert storage.objects[f"{key}/post.txt"] == b"x" * 1000
    assert storage.objects[f"{key}/image.webp"] == IMAGE


def test_sibling_layout_image_failure_leaves_caption(sibling_client, storage):
    storage.fail_on.add("image.jpg")

    resp = upload(sibling_client, caption="left behind")

    assert resp.status_code == 500
    assert resp.content == b""
    keys = storage.list_keys()
    assert len(keys) == 1
    assert keys[0].endswith("/post.txt")
    assert storage.objects[keys[0]] == b"left behind"


def test_sibling_layout_caption_failure_skips_image(sibling_client, storage):
    storage.fail_on.add("post.txt")

    resp = upload(sibling_client)

    assert resp.status_code == 500
    assert storage.objects == {}
    assert len(storage.calls) == 1


def test_list_is_not_implemented(client, storage):
    resp = client.get("/v1/list")

    assert resp.status_code == 501
    assert resp.content == b""
    assert storage.calls == []
