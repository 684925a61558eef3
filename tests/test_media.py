from app.config import settings
from app.modules.media import s3_storage
from app.modules.media.service import build_object_key, classify_media_type


def _upload(client, headers, name="photo.JPG", content=b"jpegdata", content_type="image/jpeg"):
    return client.post("/api/v1/media", headers=headers, files={"file": (name, content, content_type)})


def test_classify_media_type():
    assert classify_media_type("image/png") == "image"
    assert classify_media_type("video/mp4") == "video"
    assert classify_media_type("application/pdf") == "document"
    assert classify_media_type(None) == "document"


def test_build_object_key_uses_last_extension():
    assert build_object_key("u1", "archive.tar.gz", now_ms=1700000000000) == "u1/1700000000000.gz"
    assert build_object_key("u1", "README", now_ms=5) == "u1/5.README"


def test_upload_to_supabase_storage(client, fake_db, make_student):
    student = make_student()
    resp = _upload(client, student.headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["file_name"] == "photo.JPG"
    assert body["file_type"] == "image"
    assert body["file_size"] == len(b"jpegdata")
    assert body["file_url"].startswith("https://fake.supabase.co/storage/v1/object/public/media/")

    (bucket, path), = fake_db.storage.objects.keys()
    assert bucket == "media"
    assert path.startswith(f"{student.user_id}/") and path.endswith(".JPG")
    _, options = fake_db.storage.objects[(bucket, path)]
    assert options == {"content-type": "image/jpeg"}


def test_upload_to_s3_when_configured(client, fake_db, make_student, monkeypatch):
    uploads = []

    class FakeS3Client:
        def put_object(self, **kwargs):
            uploads.append(kwargs)

    monkeypatch.setattr(settings, "aws_access_key_id", "AKIA")
    monkeypatch.setattr(settings, "aws_secret_access_key", "secret")
    monkeypatch.setattr(settings, "s3_bucket_name", "batchboard-media")
    monkeypatch.setattr(s3_storage.boto3, "client", lambda *args, **kwargs: FakeS3Client())

    student = make_student()
    resp = _upload(client, student.headers, name="clip.mp4", content_type="video/mp4")
    assert resp.status_code == 201
    body = resp.json()
    assert body["file_type"] == "video"
    assert body["file_url"].startswith("https://batchboard-media.s3.us-east-1.amazonaws.com/media/")
    assert uploads[0]["Bucket"] == "batchboard-media"
    assert uploads[0]["ContentType"] == "video/mp4"
    assert fake_db.storage.objects == {}


def test_upload_size_limit(client, make_student, monkeypatch):
    monkeypatch.setattr(settings, "max_media_upload_bytes", 4)
    student = make_student()
    resp = _upload(client, student.headers, content=b"12345")
    assert resp.status_code == 413


def test_storage_failure_is_reported(client, fake_db, make_student, monkeypatch):
    student = make_student()

    def broken_upload(self, path, file, file_options=None):
        raise Exception("bucket not found")

    monkeypatch.setattr(type(fake_db.storage.from_("media")), "upload", broken_upload)
    resp = _upload(client, student.headers)
    assert resp.status_code == 500
    assert "bucket not found" in resp.json()["detail"]
    assert fake_db.rows("media") == []


def test_list_and_count_media(client, make_student):
    alice = make_student()
    bob = make_student("STU002", "Bob Stone")
    _upload(client, alice.headers, name="one.png", content_type="image/png")
    _upload(client, alice.headers, name="two.pdf", content_type="application/pdf")
    _upload(client, bob.headers, name="bob.png", content_type="image/png")

    listed = client.get("/api/v1/media", headers=alice.headers).json()
    assert [m["file_name"] for m in listed] == ["two.pdf", "one.png"]
    assert listed[0]["file_type"] == "document"
    assert client.get("/api/v1/media/count", headers=alice.headers).json() == {"count": 2}
    assert client.get("/api/v1/media", headers=alice.headers, params={"limit": 1, "offset": 1}).json()[0]["file_name"] == "one.png"
    assert client.get("/api/v1/media").status_code in (401, 403)
