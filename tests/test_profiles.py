def test_list_profiles_filters_and_collects_skills(client, make_student):
    make_student("STU001", "Alice Walker", bio="Loves robotics", skills=["Python", "CAD"])
    make_student("STU002", "Bob Stone", skills=["Design"])
    make_student("STU003", "Carla Diaz", skills=["Python"], public=False)

    body = client.get("/api/v1/profiles").json()
    assert [p["student_id"] for p in body["profiles"]] == ["STU001", "STU002"]
    assert body["total"] == 2
    assert body["all_skills"] == ["CAD", "Design", "Python"]
    assert body["profiles"][0]["initials"] == "AW"

    by_search = client.get("/api/v1/profiles", params={"q": "ROBOT"}).json()
    assert [p["student_id"] for p in by_search["profiles"]] == ["STU001"]
    assert by_search["total"] == 2

    by_skill = client.get("/api/v1/profiles", params={"skill": "Design"}).json()
    assert [p["student_id"] for p in by_skill["profiles"]] == ["STU002"]


def test_featured_and_count(client, make_student):
    make_student("STU001", "Alice Walker")
    make_student("STU002", "Bob Stone")
    make_student("STU003", "Carla Diaz", public=False)

    featured = client.get("/api/v1/profiles/featured", params={"limit": 1}).json()
    assert len(featured) == 1
    assert client.get("/api/v1/profiles/count").json() == {"count": 2}


def test_get_my_profile(client, make_student):
    student = make_student()
    resp = client.get("/api/v1/profiles/me", headers=student.headers)
    assert resp.status_code == 200
    assert resp.json()["first_login"] is True
    assert client.get("/api/v1/profiles/me").status_code in (401, 403)


def test_update_profile_only_touches_given_fields(client, fake_db, make_student):
    student = make_student(bio="Old bio", skills=["Python"])
    resp = client.put("/api/v1/profiles/me", headers=student.headers, json={
        "quote": "Stay curious",
        "skills": [" Rust ", "Go"],
        "social_links": [{"platform": "github", "url": "https://github.com/alice"}],
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["bio"] == "Old bio"
    assert body["quote"] == "Stay curious"
    assert body["skills"] == ["Rust", "Go"]
    assert body["social_links"] == {"github": "https://github.com/alice"}
    assert fake_db.find("profiles", user_id=student.user_id)["full_name"] == "Alice Walker"


def test_update_profile_empty_bio_is_cleared(client, make_student):
    student = make_student(bio="Something")
    body = client.put("/api/v1/profiles/me", headers=student.headers, json={"bio": ""}).json()
    assert body["bio"] is None


def test_update_profile_validation(client, make_student):
    student = make_student()
    headers = student.headers
    url = "/api/v1/profiles/me"
    assert client.put(url, headers=headers, json={"bio": "x" * 501}).status_code == 422
    assert client.put(url, headers=headers, json={"quote": "x" * 201}).status_code == 422
    assert client.put(url, headers=headers, json={"skills": ["   "]}).status_code == 422
    assert client.put(url, headers=headers, json={"skills": ["x" * 51]}).status_code == 422
    assert client.put(url, headers=headers, json={"skills": [f"s{i}" for i in range(21)]}).status_code == 422
    assert client.put(url, headers=headers, json={"full_name": "R2D2"}).status_code == 422
    assert client.put(url, headers=headers, json={
        "social_links": [{"platform": "web", "url": "not a url"}]
    }).status_code == 422


def test_upload_profile_picture(client, fake_db, make_student):
    student = make_student()
    resp = client.post(
        "/api/v1/profiles/me/picture",
        headers=student.headers,
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
    )
    assert resp.status_code == 200
    url = resp.json()["profile_pic"]
    assert url.startswith("https://fake.supabase.co/storage/v1/object/public/profiles/")
    assert url.endswith(".png")
    (bucket, path), = fake_db.storage.objects.keys()
    assert bucket == "profiles"
    assert path.startswith(f"{student.user_id}/")


def test_upload_profile_picture_rejects_non_images(client, make_student):
    student = make_student()
    resp = client.post(
        "/api/v1/profiles/me/picture",
        headers=student.headers,
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please select an image file"


def test_upload_profile_picture_size_limit(client, make_student):
    student = make_student()
    resp = client.post(
        "/api/v1/profiles/me/picture",
        headers=student.headers,
        files={"file": ("big.jpg", b"0" * (5 * 1024 * 1024 + 1), "image/jpeg")},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Image must be less than 5MB"


def test_public_profile_logs_views(client, fake_db, make_student):
    owner = make_student("STU001", "Alice Walker")
    visitor = make_student("STU002", "Bob Stone")

    anon = client.get("/api/v1/profiles/STU001")
    assert anon.status_code == 200
    assert anon.json()["initials"] == "AW"
    client.get("/api/v1/profiles/STU001", headers=visitor.headers)

    views = fake_db.rows("profile_views", profile_id=owner.profile["id"])
    assert [v["visitor_id"] for v in views] == [None, visitor.user_id]
    assert client.get("/api/v1/profiles/STU001/views").json() == {"student_id": "STU001", "view_count": 2}


def test_public_profile_survives_view_tracking_failure(client, fake_db, make_student):
    make_student()
    fake_db.fail("profile_views", "insert")
    assert client.get("/api/v1/profiles/STU001").status_code == 200


def test_hidden_or_unknown_profile_is_not_found(client, make_student):
    make_student(public=False)
    resp = client.get("/api/v1/profiles/STU001")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Student profile not found"
    assert client.get("/api/v1/profiles/NOPE99").status_code == 404
    assert client.get("/api/v1/profiles/STU001/pages").status_code == 404


def test_published_pages_of_student(client, make_student):
    student = make_student()
    draft = client.post("/api/v1/pages", headers=student.headers, json={
        "title": "Draft", "content": "not yet",
    }).json()
    live = client.post("/api/v1/pages", headers=student.headers, json={
        "title": "Hello", "content": "# Hi\nWelcome", "published": True,
    }).json()

    pages = client.get("/api/v1/profiles/STU001/pages").json()
    assert [p["id"] for p in pages] == [live["id"]]
    assert pages[0]["excerpt"] == " Hi\nWelcome"

    page = client.get(f"/api/v1/profiles/STU001/pages/{live['id']}").json()
    assert page["author"] == {
        "full_name": "Alice Walker",
        "student_id": "STU001",
        "profile_pic": None,
        "initials": "AW",
    }

    resp = client.get(f"/api/v1/profiles/STU001/pages/{draft['id']}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Page not found or not published"


def test_page_of_another_student_is_not_served(client, make_student):
    make_student("STU001", "Alice Walker")
    bob = make_student("STU002", "Bob Stone")
    page = client.post("/api/v1/pages", headers=bob.headers, json={
        "title": "Bob's", "content": "stuff", "published": True,
    }).json()
    assert client.get(f"/api/v1/profiles/STU001/pages/{page['id']}").status_code == 404


def test_social_links_are_stored_as_typed(client, fake_db, make_student):
    student = make_student()
    resp = client.put("/api/v1/profiles/me", headers=student.headers, json={
        "social_links": [
            {"platform": "github", "url": "https://github.com"},
            {"platform": "site", "url": " https://alice.dev/about?tab=1 "},
        ],
    })
    assert resp.status_code == 200
    assert resp.json()["social_links"] == {
        "github": "https://github.com",
        "site": "https://alice.dev/about?tab=1",
    }
    assert fake_db.find("profiles", user_id=student.user_id)["social_links"]["github"] == "https://github.com"
