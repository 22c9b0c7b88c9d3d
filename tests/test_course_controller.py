from config import settings


def create(client, auth_headers, user_id="instructor-1", video=None, **fields):
    data = {
        "title": "Intro to Go",
        "description": "Learn Go",
        "category": "Programming",
        "price": "49.99",
    }
    data.update(fields)
    files = {"video": ("intro.mp4", video, "video/mp4")} if video is not None else None
    return client.post("/api/courses", data=data, files=files, headers=auth_headers(user_id))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_create_course(client, auth_headers):
    response = create(client, auth_headers, instructor="someone-else")

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Intro to Go"
    assert body["price"] == 49.99
    assert body["instructor"] == "instructor-1"
    assert body["video"] is None
    assert body["id"]


def test_create_requires_authentication(client):
    response = client.post("/api/courses", data={"title": "Intro to Go"})

    assert response.status_code == 401
    assert response.json() == {"message": "Not authenticated"}


def test_create_without_user_id_is_unauthenticated(client):
    response = client.post(
        "/api/courses", data={"title": "Intro to Go"},
        headers={"Authorization": "Bearer test-token"},
    )

    assert response.status_code == 401


def test_create_duplicate_title(client, auth_headers):
    create(client, auth_headers)
    response = create(client, auth_headers, user_id="instructor-2", description="Other")

    assert response.status_code == 400
    assert response.json() == {"message": "Course already exists"}


def test_create_missing_title_is_bad_request(client, auth_headers):
    response = client.post("/api/courses", data={"description": "x"}, headers=auth_headers("instructor-1"))

    assert response.status_code == 400
    assert "title" in response.json()["message"]


def test_create_with_video_returns_data_url(client, auth_headers):
    response = create(client, auth_headers, video=b"\x00\x01")

    assert response.status_code == 201
    assert response.json()["video"] == "data:video/mp4;base64,AAE="


def test_create_rejects_oversized_video(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_VIDEO_BYTES", 2)

    response = create(client, auth_headers, video=b"\x00\x01\x02")

    assert response.status_code == 400


def test_get_course_by_id_encodes_video(client, auth_headers):
    course_id = create(client, auth_headers, video=b"\x00\x01").json()["id"]

    response = client.get(f"/api/courses/{course_id}")

    assert response.status_code == 200
    assert response.json()["video"] == "data:video/mp4;base64,AAE="


def test_get_course_by_id_not_found(client):
    response = client.get("/api/courses/missing")

    assert response.status_code == 404
    assert response.json() == {"message": "Course not found"}


def test_get_all_courses(client, auth_headers):
    create(client, auth_headers)
    create(client, auth_headers, title="Rust Basics")

    response = client.get("/api/courses")

    assert response.status_code == 200
    assert sorted(c["title"] for c in response.json()) == ["Intro to Go", "Rust Basics"]


def test_update_course(client, auth_headers):
    course_id = create(client, auth_headers).json()["id"]

    response = client.put(
        f"/api/courses/{course_id}",
        data={"category": "Systems", "description": ""},
        headers=auth_headers("instructor-1"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "Systems"
    assert body["description"] == "Learn Go"
    assert body["title"] == "Intro to Go"


def test_update_replaces_video(client, auth_headers):
    course_id = create(client, auth_headers, video=b"old").json()["id"]

    client.put(
        f"/api/courses/{course_id}",
        files={"video": ("new.mp4", b"\x00\x01", "video/mp4")},
        headers=auth_headers("instructor-1"),
    )

    assert client.get(f"/api/courses/{course_id}").json()["video"] == "data:video/mp4;base64,AAE="


def test_update_by_other_user_is_forbidden(client, auth_headers):
    course_id = create(client, auth_headers).json()["id"]

    response = client.put(
        f"/api/courses/{course_id}", data={"title": "Mine now"}, headers=auth_headers("instructor-2")
    )

    assert response.status_code == 403
    assert response.json() == {"message": "Not authorized to update this course"}
    assert client.get(f"/api/courses/{course_id}").json()["title"] == "Intro to Go"


def test_update_by_admin(client, auth_headers):
    course_id = create(client, auth_headers).json()["id"]

    response = client.put(
        f"/api/courses/{course_id}", data={"price": "0"}, headers=auth_headers("admin-1", role="admin")
    )

    assert response.status_code == 200
    assert response.json()["price"] == 0
    assert response.json()["instructor"] == "instructor-1"


def test_update_missing_course(client, auth_headers):
    response = client.put("/api/courses/missing", data={"title": "x"}, headers=auth_headers("instructor-1"))

    assert response.status_code == 404


def test_delete_course(client, auth_headers):
    course_id = create(client, auth_headers).json()["id"]

    response = client.delete(f"/api/courses/{course_id}", headers=auth_headers("instructor-1"))

    assert response.status_code == 200
    assert response.json() == {"message": "Course removed"}
    assert client.get(f"/api/courses/{course_id}").status_code == 404


def test_delete_missing_course(client, auth_headers):
    response = client.delete("/api/courses/missing", headers=auth_headers("instructor-1"))

    assert response.status_code == 404
    assert response.json() == {"message": "Course not found"}


def test_delete_by_other_user_is_forbidden(client, auth_headers):
    course_id = create(client, auth_headers).json()["id"]

    response = client.delete(f"/api/courses/{course_id}", headers=auth_headers("instructor-2"))

    assert response.status_code == 403
    assert client.get(f"/api/courses/{course_id}").status_code == 200


def test_search_courses(client, auth_headers):
    create(client, auth_headers)
    create(client, auth_headers, title="Rust Basics")

    response = client.get("/api/courses/search/INTRO")

    assert response.status_code == 200
    assert [c["title"] for c in response.json()] == ["Intro to Go"]


def test_courses_by_instructor(client, auth_headers):
    create(client, auth_headers)
    create(client, auth_headers, user_id="instructor-2", title="Watercolor")

    response = client.get("/api/courses/instructor/instructor-2")

    assert response.status_code == 200
    assert [c["title"] for c in response.json()] == ["Watercolor"]


def test_courses_by_instructor_empty_is_not_found(client, monkeypatch):
    monkeypatch.setattr(settings, "EMPTY_INSTRUCTOR_LISTING", settings.EMPTY_LISTING_NOT_FOUND)

    response = client.get("/api/courses/instructor/nobody")

    assert response.status_code == 404
    assert response.json() == {"message": "No courses found for this instructor"}


def test_courses_by_instructor_empty_policy(client, monkeypatch):
    monkeypatch.setattr(settings, "EMPTY_INSTRUCTOR_LISTING", settings.EMPTY_LISTING_EMPTY)

    response = client.get("/api/courses/instructor/nobody")

    assert response.status_code == 200
    assert response.json() == []


def test_store_failure_is_500(client, store, monkeypatch):
    def boom():
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(store, "scan_all", boom)

    response = client.get("/api/courses")

    assert response.status_code == 500
    assert response.json() == {"message": "store unavailable"}


def test_create_with_nan_price_is_bad_request(client, auth_headers, store):
    response = create(client, auth_headers, price="nan")

    assert response.status_code == 400
    assert response.json() == {"message": "Price must be a finite number"}
    assert store.scan_all() == []


def test_update_with_infinite_price_is_bad_request(client, auth_headers):
    course_id = create(client, auth_headers).json()["id"]

    response = client.put(
        f"/api/courses/{course_id}", data={"price": "inf"}, headers=auth_headers("instructor-1")
    )

    assert response.status_code == 400
    assert client.get(f"/api/courses/{course_id}").json()["price"] == 49.99


def test_create_with_oversized_title_is_bad_request(client, auth_headers):
    response = create(client, auth_headers, title="x" * 2049)

    assert response.status_code == 400
