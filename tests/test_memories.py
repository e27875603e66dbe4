from relive.models.media import Media


def test_create_memory(client, auth_headers):
    response = client.post(
        "/api/v1/memories/",
        json={
            "title": "Beach Sunset",
            "content": '<p>Colours everywhere</p><img src="https://cdn.example.com/sunset.jpg">',
            "date": "2024-02-28",
            "location": "Malibu",
            "mood": "😌",
            "tags": ["Nature", "Peace", "nature", " "],
        },
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    memory = data["memory"]
    assert memory["title"] == "Beach Sunset"
    assert memory["date"] == "2024-02-28"
    assert memory["mood"] == "😌"
    assert sorted(memory["tags"]) == ["Nature", "Peace"]
    assert [(m["url"], m["type"]) for m in memory["media"]] == [("https://cdn.example.com/sunset.jpg", "image")]


def test_create_memory_missing_fields(client, auth_headers):
    response = client.post("/api/v1/memories/", json={"title": "No body"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: title, content, date"


def test_create_memory_requires_auth(client):
    response = client.post("/api/v1/memories/", json={"title": "x", "content": "y", "date": "2024-01-01"})
    assert response.status_code == 401


def test_create_memory_sanitizes_content(client, create_memory):
    memory = create_memory(content='<p onclick="x()">Hi</p><script>alert(1)</script>')
    assert "script" not in memory["content"]
    assert "onclick" not in memory["content"]


def test_list_memories_newest_first(client, auth_headers, create_memory):
    create_memory(title="Old", date="2022-11-20")
    create_memory(title="New", date="2024-03-15")
    create_memory(title="Middle", date="2023-07-04")

    response = client.get("/api/v1/memories/", headers=auth_headers)

    assert response.status_code == 200
    assert [m["title"] for m in response.json()["memories"]] == ["New", "Middle", "Old"]


def test_list_memories_filters(client, auth_headers, create_memory):
    create_memory(title="Lisbon trip", mood="😊", tags=["Travel"], date="2024-04-01")
    create_memory(title="Dinner", mood="😍", tags=["Food"], content="<p>Pasta in Rome</p>", date="2024-05-01")

    def titles(**params):
        response = client.get("/api/v1/memories/", params=params, headers=auth_headers)
        return [m["title"] for m in response.json()["memories"]]

    assert titles(tag="Travel") == ["Lisbon trip"]
    assert titles(mood="😍") == ["Dinner"]
    assert titles(q="rome") == ["Dinner"]
    assert titles(date_from="2024-04-15") == ["Dinner"]
    assert titles(date_to="2024-04-15") == ["Lisbon trip"]


def test_list_memories_tag_filter_ignores_case(client, auth_headers, create_memory):
    create_memory(title="Lisbon trip", tags=["Travel"])
    create_memory(title="Dinner", tags=["Food"])

    response = client.get("/api/v1/memories/", params={"tag": "travel"}, headers=auth_headers)
    assert [m["title"] for m in response.json()["memories"]] == ["Lisbon trip"]


def test_list_memories_search_skips_markup(client, auth_headers, create_memory):
    create_memory(title="Beach", content='<p>Sunset</p><img src="https://cdn.example.com/a.jpg">')

    def count(q):
        response = client.get("/api/v1/memories/", params={"q": q}, headers=auth_headers)
        return len(response.json()["memories"])

    assert count("img") == 0
    assert count("cdn.example") == 0
    assert count("sunset") == 1


def test_memories_are_private(client, create_memory, other_auth_headers):
    memory = create_memory()

    assert client.get("/api/v1/memories/", headers=other_auth_headers).json() == {"memories": []}
    assert client.get(f"/api/v1/memories/{memory['id']}", headers=other_auth_headers).status_code == 404
    assert client.put(
        f"/api/v1/memories/{memory['id']}", json={"title": "Mine now"}, headers=other_auth_headers
    ).status_code == 404
    assert client.delete(f"/api/v1/memories/{memory['id']}", headers=other_auth_headers).status_code == 404


def test_get_memory(client, auth_headers, create_memory):
    memory = create_memory(tags=["Friends"])
    response = client.get(f"/api/v1/memories/{memory['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["memory"]["tags"] == ["Friends"]


def test_get_missing_memory(client, auth_headers):
    assert client.get("/api/v1/memories/999", headers=auth_headers).status_code == 404


def test_update_memory_partial(client, auth_headers, create_memory):
    memory = create_memory(mood="😊", location="Cafe Mocha", tags=["Coffee"])

    response = client.put(
        f"/api/v1/memories/{memory['id']}",
        json={"title": "Coffee with Sam", "mood": None},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()["memory"]
    assert updated["title"] == "Coffee with Sam"
    assert updated["mood"] is None
    assert updated["location"] == "Cafe Mocha"
    assert updated["content"] == memory["content"]
    assert updated["tags"] == ["Coffee"]


def test_update_memory_rejects_empty_title(client, auth_headers, create_memory):
    memory = create_memory()
    response = client.put(f"/api/v1/memories/{memory['id']}", json={"title": "  "}, headers=auth_headers)
    assert response.status_code == 400


def test_update_memory_replaces_tags(client, auth_headers, create_memory):
    memory = create_memory(tags=["Work", "Family"])
    response = client.put(f"/api/v1/memories/{memory['id']}", json={"tags": ["Travel"]}, headers=auth_headers)
    assert response.json()["memory"]["tags"] == ["Travel"]


def test_update_content_resyncs_media(client, db_session, auth_headers, create_memory):
    memory = create_memory(
        content='<img src="https://cdn.example.com/1.jpg"><video src="https://cdn.example.com/2.mp4"></video>'
    )
    assert len(memory["media"]) == 2

    response = client.put(
        f"/api/v1/memories/{memory['id']}",
        json={"content": '<p>Only audio now</p><audio src="https://cdn.example.com/3.mp3"></audio>'},
        headers=auth_headers,
    )

    media = response.json()["memory"]["media"]
    assert [(m["url"], m["type"]) for m in media] == [("https://cdn.example.com/3.mp3", "audio")]
    assert db_session.query(Media).filter(Media.memory_id == memory["id"]).count() == 1


def test_update_without_content_keeps_media(client, auth_headers, create_memory):
    memory = create_memory(content='<img src="https://cdn.example.com/1.jpg">')
    response = client.put(f"/api/v1/memories/{memory['id']}", json={"title": "Renamed"}, headers=auth_headers)
    assert len(response.json()["memory"]["media"]) == 1


def test_delete_memory_removes_media(client, db_session, auth_headers, create_memory):
    memory = create_memory(content='<img src="https://cdn.example.com/1.jpg">')

    response = client.delete(f"/api/v1/memories/{memory['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Memory deleted successfully"}
    assert client.get(f"/api/v1/memories/{memory['id']}", headers=auth_headers).status_code == 404
    assert db_session.query(Media).count() == 0
