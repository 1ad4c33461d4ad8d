"""
End-to-end tests through FastAPI routes, the session cookie and templates
"""
from tests.sample_app import Post


def test_create_redirects_and_carries_the_notice(client, db):
    response = client.post("/posts", data={"title": "Hello", "slug": "hello"}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/posts/1"
    assert db.query(Post).count() == 1

    page = client.get("/posts/1")
    assert page.status_code == 200
    assert "Post created." in page.text
    assert "<h1>Hello</h1>" in page.text

    # The notice survives exactly one request
    again = client.get("/posts/1")
    assert "Post created." not in again.text


def test_failed_create_renders_new_with_alert(client, db):
    response = client.post("/posts", data={"title": ""}, follow_redirects=False)

    assert response.status_code == 422
    assert "Post could not be created." in response.text
    assert "Title can&#39;t be blank" in response.text
    assert db.query(Post).count() == 0

    # A render-time alert is not carried to the next request
    db.add(Post(title="Later"))
    db.commit()
    assert "Post could not be created." not in client.get("/posts/1").text


def test_update_and_destroy(client, db, post):
    response = client.post(f"/posts/{post.id}", data={"title": "Renamed"}, follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == f"/posts/{post.id}"

    response = client.post(f"/posts/{post.id}/delete", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/posts"
    assert db.query(Post).count() == 0


def test_publish_failure_redirects_back_with_alert(client, db, post):
    post.locked = True
    db.commit()

    response = client.post(f"/posts/{post.id}/publish", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == f"/posts/{post.id}"

    db.rollback()
    page = client.get(f"/posts/{post.id}")
    assert "Post could not be published." in page.text


def test_missing_post_is_404(client):
    assert client.get("/posts/42").status_code == 404


def test_request_id_header(client, post):
    response = client.get(f"/posts/{post.id}", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"

    generated = client.get(f"/posts/{post.id}")
    assert generated.headers["X-Request-ID"]
