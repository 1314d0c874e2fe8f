import pytest

from vspress.config import settings

from conftest import sign_in


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Process-Time" in response.headers


def test_home_page_lists_latest(client, fake_firebase):
    fake_firebase.add_article("Spring Fair", featured=True)
    fake_firebase.add_article("Match report", category="Sports")

    response = client.get("/")

    assert response.status_code == 200
    assert 'id="view-home"' in response.text
    assert "Spring Fair" in response.text
    assert "Match report" in response.text


def test_articles_page_category(client, fake_firebase):
    fake_firebase.add_article("Match report", category="Sports")
    fake_firebase.add_article("Gallery", category="Arts")

    response = client.get("/articles?category=Arts")

    assert "Gallery" in response.text
    assert "Match report" not in response.text


def test_article_page_by_query_and_path(client, fake_firebase):
    article_id = fake_firebase.add_article()
    fake_firebase.add_comment(article_id, "u1", "Looking forward to it", "Sam")

    by_query = client.get(f"/article?id={article_id}")
    by_path = client.get(f"/article/{article_id}")

    for response in (by_query, by_path):
        assert response.status_code == 200
        assert 'id="view-article"' in response.text
        assert "Looking forward to it" in response.text
    assert fake_firebase.collections["articles"][article_id]["views"] == 2


def test_missing_article_page(client):
    assert client.get("/article/nope").status_code == 404
    assert client.get("/article").status_code == 404


def test_unknown_path_renders_shell(client):
    response = client.get("/about")
    assert response.status_code == 404
    assert settings.APP_NAME in response.text
    assert 'id="view-' not in response.text


def test_admin_page_denied_for_readers(client, fake_firebase):
    sign_in(client, fake_firebase, "reader-uid")

    response = client.get("/admin")

    assert response.status_code == 403
    assert "Access Denied" in response.text


def test_admin_page_edit_prefills_form(client, fake_firebase):
    article_id = fake_firebase.add_article("Spring Fair")
    sign_in(client, fake_firebase, "admin-uid", "Editor", "admin")

    response = client.get(f"/admin?edit={article_id}")

    assert response.status_code == 200
    assert "Edit Article" in response.text
    assert 'value="Spring Fair"' in response.text


def test_like_form_requires_login(client, fake_firebase):
    article_id = fake_firebase.add_article()

    response = client.post(f"/article/{article_id}/like", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == f"/article/{article_id}"
    assert fake_firebase.collections["articles"][article_id]["likes"] == 0
    assert "Login to like" in client.get(f"/article/{article_id}").text


def test_like_form_toggles(client, fake_firebase):
    article_id = fake_firebase.add_article()
    sign_in(client, fake_firebase, "u1")

    client.post(f"/article/{article_id}/like")
    assert fake_firebase.collections["articles"][article_id]["likedBy"] == ["u1"]

    client.post(f"/article/{article_id}/like")
    assert fake_firebase.collections["articles"][article_id]["likedBy"] == []


def test_comment_forms(client, fake_firebase):
    article_id = fake_firebase.add_article()
    sign_in(client, fake_firebase, "u1", "Sam")

    response = client.post(f"/article/{article_id}/comments", data={"text": "Count me in"})

    assert response.status_code == 200
    assert "Comment posted!" in response.text
    assert "Count me in" in response.text

    (comment_id,) = fake_firebase.collections[f"articles/{article_id}/comments"]
    response = client.post(f"/article/{article_id}/comments/{comment_id}/delete")

    assert "Comment deleted" in response.text
    assert fake_firebase.collections[f"articles/{article_id}/comments"] == {}


def test_theme_toggle_persists(client):
    response = client.post("/theme", headers={"referer": "http://testserver/articles"},
                           follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/articles"
    assert response.cookies[settings.THEME_COOKIE_NAME] == "dark"
    assert '<html lang="en" class="dark">' in client.get("/").text


@pytest.mark.parametrize("referer,location", [
    ("http://testserver//evil.com/x", "/"),
    ("http://testserver/\\evil.com/x", "/"),
    ("https://evil.com/x", "/x"),
])
def test_theme_toggle_stays_on_site(client, referer, location):
    response = client.post("/theme", headers={"referer": referer}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == location


def test_theme_follows_client_hint(client):
    response = client.get("/", headers={"Sec-CH-Prefers-Color-Scheme": "dark"})
    assert '<html lang="en" class="dark">' in response.text


def test_admin_saves_article_with_upload(client, fake_firebase):
    sign_in(client, fake_firebase, "admin-uid", "Editor", "admin")

    response = client.post(
        "/admin/articles",
        data={
            "editing_id": "new",
            "title": "Spring Fair",
            "excerpt": "Stalls and music",
            "category": "Events",
            "content": "<p>Noon on the lawn</p>",
        },
        files={"image": ("fair.jpg", b"jpeg-bytes", "image/jpeg")},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/admin"
    (stored,) = fake_firebase.collections["articles"].values()
    assert stored["title"] == "Spring Fair"
    assert stored["imageUrl"].startswith("https://storage.test/articles/")
    assert "Article created" in client.get("/admin").text


def test_admin_save_incomplete_rerenders_form(client, fake_firebase):
    sign_in(client, fake_firebase, "admin-uid", "Editor", "admin")

    response = client.post(
        "/admin/articles",
        data={"editing_id": "new", "title": "Draft", "category": "Events"},
        files={"image": ("draft.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 400
    assert "Fill all fields" in response.text
    assert 'value="Draft"' in response.text
    assert fake_firebase.collections["articles"] == {}
    assert fake_firebase.calls_to("upload_blob") == []
    assert fake_firebase.blobs == {}


def test_admin_delete_requires_confirmation(client, fake_firebase):
    article_id = fake_firebase.add_article()
    sign_in(client, fake_firebase, "admin-uid", "Editor", "admin")

    client.post(f"/admin/articles/{article_id}/delete", data={"confirm": ""})
    assert article_id in fake_firebase.collections["articles"]

    response = client.post(f"/admin/articles/{article_id}/delete", data={"confirm": "true"})
    assert article_id not in fake_firebase.collections["articles"]
    assert "Article deleted" in response.text
