"""
End-to-end newsroom flow against the in-memory Firebase
"""

import pytest

from vspress.models.user import UserRole

from conftest import make_context


@pytest.mark.asyncio
async def test_spring_fair(fake_firebase, article_service, comment_service):
    admin = make_context("admin-uid", "Editor", UserRole.ADMIN)
    u1, u2, u3 = make_context("u1", "Ana"), make_context("u2", "Ben"), make_context("u3", "Cy")

    # admin publishes with an uploaded image
    article_service.start_new(admin)
    admin.form.title = "Spring Fair"
    admin.form.excerpt = "Stalls, music and a bake sale"
    admin.form.content = "<p>Noon on the front lawn.</p>"
    admin.form.category = "Events"
    await article_service.upload_image(admin, "fair.jpg", b"jpeg-bytes", "image/jpeg")
    article_id = await article_service.save_article(admin)
    assert article_id is not None

    # two readers like it
    for reader in (u1, u2):
        await article_service.load_article(reader, article_id)
        assert await article_service.toggle_like(reader, article_id) is True

    stored = await article_service.fetch_article(article_id)
    assert stored.likes == 2
    assert set(stored.liked_by) == {"u1", "u2"}

    # a third reader cannot remove someone else's comment
    await comment_service.add_comment(u1, article_id, "See you there")
    await comment_service.load_comments(u3, article_id)
    assert await comment_service.delete_comment(u3, article_id, u3.comments[0]) is False
    assert u3.errors[-1].message == "Not authorized"
    assert len(await comment_service.fetch_comments(article_id)) == 1

    # admin deletes the article and it drops out of the listing
    await article_service.load_articles(admin)
    assert [a.id for a in admin.articles] == [article_id]
    assert await article_service.delete_article(admin, article_id, confirmed=True) is True
    assert admin.articles == []

    listing = make_context()
    await article_service.load_articles(listing)
    assert listing.articles == []
