from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from vspress.dependencies import get_firebase
from vspress.main import app
from vspress.services.firebase_service import CollaboratorError, FirebaseService


PATH_ERROR = "A document must have an even number of path elements"


@pytest.fixture
def firestore_rejecting_ids():
    """FirebaseService over a Firestore client that refuses every document id"""
    service = object.__new__(FirebaseService)
    service._db = MagicMock()
    service._db.collection.return_value.document.side_effect = ValueError(PATH_ERROR)
    return service


@pytest.mark.asyncio
async def test_bad_document_id_becomes_collaborator_error(firestore_rejecting_ids):
    with pytest.raises(CollaboratorError, match="even number"):
        await firestore_rejecting_ids.get_document("articles", "a/b")
    with pytest.raises(CollaboratorError, match="even number"):
        await firestore_rejecting_ids.update_document("articles", "a/b", {"views": 1})
    with pytest.raises(CollaboratorError, match="even number"):
        await firestore_rejecting_ids.create_document("articles/a/b/comments", {"text": "x"})


def test_article_page_with_slash_in_id(firestore_rejecting_ids):
    app.dependency_overrides[get_firebase] = lambda: firestore_rejecting_ids
    try:
        response = TestClient(app).get("/article?id=a/b")
    finally:
        app.dependency_overrides = {}

    assert response.status_code == 404
    assert "text/html" in response.headers["content-type"]
    assert PATH_ERROR in response.text
